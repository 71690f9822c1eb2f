"""Single-slot frame coalescer."""

from typing import Any, Callable, Optional


class FrameCoalescer:
    """
    Collapse any number of triggers into one handler call on the next frame.

    Unlike a trailing debounce, a trigger while a frame is already armed does
    nothing: the armed frame reads live state when it fires.

    Usage:
        self._coalescer = FrameCoalescer(host.request_frame, host.cancel_frame, self._recompute)

        def on_scroll(self):
            self._coalescer.trigger()
    """

    def __init__(
        self,
        request_frame: Callable[[Callable[[], None]], Any],
        cancel_frame: Callable[[Any], None],
        handler: Callable[[], None],
    ):
        self._request_frame = request_frame
        self._cancel_frame = cancel_frame
        self._handler = handler
        self._token: Optional[Any] = None
        self._armed = False

    @property
    def armed(self) -> bool:
        return self._armed

    def trigger(self) -> bool:
        """Arm a frame unless one is pending. Returns True if newly armed."""
        if self._armed:
            return False
        self._armed = True
        self._token = self._request_frame(self._fire)
        return True

    def cancel(self):
        """Cancel the pending frame, if any."""
        if self._armed:
            self._cancel_frame(self._token)
        self._armed = False
        self._token = None

    def force(self):
        """Cancel the pending frame and run the handler immediately."""
        self.cancel()
        self._handler()

    def _fire(self):
        if not self._armed:
            return
        self._armed = False
        self._token = None
        self._handler()
