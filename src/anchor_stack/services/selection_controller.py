"""
Selection ownership for an AnchorStack.

Supports the two usual ownership models:
- Uncontrolled: the controller stores the selection itself.
- Controlled: the application owns the selection. ``set_selected_id`` only
  reports the request through ``on_selected_id_change``; the application
  pushes the accepted value back with ``sync_selected_id``. While the
  application-owned value is None, ``initial_selected_id`` is used instead.
"""

import logging
from typing import Callable, Optional

from anchor_stack.services.stack_scheduler import AnchorStack

logger = logging.getLogger(__name__)

_UNSET = object()


class SelectionController:
    """Route selection changes into an AnchorStack.

    Args:
        stack: Stack whose selected card follows this controller.
        selected_id: Pass any value (including None) for controlled mode.
        initial_selected_id: Starting selection; in controlled mode, the fallback while the owned value is None.
        on_selected_id_change: Receives requested selections in controlled mode.
    """

    def __init__(
        self,
        stack: AnchorStack,
        selected_id=_UNSET,
        initial_selected_id: Optional[str] = None,
        on_selected_id_change: Optional[Callable[[Optional[str]], None]] = None,
    ):
        self._stack = stack
        self._controlled = selected_id is not _UNSET
        self._controlled_id: Optional[str] = selected_id if self._controlled else None
        self._uncontrolled_id: Optional[str] = initial_selected_id
        self._on_selected_id_change = on_selected_id_change
        stack.set_selected_id(self.selected_id)

    @property
    def is_controlled(self) -> bool:
        return self._controlled

    @property
    def selected_id(self) -> Optional[str]:
        if self._controlled and self._controlled_id is not None:
            return self._controlled_id
        return self._uncontrolled_id

    def set_selected_id(self, selected_id: Optional[str]) -> None:
        """Request a new selection."""
        if self._controlled:
            if self._on_selected_id_change is not None:
                self._on_selected_id_change(selected_id)
            else:
                logger.warning(
                    f"Controlled selection change to {selected_id!r} ignored: no on_selected_id_change handler"
                )
            return

        self._uncontrolled_id = selected_id
        self._stack.set_selected_id(selected_id)

    def sync_selected_id(self, selected_id: Optional[str]) -> None:
        """Push the application-owned selection in controlled mode."""
        if not self._controlled:
            raise RuntimeError("sync_selected_id() is only valid for a controlled SelectionController")
        self._controlled_id = selected_id
        self._stack.set_selected_id(self.selected_id)

    def select_and_prepare(self, selected_id: Optional[str]) -> None:
        """Select and recompute positions immediately.

        Use before scrolling the selected card into view so the scroll
        target reflects the new layout.
        """
        self.set_selected_id(selected_id)
        self._stack.flush()
