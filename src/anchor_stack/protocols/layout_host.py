"""Layout host protocol and ABC: the platform capabilities an AnchorStack consumes.

An AnchorStack never touches a widget toolkit directly. Everything it needs
to know about geometry, scrolling, size changes and frame timing comes
through a LayoutHost. Qt applications use QtLayoutHost; other front ends
(terminal, canvas, tests) subclass LayoutHostABC.

Example:
    class TerminalLayoutHost(LayoutHostABC):
        def element_top(self, element):
            return element.row - self.screen.first_visible_row
        ...

    register_layout_host(TerminalLayoutHost(screen))
"""

from abc import ABC, abstractmethod
from typing import Any, Callable, Optional, Protocol

Callback = Callable[[], None]


class LayoutHostProtocol(Protocol):
    """Protocol for layout hosts.

    Use this for duck-typed checking. For implementation, prefer LayoutHostABC.
    """

    def element_top(self, element: Any) -> float:
        ...

    def element_height(self, element: Any) -> float:
        ...

    def scroll_offset(self) -> float:
        ...

    def observe_size(self, element: Any, callback: Callback) -> None:
        ...

    def unobserve_size(self, element: Any) -> None:
        ...

    def request_frame(self, callback: Callback) -> Any:
        ...

    def cancel_frame(self, token: Any) -> None:
        ...

    def add_layout_listener(self, callback: Callback) -> None:
        ...

    def remove_layout_listener(self, callback: Callback) -> None:
        ...

    def when_metrics_settled(self, callback: Callback) -> None:
        ...


class LayoutHostABC(ABC):
    """Abstract base class for layout hosts."""

    @abstractmethod
    def element_top(self, element: Any) -> float:
        """Return the element's top edge relative to the visible viewport."""
        ...

    @abstractmethod
    def element_height(self, element: Any) -> float:
        """Return the element's rendered height."""
        ...

    @abstractmethod
    def scroll_offset(self) -> float:
        """Return how far the document is scrolled vertically."""
        ...

    @abstractmethod
    def observe_size(self, element: Any, callback: Callback) -> None:
        """Call ``callback`` whenever ``element`` changes size.

        Observing an already observed element replaces its callback.
        """
        ...

    @abstractmethod
    def unobserve_size(self, element: Any) -> None:
        """Stop observing ``element``. Unknown elements are ignored."""
        ...

    @abstractmethod
    def request_frame(self, callback: Callback) -> Any:
        """Run ``callback`` once before the next paint; return a cancel token."""
        ...

    @abstractmethod
    def cancel_frame(self, token: Any) -> None:
        """Cancel a frame returned by request_frame that has not fired yet."""
        ...

    @abstractmethod
    def add_layout_listener(self, callback: Callback) -> None:
        """Call ``callback`` on viewport resize and on scroll."""
        ...

    @abstractmethod
    def remove_layout_listener(self, callback: Callback) -> None:
        """Remove a listener added with add_layout_listener."""
        ...

    @abstractmethod
    def when_metrics_settled(self, callback: Callback) -> None:
        """Call ``callback`` once, after fonts and text metrics are final.

        Hosts whose metrics are already settled call it on the next frame.
        """
        ...


_layout_host: Optional[LayoutHostProtocol] = None


def register_layout_host(host: Optional[LayoutHostProtocol]) -> None:
    """Register the global layout host used by AnchorStacks built without one.

    Args:
        host: Host implementing LayoutHostProtocol or LayoutHostABC, or None to clear
    """
    global _layout_host
    _layout_host = host


def get_layout_host() -> Optional[LayoutHostProtocol]:
    """Get the registered layout host."""
    return _layout_host
