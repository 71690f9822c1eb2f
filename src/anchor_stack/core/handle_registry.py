"""Lazily created, identity-stable element handles keyed by item id."""

from typing import Any, Callable, Dict, Iterator, List, Optional

AttachListener = Callable[[str, Optional[Any], Optional[Any]], None]


class ElementHandle:
    """
    Slot holding the rendered element of one card.

    The renderer assigns ``handle.current = widget`` once the card exists and
    ``None`` when it goes away. Each assignment that changes the element is
    reported to the owning registry.
    """

    __slots__ = ("_id", "_current", "_on_change")

    def __init__(self, item_id: str, on_change: Optional[AttachListener] = None):
        self._id = item_id
        self._current: Optional[Any] = None
        self._on_change = on_change

    @property
    def id(self) -> str:
        return self._id

    @property
    def current(self) -> Optional[Any]:
        return self._current

    @current.setter
    def current(self, element: Optional[Any]) -> None:
        previous = self._current
        if previous is element:
            return
        self._current = element
        if self._on_change is not None:
            self._on_change(self._id, previous, element)

    def __repr__(self) -> str:
        return f"ElementHandle(id={self._id!r}, current={self._current!r})"


class HandleRegistry:
    """
    Id-keyed table of ElementHandle objects.

    ``get(id)`` always returns the same handle for an id. Handles are never
    evicted one by one; an owner whose item set changes wholesale builds a
    new registry instead.

    Usage:
        registry = HandleRegistry(on_attach_changed=self._on_handle_changed)
        registry.get("comment-1").current = card_widget
    """

    def __init__(self, on_attach_changed: Optional[AttachListener] = None):
        self._handles: Dict[str, ElementHandle] = {}
        self._on_attach_changed = on_attach_changed

    def get(self, item_id: str) -> ElementHandle:
        handle = self._handles.get(item_id)
        if handle is None:
            handle = ElementHandle(item_id, self._notify)
            self._handles[item_id] = handle
        return handle

    def ids(self) -> List[str]:
        return list(self._handles)

    def attached(self) -> Iterator[ElementHandle]:
        """Yield handles that currently hold an element."""
        for handle in self._handles.values():
            if handle.current is not None:
                yield handle

    def clear(self) -> None:
        """Detach every element and forget all handles."""
        for handle in list(self._handles.values()):
            handle.current = None
        self._handles.clear()

    def detach(self) -> None:
        """Stop reporting attach changes; handles already handed out go quiet."""
        self._on_attach_changed = None

    def _notify(self, item_id: str, previous: Optional[Any], element: Optional[Any]) -> None:
        if self._on_attach_changed is not None:
            self._on_attach_changed(item_id, previous, element)

    def __contains__(self, item_id: object) -> bool:
        return item_id in self._handles

    def __len__(self) -> int:
        return len(self._handles)
