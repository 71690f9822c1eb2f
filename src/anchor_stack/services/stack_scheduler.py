"""
Anchor stack scheduler.

Keeps published card positions current. Item, selection and gap changes,
viewport resize and scroll, the one-time metrics-settled signal and size
changes of any attached card element all arm a single frame; when it fires,
the stack measures live geometry through its LayoutHost, runs the position
solver and publishes the result.

Any number of triggers between arming and firing collapse into one
recomputation that reads state at firing time (latest wins, no queue).
"""

import logging
from typing import Any, Callable, Dict, Iterable, List, Optional

from anchor_stack.core.exceptions import InvalidGapError, LayoutHostUnavailableError
from anchor_stack.core.frame_coalescer import FrameCoalescer
from anchor_stack.core.handle_registry import HandleRegistry
from anchor_stack.core.position_solver import solve_positions
from anchor_stack.core.types import ItemPosition, PositionResult, StackItem
from anchor_stack.protocols.layout_host import LayoutHostProtocol, get_layout_host
from anchor_stack.protocols.stack_config import get_stack_config

logger = logging.getLogger(__name__)

AnchorResolver = Callable[[StackItem], Optional[Any]]
PositionsListener = Callable[[PositionResult], None]


class AnchorStack:
    """
    Scheduler that feeds the position solver with live measurements.

    Usage:
        stack = AnchorStack(items, anchor_resolver=find_anchor_widget, host=QtLayoutHost(scroll_area))
        stack.handles.get(item.id).current = card_widget
        stack.subscribe(lambda result: move_cards(result.positions))

        # Later:
        stack.set_selected_id("comment-3")
        stack.dispose()

    Dispose the stack before its host. A host torn down first cancels the
    frame the stack has armed, and the stack then never recomputes again.

    Args:
        items: Cards to place. Later duplicates of an id are dropped with an error log.
        anchor_resolver: Maps an item to its anchor element, or None if it has none yet.
        selected_id: Card that must stay on its anchor.
        gap: Clearance between cards (None = AnchorStackConfig.default_gap).
        host: Layout host (None = the globally registered host).

    Raises:
        InvalidGapError: ``gap`` is negative.
        LayoutHostUnavailableError: No host passed and none registered.
    """

    def __init__(
        self,
        items: Iterable[StackItem],
        anchor_resolver: AnchorResolver,
        selected_id: Optional[str] = None,
        gap: Optional[float] = None,
        host: Optional[LayoutHostProtocol] = None,
    ):
        config = get_stack_config()
        if gap is None:
            gap = config.default_gap
        if gap < 0:
            raise InvalidGapError(gap)

        host = host if host is not None else get_layout_host()
        if host is None:
            raise LayoutHostUnavailableError(
                "AnchorStack needs a layout host; pass host= or call register_layout_host()"
            )

        self._host = host
        self._anchor_resolver = anchor_resolver
        self._items: List[StackItem] = _drop_duplicates(items)
        self._selected_id = selected_id
        self._gap = gap
        self._positions: Dict[str, ItemPosition] = {}
        self._sorted_items: List[StackItem] = []
        self._listeners: List[PositionsListener] = []
        self._disposed = False

        self._handles = HandleRegistry(on_attach_changed=self._on_handle_changed)
        self._coalescer = FrameCoalescer(host.request_frame, host.cancel_frame, self._recompute)

        host.add_layout_listener(self._schedule)
        host.when_metrics_settled(self._schedule)
        self._schedule()
        logger.debug(f"[AnchorStack] Created with {len(self._items)} items, gap={gap}")

    # ---------- Published state ----------

    @property
    def positions(self) -> Dict[str, ItemPosition]:
        return self._positions

    @property
    def sorted_items(self) -> List[StackItem]:
        return self._sorted_items

    @property
    def handles(self) -> HandleRegistry:
        return self._handles

    @property
    def items(self) -> List[StackItem]:
        return list(self._items)

    @property
    def selected_id(self) -> Optional[str]:
        return self._selected_id

    @property
    def gap(self) -> float:
        return self._gap

    @property
    def is_scheduled(self) -> bool:
        return self._coalescer.armed

    @property
    def is_disposed(self) -> bool:
        return self._disposed

    def subscribe(self, listener: PositionsListener) -> Callable[[], None]:
        """Call ``listener`` after every publish. Returns an unsubscribe function."""
        self._listeners.append(listener)

        def unsubscribe():
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    # ---------- Inputs ----------

    def set_items(self, items: Iterable[StackItem]) -> None:
        """Replace the item list. Recomputes only if the list actually changed."""
        new_items = _drop_duplicates(items)
        if len(new_items) == len(self._items) and all(
            new is old for new, old in zip(new_items, self._items)
        ):
            return

        old_ids = {item.id for item in self._items}
        new_ids = {item.id for item in new_items}
        self._items = new_items
        if old_ids and new_ids and old_ids.isdisjoint(new_ids):
            self._rebuild_handles()
        self._schedule()

    def set_selected_id(self, selected_id: Optional[str]) -> None:
        if selected_id == self._selected_id:
            return
        self._selected_id = selected_id
        self._schedule()

    def set_gap(self, gap: float) -> None:
        if gap < 0:
            raise InvalidGapError(gap)
        if gap == self._gap:
            return
        self._gap = gap
        self._schedule()

    # ---------- Lifecycle ----------

    def flush(self) -> None:
        """Recompute now instead of waiting for the armed frame.

        Call before anything that depends on fresh positions, such as
        scrolling the selected card into view.
        """
        if self._disposed:
            return
        self._coalescer.force()

    def dispose(self) -> None:
        """Cancel the pending frame and release every host listener."""
        if self._disposed:
            return
        self._disposed = True
        self._coalescer.cancel()
        self._host.remove_layout_listener(self._schedule)
        for handle in self._handles.attached():
            self._host.unobserve_size(handle.current)
        self._listeners.clear()
        logger.debug("[AnchorStack] Disposed")

    def __enter__(self) -> "AnchorStack":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.dispose()

    # ---------- Internal ----------

    def _schedule(self) -> None:
        if self._disposed:
            return
        self._coalescer.trigger()

    def _on_handle_changed(self, item_id: str, previous: Optional[Any], element: Optional[Any]) -> None:
        if self._disposed:
            return
        if previous is not None:
            self._host.unobserve_size(previous)
        if element is not None:
            self._host.observe_size(element, self._schedule)
        self._schedule()

    def _rebuild_handles(self) -> None:
        old_handles = self._handles
        self._handles = HandleRegistry(on_attach_changed=self._on_handle_changed)
        old_handles.clear()
        old_handles.detach()
        logger.debug("[AnchorStack] Item set replaced; handle registry rebuilt")

    def _resolve_anchor(self, item: StackItem) -> Optional[Any]:
        try:
            element = self._anchor_resolver(item)
        except Exception:
            logger.exception(f"[AnchorStack] Anchor resolver failed for item \"{item.id}\"")
            return None
        if element is None and get_stack_config().report_unresolved_anchors:
            logger.error(f"[AnchorStack] Could not find anchor element for item \"{item.id}\"")
        return element

    def _recompute(self) -> None:
        if self._disposed:
            return

        host = self._host
        scroll_offset = host.scroll_offset()
        anchor_tops: Dict[str, float] = {}
        heights: Dict[str, float] = {}
        resolved: List[StackItem] = []

        for item in self._items:
            anchor = self._resolve_anchor(item)
            if anchor is None:
                continue
            try:
                anchor_tops[item.id] = host.element_top(anchor) + scroll_offset
            except RuntimeError:
                # Qt raises RuntimeError for widgets whose C++ side is gone
                logger.exception(f"[AnchorStack] Could not measure anchor for item \"{item.id}\"")
                continue
            resolved.append(item)

        for item in resolved:
            element = self._handles.get(item.id).current
            if element is None:
                continue
            try:
                heights[item.id] = host.element_height(element)
            except RuntimeError:
                logger.exception(f"[AnchorStack] Could not measure card for item \"{item.id}\"")

        result = solve_positions(resolved, anchor_tops, heights, self._selected_id, self._gap)
        self._positions = result.positions
        self._sorted_items = result.sorted_items

        for listener in list(self._listeners):
            try:
                listener(result)
            except Exception:
                logger.exception("[AnchorStack] Positions listener failed")


def _drop_duplicates(items: Iterable[StackItem]) -> List[StackItem]:
    unique = []
    seen = set()
    for item in items:
        if item.id in seen:
            logger.error(f"[AnchorStack] Dropping duplicate item id \"{item.id}\"")
            continue
        seen.add(item.id)
        unique.append(item)
    return unique
