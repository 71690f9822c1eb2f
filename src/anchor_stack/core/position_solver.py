"""
Collision-free vertical placement of anchored cards.

Cards want to sit at their anchor's top. Walking them in anchor order, a card
that would overlap its predecessor is pushed down below it. The selected card
is the one exception: it always keeps its anchor, and the cards above it are
pushed up instead (the relief pass) until one of them already has room.

No Qt and no state: the same inputs always give the same result.
"""

import logging
from dataclasses import dataclass
from typing import Iterable, List, Mapping, Optional

from anchor_stack.core.exceptions import DuplicateItemError, InvalidGapError
from anchor_stack.core.types import ItemPosition, PositionResult, StackItem

logger = logging.getLogger(__name__)

DEFAULT_GAP = 8.0


@dataclass
class _Placement:
    id: str
    anchor_top: float
    top: float
    height: float

    @property
    def bottom(self) -> float:
        return self.top + self.height


def sort_by_anchor(items: Iterable[StackItem], anchor_tops: Mapping[str, float]) -> List[StackItem]:
    """Return items ascending by anchor top; equal anchors keep input order."""
    return sorted(items, key=lambda item: anchor_tops[item.id])


def solve_positions(
    items: Iterable[StackItem],
    anchor_tops: Mapping[str, float],
    heights: Mapping[str, float],
    selected_id: Optional[str] = None,
    gap: float = DEFAULT_GAP,
) -> PositionResult:
    """
    Place every item at or near its anchor without overlaps.

    Args:
        items: Items to place. Every id must be present in ``anchor_tops``.
        anchor_tops: Document-relative anchor top per id.
        heights: Rendered card height per id. Missing ids count as height 0.
        selected_id: Id of the card that must stay on its anchor, if any.
        gap: Minimum clearance between consecutive cards.

    Returns:
        PositionResult with one ItemPosition per item and the sorted items.

    Raises:
        DuplicateItemError: Two items share an id.
        InvalidGapError: ``gap`` is negative.
        KeyError: An item has no anchor top.
    """
    if gap < 0:
        raise InvalidGapError(gap)

    items = list(items)
    seen = set()
    for item in items:
        if item.id in seen:
            raise DuplicateItemError(item.id)
        seen.add(item.id)

    sorted_items = sort_by_anchor(items, anchor_tops)
    positions = {}
    placements: List[_Placement] = []

    for index, item in enumerate(sorted_items):
        anchor_top = anchor_tops[item.id]
        height = heights.get(item.id, 0.0)
        if index == 0:
            previous_bottom = float("-inf")
        else:
            previous_bottom = placements[index - 1].bottom + gap

        if anchor_top >= previous_bottom:
            top = anchor_top
        elif item.id != selected_id:
            top = previous_bottom
        else:
            top = anchor_top
            _relieve_predecessors(placements, positions, anchor_top, gap)

        positions[item.id] = ItemPosition(id=item.id, top=top, is_stacked=top != anchor_top)
        placements.append(_Placement(id=item.id, anchor_top=anchor_top, top=top, height=height))

    logger.debug(f"Solved {len(positions)} positions (selected={selected_id!r}, gap={gap})")
    return PositionResult(positions=positions, sorted_items=sorted_items)


def _relieve_predecessors(placements: List[_Placement], positions: dict, next_top: float, gap: float) -> None:
    """Push earlier cards up until one of them already clears ``next_top``.

    Only the emitted positions are rewritten; the placement records stay as
    the forward pass left them.
    """
    for previous in reversed(placements):
        if previous.bottom + gap <= next_top:
            break

        offset_top = next_top - gap - previous.height
        positions[previous.id] = ItemPosition(
            id=previous.id,
            top=offset_top,
            is_stacked=offset_top != previous.anchor_top,
        )
        next_top = offset_top
