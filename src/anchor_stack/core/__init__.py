"""
Core anchor stack utilities.

Pure Python, no Qt: value types, the position solver, the handle registry
and the frame coalescer.
"""

from .exceptions import AnchorStackError, DuplicateItemError, InvalidGapError, LayoutHostUnavailableError
from .types import StackItem, ItemPosition, PositionResult
from .position_solver import DEFAULT_GAP, solve_positions, sort_by_anchor
from .handle_registry import ElementHandle, HandleRegistry
from .frame_coalescer import FrameCoalescer

__all__ = [
    "AnchorStackError",
    "DuplicateItemError",
    "InvalidGapError",
    "LayoutHostUnavailableError",
    "StackItem",
    "ItemPosition",
    "PositionResult",
    "DEFAULT_GAP",
    "solve_positions",
    "sort_by_anchor",
    "ElementHandle",
    "HandleRegistry",
    "FrameCoalescer",
]
