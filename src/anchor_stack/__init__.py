"""
anchor-stack: keep floating cards aligned with their anchors, without overlaps.

Cards (comments, annotations, notes) follow anchor points in a scrolled
document. When cards would overlap they are stacked; the selected card always
stays exactly on its anchor and pushes its predecessors up instead.

Architecture:
- Tier 1 (Core): Pure Python solver, handle registry and frame coalescer
- Tier 2 (Protocols): LayoutHost capability ABC and configuration
- Tier 3 (Services): AnchorStack scheduler and selection ownership
- Tier 4 (Qt): PyQt6 LayoutHost for QScrollArea content

The Qt tier is not imported here, so the pure tiers work without a display.
"""

from anchor_stack.core import (
    AnchorStackError,
    DuplicateItemError,
    InvalidGapError,
    LayoutHostUnavailableError,
    StackItem,
    ItemPosition,
    PositionResult,
    ElementHandle,
    HandleRegistry,
    solve_positions,
)
from anchor_stack.protocols import (
    LayoutHostABC,
    AnchorStackConfig,
    register_layout_host,
    get_layout_host,
    set_stack_config,
    get_stack_config,
)
from anchor_stack.services import AnchorStack, SelectionController

__version__ = "0.1.0"

__all__ = [
    "__version__",
    "AnchorStackError",
    "DuplicateItemError",
    "InvalidGapError",
    "LayoutHostUnavailableError",
    "StackItem",
    "ItemPosition",
    "PositionResult",
    "ElementHandle",
    "HandleRegistry",
    "solve_positions",
    "LayoutHostABC",
    "AnchorStackConfig",
    "register_layout_host",
    "get_layout_host",
    "set_stack_config",
    "get_stack_config",
    "AnchorStack",
    "SelectionController",
]
