"""
Service layer for anchor stacks.

Scheduling of position recomputation and selection ownership.
"""

from .stack_scheduler import AnchorStack, AnchorResolver, PositionsListener
from .selection_controller import SelectionController

__all__ = [
    "AnchorStack",
    "AnchorResolver",
    "PositionsListener",
    "SelectionController",
]
