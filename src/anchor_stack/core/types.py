"""Value types shared by the solver and the scheduler."""

from dataclasses import dataclass, field
from typing import Any, Dict, List


@dataclass(frozen=True)
class StackItem:
    """A named card. ``data`` is an opaque payload owned by the caller."""

    id: str
    data: Any = field(default=None, compare=False)


@dataclass(frozen=True)
class ItemPosition:
    """Final placement of one card."""

    id: str
    top: float
    is_stacked: bool


@dataclass
class PositionResult:
    """Output of one solver call."""

    positions: Dict[str, ItemPosition] = field(default_factory=dict)
    sorted_items: List[StackItem] = field(default_factory=list)
