"""Anchor stack exceptions."""


class AnchorStackError(Exception):
    """Base class for anchor stack precondition violations."""


class DuplicateItemError(AnchorStackError, ValueError):
    """Raised when two items in one computation share an id."""

    def __init__(self, item_id: str):
        super().__init__(f"Duplicate stack item id: {item_id!r}")
        self.item_id = item_id


class InvalidGapError(AnchorStackError, ValueError):
    """Raised when a negative gap is requested."""

    def __init__(self, gap: float):
        super().__init__(f"Gap must be >= 0, got {gap!r}")
        self.gap = gap


class LayoutHostUnavailableError(AnchorStackError, RuntimeError):
    """Raised when no layout host was passed or registered."""
