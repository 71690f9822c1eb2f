"""Base configuration for anchor stacks.

Provides hooks for applications to tune scheduling and diagnostics.
"""

from dataclasses import dataclass
from typing import Optional


@dataclass
class AnchorStackConfig:
    """Anchor stack behavior knobs.

    Attributes:
        default_gap: Clearance used when an AnchorStack is built without a gap
        report_unresolved_anchors: Log an error for each anchor that cannot be resolved
        target_fps: Frame rate for recomputation (None = detect screen refresh rate)
        max_fps: Cap applied to the detected or requested frame rate
        frame_ms: Explicit frame interval, overrides target_fps and max_fps
    """

    default_gap: float = 8.0
    report_unresolved_anchors: bool = True
    target_fps: Optional[int] = None
    max_fps: Optional[int] = 60
    frame_ms: Optional[int] = None


# Global config instance (set by application)
_stack_config: Optional[AnchorStackConfig] = None


def set_stack_config(config: Optional[AnchorStackConfig]) -> None:
    """Set the global anchor stack configuration.

    Args:
        config: AnchorStackConfig instance, or None to restore defaults
    """
    global _stack_config
    _stack_config = config


def get_stack_config() -> AnchorStackConfig:
    """Get the current anchor stack configuration.

    Returns:
        Current AnchorStackConfig or default if not set
    """
    if _stack_config is None:
        return AnchorStackConfig()
    return _stack_config
