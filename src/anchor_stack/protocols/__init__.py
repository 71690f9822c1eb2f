"""
Layout host contracts and configuration.

ABC-based capability interface between the anchor stack and the widget
toolkit, plus the global configuration hooks.
"""

from .layout_host import (
    LayoutHostProtocol,
    LayoutHostABC,
    register_layout_host,
    get_layout_host,
)
from .stack_config import AnchorStackConfig, set_stack_config, get_stack_config

__all__ = [
    "LayoutHostProtocol",
    "LayoutHostABC",
    "register_layout_host",
    "get_layout_host",
    "AnchorStackConfig",
    "set_stack_config",
    "get_stack_config",
]
