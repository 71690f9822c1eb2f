"""
PyQt6 integration.

LayoutHost implementation for anchors and cards hosted in a QScrollArea.
"""

from .qt_layout_host import QtLayoutHost, PyQtLayoutHostMeta, resolve_frame_ms

__all__ = [
    "QtLayoutHost",
    "PyQtLayoutHostMeta",
    "resolve_frame_ms",
]
