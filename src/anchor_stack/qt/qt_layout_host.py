"""
PyQt6 layout host.

Measures anchor and card widgets that live inside a QScrollArea and turns
Qt events into AnchorStack triggers:
- viewport Resize events and vertical scroll bar changes -> layout listeners
- Resize events on observed card widgets -> size callbacks
- single-shot QTimers at the screen frame interval -> frames
- first return to the event loop, and application font changes -> metrics settled
"""

import logging
from abc import ABCMeta
from typing import Any, Callable, Dict, List, Optional, Tuple

from PyQt6.QtCore import QEvent, QObject, QPoint, QTimer
from PyQt6.QtGui import QGuiApplication
from PyQt6.QtWidgets import QScrollArea, QWidget

from anchor_stack.protocols.layout_host import LayoutHostABC
from anchor_stack.protocols.stack_config import AnchorStackConfig, get_stack_config

logger = logging.getLogger(__name__)

Callback = Callable[[], None]

# Combines Qt's metaclass with ABCMeta so a QObject can implement LayoutHostABC
_QtMetaclass = type(QObject)


class PyQtLayoutHostMeta(_QtMetaclass, ABCMeta):
    """Metaclass for QObjects that implement layout host ABCs."""
    pass


FALLBACK_FPS = 60
PLAUSIBLE_FPS = range(30, 501)


def _primary_screen_hz() -> Optional[float]:
    app = QGuiApplication.instance()
    screen = app.primaryScreen() if app is not None else None
    if screen is None:
        return None
    return screen.refreshRate()


def resolve_frame_ms(config: Optional[AnchorStackConfig] = None) -> int:
    """Frame interval in milliseconds.

    An explicit ``frame_ms`` wins. Otherwise the rate is ``target_fps`` or the
    primary screen's refresh rate, falling back to 60Hz when the screen reports
    nothing usable (offscreen platforms report 0), then capped at ``max_fps``.
    """
    config = config or get_stack_config()
    if config.frame_ms is not None:
        return max(0, config.frame_ms)

    fps = config.target_fps
    if fps is None:
        screen_hz = _primary_screen_hz()
        if screen_hz is None or int(screen_hz) not in PLAUSIBLE_FPS:
            logger.warning(f"[QtLayoutHost] Screen refresh rate {screen_hz!r} unusable, using {FALLBACK_FPS}Hz frames")
            fps = FALLBACK_FPS
        else:
            fps = int(screen_hz)

    if config.max_fps is not None:
        fps = min(fps, config.max_fps)
    return max(1, int(1000 / fps))


class QtLayoutHost(QObject, LayoutHostABC, metaclass=PyQtLayoutHostMeta):
    """
    Layout host for cards and anchors inside a QScrollArea.

    Anchor and card elements are QWidgets. Tops are reported relative to the
    scroll area's viewport, so ``element_top + scroll_offset`` is the position
    inside the scrolled content.

    Usage:
        host = QtLayoutHost(self.scroll_area)
        stack = AnchorStack(items, anchor_resolver=self._anchor_for, host=host)

        def closeEvent(self, event):
            stack.dispose()
            host.dispose()
            super().closeEvent(event)
    """

    def __init__(self, scroll_area: QScrollArea, frame_ms: Optional[int] = None, parent: Optional[QObject] = None):
        super().__init__(parent)
        self._scroll_area = scroll_area
        self._viewport = scroll_area.viewport()
        self._scroll_bar = scroll_area.verticalScrollBar()
        self._frame_ms = frame_ms if frame_ms is not None else resolve_frame_ms()

        self._layout_listeners: List[Callback] = []
        self._observed: Dict[int, Tuple[QWidget, Callback]] = {}
        self._frames: Dict[int, QTimer] = {}
        self._next_token = 0

        self._settled = False
        self._settled_callbacks: List[Callback] = []
        self._settle_timer = QTimer(self)
        self._settle_timer.setSingleShot(True)
        self._settle_timer.timeout.connect(self._on_metrics_settled)
        self._settle_timer.start(0)

        self._viewport.installEventFilter(self)
        self._scroll_bar.valueChanged.connect(self._on_scrolled)
        app = QGuiApplication.instance()
        if app is not None:
            app.fontChanged.connect(self._on_application_font_changed)
        self._disposed = False
        logger.debug(f"[QtLayoutHost] Created with {self._frame_ms}ms frame interval")

    @property
    def frame_ms(self) -> int:
        return self._frame_ms

    # ---------- Geometry ----------

    def element_top(self, element: QWidget) -> float:
        global_top_left = element.mapToGlobal(QPoint(0, 0))
        return float(self._viewport.mapFromGlobal(global_top_left).y())

    def element_height(self, element: QWidget) -> float:
        return float(element.height())

    def scroll_offset(self) -> float:
        return float(self._scroll_bar.value())

    # ---------- Size observation ----------

    def observe_size(self, element: QWidget, callback: Callback) -> None:
        key = id(element)
        if key not in self._observed:
            element.installEventFilter(self)
        self._observed[key] = (element, callback)

    def unobserve_size(self, element: QWidget) -> None:
        entry = self._observed.pop(id(element), None)
        if entry is None:
            return
        try:
            element.removeEventFilter(self)
        except RuntimeError:
            # Underlying C++ widget already deleted
            logger.debug("[QtLayoutHost] Observed widget already deleted")

    # ---------- Frames ----------

    def request_frame(self, callback: Callback) -> int:
        token = self._next_token
        self._next_token += 1

        timer = QTimer(self)
        timer.setSingleShot(True)
        timer.timeout.connect(lambda: self._fire_frame(token, callback))
        self._frames[token] = timer
        timer.start(self._frame_ms)
        return token

    def cancel_frame(self, token: Any) -> None:
        timer = self._frames.pop(token, None)
        if timer is not None:
            timer.stop()
            timer.deleteLater()

    def _fire_frame(self, token: int, callback: Callback) -> None:
        timer = self._frames.pop(token, None)
        if timer is None:
            return
        timer.deleteLater()
        callback()

    # ---------- Layout signals ----------

    def add_layout_listener(self, callback: Callback) -> None:
        self._layout_listeners.append(callback)

    def remove_layout_listener(self, callback: Callback) -> None:
        if callback in self._layout_listeners:
            self._layout_listeners.remove(callback)

    def when_metrics_settled(self, callback: Callback) -> None:
        if self._settled:
            self.request_frame(callback)
            return
        self._settled_callbacks.append(callback)

    def _notify_layout_listeners(self) -> None:
        for callback in list(self._layout_listeners):
            callback()

    def _on_scrolled(self, _value: int) -> None:
        self._notify_layout_listeners()

    def _on_application_font_changed(self, _font) -> None:
        logger.debug("[QtLayoutHost] Application font changed")
        self._notify_layout_listeners()

    def _on_metrics_settled(self) -> None:
        self._settled = True
        callbacks = self._settled_callbacks
        self._settled_callbacks = []
        for callback in callbacks:
            callback()

    def eventFilter(self, obj: QObject, event: QEvent) -> bool:
        if event.type() == QEvent.Type.Resize:
            if obj is self._viewport:
                self._notify_layout_listeners()
            entry = self._observed.get(id(obj))
            if entry is not None and entry[0] is obj:
                entry[1]()
        return False

    # ---------- Cleanup ----------

    def dispose(self) -> None:
        """Stop timers and remove every filter and signal connection."""
        if self._disposed:
            return
        self._disposed = True
        self._settle_timer.stop()
        if self._frames:
            logger.warning(
                f"[QtLayoutHost] Disposed with {len(self._frames)} pending frame(s); dispose AnchorStacks before their host"
            )
        for token in list(self._frames):
            self.cancel_frame(token)
        for element, _callback in list(self._observed.values()):
            self.unobserve_size(element)
        self._viewport.removeEventFilter(self)
        self._scroll_bar.valueChanged.disconnect(self._on_scrolled)
        app = QGuiApplication.instance()
        if app is not None:
            try:
                app.fontChanged.disconnect(self._on_application_font_changed)
            except TypeError:
                logger.debug("[QtLayoutHost] fontChanged was not connected")
        self._layout_listeners.clear()
        self._settled_callbacks.clear()
        logger.debug("[QtLayoutHost] Disposed")
