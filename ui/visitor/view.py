# ui/visitor/view.py
from __future__ import annotations

from typing import Callable, Optional

from PySide6.QtCore import Qt
from PySide6.QtWidgets import QFrame, QGraphicsView, QSizePolicy, QWidget

ScenePointHandler = Callable[[float, float], None]


class GridView(QGraphicsView):
    """
    Graphics view that reports pointer activity in scene coordinates.

    Mouse events are not forwarded to scene items: the grid handle is positioned by the
    sync controller, never dragged directly. Only the left button drives the grid; moves with
    any other button held are dropped. Mouse tracking stays off, so every reported move
    belongs to a left-button drag.
    """

    def __init__(self, parent: Optional[QWidget] = None) -> None:
        super().__init__(parent)
        self.setSizePolicy(QSizePolicy.Policy.Expanding, QSizePolicy.Policy.Expanding)
        self.setFrameStyle(QFrame.Shape.NoFrame)
        self.setHorizontalScrollBarPolicy(Qt.ScrollBarPolicy.ScrollBarAlwaysOff)
        self.setVerticalScrollBarPolicy(Qt.ScrollBarPolicy.ScrollBarAlwaysOff)

        self.on_press: Optional[ScenePointHandler] = None
        self.on_move: Optional[ScenePointHandler] = None
        self.on_release: Optional[Callable[[], None]] = None

    def _scene_xy(self, event) -> tuple[float, float]:
        p = self.mapToScene(event.position().toPoint())
        return float(p.x()), float(p.y())

    def mousePressEvent(self, event) -> None:  # type: ignore[override]
        if event.button() != Qt.MouseButton.LeftButton:
            return
        if self.on_press is not None:
            self.on_press(*self._scene_xy(event))
        event.accept()

    def mouseMoveEvent(self, event) -> None:  # type: ignore[override]
        if not (event.buttons() & Qt.MouseButton.LeftButton):
            return
        if self.on_move is not None:
            self.on_move(*self._scene_xy(event))
        event.accept()

    def mouseReleaseEvent(self, event) -> None:  # type: ignore[override]
        if event.button() != Qt.MouseButton.LeftButton:
            return
        if self.on_release is not None:
            self.on_release()
        event.accept()
