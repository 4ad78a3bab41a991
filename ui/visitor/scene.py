# ui/visitor/scene.py
from __future__ import annotations

from dataclasses import dataclass, field

from PySide6.QtGui import QBrush, QColor, QPen
from PySide6.QtWidgets import QGraphicsEllipseItem, QGraphicsScene, QGraphicsView

from grid.preset import GridPreset
from grid.transform import ViewTransform
from ui.visitor.layout import column_lines, dot_rects, row_lines


@dataclass(frozen=True)
class SceneStyle:
    """
    Colors and sizes for the grid drawing.

    - row_color/row_width: horizontal (U) lines.
    - col_color/col_width: vertical (V) lines, drawn heavier than rows.
    - dot_size: diameter of grid points; also the handle diameter.
    - dot_outline: outline color for dots (matches the view background).
    """
    row_color: QColor = field(default_factory=lambda: QColor(90, 90, 90, 255))
    row_width: int = 1
    col_color: QColor = field(default_factory=lambda: QColor(128, 128, 128, 255))
    col_width: int = 2
    dot_outline: QColor = field(default_factory=lambda: QColor(69, 69, 69, 255))
    dot_size: float = 8.0
    handle_color: QColor = field(default_factory=lambda: QColor(255, 0, 0, 255))


class GridSceneBuilder:
    """
    Builds a fresh QGraphicsScene for a preset/transform pair.

    The scene is rebuilt wholesale on every reload or resize; nothing is patched in place.
    The handle item is owned by the builder and re-added to each new scene so the window
    keeps a stable reference to move it.
    """

    def __init__(self, *, style: SceneStyle = SceneStyle()) -> None:
        self._style = style
        size = float(style.dot_size)
        self.handle = QGraphicsEllipseItem(0, 0, size, size)
        self.handle.setBrush(QBrush(style.handle_color))
        self.handle.setZValue(10)

    def build(self, view: QGraphicsView, preset: GridPreset, transform: ViewTransform) -> QGraphicsScene:
        s = self._style
        old = view.scene()
        if old is not None and self.handle.scene() is old:
            # Detach so clearing the old scene does not delete the handle.
            old.removeItem(self.handle)

        scene = QGraphicsScene(view)

        row_pen = QPen(s.row_color)
        row_pen.setWidth(s.row_width)
        for seg in row_lines(preset, transform):
            scene.addLine(seg.x0, seg.y0, seg.x1, seg.y1, row_pen)

        col_pen = QPen(s.col_color)
        col_pen.setWidth(s.col_width)
        for seg in column_lines(preset, transform):
            scene.addLine(seg.x0, seg.y0, seg.x1, seg.y1, col_pen)

        dot_pen = QPen(s.dot_outline)
        dot_pen.setWidth(2)
        dot_brush = QBrush(s.col_color)
        for x, y, w, h in dot_rects(preset, transform, size=s.dot_size):
            scene.addEllipse(x, y, w, h, dot_pen, dot_brush)

        scene.addItem(self.handle)
        view.setScene(scene)
        view.centerOn(transform.center_x, transform.center_y)
        if old is not None:
            old.deleteLater()
        return scene

    def move_handle(self, top_left: tuple[float, float]) -> None:
        self.handle.setPos(top_left[0], top_left[1])
