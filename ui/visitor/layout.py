"""ui/visitor/layout.py helpers."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Tuple

from grid.preset import GridPreset
from grid.transform import ViewTransform


@dataclass(frozen=True)
class Segment:
    """A scene-space line from (x0, y0) to (x1, y1)."""
    x0: float
    y0: float
    x1: float
    y1: float


# (left, top, width, height) in scene coordinates.
RectF = Tuple[float, float, float, float]


def row_lines(preset: GridPreset, transform: ViewTransform) -> List[Segment]:
    """
    One line per row, from the row's first point to its last point.

    Rows are drawn as straight segments even if intermediate points are offset; the dots
    show the actual positions.
    """
    out: List[Segment] = []
    last = preset.cols - 1
    for r in range(preset.rows):
        x0, y0 = transform.field_to_scene(preset.position(r, 0))
        x1, y1 = transform.field_to_scene(preset.position(r, last))
        out.append(Segment(x0, y0, x1, y1))
    return out


def column_lines(preset: GridPreset, transform: ViewTransform) -> List[Segment]:
    """One line per column, from the first row's point to the last row's point."""
    out: List[Segment] = []
    last = preset.rows - 1
    for c in range(preset.cols):
        x0, y0 = transform.field_to_scene(preset.position(0, c))
        x1, y1 = transform.field_to_scene(preset.position(last, c))
        out.append(Segment(x0, y0, x1, y1))
    return out


def dot_rects(preset: GridPreset, transform: ViewTransform, *, size: float) -> List[RectF]:
    """
    Bounding boxes of the grid dots (row-major), each centered on its scene point.
    """
    half = size / 2
    out: List[RectF] = []
    for r in range(preset.rows):
        for c in range(preset.cols):
            x, y = transform.field_to_scene(preset.position(r, c))
            out.append((x - half, y - half, size, size))
    return out


def grid_summary(preset: GridPreset) -> dict:
    """JSON-safe description of a preset, published on GET /grid."""
    return {
        "name": preset.name,
        "rows": preset.rows,
        "cols": preset.cols,
        "source_path": preset.source_path,
        "frames": preset.frame_tags.tolist(),
        "tagged_frames": preset.tagged_frames(),
    }
