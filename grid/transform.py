"""Field-space to scene-space scaling for a grid preset.

Preset points are stored in the wizard's field units, which are far too small to draw 1:1.
`compute_transform` scales them up so the grid fills the view (minus padding). The scene's
Y axis points down while field Y points up, so the vertical scale is negated.
"""

from __future__ import annotations

from dataclasses import dataclass

from grid.errors import DegenerateGridError
from grid.models import Point
from grid.preset import GridPreset

DEFAULT_PADDING = 15.0


@dataclass(frozen=True)
class ViewTransform:
    """
    Signed per-axis scale plus the scene-space center of the grid's bounding box.

    center_x/center_y double as the idle handle position when the current frame is not
    tagged anywhere on the grid.
    """
    scale_x: float
    scale_y: float
    center_x: float
    center_y: float

    def field_to_scene(self, p: Point) -> Point:
        return p[0] * self.scale_x, p[1] * self.scale_y

    def scene_to_field(self, p: Point) -> Point:
        return p[0] / self.scale_x, p[1] / self.scale_y


def compute_transform(
    preset: GridPreset,
    viewport_width: float,
    viewport_height: float,
    padding: float = DEFAULT_PADDING,
) -> ViewTransform:
    """
    Fit the preset's structural bounding box into a viewport.

    The X extent is read from every column of the first row and the Y extent from the first
    column of every row. This assumes an axis-aligned grid whose outer row/column carry the
    extremes, which is what the grid wizard produces.

    Raises:
        DegenerateGridError: zero span on either axis, or no usable viewport extent.
    """
    first_row_x = preset.positions[0, :, 0]
    first_col_y = preset.positions[:, 0, 1]

    min_x, max_x = float(first_row_x.min()), float(first_row_x.max())
    min_y, max_y = float(first_col_y.min()), float(first_col_y.max())

    grid_width = abs(max_x - min_x)
    grid_height = abs(max_y - min_y)
    if grid_width == 0.0 or grid_height == 0.0:
        raise DegenerateGridError(
            f"Grid '{preset.name}' has a zero-size bounding box ({grid_width} x {grid_height})"
        )

    usable_w = float(viewport_width) - float(padding)
    usable_h = float(viewport_height) - float(padding)
    if usable_w <= 0.0 or usable_h <= 0.0:
        raise DegenerateGridError(
            f"Viewport {viewport_width}x{viewport_height} leaves no room after padding {padding}"
        )

    scale_x = usable_w / grid_width
    scale_y = -(usable_h / grid_height)

    return ViewTransform(
        scale_x=scale_x,
        scale_y=scale_y,
        center_x=(min_x + max_x) / 2 * scale_x,
        center_y=(min_y + max_y) / 2 * scale_y,
    )
