# grid/nearest.py
from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from grid.models import LockAxis, Point
from grid.preset import GridPreset
from grid.transform import ViewTransform


@dataclass(frozen=True)
class NearestCell:
    """Grid cell picked for a pointer position, with the tag stored on it."""
    row: int
    col: int
    frame: int


def _last_argmin(dist: np.ndarray) -> int:
    """
    Index of the minimum, preferring the last one on ties.

    Matches a forward scan that keeps the candidate on `<=`.
    """
    rev = dist[::-1]
    return int(dist.shape[0] - 1 - int(np.argmin(rev)))


def lock_axis_for(start: Point, pos: Point) -> LockAxis:
    """
    Pick the lock for a single-axis gesture from its displacement since `start`.

    Strictly more horizontal travel gives "u" (keep the row, scrub columns); anything else,
    including equal travel, gives "v" (keep the column, scrub rows).
    """
    dx = abs(start[0] - pos[0])
    dy = abs(start[1] - pos[1])
    return "u" if dx > dy else "v"


def resolve_nearest(
    preset: GridPreset,
    transform: ViewTransform,
    pointer: Point,
    *,
    lock: LockAxis = "none",
    start: Point = (0.0, 0.0),
) -> NearestCell:
    """
    Find the grid cell closest to `pointer` with a row-then-column search.

    Args:
        preset: grid to search.
        transform: current view scaling; distances are measured in scene units.
        pointer: field-space pointer position.
        lock: "u" freezes pointer Y to start Y, "v" freezes pointer X to start X.
        start: field-space gesture start, only read when lock != "none".

    Pass 1 picks the row whose first-column Y is nearest the pointer Y. Pass 2 picks the
    column in that row whose X is nearest the pointer X. Ties go to the later row/column.
    This is O(rows + cols) and exact only for axis-aligned grids.
    """
    px, py = transform.field_to_scene(pointer)
    sx, sy = transform.field_to_scene(start)
    if lock == "u":
        py = sy
    elif lock == "v":
        px = sx

    row_y = preset.positions[:, 0, 1] * transform.scale_y
    row = _last_argmin(np.abs(row_y - py))

    col_x = preset.positions[row, :, 0] * transform.scale_x
    col = _last_argmin(np.abs(col_x - px))

    return NearestCell(row=row, col=col, frame=preset.cell_tag(row, col))
