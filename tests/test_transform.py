from __future__ import annotations

import math

import pytest

from grid.errors import DegenerateGridError
from grid.preset import parse_preset
from grid.transform import DEFAULT_PADDING, compute_transform


def test_square_grid_in_100px_view_without_padding(square) -> None:
    t = compute_transform(square, 100, 100, padding=0)

    assert t.scale_x == 10.0
    assert t.scale_y == -10.0
    assert t.center_x == 50.0
    assert t.center_y == -50.0


def test_padding_is_subtracted_from_viewport(square) -> None:
    t = compute_transform(square, 115, 215)

    assert DEFAULT_PADDING == 15.0
    assert t.scale_x == 10.0
    assert t.scale_y == -20.0


def test_same_inputs_give_equal_transforms(irregular) -> None:
    a = compute_transform(irregular, 300, 200, padding=15)
    b = compute_transform(irregular, 300, 200, padding=15)

    assert a == b


def test_irregular_grid_uses_first_row_and_first_column_extents(irregular) -> None:
    t = compute_transform(irregular, 300, 200, padding=15)

    assert t.scale_x == pytest.approx(285 / 7)
    assert t.scale_y == pytest.approx(-185 / 4)
    assert t.center_x == pytest.approx(0.5 * 285 / 7)
    assert t.center_y == pytest.approx(0.0)


def test_interior_points_do_not_widen_the_extent() -> None:
    preset = parse_preset({
        "name": "skew",
        "pos": [[[0, 0], [10, 0]], [[0, 10], [50, 10]]],
        "frames": [[1, 2], [3, 4]],
    })

    t = compute_transform(preset, 100, 100, padding=0)

    assert t.scale_x == 10.0


def test_collapsed_grid_raises_degenerate_error() -> None:
    preset = parse_preset({
        "name": "dot",
        "pos": [[[3, 3], [3, 3]], [[3, 3], [3, 3]]],
        "frames": [[1, 2], [3, 4]],
    })

    with pytest.raises(DegenerateGridError):
        compute_transform(preset, 100, 100)


def test_single_row_grid_raises_degenerate_error() -> None:
    preset = parse_preset({"name": "row", "pos": [[[0, 0], [5, 0], [9, 0]]], "frames": [[1, 2, 3]]})

    with pytest.raises(DegenerateGridError):
        compute_transform(preset, 100, 100)


def test_viewport_smaller_than_padding_raises_degenerate_error(square) -> None:
    with pytest.raises(DegenerateGridError):
        compute_transform(square, 10, 100, padding=15)


def test_scene_to_field_inverts_field_to_scene(irregular_transform) -> None:
    x, y = irregular_transform.scene_to_field(irregular_transform.field_to_scene((-1.0, 0.5)))

    assert math.isclose(x, -1.0)
    assert math.isclose(y, 0.5)
