from __future__ import annotations

import pytest

from grid.nearest import NearestCell, lock_axis_for, resolve_nearest


def test_square_example_resolves_far_corner(square, square_transform) -> None:
    cell = resolve_nearest(square, square_transform, (10.0, 10.0))

    assert cell == NearestCell(row=1, col=1, frame=4)


def test_pointer_on_each_grid_point_resolves_that_cell(irregular, irregular_transform) -> None:
    for r in range(irregular.rows):
        for c in range(irregular.cols):
            cell = resolve_nearest(irregular, irregular_transform, irregular.position(r, c))

            assert (cell.row, cell.col) == (r, c)
            assert cell.frame == irregular.cell_tag(r, c)


def test_pointer_near_a_point_snaps_to_it(irregular, irregular_transform) -> None:
    cell = resolve_nearest(irregular, irregular_transform, (0.3, 0.8))

    assert (cell.row, cell.col) == (1, 2)
    assert cell.frame == 7


def test_pointer_outside_the_grid_clamps_to_the_edge(irregular, irregular_transform) -> None:
    cell = resolve_nearest(irregular, irregular_transform, (40.0, -40.0))

    assert (cell.row, cell.col) == (2, 3)


def test_ties_go_to_the_later_row_and_column(square, square_transform) -> None:
    cell = resolve_nearest(square, square_transform, (5.0, 5.0))

    assert (cell.row, cell.col) == (1, 1)


def test_u_lock_keeps_the_start_row(square, square_transform) -> None:
    cell = resolve_nearest(square, square_transform, (10.0, 10.0), lock="u", start=(0.0, 0.0))

    assert cell == NearestCell(row=0, col=1, frame=2)


def test_v_lock_keeps_the_start_column(square, square_transform) -> None:
    cell = resolve_nearest(square, square_transform, (10.0, 10.0), lock="v", start=(0.0, 0.0))

    assert cell == NearestCell(row=1, col=0, frame=3)


def test_start_is_ignored_without_lock(square, square_transform) -> None:
    cell = resolve_nearest(square, square_transform, (0.0, 10.0), lock="none", start=(10.0, 0.0))

    assert (cell.row, cell.col) == (1, 0)


def test_untagged_cell_reports_zero(irregular, irregular_transform) -> None:
    cell = resolve_nearest(irregular, irregular_transform, (-1.0, 0.5))

    assert cell.frame == 0


@pytest.mark.parametrize(
    ("start", "pos", "expected"),
    [
        ((0.0, 0.0), (10.0, 3.0), "u"),
        ((0.0, 0.0), (-10.0, 3.0), "u"),
        ((0.0, 0.0), (3.0, 10.0), "v"),
        ((0.0, 0.0), (4.0, -4.0), "v"),
        ((2.0, 2.0), (2.0, 2.0), "v"),
    ],
)
def test_lock_axis_follows_dominant_displacement(start, pos, expected) -> None:
    assert lock_axis_for(start, pos) == expected
