from __future__ import annotations

import pytest

from grid.preset import GridPreset, parse_preset
from grid.transform import ViewTransform, compute_transform

from grid_docs import IRREGULAR_DOC, SQUARE_DOC


@pytest.fixture
def square() -> GridPreset:
    return parse_preset(SQUARE_DOC)


@pytest.fixture
def square_transform(square: GridPreset) -> ViewTransform:
    return compute_transform(square, 100, 100, padding=0)


@pytest.fixture
def irregular() -> GridPreset:
    return parse_preset(IRREGULAR_DOC)


@pytest.fixture
def irregular_transform(irregular: GridPreset) -> ViewTransform:
    return compute_transform(irregular, 300, 200, padding=15)
