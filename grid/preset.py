"""Grid preset model and `.gridPreset` parsing.

A grid preset is produced by the Master Controller Grid Wizard. It stores the field-space
position of every grid point plus the timeline frame each point is tagged to:

    {
      "name": "head_turn",
      "pos": [[[x, y], [x, y], ...], ...],      # R rows x C columns
      "frames": [[1, 2, ...], ...]              # same R x C shape, 0 = untagged
    }

`parse_preset` validates the decoded document once so the rest of the code can rely on a
rectangular, numeric grid. Instances are immutable; loading another file builds a new one.
"""

from __future__ import annotations

from dataclasses import dataclass, field
import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Tuple

import numpy as np

from grid.errors import ParseError
from grid.models import Point

logger = logging.getLogger(__name__)

PRESET_SUFFIX = ".gridPreset"


def _frozen(a: np.ndarray) -> np.ndarray:
    a.setflags(write=False)
    return a


@dataclass(frozen=True, eq=False)
class GridPreset:
    """
    Immutable, shape-checked grid preset.

    Arrays:
    - positions: float64, shape (rows, cols, 2). positions[r, c] is the (x, y) field-space
      point of cell (r, c). Rows share a Y (U axis), columns within a row are ordered along X
      (V axis); spacing may be irregular.
    - frame_tags: int64, shape (rows, cols). Values outside [1, total_frames] are untagged.

    The tag index maps each tag value to its first cell in row-major order, so duplicate tags
    resolve deterministically to the earliest cell.
    """
    name: str
    positions: np.ndarray
    frame_tags: np.ndarray
    source_path: Optional[str] = None
    _tag_index: Dict[int, Tuple[int, int]] = field(init=False, repr=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "_tag_index", _build_tag_index(self.frame_tags))

    @property
    def rows(self) -> int:
        return int(self.positions.shape[0])

    @property
    def cols(self) -> int:
        return int(self.positions.shape[1])

    def position(self, row: int, col: int) -> Point:
        """Field-space point of a cell."""
        x, y = self.positions[row, col]
        return float(x), float(y)

    def cell_tag(self, row: int, col: int) -> int:
        """Frame tag stored for a cell (may be UNTAGGED or out of range)."""
        return int(self.frame_tags[row, col])

    def find_frame_cell(self, frame: int) -> Optional[Tuple[int, int]]:
        """
        Return the (row, col) of the first cell tagged with `frame`, or None.

        Equivalent to a row-major linear scan; the lookup goes through the index built at
        load time.
        """
        return self._tag_index.get(int(frame))

    def tagged_frames(self) -> List[int]:
        """Sorted distinct positive tags present in the grid."""
        return sorted(t for t in self._tag_index if t > 0)


def _build_tag_index(frame_tags: np.ndarray) -> Dict[int, Tuple[int, int]]:
    index: Dict[int, Tuple[int, int]] = {}
    rows, cols = frame_tags.shape
    for r in range(rows):
        for c in range(cols):
            # setdefault keeps the first occurrence in row-major order.
            index.setdefault(int(frame_tags[r, c]), (r, c))
    return index


def _require_rows(v: Any, key: str) -> List[Any]:
    """Require a non-empty list of non-empty lists, all of the same length."""
    if not isinstance(v, list) or not v:
        raise ParseError(f"Missing or invalid '{key}' (expected a non-empty 2D array)")
    width: Optional[int] = None
    for i, row in enumerate(v):
        if not isinstance(row, list) or not row:
            raise ParseError(f"Invalid '{key}[{i}]' (expected a non-empty array)")
        if width is None:
            width = len(row)
        elif len(row) != width:
            raise ParseError(f"Ragged '{key}': row {i} has {len(row)} entries, expected {width}")
    return v


def _require_point(v: Any, key: str) -> Point:
    """
    Require a numeric coordinate array with at least x and y.

    Extra components are ignored; booleans are rejected even though they are ints in Python.
    """
    if not isinstance(v, list) or len(v) < 2:
        raise ParseError(f"Invalid '{key}' (expected [x, y])")
    x, y = v[0], v[1]
    for comp in (x, y):
        if isinstance(comp, bool) or not isinstance(comp, (int, float)):
            raise ParseError(f"Invalid '{key}' (coordinates must be numbers)")
    if not (np.isfinite(x) and np.isfinite(y)):
        raise ParseError(f"Invalid '{key}' (coordinates must be finite)")
    return float(x), float(y)


def _require_tag(v: Any, key: str) -> int:
    if isinstance(v, bool) or not isinstance(v, int):
        raise ParseError(f"Invalid '{key}' (frame tags must be integers)")
    return v


def parse_preset(
    raw: Mapping[str, Any],
    *,
    default_name: str = "untitled",
    source_path: Optional[str] = None,
) -> GridPreset:
    """
    Validate a decoded preset document and build a GridPreset.

    Rules:
    - `pos` and `frames` are required, rectangular, non-empty, and of identical shape.
    - `name` is optional; a missing or blank name falls back to `default_name`.

    Raises:
        ParseError: any structural or type problem.
    """
    if not isinstance(raw, Mapping):
        raise ParseError("Preset document must be a JSON object")

    name_raw = raw.get("name")
    if name_raw is None or (isinstance(name_raw, str) and not name_raw.strip()):
        name = default_name
    elif isinstance(name_raw, str):
        name = name_raw
    else:
        raise ParseError("Invalid 'name' (expected string)")

    pos_rows = _require_rows(raw.get("pos"), "pos")
    frame_rows = _require_rows(raw.get("frames"), "frames")

    if len(pos_rows) != len(frame_rows) or len(pos_rows[0]) != len(frame_rows[0]):
        raise ParseError(
            f"Shape mismatch: pos is {len(pos_rows)}x{len(pos_rows[0])}, "
            f"frames is {len(frame_rows)}x{len(frame_rows[0])}"
        )

    positions = np.array(
        [[_require_point(p, f"pos[{r}][{c}]") for c, p in enumerate(row)] for r, row in enumerate(pos_rows)],
        dtype=np.float64,
    )
    frame_tags = np.array(
        [[_require_tag(t, f"frames[{r}][{c}]") for c, t in enumerate(row)] for r, row in enumerate(frame_rows)],
        dtype=np.int64,
    )

    return GridPreset(
        name=name,
        positions=_frozen(positions),
        frame_tags=_frozen(frame_tags),
        source_path=source_path,
    )


def load_preset(path: str) -> GridPreset:
    """
    Read and parse a `.gridPreset` file.

    Raises:
        ParseError: the file is missing, unreadable, not valid JSON, or not a valid grid.
    """
    p = Path(path)
    try:
        with p.open("r", encoding="utf-8") as f:
            raw = json.load(f)
    except FileNotFoundError as e:
        raise ParseError(f"Preset file not found: {p}") from e
    except (OSError, UnicodeDecodeError) as e:
        raise ParseError(f"Cannot read preset file {p}: {e}") from e
    except json.JSONDecodeError as e:
        raise ParseError(f"Preset file {p} is not valid JSON: {e}") from e

    stem = p.name[: -len(PRESET_SUFFIX)] if p.name.endswith(PRESET_SUFFIX) else p.stem
    preset = parse_preset(raw, default_name=stem, source_path=str(p))
    logger.info("Loaded preset '%s' (%dx%d) from %s", preset.name, preset.rows, preset.cols, p)
    return preset
