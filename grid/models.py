# grid/models.py
from __future__ import annotations

from typing import Literal, Tuple


# A 2D coordinate. Whether it is in field units or scene units depends on the caller;
# function signatures say which one they expect.
Point = Tuple[float, float]

# Axis lock for single-axis ("EZFlip") dragging.
# - "none": no constraint, both coordinates follow the pointer
# - "u": the gesture moved mostly horizontally; the row (pointer Y) is frozen to the start
# - "v": the gesture moved mostly vertically; the column (pointer X) is frozen to the start
LockAxis = Literal["none", "u", "v"]

# Tag value written by the grid wizard for points that are not bound to any frame.
UNTAGGED = 0


def is_valid_frame(tag: int, total_frames: int) -> bool:
    """
    Whether a resolved tag may be sent to the timeline.

    Timeline frames are 1-based, so 0 (untagged), negatives, and anything past the
    scene length are rejected.
    """
    return 1 <= int(tag) <= int(total_frames)
