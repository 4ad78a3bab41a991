"""Exception types raised by the grid mapping core."""

from __future__ import annotations


class GridError(Exception):
    """Base class for grid preset / transform failures."""


class ParseError(GridError):
    """
    A preset source is missing, unreadable, or not a well-formed grid document.

    Non-fatal for the application: the UI keeps the previously loaded grid (or the empty
    view) and reports the message.
    """


class DegenerateGridError(GridError):
    """
    The grid cannot be fitted into the viewport.

    Raised when the grid's span along either axis is zero, or the viewport has no usable
    extent after padding. Either case would otherwise produce infinite or NaN scales.
    """
