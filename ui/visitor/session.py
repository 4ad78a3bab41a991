"""Loaded grid plus its current view transform, kept Qt-free."""

from __future__ import annotations

from typing import Optional

from grid.preset import GridPreset
from grid.transform import DEFAULT_PADDING, ViewTransform, compute_transform


class GridSession:
    """
    The preset/transform pair the window draws and the controller resolves against.

    Both change together or not at all: a preset is only adopted once a transform has been
    computed for it, and a failed rescale keeps the previous transform.
    """

    def __init__(self, *, padding: float = DEFAULT_PADDING) -> None:
        self._padding = float(padding)
        self._preset: Optional[GridPreset] = None
        self._transform: Optional[ViewTransform] = None

    @property
    def preset(self) -> Optional[GridPreset]:
        return self._preset

    @property
    def transform(self) -> Optional[ViewTransform]:
        return self._transform

    @property
    def loaded(self) -> bool:
        return self._preset is not None and self._transform is not None

    def adopt(self, preset: GridPreset, viewport_width: float, viewport_height: float) -> ViewTransform:
        """
        Fit `preset` into the viewport and make it current.

        Raises:
            DegenerateGridError: the preset cannot be fitted; the previous grid stays current.
        """
        transform = compute_transform(preset, viewport_width, viewport_height, self._padding)
        self._preset = preset
        self._transform = transform
        return transform

    def rescale(self, viewport_width: float, viewport_height: float) -> Optional[ViewTransform]:
        """
        Refit the current preset after a resize. Returns None when nothing is loaded.

        Raises:
            DegenerateGridError: the viewport has no room; the previous transform stays.
        """
        if self._preset is None:
            return None
        self._transform = compute_transform(self._preset, viewport_width, viewport_height, self._padding)
        return self._transform
