"""Top-level Qt tool window for visiting tagged frames on a grid.

`VisitorWindow` composes the graphics view, the scene builder and the grid sync controller.
It owns a GridSession (preset + transform) and rebuilds the scene on load and resize; the
controller decides where the handle goes and which frame to request.
"""

from __future__ import annotations

import logging
from typing import Callable, Optional

from PySide6.QtCore import Qt
from PySide6.QtWidgets import (
    QCheckBox,
    QFileDialog,
    QHBoxLayout,
    QLabel,
    QPushButton,
    QSizePolicy,
    QStyle,
    QVBoxLayout,
    QWidget,
)

from grid.errors import DegenerateGridError, ParseError
from grid.preset import load_preset
from grid.sync import HandleSyncController
from server.timeline_store import TimelineStore
from ui.visitor.layout import grid_summary
from ui.visitor.scene import GridSceneBuilder, SceneStyle
from ui.visitor.session import GridSession
from ui.visitor.timeline_bridge import QtTimelineHost
from ui.visitor.view import GridView

logger = logging.getLogger(__name__)

APP_TITLE = "MC Grid Frame Visitor"
APP_VERSION = "1.0.4"


class VisitorWindow(QWidget):
    """
    Grid frame visitor window.

    Layout:
    - left: GridView showing grid lines, points and the red handle
    - right: load button, "EZFlip" checkbox (single-axis dragging), frame/status label

    Lifecycle:
    - load_preset_file(): parse and fit a preset; on failure the previous grid stays.
    - resizeEvent(): refit the current preset and rebuild the scene.
    - closeEvent(): detach from the timeline, hand preferences to on_save_prefs, call on_close.
    """

    def __init__(
        self,
        *,
        store: TimelineStore,
        padding_px: float,
        handle_px: float,
        single_axis: bool,
        preset_dir: str,
        on_close: Callable[[], None],
        on_save_prefs: Optional[Callable[..., None]] = None,
    ) -> None:
        super().__init__()

        self._store = store
        self._preset_dir = str(preset_dir)
        self._on_close = on_close
        self._on_save_prefs = on_save_prefs

        self._session = GridSession(padding=float(padding_px))

        self._host = QtTimelineHost(store, parent=self)
        self._builder = GridSceneBuilder(style=SceneStyle(dot_size=float(handle_px)))
        self._controller = HandleSyncController(
            host=self._host,
            handle_size=float(handle_px),
            single_axis=bool(single_axis),
            on_handle_moved=self._builder.move_handle,
        )
        self._controller.attach()
        self._host.currentFrameChanged.connect(self._update_frame_label)  # type: ignore[arg-type]

        self.setWindowTitle(f"{APP_TITLE} v{APP_VERSION}")
        self.setWindowFlags(Qt.WindowType.Tool)

        main_layout = QHBoxLayout(self)

        self._view = GridView()
        self._view.on_press = self._on_view_press
        self._view.on_move = self._on_view_move
        self._view.on_release = self._controller.on_pointer_up
        main_layout.addWidget(self._view)

        main_layout.addSpacing(12)
        right = QVBoxLayout()
        main_layout.addLayout(right)

        self._load_btn = QPushButton("")
        self._load_btn.setToolTip("Load Grid Preset")
        self._load_btn.setIcon(self.style().standardIcon(QStyle.StandardPixmap.SP_DialogOpenButton))
        self._load_btn.setSizePolicy(QSizePolicy.Policy.Preferred, QSizePolicy.Policy.Preferred)
        self._load_btn.released.connect(self._choose_preset)  # type: ignore[arg-type]
        right.addWidget(self._load_btn)

        self._flip_cb = QCheckBox("EZFlip")
        self._flip_cb.setToolTip("Turn Easy Flip Mode")
        self._flip_cb.setChecked(bool(single_axis))
        self._flip_cb.toggled.connect(self._set_single_axis)  # type: ignore[arg-type]
        right.addWidget(self._flip_cb)

        self._status = QLabel("")
        self._status.setWordWrap(True)
        right.addWidget(self._status)
        right.addStretch(1)

        self._update_frame_label(self._store.current_frame())

    # ----------------------------
    # Public API
    # ----------------------------

    @property
    def controller(self) -> HandleSyncController:
        return self._controller

    @property
    def preset_path(self) -> Optional[str]:
        preset = self._session.preset
        return preset.source_path if preset is not None else None

    @property
    def status_text(self) -> str:
        return self._status.text()

    def load_preset_file(self, path: str) -> bool:
        """
        Load a preset, fit it to the view and redraw.

        Returns False on failure. A preset that cannot be read or cannot be fitted leaves the
        current grid, title, published summary and controller state as they were.
        """
        try:
            preset = load_preset(path)
        except ParseError as e:
            logger.warning("Could not load preset: %s", e)
            self._status.setText(str(e))
            return False

        try:
            self._session.adopt(preset, self._view.width(), self._view.height())
        except DegenerateGridError as e:
            logger.error("Cannot scale grid: %s", e)
            self._status.setText(str(e))
            return False

        self._store.set_grid_summary(grid_summary(preset))
        self.setWindowTitle(f"{preset.name}.gridPreset - {APP_TITLE} v{APP_VERSION}")
        self._redraw()
        return True

    # ----------------------------
    # Refresh
    # ----------------------------

    def _rescale(self) -> None:
        """Refit the current grid to the view; a failed fit keeps the previous drawing."""
        try:
            transform = self._session.rescale(self._view.width(), self._view.height())
        except DegenerateGridError as e:
            logger.error("Cannot scale grid: %s", e)
            self._status.setText(str(e))
            return
        if transform is not None:
            self._redraw()

    def _redraw(self) -> None:
        preset, transform = self._session.preset, self._session.transform
        if preset is None or transform is None:
            return
        self._builder.build(self._view, preset, transform)
        self._controller.on_view_reset(preset, transform)
        self._update_frame_label(self._store.current_frame())

    def _update_frame_label(self, frame: int) -> None:
        total = self._store.total_frame_count()
        preset = self._session.preset
        name = preset.name if preset is not None else "no grid loaded"
        self._status.setText(f"{name}\nframe {int(frame)} / {total}")

    # ----------------------------
    # Slots
    # ----------------------------

    def _choose_preset(self) -> None:
        start = self.preset_path or self._preset_dir
        path, _ = QFileDialog.getOpenFileName(
            self,
            "Select a Grid Preset File to Load",
            start,
            "Grid Presets (*.gridPreset)",
        )
        if path:
            self.load_preset_file(path)

    def _set_single_axis(self, enabled: bool) -> None:
        self._controller.single_axis = bool(enabled)

    def _on_view_press(self, x: float, y: float) -> None:
        transform = self._session.transform
        if transform is None:
            return
        self._controller.on_pointer_down(transform.scene_to_field((x, y)))

    def _on_view_move(self, x: float, y: float) -> None:
        transform = self._session.transform
        if transform is None:
            return
        self._controller.on_pointer_move(transform.scene_to_field((x, y)))

    # ----------------------------
    # Qt events
    # ----------------------------

    def resizeEvent(self, event) -> None:  # type: ignore[override]
        super().resizeEvent(event)
        self._rescale()

    def closeEvent(self, event) -> None:  # type: ignore[override]
        """
        Detach from the timeline, persist preferences, then propagate the close.
        """
        self._controller.detach()
        self._host.close()
        if self._on_save_prefs is not None:
            g = self.geometry()
            try:
                self._on_save_prefs(
                    preset_path=self.preset_path,
                    single_axis=self._controller.single_axis,
                    window_x=g.x(),
                    window_y=g.y(),
                    window_width=g.width(),
                    window_height=g.height(),
                )
            except (OSError, ValueError) as e:
                logger.warning("Could not save preferences: %s", e)
        self._on_close()
        event.accept()
