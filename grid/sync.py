# grid/sync.py
from __future__ import annotations

from dataclasses import dataclass, replace
import logging
from typing import Callable, Optional, Protocol

from grid.models import LockAxis, Point, is_valid_frame
from grid.nearest import NearestCell, lock_axis_for, resolve_nearest
from grid.preset import GridPreset
from grid.transform import ViewTransform

logger = logging.getLogger(__name__)

FrameListener = Callable[[int], None]


class FrameHost(Protocol):
    """
    Timeline collaborator used by the controller.

    Implementations: server.timeline_store.TimelineStore (in-process store shared with the
    HTTP bridge) and ui.visitor.timeline_bridge.QtTimelineHost (same store, notifications
    delivered on the Qt thread).
    """

    def current_frame(self) -> int: ...
    def set_current_frame(self, frame: int) -> None: ...
    def total_frame_count(self) -> int: ...
    def subscribe(self, listener: FrameListener) -> None: ...
    def unsubscribe(self, listener: FrameListener) -> None: ...


@dataclass
class DragState:
    """
    Per-gesture state for single-axis dragging.

    Fields:
    - is_first_move: True until the first move of a drag; that move only records the start.
    - locked_axis: decided on the second move and kept until release.
    - start_position: field-space pointer position captured on the first move.
    """
    is_first_move: bool = True
    locked_axis: LockAxis = "none"
    start_position: Point = (0.0, 0.0)


class HandleSyncController:
    """
    Keeps the grid handle and the timeline's current frame in step.

    Frame -> handle:
    - on_external_frame_changed() moves the handle to the cell tagged with the new frame.
    - on_view_reset() places the handle after a (re)load or resize, falling back to the grid
      center when the current frame is not on the grid.

    Pointer -> frame:
    - on_pointer_down/move() resolve the nearest cell and ask the host to jump to its tag.
      Tags outside [1, total_frame_count] are ignored.
    - With single_axis enabled, a drag locks to the axis it first travels along.

    Pointer positions are field-space; the view converts with ViewTransform.scene_to_field.
    Handle coordinates are scene-space.
    """

    def __init__(
        self,
        *,
        host: FrameHost,
        handle_size: float = 8.0,
        single_axis: bool = False,
        on_handle_moved: Optional[Callable[[Point], None]] = None,
    ) -> None:
        self._host = host
        self._handle_size = float(handle_size)
        self._single_axis = bool(single_axis)
        self._on_handle_moved = on_handle_moved

        self._preset: Optional[GridPreset] = None
        self._transform: Optional[ViewTransform] = None

        # Scene-space center of the handle; origin until a grid is shown.
        self._handle_center: Point = (0.0, 0.0)

        self._drag = DragState()
        self._attached = False

    # ----------------------------
    # Lifecycle
    # ----------------------------

    def attach(self) -> None:
        """Subscribe to the host's frame-change notifications."""
        if self._attached:
            return
        self._host.subscribe(self.on_external_frame_changed)
        self._attached = True

    def detach(self) -> None:
        """Unsubscribe; call on teardown."""
        if not self._attached:
            return
        self._host.unsubscribe(self.on_external_frame_changed)
        self._attached = False

    # ----------------------------
    # State
    # ----------------------------

    @property
    def has_grid(self) -> bool:
        return self._preset is not None and self._transform is not None

    @property
    def preset(self) -> Optional[GridPreset]:
        return self._preset

    @property
    def transform(self) -> Optional[ViewTransform]:
        return self._transform

    @property
    def single_axis(self) -> bool:
        return self._single_axis

    @single_axis.setter
    def single_axis(self, enabled: bool) -> None:
        self._single_axis = bool(enabled)

    @property
    def handle_size(self) -> float:
        return self._handle_size

    @property
    def handle_center(self) -> Point:
        return self._handle_center

    @property
    def handle_position(self) -> Point:
        """Top-left corner of the handle's bounding box, as a graphics item expects."""
        half = self._handle_size / 2
        return self._handle_center[0] - half, self._handle_center[1] - half

    @property
    def drag(self) -> DragState:
        return replace(self._drag)

    # ----------------------------
    # Frame -> handle
    # ----------------------------

    def on_view_reset(self, preset: GridPreset, transform: ViewTransform) -> None:
        """Adopt a new grid/transform pair and place the handle for the current frame."""
        self._preset = preset
        self._transform = transform

        cell = preset.find_frame_cell(self._host.current_frame())
        if cell is None:
            self._move_handle((transform.center_x, transform.center_y))
        else:
            self._move_handle(transform.field_to_scene(preset.position(*cell)))

    def on_external_frame_changed(self, frame: int) -> None:
        """Follow a timeline change; untagged frames leave the handle where it is."""
        if self._preset is None or self._transform is None:
            return
        cell = self._preset.find_frame_cell(frame)
        if cell is None:
            return
        self._move_handle(self._transform.field_to_scene(self._preset.position(*cell)))

    def _move_handle(self, center: Point) -> None:
        self._handle_center = (float(center[0]), float(center[1]))
        if self._on_handle_moved is not None:
            self._on_handle_moved(self.handle_position)

    # ----------------------------
    # Pointer -> frame
    # ----------------------------

    def on_pointer_down(self, pos: Point) -> Optional[NearestCell]:
        """Click: jump to the nearest cell, never axis-locked."""
        return self._resolve_and_request(pos, lock="none")

    def on_pointer_move(self, pos: Point) -> Optional[NearestCell]:
        """
        Drag: jump to the nearest cell, honoring single-axis mode.

        In single-axis mode the first move only records the gesture start. The next move
        fixes the lock axis from the displacement so far; the lock then holds until release.
        """
        if not self.has_grid:
            return None

        if not self._single_axis:
            return self._resolve_and_request(pos, lock="none")

        if self._drag.is_first_move:
            self._drag.start_position = (float(pos[0]), float(pos[1]))
            self._drag.is_first_move = False
            return None

        if self._drag.locked_axis == "none":
            self._drag.locked_axis = lock_axis_for(self._drag.start_position, pos)
            logger.debug("Drag locked to axis %s", self._drag.locked_axis)

        return self._resolve_and_request(pos, lock=self._drag.locked_axis)

    def on_pointer_up(self) -> None:
        self._drag = DragState()

    def _resolve_and_request(self, pos: Point, *, lock: LockAxis) -> Optional[NearestCell]:
        if self._preset is None or self._transform is None:
            return None

        cell = resolve_nearest(
            self._preset,
            self._transform,
            pos,
            lock=lock,
            start=self._drag.start_position,
        )
        if is_valid_frame(cell.frame, self._host.total_frame_count()):
            self._host.set_current_frame(cell.frame)
        else:
            logger.debug("Cell (%d, %d) has no usable tag (%d)", cell.row, cell.col, cell.frame)
        return cell
