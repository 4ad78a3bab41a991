"""Thread-safe timeline state shared by the Qt UI and the HTTP bridge.

The store stands in for the host application's timeline: it owns the current frame and the
scene length, and notifies subscribers whenever the current frame changes. HTTP routes and
the grid controller both write through it, so the handle follows frame changes made from
either side.
"""

from __future__ import annotations

import logging
import threading
from typing import Any, Callable, Dict, List, Optional

logger = logging.getLogger(__name__)

JsonDict = Dict[str, Any]
FrameListener = Callable[[int], None]


class TimelineStore:
    """
    In-memory timeline implementing the grid controller's FrameHost protocol.

    Threading model:
    - The Qt thread calls set_current_frame() while the user drags.
    - Uvicorn worker threads call the same setters from PUT /timeline.
    - State is guarded by one lock; listeners are invoked after the lock is released, on the
      thread that made the change. Qt consumers must marshal to their own thread
      (see ui.visitor.timeline_bridge).

    Frames are 1-based. Requested frames are clamped to [1, total_frames].
    """

    def __init__(self, *, total_frames: int, current_frame: int = 1) -> None:
        self._lock = threading.Lock()
        self._total = max(1, int(total_frames))
        self._current = self._clamp(int(current_frame), self._total)
        self._listeners: List[FrameListener] = []

        # Summary of the loaded grid, published for GET /grid. None until a preset loads.
        self._grid_summary: Optional[JsonDict] = None

        # Set by POST /quit, polled by the UI thread.
        self._quit_requested = False

    @staticmethod
    def _clamp(frame: int, total: int) -> int:
        return max(1, min(total, frame))

    # ----------------------------
    # FrameHost protocol
    # ----------------------------

    def current_frame(self) -> int:
        with self._lock:
            return self._current

    def total_frame_count(self) -> int:
        with self._lock:
            return self._total

    def set_current_frame(self, frame: int) -> None:
        """
        Jump to `frame` (clamped). Listeners fire only if the frame actually changed.
        """
        with self._lock:
            new = self._clamp(int(frame), self._total)
            if new == self._current:
                return
            self._current = new
            listeners = list(self._listeners)
        logger.debug("Current frame -> %d", new)
        for cb in listeners:
            cb(new)

    def subscribe(self, listener: FrameListener) -> None:
        with self._lock:
            self._listeners.append(listener)

    def unsubscribe(self, listener: FrameListener) -> None:
        with self._lock:
            try:
                self._listeners.remove(listener)
            except ValueError:
                logger.debug("unsubscribe() for a listener that was not registered")

    # ----------------------------
    # Scene length
    # ----------------------------

    def set_total_frames(self, total: int) -> None:
        """
        Change the scene length. If the current frame falls outside, it is clamped and
        listeners are notified.
        """
        with self._lock:
            self._total = max(1, int(total))
            new = self._clamp(self._current, self._total)
            changed = new != self._current
            self._current = new
            listeners = list(self._listeners) if changed else []
        for cb in listeners:
            cb(new)

    def get_timeline(self) -> JsonDict:
        with self._lock:
            return {"current_frame": self._current, "total_frames": self._total}

    # ----------------------------
    # Grid summary
    # ----------------------------

    def set_grid_summary(self, summary: Optional[JsonDict]) -> None:
        with self._lock:
            self._grid_summary = dict(summary) if summary is not None else None

    def get_grid_summary(self) -> Optional[JsonDict]:
        with self._lock:
            return dict(self._grid_summary) if self._grid_summary is not None else None

    # ----------------------------
    # Quit signalling
    # ----------------------------

    def request_quit(self) -> None:
        with self._lock:
            self._quit_requested = True

    def quit_requested(self) -> bool:
        with self._lock:
            return self._quit_requested
