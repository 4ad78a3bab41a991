"""Qt-side adapter that exposes TimelineStore as a FrameHost on the UI thread."""

from __future__ import annotations

import logging
from typing import Callable, Optional

from PySide6.QtCore import QObject, Qt, Signal

from server.timeline_store import TimelineStore

logger = logging.getLogger(__name__)


class QtTimelineHost(QObject):
    """
    FrameHost backed by a TimelineStore, delivering change notifications on the Qt thread.

    Why this exists:
    - The store notifies on whichever thread changed the frame; PUT /timeline runs on a
      uvicorn worker thread.
    - The grid controller and graphics items must only be touched from the UI thread.

    The store listener only emits `currentFrameChanged`; PySide queues the emission to the
    receiver's thread when it comes from another thread, so subscribers always run in the
    Qt event loop, one event at a time.
    """

    currentFrameChanged = Signal(int)

    def __init__(self, store: TimelineStore, parent: Optional[QObject] = None) -> None:
        super().__init__(parent)
        self._store = store
        self._store.subscribe(self._emit_changed)

    def _emit_changed(self, frame: int) -> None:
        self.currentFrameChanged.emit(int(frame))

    def current_frame(self) -> int:
        return self._store.current_frame()

    def set_current_frame(self, frame: int) -> None:
        self._store.set_current_frame(frame)

    def total_frame_count(self) -> int:
        return self._store.total_frame_count()

    def subscribe(self, listener: Callable[[int], None]) -> None:
        self.currentFrameChanged.connect(listener, Qt.ConnectionType.AutoConnection)  # type: ignore[arg-type]

    def unsubscribe(self, listener: Callable[[int], None]) -> None:
        try:
            self.currentFrameChanged.disconnect(listener)  # type: ignore[arg-type]
        except (RuntimeError, TypeError) as e:
            # Already disconnected (e.g. during interpreter shutdown).
            logger.debug("Listener already disconnected: %s", e)

    def close(self) -> None:
        """Stop listening to the store."""
        self._store.unsubscribe(self._emit_changed)
