# ui/visitor_ui.py
from __future__ import annotations

from typing import Callable, Optional

from PySide6.QtCore import QTimer
from PySide6.QtWidgets import QApplication

from server.timeline_store import TimelineStore
from ui.visitor.window import VisitorWindow


def run_visitor_ui(
    *,
    store: TimelineStore,
    window_geometry: dict[str, int],
    padding_px: float,
    handle_px: float,
    single_axis: bool,
    preset_dir: str,
    preset_path: Optional[str],
    on_close: Callable[[], None],
    on_save_prefs: Optional[Callable[..., None]] = None,
    quit_poll_ms: int = 200,
) -> int:
    """
    Start (or attach to) the Qt application and show the visitor window.

    Responsibilities:
    - Create the VisitorWindow bound to the shared TimelineStore.
    - Restore the saved window geometry and load the last preset, if any.
    - Poll the store's quit flag (set by POST /quit on the server thread) and close cleanly.

    Threading model:
    - Must be called from the main thread; returns when the event loop exits.
    """
    # Reuse an existing QApplication (embedded/hosted contexts), otherwise create one.
    app = QApplication.instance() or QApplication([])

    w = VisitorWindow(
        store=store,
        padding_px=float(padding_px),
        handle_px=float(handle_px),
        single_axis=bool(single_axis),
        preset_dir=str(preset_dir),
        on_close=on_close,
        on_save_prefs=on_save_prefs,
    )
    w.setGeometry(
        int(window_geometry["x"]),
        int(window_geometry["y"]),
        int(window_geometry["width"]),
        int(window_geometry["height"]),
    )
    w.show()

    if preset_path:
        w.load_preset_file(preset_path)

    # The quit flag is a plain bool behind a lock; a timer keeps the check on the UI thread.
    quit_timer = QTimer()
    quit_timer.setInterval(int(quit_poll_ms))

    def on_quit_tick() -> None:
        if store.quit_requested():
            quit_timer.stop()
            # Closed by the user already if on_close is what raised the flag.
            if w.isVisible():
                w.close()
            app.quit()

    quit_timer.timeout.connect(on_quit_tick)  # type: ignore[arg-type]
    quit_timer.start()

    return int(app.exec())
