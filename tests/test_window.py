from __future__ import annotations

import json
import os

import pytest

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")
QtWidgets = pytest.importorskip("PySide6.QtWidgets")

from grid.errors import DegenerateGridError  # noqa: E402
from server.timeline_store import TimelineStore  # noqa: E402
from ui.visitor.view import GridView  # noqa: E402
from ui.visitor.window import VisitorWindow  # noqa: E402

from grid_docs import COLLAPSED_DOC, SQUARE_DOC  # noqa: E402


@pytest.fixture(scope="module")
def qapp():
    return QtWidgets.QApplication.instance() or QtWidgets.QApplication([])


@pytest.fixture
def presets(tmp_path):
    paths = {}
    for key, doc in (("square", SQUARE_DOC), ("dot", COLLAPSED_DOC)):
        p = tmp_path / f"{key}.gridPreset"
        p.write_text(json.dumps(doc), encoding="utf-8")
        paths[key] = str(p)
    bad = tmp_path / "broken.gridPreset"
    bad.write_text("{nope", encoding="utf-8")
    paths["broken"] = str(bad)
    return paths


@pytest.fixture
def window(qapp, tmp_path):
    store = TimelineStore(total_frames=4, current_frame=1)
    saved = []
    w = VisitorWindow(
        store=store,
        padding_px=15,
        handle_px=8,
        single_axis=False,
        preset_dir=str(tmp_path),
        on_close=store.request_quit,
        on_save_prefs=lambda **prefs: saved.append(prefs),
    )
    w.resize(400, 300)
    w.show()
    qapp.processEvents()
    yield w, store, saved
    if w.isVisible():
        w.close()
    w.deleteLater()
    qapp.processEvents()


def test_loading_a_preset_publishes_it(window, presets) -> None:
    w, store, _ = window

    assert w.load_preset_file(presets["square"]) is True

    assert w.controller.preset.name == "square"
    assert store.get_grid_summary()["name"] == "square"
    assert w.windowTitle().startswith("square.gridPreset - ")


def test_degenerate_preset_keeps_previous_grid(window, presets) -> None:
    w, store, saved = window
    w.load_preset_file(presets["square"])
    title = w.windowTitle()
    transform = w.controller.transform

    assert w.load_preset_file(presets["dot"]) is False

    assert w.controller.preset.name == "square"
    assert w.controller.transform == transform
    assert store.get_grid_summary()["name"] == "square"
    assert w.windowTitle() == title
    assert "zero-size" in w.status_text

    w.close()
    assert saved[-1]["preset_path"] == presets["square"]
    assert store.quit_requested()


def test_unreadable_preset_keeps_previous_grid(window, presets) -> None:
    w, store, _ = window
    w.load_preset_file(presets["square"])

    assert w.load_preset_file(presets["broken"]) is False

    assert w.controller.preset.name == "square"
    assert store.get_grid_summary()["name"] == "square"
    assert "not valid JSON" in w.status_text


def test_degenerate_preset_on_first_load_leaves_window_empty(window, presets) -> None:
    w, store, _ = window

    assert w.load_preset_file(presets["dot"]) is False

    assert w.controller.preset is None
    assert store.get_grid_summary() is None
    assert w.preset_path is None


def test_failed_rescale_reports_error_and_keeps_transform(window, presets, monkeypatch) -> None:
    w, _, _ = window
    w.load_preset_file(presets["square"])
    transform = w.controller.transform

    def too_small(width, height):
        raise DegenerateGridError("Viewport leaves no room after padding")

    monkeypatch.setattr(w._session, "rescale", too_small)
    w.resize(420, 320)
    w._rescale()

    assert w.status_text == "Viewport leaves no room after padding"
    assert w.controller.transform == transform


def _mouse(kind, button, buttons):
    from PySide6.QtCore import QEvent, QPointF, Qt
    from PySide6.QtGui import QMouseEvent

    return QMouseEvent(
        getattr(QEvent.Type, kind),
        QPointF(10, 10),
        QPointF(10, 10),
        getattr(Qt.MouseButton, button),
        getattr(Qt.MouseButton, buttons),
        Qt.KeyboardModifier.NoModifier,
    )


def test_view_reports_only_left_button_gestures(qapp) -> None:
    view = GridView()
    calls = []
    view.on_press = lambda x, y: calls.append("press")
    view.on_move = lambda x, y: calls.append("move")
    view.on_release = lambda: calls.append("release")

    view.mousePressEvent(_mouse("MouseButtonPress", "RightButton", "RightButton"))
    view.mouseMoveEvent(_mouse("MouseMove", "NoButton", "RightButton"))
    view.mouseReleaseEvent(_mouse("MouseButtonRelease", "RightButton", "NoButton"))
    assert calls == []

    view.mousePressEvent(_mouse("MouseButtonPress", "LeftButton", "LeftButton"))
    view.mouseMoveEvent(_mouse("MouseMove", "NoButton", "LeftButton"))
    view.mouseReleaseEvent(_mouse("MouseButtonRelease", "LeftButton", "NoButton"))
    assert calls == ["press", "move", "release"]
    view.deleteLater()
