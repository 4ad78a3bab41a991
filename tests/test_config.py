from __future__ import annotations

import json
from pathlib import Path

import pytest

from config.config import load_config, load_config_or_default, parse_config, patch_runtime_prefs


def test_empty_document_gives_defaults() -> None:
    cfg = parse_config({})

    assert cfg.server_enabled is True
    assert cfg.server_host == "127.0.0.1"
    assert cfg.server_port == 8736
    assert cfg.total_frames == 60
    assert cfg.initial_frame == 1
    assert cfg.window == {"x": 300, "y": 200, "width": 300, "height": 200}
    assert cfg.padding_px == 15.0
    assert cfg.handle_px == 8.0
    assert cfg.single_axis is False
    assert cfg.preset_dir == "./presets"
    assert cfg.preset_path == ""


def test_values_are_read_from_sections() -> None:
    cfg = parse_config({
        "server": {"enabled": False, "port": 9000},
        "timeline": {"total_frames": 120, "initial_frame": 30},
        "ui": {"window": {"width": 640}, "single_axis": True, "preset_path": "a.gridPreset"},
    })

    assert cfg.server_enabled is False
    assert cfg.server_port == 9000
    assert cfg.total_frames == 120
    assert cfg.initial_frame == 30
    assert cfg.window["width"] == 640
    assert cfg.window["height"] == 200
    assert cfg.single_axis is True
    assert cfg.preset_path == "a.gridPreset"


@pytest.mark.parametrize(
    "raw",
    [
        [],
        {"server": "yes"},
        {"server": {"port": 0}},
        {"server": {"port": "8736"}},
        {"server": {"host": "  "}},
        {"timeline": {"total_frames": 0}},
        {"timeline": {"total_frames": 10, "initial_frame": 11}},
        {"ui": {"window": {"width": 0}}},
        {"ui": {"padding_px": -1}},
        {"ui": {"handle_px": 0}},
        {"ui": {"single_axis": "true"}},
        {"ui": {"preset_dir": 3}},
    ],
)
def test_invalid_documents_raise(raw) -> None:
    with pytest.raises(ValueError):
        parse_config(raw)


def test_load_config_reads_file(tmp_path: Path) -> None:
    p = tmp_path / "config.json"
    p.write_text(json.dumps({"timeline": {"total_frames": 12}}), encoding="utf-8")

    assert load_config(str(p)).total_frames == 12


def test_missing_file_falls_back_to_defaults(tmp_path: Path) -> None:
    cfg = load_config_or_default(str(tmp_path / "nope.json"))

    assert cfg == parse_config({})


def test_broken_file_still_raises(tmp_path: Path) -> None:
    p = tmp_path / "config.json"
    p.write_text("{not json", encoding="utf-8")

    with pytest.raises(ValueError):
        load_config_or_default(str(p))


def test_patch_creates_file_and_directory(tmp_path: Path) -> None:
    p = tmp_path / "sub" / "config.json"

    patch_runtime_prefs(str(p), preset_path="x.gridPreset", single_axis=True, window_width=0)

    raw = json.loads(p.read_text(encoding="utf-8"))
    assert raw["ui"]["preset_path"] == "x.gridPreset"
    assert raw["ui"]["single_axis"] is True
    assert raw["ui"]["window"] == {"width": 1}


def test_patch_preserves_other_settings(tmp_path: Path) -> None:
    p = tmp_path / "config.json"
    p.write_text(
        json.dumps({"server": {"port": 9001}, "ui": {"preset_path": "old", "window": {"x": 5}}}),
        encoding="utf-8",
    )

    patch_runtime_prefs(str(p), window_y=7)

    raw = json.loads(p.read_text(encoding="utf-8"))
    assert raw["server"] == {"port": 9001}
    assert raw["ui"]["preset_path"] == "old"
    assert raw["ui"]["window"] == {"x": 5, "y": 7}
    assert load_config(str(p)).window["y"] == 7
