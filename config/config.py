"""Settings schema and JSON validation helpers.

`load_config` validates and normalizes the visitor's settings file into an immutable
`AppConfig`. The same file doubles as the preference store: `patch_runtime_prefs` writes back
the last preset path, window geometry and EZFlip toggle when the window closes.
"""

from __future__ import annotations

from dataclasses import dataclass
import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = "./config/config.json"


@dataclass(frozen=True)
class AppConfig:
    """
    Strongly-typed, validated application settings loaded from a JSON file.

    Expected JSON structure (every section is optional; missing keys take defaults):

    {
      "server": { "enabled": true, "host": "127.0.0.1", "port": 8736 },
      "timeline": { "total_frames": 60, "initial_frame": 1 },
      "ui": {
        "window": { "x": 300, "y": 200, "width": 300, "height": 200 },
        "padding_px": 15,
        "handle_px": 8,
        "single_axis": false,
        "preset_dir": "./presets",
        "preset_path": ""
      }
    }
    """

    # -----------------------------
    # Timeline bridge
    # -----------------------------
    server_enabled: bool
    server_host: str
    server_port: int

    # -----------------------------
    # Timeline defaults (used when no host pushes its own)
    # -----------------------------
    total_frames: int
    initial_frame: int

    # -----------------------------
    # UI
    # -----------------------------
    window: Dict[str, int]
    padding_px: float
    handle_px: float
    single_axis: bool
    preset_dir: str
    preset_path: str


def _require_obj(raw: Dict[str, Any], key: str) -> Dict[str, Any]:
    """
    Return `raw[key]` as a dict; a missing section is an empty dict.

    A present but non-object section is a structural error.
    """
    v = raw.get(key)
    if v is None:
        return {}
    if not isinstance(v, dict):
        raise ValueError(f"Missing or invalid '{key}' object in config")
    return v


def _opt_num(v: Any, key: str, default: float) -> float:
    if v is None:
        return default
    if isinstance(v, bool) or not isinstance(v, (int, float)):
        raise ValueError(f"Missing or invalid '{key}' (expected number)")
    return float(v)


def _opt_int(v: Any, key: str, default: int) -> int:
    """
    Optional integer with default. JSON numbers like 10.0 are accepted and truncated.
    """
    return int(_opt_num(v, key, float(default)))


def _opt_bool(v: Any, key: str, default: bool) -> bool:
    """
    Optional boolean with default.

    Rejects strings like "true" so a hand-edited file cannot silently flip a setting.
    """
    if v is None:
        return default
    if isinstance(v, bool):
        return v
    raise ValueError(f"Missing or invalid '{key}' (expected boolean)")


def _opt_str(v: Any, key: str, default: str) -> str:
    """Optional string; empty strings are allowed (e.g. "no preset yet")."""
    if v is None:
        return default
    if isinstance(v, str):
        return v
    raise ValueError(f"Missing or invalid '{key}' (expected string)")


def parse_config(raw: Dict[str, Any]) -> AppConfig:
    """
    Validate a decoded settings document.

    Raises:
        ValueError: invalid types or failed constraints.
    """
    if not isinstance(raw, dict):
        raise ValueError("Config root must be a JSON object")

    server = _require_obj(raw, "server")
    timeline = _require_obj(raw, "timeline")
    ui = _require_obj(raw, "ui")
    window_obj = _require_obj(ui, "window")

    # ---- Server ----
    server_enabled = _opt_bool(server.get("enabled"), "server.enabled", True)
    server_host = _opt_str(server.get("host"), "server.host", "127.0.0.1").strip()
    server_port = _opt_int(server.get("port"), "server.port", 8736)
    if not server_host:
        raise ValueError("server.host must not be empty")
    if not (0 < server_port < 65536):
        raise ValueError("server.port must be in 1..65535")

    # ---- Timeline ----
    total_frames = _opt_int(timeline.get("total_frames"), "timeline.total_frames", 60)
    initial_frame = _opt_int(timeline.get("initial_frame"), "timeline.initial_frame", 1)
    if total_frames <= 0:
        raise ValueError("timeline.total_frames must be > 0")
    if not (1 <= initial_frame <= total_frames):
        raise ValueError("timeline.initial_frame must be in [1, total_frames]")

    # ---- UI ----
    window = {
        "x": _opt_int(window_obj.get("x"), "ui.window.x", 300),
        "y": _opt_int(window_obj.get("y"), "ui.window.y", 200),
        "width": _opt_int(window_obj.get("width"), "ui.window.width", 300),
        "height": _opt_int(window_obj.get("height"), "ui.window.height", 200),
    }
    if window["width"] <= 0 or window["height"] <= 0:
        raise ValueError("ui.window.width and ui.window.height must be > 0")

    padding_px = _opt_num(ui.get("padding_px"), "ui.padding_px", 15.0)
    handle_px = _opt_num(ui.get("handle_px"), "ui.handle_px", 8.0)
    if padding_px < 0:
        raise ValueError("ui.padding_px must be >= 0")
    if handle_px <= 0:
        raise ValueError("ui.handle_px must be > 0")

    return AppConfig(
        server_enabled=server_enabled,
        server_host=server_host,
        server_port=server_port,
        total_frames=total_frames,
        initial_frame=initial_frame,
        window=window,
        padding_px=padding_px,
        handle_px=handle_px,
        single_axis=_opt_bool(ui.get("single_axis"), "ui.single_axis", False),
        preset_dir=_opt_str(ui.get("preset_dir"), "ui.preset_dir", "./presets"),
        preset_path=_opt_str(ui.get("preset_path"), "ui.preset_path", ""),
    )


def load_config(path: str) -> AppConfig:
    """
    Load and validate settings from a JSON file.

    Raises:
        ValueError: invalid content.
        OSError: file cannot be opened/read.
        json.JSONDecodeError: invalid JSON.
    """
    with open(path, "r", encoding="utf-8") as f:
        raw: Dict[str, Any] = json.load(f)
    return parse_config(raw)


def load_config_or_default(path: str) -> AppConfig:
    """
    Like load_config, but a missing file yields the built-in defaults.

    A file that exists but is broken still raises: silently discarding a user's settings
    would lose them on the next save.
    """
    try:
        return load_config(path)
    except FileNotFoundError:
        logger.info("Settings file %s not found. Loading default settings.", path)
        return parse_config({})


def patch_runtime_prefs(
    path: str,
    *,
    preset_path: Optional[str] = None,
    single_axis: Optional[bool] = None,
    window_x: Optional[int] = None,
    window_y: Optional[int] = None,
    window_width: Optional[int] = None,
    window_height: Optional[int] = None,
) -> None:
    """Persist runtime-updated UI preferences into the settings file (created if missing)."""
    p = Path(path)
    raw: Dict[str, Any]
    if p.exists():
        with p.open("r", encoding="utf-8") as f:
            raw = json.load(f)
        if not isinstance(raw, dict):
            raw = {}
    else:
        raw = {}
        p.parent.mkdir(parents=True, exist_ok=True)

    ui = raw.get("ui")
    if not isinstance(ui, dict):
        ui = {}
        raw["ui"] = ui

    if preset_path is not None:
        ui["preset_path"] = str(preset_path)
    if single_axis is not None:
        ui["single_axis"] = bool(single_axis)

    window = ui.get("window")
    if not isinstance(window, dict):
        window = {}
        ui["window"] = window

    if window_x is not None:
        window["x"] = int(window_x)
    if window_y is not None:
        window["y"] = int(window_y)
    if window_width is not None:
        window["width"] = max(1, int(window_width))
    if window_height is not None:
        window["height"] = max(1, int(window_height))

    with p.open("w", encoding="utf-8") as f:
        json.dump(raw, f, indent=2)
        f.write("\n")
