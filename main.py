"""Application composition root for the MC grid frame visitor.

This module wires together:
- logging and settings
- the shared TimelineStore (current frame + scene length)
- the FastAPI timeline bridge thread (optional)
- the Qt visitor window

Cross-component lifecycle lives here so the grid core, the server and the UI stay focused
on their own concerns.
"""

from __future__ import annotations

import argparse
import json
import logging
from typing import Any

from config.config import DEFAULT_CONFIG_PATH, load_config_or_default, patch_runtime_prefs
from config.logging_config import setup_logging
from server.server import run_server_in_thread
from server.timeline_store import TimelineStore
from ui.visitor_ui import run_visitor_ui

logger = logging.getLogger(__name__)


def _parse_args() -> argparse.Namespace:
    p = argparse.ArgumentParser(prog="mc-grid-frame-visitor")
    p.add_argument("--config", default=DEFAULT_CONFIG_PATH, help="Path to the settings JSON file.")
    p.add_argument("--preset", default=None, help="Grid preset to open (overrides the saved one).")
    p.add_argument("--frames", type=int, default=None, help="Scene length in frames.")
    p.add_argument("--no-server", action="store_true", help="Do not start the HTTP timeline bridge.")
    p.add_argument("--debug", action="store_true", help="Verbose logging.")
    p.add_argument("--log-file", default=None, help="Also write the log to this file.")
    return p.parse_args()


def main() -> int:
    """
    Application entry point.

    High-level responsibilities:
    - Load settings (missing file -> defaults, broken file -> exit code 2).
    - Create the TimelineStore shared by the UI and the HTTP bridge.
    - Start the bridge unless disabled.
    - Run the Qt UI on the main thread until the window closes or POST /quit arrives.
    - Save preferences on close.
    """
    args = _parse_args()
    setup_logging(level=logging.DEBUG if args.debug else logging.INFO, log_file=args.log_file)

    try:
        cfg = load_config_or_default(args.config)
    except (OSError, ValueError) as e:
        # json.JSONDecodeError is a ValueError.
        logger.error("Invalid settings file %s: %s", args.config, e)
        return 2

    total_frames = int(args.frames) if args.frames is not None else cfg.total_frames
    if total_frames <= 0:
        logger.error("--frames must be > 0")
        return 2

    store = TimelineStore(total_frames=total_frames, current_frame=cfg.initial_frame)

    if cfg.server_enabled and not args.no_server:
        run_server_in_thread(host=cfg.server_host, port=cfg.server_port, store=store)

    def on_save_prefs(**prefs: Any) -> None:
        # An unloaded grid should not erase the remembered preset.
        if prefs.get("preset_path") is None:
            prefs.pop("preset_path", None)
        patch_runtime_prefs(args.config, **prefs)
        logger.info("Preferences saved to %s: %s", args.config, json.dumps(prefs))

    preset_path = args.preset if args.preset else (cfg.preset_path or None)

    rc = run_visitor_ui(
        store=store,
        window_geometry=cfg.window,
        padding_px=cfg.padding_px,
        handle_px=cfg.handle_px,
        single_axis=cfg.single_axis,
        preset_dir=cfg.preset_dir,
        preset_path=preset_path,
        on_close=store.request_quit,
        on_save_prefs=on_save_prefs,
    )
    logger.info("Visitor closed.")
    return rc


if __name__ == "__main__":
    raise SystemExit(main())
