"""FastAPI timeline bridge and server-thread launcher.

External tools (a host-application script, `tools/timeline_client.py`, curl) use these
routes to drive the visitor's timeline or follow the frame the user picks on the grid.
Routes stay thin; state lives in `TimelineStore`.
"""

from __future__ import annotations

import logging
import threading
from typing import Any

import uvicorn
from fastapi import Body, FastAPI
from fastapi.responses import JSONResponse

from server.timeline_store import TimelineStore

logger = logging.getLogger(__name__)


def _positive_int(v: Any) -> bool:
    return isinstance(v, int) and not isinstance(v, bool) and v > 0


def create_app(store: TimelineStore) -> FastAPI:
    """
    Build the FastAPI application.

    Endpoints:
        GET  /timeline  -> {"current_frame": int, "total_frames": int}
        PUT  /timeline  <- {"current_frame"?: int, "total_frames"?: int}
        GET  /grid      -> loaded preset summary, or {"loaded": false}
        POST /quit      -> asks the UI to close
    """
    app = FastAPI()

    @app.get("/timeline")
    async def get_timeline() -> JSONResponse:
        return JSONResponse(store.get_timeline())

    @app.put("/timeline")
    async def put_timeline(body: dict[str, Any] = Body(...)) -> JSONResponse:
        """
        Update the scene length and/or jump to a frame.

        The length is applied first so a single request can extend the scene and move into
        the new range. Frames beyond the length are clamped by the store.
        """
        total = body.get("total_frames")
        current = body.get("current_frame")
        if total is None and current is None:
            return JSONResponse({"error": "expected current_frame and/or total_frames"}, status_code=400)
        if total is not None and not _positive_int(total):
            return JSONResponse({"error": "total_frames must be a positive integer"}, status_code=400)
        if current is not None and not _positive_int(current):
            return JSONResponse({"error": "current_frame must be a positive integer"}, status_code=400)

        if total is not None:
            store.set_total_frames(total)
        if current is not None:
            store.set_current_frame(current)
        return JSONResponse(store.get_timeline())

    @app.get("/grid")
    async def get_grid() -> JSONResponse:
        summary = store.get_grid_summary()
        if summary is None:
            return JSONResponse({"loaded": False})
        return JSONResponse({"loaded": True, **summary})

    @app.post("/quit")
    async def quit_app() -> JSONResponse:
        """
        Request application shutdown. The UI polls the flag and closes itself.
        """
        store.request_quit()
        return JSONResponse({"ok": True})

    return app


def run_server_in_thread(*, host: str, port: int, store: TimelineStore) -> threading.Thread:
    """
    Run the bridge in a daemon thread next to the Qt event loop.

    `log_level="error"` keeps uvicorn's access log out of the application log.
    """
    app = create_app(store)

    def _run() -> None:
        uvicorn.run(app, host=host, port=port, log_level="error")

    t = threading.Thread(target=_run, name="timeline-bridge", daemon=True)
    t.start()
    logger.info("Timeline bridge listening on http://%s:%d", host, port)
    return t
