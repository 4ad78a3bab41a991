#!/usr/bin/env python3
"""CLI utility to drive or inspect a running visitor through its timeline bridge."""
from __future__ import annotations

import argparse
import json
import sys
from typing import Any, Optional

import httpx


class TimelineClient:
    """
    Thin httpx wrapper around the bridge routes.

    Every call returns the decoded JSON object; HTTP errors raise httpx.HTTPStatusError and
    connection problems raise httpx.RequestError.
    """

    def __init__(
        self,
        base_url: str,
        *,
        timeout_sec: float = 2.0,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        self._client = httpx.Client(
            base_url=base_url.rstrip("/"),
            timeout=timeout_sec,
            transport=transport,
            headers={"Cache-Control": "no-store"},
        )

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> "TimelineClient":
        return self

    def __exit__(self, *exc: Any) -> None:
        self.close()

    def _json(self, res: httpx.Response) -> dict[str, Any]:
        res.raise_for_status()
        data = res.json()
        if not isinstance(data, dict):
            raise ValueError(f"Unexpected response from {res.request.url}: {data!r}")
        return data

    def get_timeline(self) -> dict[str, Any]:
        return self._json(self._client.get("/timeline"))

    def set_frame(self, frame: int) -> dict[str, Any]:
        return self._json(self._client.put("/timeline", json={"current_frame": int(frame)}))

    def set_length(self, total_frames: int) -> dict[str, Any]:
        return self._json(self._client.put("/timeline", json={"total_frames": int(total_frames)}))

    def get_grid(self) -> dict[str, Any]:
        return self._json(self._client.get("/grid"))

    def quit(self) -> dict[str, Any]:
        return self._json(self._client.post("/quit"))


def _parse_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(prog="timeline-client")
    p.add_argument("--url", default="http://127.0.0.1:8736", help="Bridge base URL")
    p.add_argument("--timeout", type=float, default=2.0, help="Request timeout in seconds")
    sub = p.add_subparsers(dest="command", required=True)
    sub.add_parser("get", help="Print current frame and scene length")
    s = sub.add_parser("set", help="Jump to a frame")
    s.add_argument("frame", type=int)
    ln = sub.add_parser("length", help="Set the scene length")
    ln.add_argument("total", type=int)
    sub.add_parser("grid", help="Print the loaded grid summary")
    sub.add_parser("quit", help="Close the visitor")
    return p.parse_args(argv)


def main(argv: Optional[list[str]] = None, *, transport: Optional[httpx.BaseTransport] = None) -> int:
    args = _parse_args(argv)

    try:
        with TimelineClient(args.url, timeout_sec=args.timeout, transport=transport) as client:
            if args.command == "get":
                out = client.get_timeline()
            elif args.command == "set":
                out = client.set_frame(args.frame)
            elif args.command == "length":
                out = client.set_length(args.total)
            elif args.command == "grid":
                out = client.get_grid()
            else:
                out = client.quit()
    except httpx.HTTPStatusError as e:
        print(f"ERROR: {e.response.status_code} {e.response.text}", file=sys.stderr)
        return 3
    except (httpx.RequestError, ValueError) as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 2

    print(json.dumps(out, indent=2))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
