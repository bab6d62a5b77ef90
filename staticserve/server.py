from __future__ import annotations

from http.server import ThreadingHTTPServer
from pathlib import Path

from staticserve.static_files import make_handler


def create_server(port: int, root: str | Path, e404: str, host: str = "") -> ThreadingHTTPServer:
    """Bind a threaded HTTP server serving ``root``; port 0 picks a free port."""

    return ThreadingHTTPServer((host, int(port)), make_handler(root, e404))
