from __future__ import annotations

import html
import logging
import os
import shutil
from http.server import BaseHTTPRequestHandler
from pathlib import Path
from urllib.parse import unquote, urlsplit

logger = logging.getLogger(__name__)

MIME_TYPES: dict[str, str] = {
    "css": "text/css",
    "html": "text/html",
    "js": "text/javascript",
    "jpg": "image/jpg",
    "png": "image/png",
    "svg": "image/svg+xml",
}


def _inside(root: Path, candidate: Path) -> bool:
    try:
        candidate.relative_to(root)
    except ValueError:
        return False
    return True


def content_type_for(path: str | Path) -> str | None:
    suffix = Path(path).suffix.lstrip(".")
    return MIME_TYPES.get(suffix)


class StaticFileHandler(BaseHTTPRequestHandler):
    """Serve files below ``root``; missing paths get the ``e404`` page with a 404 status."""

    root: Path = Path(".")
    e404: str = "index.html"

    def locate(self, request_path: str) -> tuple[int, Path]:
        base = self.root
        candidate = Path(os.path.normpath(os.path.join(base, request_path.lstrip("/"))))

        if _inside(base, candidate) and candidate.exists():
            if candidate.is_dir():
                candidate = candidate / "index.html"
            return 200, candidate

        logger.warning("%s not found!", request_path)
        return 404, base / self.e404

    def _send_not_found(self, error: OSError, *, body: bool = True) -> None:
        payload = f"<p>404: File not found!</p><p>{html.escape(str(error))}</p>".encode("utf-8")
        self.send_response(404, "Not Found")
        self.send_header("Content-Type", "text/html")
        self.send_header("Content-Length", str(len(payload)))
        self.end_headers()
        if body:
            self.wfile.write(payload)

    def _discard_request_body(self) -> None:
        length = int(self.headers.get("Content-Length") or 0)
        if length > 0:
            self.rfile.read(length)

    def serve(self, *, body: bool = True) -> None:
        """Answer any method with the located file; HEAD gets headers only."""

        self._discard_request_body()
        request_path = unquote(urlsplit(self.path or "/").path) or "/"
        logger.info("Request %s file", request_path)

        status, file_path = self.locate(request_path)

        try:
            f = open(file_path, "rb")
        except OSError as e:
            self._send_not_found(e, body=body)
            return

        with f:
            self.send_response(status)
            ctype = content_type_for(file_path)
            if ctype:
                self.send_header("Content-Type", ctype)
            self.send_header("Content-Length", str(os.fstat(f.fileno()).st_size))
            self.end_headers()
            if body:
                shutil.copyfileobj(f, self.wfile)

    def do_GET(self) -> None:  # noqa: N802
        self.serve()

    def do_HEAD(self) -> None:  # noqa: N802
        self.serve(body=False)

    do_POST = do_PUT = do_DELETE = do_PATCH = do_OPTIONS = do_GET

    def log_message(self, format: str, *args) -> None:  # noqa: A002
        logger.debug("%s - %s", self.client_address[0], format % args)


def make_handler(root: str | Path, e404: str) -> type[StaticFileHandler]:
    """Bind a handler class to a static root and fallback page."""

    class Handler(StaticFileHandler):
        pass

    Handler.root = Path(root).resolve()
    Handler.e404 = str(e404)
    return Handler
