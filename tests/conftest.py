from __future__ import annotations

import logging
import threading
from pathlib import Path

import pytest

from staticserve.argv import FlagRegistry
from staticserve.server import create_server


@pytest.fixture(autouse=True)
def _isolated_base_logger():
    """Undo any handler/level/propagation changes made to the 'staticserve' logger."""
    base = logging.getLogger("staticserve")
    saved = (list(base.handlers), base.level, base.propagate)
    for h in saved[0]:
        base.removeHandler(h)

    try:
        yield base
    finally:
        for h in list(base.handlers):
            base.removeHandler(h)
        handlers, level, propagate = saved
        for h in handlers:
            base.addHandler(h)
        base.setLevel(level)
        base.propagate = propagate


@pytest.fixture()
def registry() -> FlagRegistry:
    """The server's own flag set, declared the same way the call site declares it."""
    return (
        FlagRegistry()
        .usage_text("Usage: $0 [options]")
        .alias("p", "port")
        .default("p", 8080)
        .describe("p", "port to use")
        .help("h")
        .alias("h", "help")
        .count("v")
        .alias("v", "verbose")
        .alias("l", "log")
        .describe("l", "log level")
        .choices("l", ["debug", "info", "warn", "error"])
        .default("l", "warn")
        .default("path", "./")
        .default("e404", "index.html")
    )


@pytest.fixture()
def site(tmp_path: Path) -> Path:
    root = tmp_path / "site"
    (root / "docs").mkdir(parents=True)
    (root / "empty").mkdir()
    (root / "index.html").write_text("<h1>home</h1>", encoding="utf-8")
    (root / "404.html").write_text("<h1>missing</h1>", encoding="utf-8")
    (root / "style.css").write_text("body { color: red; }", encoding="utf-8")
    (root / "app.js").write_text("console.log(1);", encoding="utf-8")
    (root / "notes.txt").write_text("plain", encoding="utf-8")
    (root / "docs" / "index.html").write_text("<h1>docs</h1>", encoding="utf-8")
    (tmp_path / "secret.txt").write_text("outside", encoding="utf-8")
    return root


def _start(root: Path, e404: str):
    httpd = create_server(port=0, root=root, e404=e404, host="127.0.0.1")
    host, port = httpd.server_address[:2]

    t = threading.Thread(target=httpd.serve_forever, daemon=True)
    t.start()
    return httpd, f"http://{host}:{port}"


@pytest.fixture()
def base_url(site: Path) -> str:
    httpd, url = _start(site, "404.html")
    try:
        yield url
    finally:
        httpd.shutdown()
        httpd.server_close()


@pytest.fixture()
def base_url_without_404_page(site: Path) -> str:
    httpd, url = _start(site, "does-not-exist.html")
    try:
        yield url
    finally:
        httpd.shutdown()
        httpd.server_close()
