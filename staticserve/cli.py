from __future__ import annotations

import sys
from typing import Sequence

from staticserve.argv import FlagRegistry, HelpRequested
from staticserve.flag_table import SERVER_FLAGS, load_flag_table
from staticserve.log import configure_logging
from staticserve.server import create_server

MAX_PORT = 65535


def build_registry() -> FlagRegistry:
    return load_flag_table(SERVER_FLAGS)


def _port(raw) -> int:  # noqa: ANN001
    try:
        port = int(raw)
    except (TypeError, ValueError):
        raise SystemExit(f"Invalid port: {raw!r}")
    if not 0 <= port <= MAX_PORT:
        raise SystemExit(f"Invalid port: {raw!r} (expected 0-{MAX_PORT})")
    return port


def main(argv: Sequence[str] | None = None) -> int:
    """Parse flags and serve until interrupted.

    ``argv`` is the full raw vector: interpreter, script, then flags.
    """

    raw = list(argv) if argv is not None else [sys.executable, *sys.argv]

    result = build_registry().resolve(raw)
    if isinstance(result, HelpRequested):
        print(result.text)
        return 0

    config = result.config
    logger = configure_logging(config["l"], config["v"])
    port = _port(config["p"])

    try:
        httpd = create_server(port=port, root=config["path"], e404=config["e404"])
    except OSError as e:
        raise SystemExit(f"Cannot listen on port {port}: {e}")
    logger.info("Server has started")

    try:
        httpd.serve_forever()
    except KeyboardInterrupt:
        return 0
    finally:
        httpd.server_close()
    return 0
