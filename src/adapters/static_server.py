"""Servidor HTTP local para el directorio de salida.

Solo para validación en vivo: sirve `output_dir` en un puerto local desde un
thread daemon, de modo que la raíz `/` devuelva el artefacto y las rutas
públicas (`/portada.jpg`, ...) resuelvan igual que en producción.
"""

from __future__ import annotations

import logging
import threading
from contextlib import contextmanager
from functools import partial
from http.server import SimpleHTTPRequestHandler, ThreadingHTTPServer
from pathlib import Path
from typing import Any, Iterator

logger = logging.getLogger(__name__)


class _QuietHandler(SimpleHTTPRequestHandler):
    extensions_map = {
        **SimpleHTTPRequestHandler.extensions_map,
        ".webp": "image/webp",
        ".ico": "image/x-icon",
    }

    def log_message(self, format: str, *args: Any) -> None:  # noqa: A002
        logger.debug("http: " + format, *args)


@contextmanager
def serve_directory(root: Path, *, host: str = "127.0.0.1", port: int = 0) -> Iterator[str]:
    """Sirve `root` y devuelve la URL base (termina en '/')."""

    if not root.is_dir():
        raise FileNotFoundError(f"output directory not found: {root}")

    handler = partial(_QuietHandler, directory=str(root))
    server = ThreadingHTTPServer((host, port), handler)
    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()
    bound_host, bound_port = server.server_address[:2]
    url = f"http://{bound_host}:{bound_port}/"
    logger.info("Serving %s at %s", root, url)
    try:
        yield url
    finally:
        server.shutdown()
        server.server_close()
        thread.join(timeout=5)
