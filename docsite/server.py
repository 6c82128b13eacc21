"""Serve a built site locally for previewing."""

from __future__ import annotations

import functools
import typing as typ
from http.server import SimpleHTTPRequestHandler, ThreadingHTTPServer

if typ.TYPE_CHECKING:
    from pathlib import Path


class BaseUrlRequestHandler(SimpleHTTPRequestHandler):
    """Static file handler that serves the output directory under a base URL."""

    base_url = "/"

    def translate_path(self, path: str) -> str:
        """Map ``/<base_url>/foo`` onto ``<directory>/foo``."""
        prefix = self.base_url.rstrip("/")
        if prefix and (path == prefix or path.startswith(f"{prefix}/")):
            path = path[len(prefix) :] or "/"
        return super().translate_path(path)


def make_server(
    directory: Path, *, base_url: str = "/", host: str = "127.0.0.1", port: int = 3000
) -> ThreadingHTTPServer:
    """Return an HTTP server serving ``directory`` under ``base_url``.

    Parameters
    ----------
    directory : Path
        Built site output directory.
    base_url : str, optional
        URL prefix the site expects to be hosted under.
    host : str, optional
        Interface to bind.
    port : int, optional
        TCP port to bind; ``0`` picks a free port.
    """
    handler_class = type(
        "SiteRequestHandler", (BaseUrlRequestHandler,), {"base_url": base_url}
    )
    handler = functools.partial(handler_class, directory=str(directory))
    return ThreadingHTTPServer((host, port), handler)


__all__ = ["BaseUrlRequestHandler", "make_server"]
