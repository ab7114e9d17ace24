"""Local preview server for a built site.

The output directory is served under the configured base URL, so links that
carry ``/rust-up-knowledge/`` resolve exactly as they will once deployed.
"""

from __future__ import annotations

import functools
import http.server
import logging
import typing as typ

if typ.TYPE_CHECKING:
    from pathlib import Path

logger = logging.getLogger(__name__)


class BaseUrlRequestHandler(http.server.SimpleHTTPRequestHandler):
    """Serve files from ``directory`` as if mounted at ``base_url``."""

    def __init__(
        self, *args: typ.Any, base_url: str = "/", **kwargs: typ.Any
    ) -> None:
        self.base_url = base_url
        super().__init__(*args, **kwargs)

    def do_GET(self) -> None:  # noqa: N802
        """Redirect the bare origin to the base URL, then serve as usual."""
        if self.base_url != "/" and self.path in {"", "/"}:
            self.send_response(302)
            self.send_header("Location", self.base_url)
            self.end_headers()
            return
        super().do_GET()

    def translate_path(self, path: str) -> str:
        """Strip the base URL before mapping ``path`` onto the directory."""
        if self.base_url != "/" and (path + "/").startswith(self.base_url):
            path = "/" + path[len(self.base_url) :]
        return super().translate_path(path)

    def log_message(self, format: str, *args: typ.Any) -> None:  # noqa: A002
        """Route access logs through :mod:`logging`."""
        logger.info("%s - %s", self.address_string(), format % args)


def make_server(
    directory: Path, *, base_url: str = "/", host: str = "localhost", port: int = 3000
) -> http.server.ThreadingHTTPServer:
    """Return a threading HTTP server for ``directory`` (not yet serving)."""
    handler = functools.partial(
        BaseUrlRequestHandler, directory=str(directory), base_url=base_url
    )
    return http.server.ThreadingHTTPServer((host, port), handler)


def serve(
    directory: Path, *, base_url: str = "/", host: str = "localhost", port: int = 3000
) -> None:
    """Serve ``directory`` until interrupted."""
    httpd = make_server(directory, base_url=base_url, host=host, port=port)
    print(f"serving http://{host}:{port}{base_url} (site dir: {directory})")
    try:
        httpd.serve_forever()
    except KeyboardInterrupt:
        print("shutting down server")
    finally:
        httpd.server_close()


__all__ = ["BaseUrlRequestHandler", "make_server", "serve"]
