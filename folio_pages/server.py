"""Serve a built site locally with a ``404.html`` fallback.

The handler maps request paths under the mount prefix onto the build
directory. Missing files, paths outside the prefix, and directories without an
``index.html`` receive the site's own not-found page with status 404.

Example
-------
>>> from pathlib import Path
>>> server = make_server(Path("public"), port=8080, base_path="/preview")  # doctest: +SKIP
>>> server.serve_forever()  # doctest: +SKIP
"""

from __future__ import annotations

import functools
import http.server
import posixpath
import typing as typ
import urllib.parse
from http import HTTPStatus
from pathlib import Path

from ._constants import NOT_FOUND_FILENAME, PAGE_FILENAME

FALLBACK_NOT_FOUND = b"<html><body><h1>404 Not Found</h1></body></html>\n"


def strip_mount_prefix(base_path: str, request_path: str) -> str | None:
    """Return ``request_path`` relative to the mount prefix, or ``None``.

    >>> strip_mount_prefix("/preview", "/preview/blog/")
    '/blog/'
    >>> strip_mount_prefix("/preview", "/other/") is None
    True
    """
    prefix = base_path.strip().rstrip("/")
    if prefix and not prefix.startswith("/"):
        prefix = f"/{prefix}"
    if not prefix:
        return request_path
    if request_path == prefix:
        return "/"
    if request_path.startswith(f"{prefix}/"):
        return request_path[len(prefix) :]
    return None


class SiteRequestHandler(http.server.SimpleHTTPRequestHandler):
    """Static file handler that answers unknown paths with ``404.html``."""

    base_path: str = ""

    def __init__(self, *args: typ.Any, base_path: str = "", **kwargs: typ.Any) -> None:
        self.base_path = base_path
        super().__init__(*args, **kwargs)

    def translate_path(self, path: str) -> str:
        """Map a request path onto the build directory, honouring the prefix."""
        parsed = urllib.parse.urlsplit(path)
        relative = strip_mount_prefix(
            self.base_path, urllib.parse.unquote(parsed.path)
        )
        if relative is None:
            return ""
        return super().translate_path(relative)

    def send_head(self) -> typ.Any:
        """Serve the requested file or fall back to the not-found page."""
        target = self.translate_path(self.path)
        if not target or not self._is_servable(Path(target)):
            return self._send_not_found()
        return super().send_head()

    @staticmethod
    def _is_servable(target: Path) -> bool:
        if target.is_dir():
            return (target / PAGE_FILENAME).is_file()
        return target.is_file()

    def _send_not_found(self) -> typ.Any:
        page = Path(self.directory) / NOT_FOUND_FILENAME
        body = page.read_bytes() if page.is_file() else FALLBACK_NOT_FOUND
        self.send_response(HTTPStatus.NOT_FOUND)
        self.send_header("Content-Type", "text/html; charset=utf-8")
        self.send_header("Content-Length", str(len(body)))
        self.end_headers()
        if self.command != "HEAD":
            self.wfile.write(body)
        return None


def make_server(
    root: Path, *, port: int = 8080, base_path: str = "", host: str = ""
) -> http.server.ThreadingHTTPServer:
    """Return an HTTP server for ``root`` mounted at ``base_path``."""
    handler = functools.partial(
        SiteRequestHandler, directory=str(root), base_path=base_path
    )
    return http.server.ThreadingHTTPServer((host, port), handler)


def site_url(port: int, base_path: str) -> str:
    """Return the browsable local URL for a preview server."""
    prefix = posixpath.join("/", base_path.strip().strip("/"))
    if not prefix.endswith("/"):
        prefix = f"{prefix}/"
    return f"http://localhost:{port}{prefix}"


__all__ = ["SiteRequestHandler", "make_server", "site_url", "strip_mount_prefix"]
