"""Compose site-relative URLs against a configurable mount prefix.

Every href emitted by the build passes through :func:`site_path` so the same
content tree can be published at the domain root in production and under a
sub-path (for example ``/preview``) during local previews.

Examples
--------
>>> site_path("", "/")
'/'
>>> site_path("/blog/", "/")
'/blog/'
>>> site_path("/blog", "/css/a.css")
'/blog/css/a.css'
"""

from __future__ import annotations

import dataclasses as dc


def _normalize_prefix(base_path: str | None) -> str:
    prefix = (base_path or "").strip().rstrip("/")
    if prefix and not prefix.startswith("/"):
        prefix = f"/{prefix}"
    return prefix


def site_path(base_path: str | None, path: str) -> str:
    """Return ``path`` mounted under ``base_path``.

    Parameters
    ----------
    base_path : str or None
        Mount prefix such as ``"/blog"``; empty or ``None`` means the site is
        served from the domain root. Trailing separators are ignored.
    path : str
        Site-relative path. A missing leading ``/`` is added.

    Returns
    -------
    str
        Absolute site path that always starts with ``/`` and never doubles the
        separator where the prefix and path meet.
    """
    if not path.startswith("/"):
        path = f"/{path}"
    prefix = _normalize_prefix(base_path)
    if not prefix:
        return path
    if path == "/":
        return f"{prefix}/"
    return f"{prefix}{path}"


@dc.dataclass(frozen=True, slots=True)
class SitePaths:
    """Bind a mount prefix so callers can compose paths without repeating it."""

    base_path: str = ""

    def site_path(self, path: str) -> str:
        """Return ``path`` mounted under the bound prefix."""
        return site_path(self.base_path, path)

    def directory(self, location: str) -> str:
        """Return the directory URL for an output location (``""`` is the root)."""
        location = location.strip("/")
        if not location:
            return self.site_path("/")
        return self.site_path(f"/{location}/")

    def absolute(self, site_url: str, path: str) -> str:
        """Return an absolute URL on ``site_url`` for the mounted ``path``."""
        return f"{site_url.rstrip('/')}{self.site_path(path)}"


__all__ = ["SitePaths", "site_path"]
