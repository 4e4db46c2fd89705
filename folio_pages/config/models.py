"""Typed dataclasses describing folio site configuration structures."""

from __future__ import annotations

import dataclasses as dc
from pathlib import Path

DEFAULT_STATIC_DIRS = ("css", "js", "images")


class SiteConfigError(ValueError):
    """Raised when the site configuration is invalid or incomplete."""


@dc.dataclass(slots=True)
class WebsiteConfig:
    """Site identity and mount prefixes.

    Attributes
    ----------
    url : str
        Public site URL (``https://example.com``); empty when not deployed.
    name : str
        Display name used in titles, the navbar, and the feed channel.
    base_path : str
        Mount prefix for production builds; empty for the domain root.
    dev_path : str
        Mount prefix used by preview builds served with ``folio serve``.
    """

    url: str = ""
    name: str = ""
    base_path: str = ""
    dev_path: str = ""


@dc.dataclass(slots=True)
class MenuEntry:
    """Navigation entry referencing a content file by source path."""

    title: str
    path: str


@dc.dataclass(slots=True)
class SiteConfig:
    """Fully resolved site configuration consumed read-only by the build."""

    website: WebsiteConfig
    menu: list[MenuEntry] = dc.field(default_factory=list)
    content_dir: Path = Path()
    output_dir: Path = Path("public")
    static_dirs: list[str] = dc.field(default_factory=lambda: list(DEFAULT_STATIC_DIRS))
    pygments_style: str = "monokai"

    def with_base_path(self, base_path: str | None) -> SiteConfig:
        """Return a copy mounted at ``base_path`` (unchanged when ``None``)."""
        if base_path is None:
            return self
        website = dc.replace(self.website, base_path=base_path)
        return dc.replace(self, website=website)

    def with_output_dir(self, output_dir: Path | None) -> SiteConfig:
        """Return a copy writing to ``output_dir`` (unchanged when ``None``)."""
        if output_dir is None:
            return self
        return dc.replace(self, output_dir=output_dir)


__all__ = [
    "DEFAULT_STATIC_DIRS",
    "MenuEntry",
    "SiteConfig",
    "SiteConfigError",
    "WebsiteConfig",
]
