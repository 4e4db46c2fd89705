"""Load site configuration YAML into typed dataclasses."""

from __future__ import annotations

import typing as typ
from pathlib import Path

from ruamel.yaml import YAML

from .helpers import (
    _build_menu,
    _build_static_dirs,
    _build_website_config,
    _optional_str,
    _require_mapping,
    _resolve_dir,
)
from .models import SiteConfig, SiteConfigError


def load_site_config(path: Path) -> SiteConfig:
    """Load the YAML configuration describing the site and its build layout.

    Parameters
    ----------
    path : Path
        Filesystem path to the YAML configuration file (for example,
        ``config.yaml``). Relative ``content_dir`` and ``output_dir`` values are
        resolved against the directory containing this file.

    Returns
    -------
    SiteConfig
        Parsed site configuration including website identity, navigation menu,
        content and output directories.

    Raises
    ------
    FileNotFoundError
        If the configuration file does not exist at ``path``.
    SiteConfigError
        If the top-level structure or any section has the wrong shape.
    YAMLError
        If the YAML content cannot be parsed by the underlying loader.

    Examples
    --------
    >>> from pathlib import Path
    >>> from folio_pages.config import load_site_config
    >>> config = load_site_config(Path("config.yaml"))  # doctest: +SKIP
    >>> config.website.name  # doctest: +SKIP
    'Example'
    """
    if not path.exists():
        msg = f"Configuration file '{path}' not found."
        raise FileNotFoundError(msg)

    loader = YAML(typ="safe")
    loader.version = (1, 2)
    with path.open("r", encoding="utf-8") as handle:
        loaded = loader.load(handle) or {}
    if not isinstance(loaded, dict):
        msg = "Top-level YAML structure must be a mapping."
        raise SiteConfigError(msg)
    raw: dict[str, typ.Any] = dict(loaded)

    website = _build_website_config(_require_mapping(raw.get("website"), "website"))
    menu = _build_menu(raw.get("menu"))
    build = _require_mapping(raw.get("build"), "build")
    base = path.parent

    return SiteConfig(
        website=website,
        menu=menu,
        content_dir=_resolve_dir(base, build.get("content_dir"), "."),
        output_dir=_resolve_dir(base, build.get("output_dir"), "public"),
        static_dirs=_build_static_dirs(build.get("static_dirs")),
        pygments_style=_optional_str(build.get("pygments_style")) or "monokai",
    )


__all__ = ["load_site_config"]
