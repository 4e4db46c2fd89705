"""Load and validate site configuration YAML for folio builds.

This subpackage parses the project's ``config.yaml``, applies defaults for the
build layout, resolves content and output directories relative to the config
file, and produces typed dataclasses (:class:`SiteConfig`,
:class:`WebsiteConfig`, :class:`MenuEntry`) that the site builder consumes.

Examples
--------
>>> from pathlib import Path
>>> from folio_pages.config import load_site_config
>>> site = load_site_config(Path("config.yaml"))  # doctest: +SKIP
>>> site.menu[0].path  # doctest: +SKIP
'index.md'
"""

from .loader import load_site_config
from .models import MenuEntry, SiteConfig, SiteConfigError, WebsiteConfig

__all__ = [
    "MenuEntry",
    "SiteConfig",
    "SiteConfigError",
    "WebsiteConfig",
    "load_site_config",
]
