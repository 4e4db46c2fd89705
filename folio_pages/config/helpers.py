"""Utility helpers shared by the folio configuration loader."""

from __future__ import annotations

import typing as typ
from pathlib import Path

from .models import DEFAULT_STATIC_DIRS, MenuEntry, SiteConfigError, WebsiteConfig


def _optional_str(value: object | None) -> str:
    """Return a stripped string value or an empty string."""
    if value is None:
        return ""
    return str(value).strip()


def _require_mapping(value: object, section: str) -> typ.Mapping[str, typ.Any]:
    """Return ``value`` as a mapping, treating ``None`` as empty."""
    match value:
        case None:
            return {}
        case dict():
            return value
        case _:
            msg = f"'{section}' must be a mapping."
            raise SiteConfigError(msg)


def _build_website_config(payload: typ.Mapping[str, typ.Any]) -> WebsiteConfig:
    """Build a WebsiteConfig from the ``website`` block."""
    return WebsiteConfig(
        url=_optional_str(payload.get("url")),
        name=_optional_str(payload.get("name")),
        base_path=_optional_str(payload.get("basePath", payload.get("base_path"))),
        dev_path=_optional_str(payload.get("devPath", payload.get("dev_path"))),
    )


def _build_menu(payload: object) -> list[MenuEntry]:
    """Build the ordered navigation menu from the ``menu`` list."""
    match payload:
        case None:
            return []
        case list() as items:
            pass
        case _:
            msg = "'menu' must be a list of {title, path} entries."
            raise SiteConfigError(msg)
    entries: list[MenuEntry] = []
    for index, item in enumerate(items):
        match item:
            case {"title": title, "path": path} if _optional_str(path):
                entries.append(
                    MenuEntry(title=_optional_str(title), path=_optional_str(path))
                )
            case _:
                msg = f"Menu entry {index} requires 'title' and 'path'."
                raise SiteConfigError(msg)
    return entries


def _resolve_dir(base: Path, value: object | None, default: str) -> Path:
    """Resolve a configured directory relative to the config file location."""
    path = Path(_optional_str(value) or default)
    if path.is_absolute():
        return path
    return base / path


def _build_static_dirs(value: object | None) -> list[str]:
    """Return the static asset directory names to copy into the output."""
    match value:
        case None:
            return list(DEFAULT_STATIC_DIRS)
        case list() as items:
            return [text for item in items if (text := _optional_str(item))]
        case str() as text:
            return [part.strip() for part in text.split(",") if part.strip()]
        case _:
            msg = "'build.static_dirs' must be a list of directory names."
            raise SiteConfigError(msg)


__all__ = [
    "_build_menu",
    "_build_static_dirs",
    "_build_website_config",
    "_optional_str",
    "_require_mapping",
    "_resolve_dir",
]
