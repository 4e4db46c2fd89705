"""Shared dataclasses used by the page generation pipeline."""

from __future__ import annotations

import dataclasses as dc
import typing as typ
from pathlib import Path

if typ.TYPE_CHECKING:
    from folio_pages.documents import Document


@dc.dataclass(slots=True)
class MonthGroup:
    """Listing entries published within one calendar month.

    Attributes
    ----------
    month : int
        Calendar month number (1-12).
    name : str
        English month name used as the sub-heading.
    documents : list[Document]
        Entries in descending publication date order.
    """

    month: int
    name: str
    documents: list[Document]


@dc.dataclass(slots=True)
class YearGroup:
    """Listing entries published within one calendar year, split by month."""

    year: int
    months: list[MonthGroup]


@dc.dataclass(slots=True)
class LinkModel:
    """Label and mounted href passed to templates for navigation and badges."""

    label: str
    href: str


@dc.dataclass(slots=True)
class BuildResult:
    """Files written by a build and any best-effort failures encountered.

    Attributes
    ----------
    written : list[Path]
        Every file written, in write order.
    warnings : list[str]
        Messages for non-fatal failures such as an unwritable ``CNAME``.
    """

    written: list[Path] = dc.field(default_factory=list)
    warnings: list[str] = dc.field(default_factory=list)


__all__ = ["BuildResult", "LinkModel", "MonthGroup", "YearGroup"]
