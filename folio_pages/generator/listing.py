"""Aggregate dated documents into year/month grouped listing fragments.

A ``list`` document renders the documents it selects instead of its own body.
Selection follows the listing's filters: an author filter or tag filter selects
across the whole site, otherwise only siblings in the listing's directory are
considered. Directory indexes and undated documents never appear.

Example
-------
>>> import datetime as dt
>>> from folio_pages.documents import Document, Metadata
>>> docs = [
...     Document("b/x.md", Metadata(title="x", date=dt.date(2024, 1, 5))),
...     Document("b/y.md", Metadata(title="y", date=dt.date(2023, 12, 1))),
... ]
>>> [group.year for group in group_by_month(docs)]
[2024, 2023]
"""

from __future__ import annotations

import calendar
import dataclasses as dc
import itertools
import posixpath
import typing as typ

from markupsafe import Markup

from folio_pages._constants import AUTHORS_DIR, INDEX_FILENAME, TAGS_DIR
from folio_pages.documents import Document, DocumentKind, Metadata
from folio_pages.generator.models import LinkModel, MonthGroup, YearGroup
from folio_pages.paths import slugify

if typ.TYPE_CHECKING:
    import collections.abc as cabc
    import datetime as dt

    from jinja2 import Environment

    from folio_pages.paths import PathResolver
    from folio_pages.urls import SitePaths

LISTING_TEMPLATE = "listing.jinja"


def _matches_any(value: str, candidates: cabc.Iterable[str]) -> bool:
    needle = value.strip().casefold()
    return any(needle == candidate.strip().casefold() for candidate in candidates)


def _is_selected(listing: Document, document: Document) -> bool:
    filters = listing.metadata
    if filters.author_filter:
        return bool(document.metadata.author) and _matches_any(
            document.metadata.author or "", filters.author_filter
        )
    if filters.tag_filter:
        return any(
            _matches_any(tag, filters.tag_filter) for tag in document.metadata.tags
        )
    return document.directory == listing.directory


def _publication_date(document: Document) -> dt.date:
    date = document.metadata.date
    if date is None:  # pragma: no cover - filtered before sorting
        msg = f"Document '{document.source_path}' has no publication date."
        raise ValueError(msg)
    return date


def select_entries(
    listing: Document, documents: cabc.Iterable[Document]
) -> list[Document]:
    """Return the documents ``listing`` aggregates, newest first.

    Ties on the publication date keep their encounter order.
    """
    selected = [
        document
        for document in documents
        if not document.is_directory_index
        and document.metadata.date is not None
        and _is_selected(listing, document)
    ]
    return sorted(selected, key=_publication_date, reverse=True)


def group_by_month(entries: cabc.Iterable[Document]) -> list[YearGroup]:
    """Partition dated ``entries`` by year, then by month, newest first.

    Entries are stably sorted on (year, month) before grouping, so documents
    within a month keep the order they were given in.
    """

    def _year_month(doc: Document) -> tuple[int, int]:
        date = _publication_date(doc)
        return date.year, date.month

    ordered = sorted(entries, key=_year_month, reverse=True)
    years: list[YearGroup] = []
    by_year = itertools.groupby(ordered, key=lambda doc: _year_month(doc)[0])
    for year, year_docs in by_year:
        months = [
            MonthGroup(
                month=month, name=calendar.month_name[month], documents=list(docs)
            )
            for month, docs in itertools.groupby(
                year_docs, key=lambda doc: _year_month(doc)[1]
            )
        ]
        years.append(YearGroup(year=year, months=months))
    return years


def author_location(author: str) -> str | None:
    """Return the output location of the listing page for ``author``."""
    slug = slugify(author)
    return posixpath.join(AUTHORS_DIR, slug) if slug else None


def tag_location(tag: str) -> str | None:
    """Return the output location of the listing page for ``tag``."""
    slug = slugify(tag)
    return posixpath.join(TAGS_DIR, slug) if slug else None


def synthesize_listing_documents(
    documents: cabc.Iterable[Document],
) -> list[Document]:
    """Create one listing document per distinct author and per distinct tag.

    Values are distinguished by their slug, so ``Python`` and ``python`` share
    one page titled after the first spelling encountered. The page filters on
    every spelling that maps to its slug, so each post linking to the page is
    listed on it. A synthetic document whose source path is already taken by a
    real document is skipped.
    """
    existing = list(documents)
    taken = {document.source_path for document in existing}
    authors: dict[str, list[str]] = {}
    tags: dict[str, list[str]] = {}
    for document in existing:
        author = document.metadata.author
        if author and (location := author_location(author)):
            _remember(authors, location, author)
        for tag in document.metadata.tags:
            if location := tag_location(tag):
                _remember(tags, location, tag)

    synthetic: list[Document] = []
    for location, spellings in authors.items():
        metadata = Metadata(
            title=f"Posts by {spellings[0]}",
            kind=DocumentKind.LIST,
            author_filter=tuple(spellings),
        )
        synthetic.append(_synthetic_document(location, metadata))
    for location, spellings in tags.items():
        metadata = Metadata(
            title=f"Posts tagged with {spellings[0]}",
            kind=DocumentKind.LIST,
            tag_filter=tuple(spellings),
        )
        synthetic.append(_synthetic_document(location, metadata))
    return [document for document in synthetic if document.source_path not in taken]


def _remember(spellings: dict[str, list[str]], location: str, value: str) -> None:
    seen = spellings.setdefault(location, [])
    if value not in seen:
        seen.append(value)


def _synthetic_document(location: str, metadata: Metadata) -> Document:
    return Document(
        source_path=posixpath.join(location, INDEX_FILENAME),
        metadata=metadata,
        output_location=location,
        synthetic=True,
    )


@dc.dataclass(slots=True)
class ListingEntry:
    """Template-ready view of one listed document."""

    title: str
    href: str
    date: dt.date
    author: LinkModel | None
    tags: list[LinkModel]


class ListingRenderer:
    """Render listing fragments for ``list`` documents."""

    def __init__(self, resolver: PathResolver, env: Environment) -> None:
        self.resolver = resolver
        self.template = env.get_template(LISTING_TEMPLATE)

    def groups(self, listing: Document) -> list[YearGroup]:
        """Return the grouped entries ``listing`` aggregates."""
        return group_by_month(select_entries(listing, self.resolver.documents))

    def render(self, listing: Document) -> Markup:
        """Return the grouped HTML fragment for ``listing``."""
        html = self.template.render(years=self.groups(listing), entry=self.entry)
        return Markup(html)

    def entry(self, document: Document) -> ListingEntry:
        """Build the template view for one listed ``document``."""
        metadata = document.metadata
        paths = self.resolver.paths
        return ListingEntry(
            title=metadata.title or document.stem,
            href=self.resolver.url_for(document),
            date=_publication_date(document),
            author=author_link(paths, metadata.author),
            tags=tag_links(paths, metadata.tags),
        )


def author_link(paths: SitePaths, author: str | None) -> LinkModel | None:
    """Return the credit link to ``author``'s listing page.

    An author whose name yields no slug gets a link with an empty ``href``;
    templates render it as plain text.
    """
    if not author:
        return None
    location = author_location(author)
    if location is None:
        return LinkModel(label=author, href="")
    return LinkModel(label=author, href=paths.directory(location))


def tag_links(paths: SitePaths, tags: cabc.Iterable[str]) -> list[LinkModel]:
    """Return badge links for every tag that maps to a listing page."""
    links: list[LinkModel] = []
    for tag in tags:
        location = tag_location(tag)
        if location is not None:
            links.append(LinkModel(label=tag, href=paths.directory(location)))
    return links


__all__ = [
    "ListingEntry",
    "ListingRenderer",
    "author_link",
    "author_location",
    "group_by_month",
    "select_entries",
    "synthesize_listing_documents",
    "tag_links",
    "tag_location",
]
