r"""Parse Markdown content files into the in-memory document model.

Each content file may begin with a YAML front matter block delimited by ``---``
lines. The block is parsed with ``ruamel.yaml`` into :class:`Metadata`; the
remainder becomes the document body. :func:`load_documents` walks a content
root and returns a :class:`DocumentSet` keyed by forward-slash source paths.

Example
-------
>>> doc = parse_document("posts/hello.md", "---\ntitle: Hello\n---\nBody")
>>> doc.metadata.title, doc.body
('Hello', 'Body')
"""

from __future__ import annotations

import dataclasses as dc
import datetime as dt
import enum
import posixpath
import re
import typing as typ
from pathlib import Path

from ruamel.yaml import YAML
from ruamel.yaml.constructor import SafeConstructor
from ruamel.yaml.error import YAMLError

from ._constants import CONTENT_SUFFIX, FRONT_MATTER_MARKER, INDEX_FILENAME

if typ.TYPE_CHECKING:
    import collections.abc as cabc

ISO_DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}(?:[Tt ]|$)")
TIMESTAMP_TAG = "tag:yaml.org,2002:timestamp"


class DocumentParseError(ValueError):
    """Raised when a content file carries a malformed front matter block."""

    def __init__(self, source_path: str, reason: str) -> None:
        super().__init__(f"{source_path}: {reason}")
        self.source_path = source_path


class DuplicateDocumentError(ValueError):
    """Raised when two documents share the same source path."""


class FrontMatterConstructor(SafeConstructor):
    """Safe constructor that leaves timestamps as plain strings.

    Dates are validated by :func:`parse_date`, so an impossible calendar date
    degrades to ``None`` instead of failing the load.
    """


FrontMatterConstructor.add_constructor(
    TIMESTAMP_TAG, FrontMatterConstructor.construct_yaml_str
)


class DocumentKind(enum.StrEnum):
    """Role of a document within the site."""

    NORMAL = "normal"
    LIST = "list"


@dc.dataclass(slots=True)
class Metadata:
    """Front matter fields recognised by the build.

    Attributes
    ----------
    title : str or None
        Display title; also the source of the output slug.
    kind : DocumentKind
        ``normal`` pages render their body, ``list`` pages render a listing.
    description : str or None
        Summary shown under the title and in the feed.
    image : str or None
        Hero image reference, site-rooted (``/images/a.png``) or bare.
    date : datetime.date or None
        Publication date; ``None`` when absent or unparsable.
    author : str or None
        Author credit.
    tags : tuple[str, ...]
        Distinct tags in first-seen order.
    tag_filter, author_filter : tuple[str, ...]
        Selection filters carried by listing documents.
    """

    title: str | None = None
    kind: DocumentKind = DocumentKind.NORMAL
    description: str | None = None
    image: str | None = None
    date: dt.date | None = None
    author: str | None = None
    tags: tuple[str, ...] = ()
    tag_filter: tuple[str, ...] = ()
    author_filter: tuple[str, ...] = ()


@dc.dataclass(slots=True)
class Document:
    """One content unit: metadata, body, and its computed output location."""

    source_path: str
    metadata: Metadata = dc.field(default_factory=Metadata)
    body: str = ""
    output_location: str | None = None
    synthetic: bool = False

    @property
    def is_directory_index(self) -> bool:
        """Return ``True`` when the file is its directory's ``index.md``."""
        return posixpath.basename(self.source_path) == INDEX_FILENAME

    @property
    def directory(self) -> str:
        """Return the content-root-relative directory (``""`` for the root)."""
        return posixpath.dirname(self.source_path)

    @property
    def stem(self) -> str:
        """Return the file name without its extension."""
        name = posixpath.basename(self.source_path)
        return posixpath.splitext(name)[0]

    @property
    def is_listing(self) -> bool:
        """Return ``True`` when the document renders an aggregated listing."""
        return self.metadata.kind is DocumentKind.LIST


class DocumentSet:
    """Ordered collection of every document taking part in one build."""

    def __init__(self, documents: cabc.Iterable[Document] = ()) -> None:
        self._documents: list[Document] = []
        self._by_source: dict[str, Document] = {}
        self.extend(documents)

    def __iter__(self) -> cabc.Iterator[Document]:
        return iter(self._documents)

    def __len__(self) -> int:
        return len(self._documents)

    def __contains__(self, source_path: object) -> bool:
        return source_path in self._by_source

    def add(self, document: Document) -> None:
        """Append ``document``, enforcing unique source paths."""
        if document.source_path in self._by_source:
            msg = f"Duplicate document source path '{document.source_path}'."
            raise DuplicateDocumentError(msg)
        self._documents.append(document)
        self._by_source[document.source_path] = document

    def extend(self, documents: cabc.Iterable[Document]) -> None:
        """Append each document in order."""
        for document in documents:
            self.add(document)

    def get(self, source_path: str) -> Document | None:
        """Return the document stored under ``source_path`` if any."""
        return self._by_source.get(source_path)


def parse_document(source_path: str, text: str) -> Document:
    """Split ``text`` into metadata and body for the file at ``source_path``.

    Parameters
    ----------
    source_path : str
        Forward-slash path relative to the content root.
    text : str
        File contents decoded as UTF-8.

    Returns
    -------
    Document
        Parsed document with no output location assigned yet.

    Raises
    ------
    DocumentParseError
        If the front matter is unterminated, not valid YAML, or not a mapping.
    """
    clean_text = text.lstrip("\ufeff")
    lines = clean_text.splitlines()
    if not lines or lines[0].strip() != FRONT_MATTER_MARKER:
        return Document(source_path=source_path, body=clean_text)

    end = next(
        (
            index
            for index in range(1, len(lines))
            if lines[index].strip() == FRONT_MATTER_MARKER
        ),
        None,
    )
    if end is None:
        raise DocumentParseError(source_path, "front matter block is not terminated")

    loader = YAML(typ="safe")
    loader.version = (1, 2)
    loader.Constructor = FrontMatterConstructor
    try:
        loaded = loader.load("\n".join(lines[1:end]))
    except YAMLError as exc:
        raise DocumentParseError(source_path, f"invalid front matter: {exc}") from exc
    if loaded is None:
        loaded = {}
    if not isinstance(loaded, dict):
        raise DocumentParseError(source_path, "front matter must be a mapping")

    body = "\n".join(lines[end + 1 :]).strip()
    return Document(
        source_path=source_path, metadata=_build_metadata(loaded), body=body
    )


def load_documents(content_dir: Path, *, exclude: Path | None = None) -> DocumentSet:
    """Parse every Markdown file below ``content_dir`` into a document set.

    Files inside hidden directories, hidden files, and anything under
    ``exclude`` (typically the output directory) are skipped. Files are visited
    in sorted path order so builds are reproducible.

    Raises
    ------
    FileNotFoundError
        If ``content_dir`` does not exist or is not a directory.
    DocumentParseError
        If any file carries malformed front matter.
    """
    if not content_dir.is_dir():
        msg = f"Content directory '{content_dir}' not found."
        raise FileNotFoundError(msg)
    excluded = exclude.resolve() if exclude is not None else None
    documents = DocumentSet()
    for path in sorted(content_dir.rglob("*"), key=lambda p: p.as_posix()):
        if not path.is_file() or path.suffix.lower() != CONTENT_SUFFIX:
            continue
        relative = path.relative_to(content_dir)
        if any(part.startswith(".") for part in relative.parts):
            continue
        if excluded is not None and path.resolve().is_relative_to(excluded):
            continue
        text = path.read_text(encoding="utf-8")
        documents.add(parse_document(relative.as_posix(), text))
    return documents


def _build_metadata(raw: typ.Mapping[str, typ.Any]) -> Metadata:
    kind_value = _optional_str(raw.get("type"))
    kind = (
        DocumentKind.LIST
        if kind_value and kind_value.lower() == DocumentKind.LIST
        else DocumentKind.NORMAL
    )
    return Metadata(
        title=_optional_str(raw.get("title")),
        kind=kind,
        description=_optional_str(raw.get("description")),
        image=_optional_str(raw.get("image")),
        date=parse_date(raw.get("date")),
        author=_optional_str(raw.get("author")),
        tags=_string_tuple(raw.get("tags")),
        tag_filter=_string_tuple(raw.get("tagFilter", raw.get("tag_filter"))),
        author_filter=_string_tuple(
            raw.get("authorFilter", raw.get("author_filter"))
        ),
    )


def parse_date(value: object) -> dt.date | None:
    """Return a calendar date for ``value`` or ``None`` when it cannot be read.

    Strings must start with ``YYYY-MM-DD``; any time part is dropped.
    """
    match value:
        case dt.datetime():
            return value.date()
        case dt.date():
            return value
        case str() as text:
            sanitized = text.strip()
            if not ISO_DATE_PATTERN.match(sanitized):
                return None
            try:
                return dt.datetime.fromisoformat(sanitized).date()
            except ValueError:
                return None
        case _:
            return None


def _optional_str(value: object | None) -> str | None:
    """Return a stripped string value or None when empty."""
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _string_tuple(value: object | None) -> tuple[str, ...]:
    """Normalize a YAML list or comma-separated string into distinct strings."""
    match value:
        case str() as text:
            items: list[object] = list(text.split(","))
        case list() | tuple() as sequence:
            items = list(sequence)
        case None:
            return ()
        case _:
            items = [value]
    seen: dict[str, None] = {}
    for item in items:
        text = str(item).strip()
        if text:
            seen.setdefault(text, None)
    return tuple(seen)


__all__ = [
    "Document",
    "DocumentKind",
    "DocumentParseError",
    "DocumentSet",
    "DuplicateDocumentError",
    "FrontMatterConstructor",
    "Metadata",
    "load_documents",
    "parse_date",
    "parse_document",
]
