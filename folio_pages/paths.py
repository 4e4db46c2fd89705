"""Assign output locations to documents and look them up by source path.

Directory indexes (``index.md``) publish at their source directory; every other
document publishes at its source directory joined with a slug derived from its
title, falling back to the file stem when the title yields nothing. Colliding
slugs are not deduplicated: the document processed last overwrites the page on
disk.

Example
-------
>>> from folio_pages.documents import Document, DocumentSet, Metadata
>>> docs = DocumentSet([Document("blog/a.md", Metadata(title="Héllo World"))])
>>> resolver = PathResolver(docs)
>>> resolver.resolve()
>>> resolver.locate("blog/a.md")
'blog/hello-world'
"""

from __future__ import annotations

import posixpath
import re
import typing as typ
import unicodedata

from .urls import SitePaths

if typ.TYPE_CHECKING:
    from .documents import Document, DocumentSet

SLUG_SEPARATOR_PATTERN = re.compile(r"[^a-z0-9]+")


def slugify(text: str | None) -> str:
    """Return a lower-case ASCII slug for ``text`` (possibly empty)."""
    if not text:
        return ""
    folded = unicodedata.normalize("NFKD", text)
    ascii_text = folded.encode("ascii", "ignore").decode("ascii")
    return SLUG_SEPARATOR_PATTERN.sub("-", ascii_text.lower()).strip("-")


class PathResolver:
    """Compute and query output locations across a whole document set."""

    def __init__(self, documents: DocumentSet, paths: SitePaths | None = None) -> None:
        self.documents = documents
        self.paths = paths or SitePaths()

    def resolve(self) -> None:
        """Assign ``output_location`` to every sourced document in the set.

        Synthetic listing documents already carry their location and are left
        untouched.
        """
        for document in self.documents:
            if document.synthetic:
                continue
            document.output_location = self.output_location_for(document)

    @staticmethod
    def output_location_for(document: Document) -> str:
        """Return the output directory for ``document`` relative to the site root."""
        if document.is_directory_index:
            return document.directory
        slug = slugify(document.metadata.title) or document.stem
        return posixpath.join(document.directory, slug)

    def locate(self, source_path: str) -> str | None:
        """Return the output location for ``source_path``.

        Returns
        -------
        str or None
            The location relative to the site root, ``""`` when the document
            publishes at the root, or ``None`` when no document matches or the
            match has not been resolved yet.
        """
        document = self.documents.get(source_path)
        if document is None:
            return None
        return document.output_location

    def url_for(self, document: Document) -> str:
        """Return the mounted directory URL for a resolved ``document``."""
        return self.paths.directory(document.output_location or "")

    def url_for_source(self, source_path: str) -> str | None:
        """Return the mounted URL for ``source_path`` or ``None`` if unknown."""
        location = self.locate(source_path)
        if location is None:
            return None
        return self.paths.directory(location)


__all__ = ["PathResolver", "slugify"]
