"""Rewrite intra-site Markdown links and image references.

Rewriting is line-oriented and regex-driven: a link whose brackets or target
span a line break is not recognised and stays untouched. Images become fixed
width ``<img>`` tags; links to other content files become mounted directory
URLs once the whole document set has been resolved.
"""

from __future__ import annotations

import posixpath
import re
import typing as typ

from folio_pages._constants import CONTENT_SUFFIX, IMAGE_MAX_WIDTH

if typ.TYPE_CHECKING:
    from folio_pages.documents import Document
    from folio_pages.paths import PathResolver

IMAGE_PATTERN = re.compile(r"!\[(.*?)\]\((.*?)\)")
LINK_PATTERN = re.compile(r"\[(.*?)\]\((.*?)\)")
EXTERNAL_PREFIXES = ("http://", "https://")
PARENT_PREFIX = "../"


def image_tag(alt: str, target: str) -> str:
    """Return the fixed-width HTML image tag for a Markdown image reference."""
    return (
        f'<img src="{target}" alt="{alt}" '
        f'style="max-width:{IMAGE_MAX_WIDTH}px;width:100%;height:auto;" '
        'class="mb-3 img-fluid"/>'
    )


def resolve_link_target(directory: str, target: str) -> str:
    """Return the candidate source path for ``target`` linked from ``directory``.

    ``../`` targets are resolved against ``directory`` and normalised, bare file
    names are treated as siblings, and anything else is taken as already
    relative to the content root.
    """
    if target.startswith(PARENT_PREFIX):
        return posixpath.normpath(posixpath.join(directory, target))
    if "/" not in target:
        return posixpath.join(directory, target)
    return target


class LinkRewriter:
    """Rewrite document bodies against a fully resolved document set."""

    def __init__(self, resolver: PathResolver) -> None:
        self.resolver = resolver

    def rewrite(self, document: Document) -> str:
        """Return ``document.body`` with images and content links rewritten."""
        lines = document.body.split("\n")
        return "\n".join(self.rewrite_line(document, line) for line in lines)

    def rewrite_line(self, document: Document, line: str) -> str:
        """Rewrite images then links within a single line."""
        line = IMAGE_PATTERN.sub(
            lambda match: image_tag(match.group(1), match.group(2)), line
        )

        def _repl(match: re.Match[str]) -> str:
            text, target = match.group(1), match.group(2)
            url = self._rewrite_target(document, target)
            if url is None:
                return match.group(0)
            return f"[{text}]({url})"

        return LINK_PATTERN.sub(_repl, line)

    def _rewrite_target(self, document: Document, target: str) -> str | None:
        lower = target.lower()
        if lower.startswith(EXTERNAL_PREFIXES):
            return None
        if not lower.endswith(CONTENT_SUFFIX):
            return None
        candidate = resolve_link_target(document.directory, target)
        return self.resolver.url_for_source(candidate)

    def rewrite_all(self, documents: typ.Iterable[Document]) -> None:
        """Replace every body in ``documents`` with its rewritten form."""
        for document in documents:
            document.body = self.rewrite(document)


__all__ = ["IMAGE_PATTERN", "LINK_PATTERN", "LinkRewriter", "image_tag"]
