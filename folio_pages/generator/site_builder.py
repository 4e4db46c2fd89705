"""High-level orchestration for a full site build.

This module owns the build context that every phase shares: the document set,
the path resolver, and the mounted URL composer. :class:`SiteBuilder` runs the
phases strictly in order (parse, resolve output locations, append synthetic
author/tag listings, rewrite links, render) and then writes the 404 page, the
RSS feed, the ``CNAME`` file, and copies of the static asset directories.

Example
-------
>>> from pathlib import Path
>>> from folio_pages.config import load_site_config
>>> from folio_pages.generator import SiteBuilder
>>> config = load_site_config(Path("config.yaml"))  # doctest: +SKIP
>>> result = SiteBuilder(config).run()  # doctest: +SKIP
>>> result.written[0]  # doctest: +SKIP
PosixPath('public/index.html')
"""

from __future__ import annotations

import datetime as dt
import shutil
import typing as typ
from pathlib import Path
from urllib.parse import urlsplit

from jinja2 import Environment, FileSystemLoader
from markupsafe import Markup

from folio_pages._constants import (
    CNAME_FILENAME,
    FEED_FILENAME,
    NOT_FOUND_FILENAME,
    PAGE_FILENAME,
)
from folio_pages.documents import Document, DocumentSet, Metadata, load_documents
from folio_pages.feed import FeedBuilder
from folio_pages.generator.link_rewriter import LinkRewriter
from folio_pages.generator.listing import (
    ListingRenderer,
    author_link,
    synthesize_listing_documents,
    tag_links,
)
from folio_pages.generator.models import BuildResult, LinkModel
from folio_pages.generator.renderer import HtmlContentRenderer
from folio_pages.paths import PathResolver
from folio_pages.urls import SitePaths

if typ.TYPE_CHECKING:
    from folio_pages.config import SiteConfig

PAGE_TEMPLATE = "page.jinja"
NOT_FOUND_TITLE = "404 Not Found"
NOT_FOUND_BODY = Markup(
    "<p>Go <a href=\"{}\">home</a> to find what you're looking for</p>"
)


def extract_domain(url: str) -> str:
    """Return the host of ``url`` without port, or ``""`` when there is none.

    A bare ``example.com`` without a scheme is accepted as a host.
    """
    parsed = urlsplit(url.strip())
    host = parsed.hostname or ""
    if not host and parsed.path and "/" not in parsed.path:
        host = parsed.path.split(":", 1)[0]
    return host


def display_date(value: dt.date | None) -> str:
    """Format a publication date as ``Jan 2, 2006``."""
    if value is None:
        return ""
    return f"{value:%b} {value.day}, {value.year}"


class SiteBuilder:
    """Build every page of a site from a content tree and a site config."""

    def __init__(
        self, config: SiteConfig, *, templates_dir: Path | None = None
    ) -> None:
        """Initialize the builder with configuration and template context.

        Parameters
        ----------
        config : SiteConfig
            Resolved site configuration; its ``website.base_path`` is the mount
            prefix applied to every emitted link.
        templates_dir : Path, optional
            Directory containing Jinja templates; defaults to the package
            templates.
        """
        self.config = config
        default_templates = Path(__file__).resolve().parents[1] / "templates"
        self.templates_dir = templates_dir or default_templates
        self.paths = SitePaths(config.website.base_path)
        self.renderer = HtmlContentRenderer(config.pygments_style)
        self.env = Environment(
            loader=FileSystemLoader(str(self.templates_dir)),
            autoescape=True,
            trim_blocks=True,
            lstrip_blocks=True,
        )
        self.env.globals["site_path"] = self.paths.site_path
        self.env.filters["display_date"] = display_date
        self.template = self.env.get_template(PAGE_TEMPLATE)
        self.documents = DocumentSet()
        self.resolver = PathResolver(self.documents, self.paths)

    def prepare(self) -> DocumentSet:
        """Run every phase that precedes rendering and return the document set.

        Path resolution completes for the whole set before any body is
        rewritten, so forward references between documents resolve.
        """
        self.documents = load_documents(
            self.config.content_dir, exclude=self.config.output_dir
        )
        self.resolver = PathResolver(self.documents, self.paths)
        self.resolver.resolve()
        self.documents.extend(synthesize_listing_documents(self.documents))
        LinkRewriter(self.resolver).rewrite_all(self.documents)
        return self.documents

    def run(self) -> BuildResult:
        """Build the site into ``config.output_dir``.

        Returns
        -------
        BuildResult
            Written paths in write order plus warnings for best-effort steps.

        Notes
        -----
        Pages are written in document order; when two documents resolve to the
        same output location the later one overwrites the earlier page.
        """
        self.prepare()
        out_dir = self.config.output_dir
        out_dir.mkdir(parents=True, exist_ok=True)
        result = BuildResult()
        result.written.extend(self._copy_static_assets(out_dir))

        menu = self.menu_links()
        listings = ListingRenderer(self.resolver, self.env)
        for document in self.documents:
            if document.is_listing:
                content = listings.render(document)
            else:
                content = self.renderer.markdown(document.body)
            location = document.output_location or ""
            output_path = out_dir / location / PAGE_FILENAME
            self._write_page(output_path, document, content, menu)
            result.written.append(output_path)

        result.written.append(self._write_not_found(out_dir, menu))
        result.written.append(self._write_feed(out_dir))
        self._write_cname(out_dir, result)
        return result

    def menu_links(self) -> list[LinkModel]:
        """Resolve navigation entries; unmatched targets point at the site root."""
        links: list[LinkModel] = []
        for entry in self.config.menu:
            href = self.resolver.url_for_source(entry.path)
            fallback = self.paths.site_path("/")
            links.append(LinkModel(label=entry.title, href=href or fallback))
        return links

    def _page_context(
        self, document: Document, content: Markup, menu: list[LinkModel]
    ) -> dict[str, typ.Any]:
        metadata = document.metadata
        website = self.config.website
        hero_image = None
        og_image = None
        if metadata.image:
            image_path = f"/{metadata.image.lstrip('/')}"
            hero_image = self.paths.site_path(image_path)
            if website.url:
                og_image = self.paths.absolute(website.url, image_path)
        return {
            "website": website,
            "page": document,
            "metadata": metadata,
            "content": content,
            "menu": menu,
            "home_href": self.paths.site_path("/"),
            "hero_image": hero_image,
            "og_image": og_image,
            "author": author_link(self.paths, metadata.author),
            "tags": tag_links(self.paths, metadata.tags),
            "pygments_css": Markup(self.renderer.stylesheet),
        }

    def _write_page(
        self,
        output_path: Path,
        document: Document,
        content: Markup,
        menu: list[LinkModel],
    ) -> None:
        output_path.parent.mkdir(parents=True, exist_ok=True)
        html = self.template.render(**self._page_context(document, content, menu))
        if not html.endswith("\n"):
            html += "\n"
        output_path.write_text(html, encoding="utf-8")

    def _write_not_found(self, out_dir: Path, menu: list[LinkModel]) -> Path:
        document = Document(
            source_path=NOT_FOUND_FILENAME,
            metadata=Metadata(title=NOT_FOUND_TITLE),
            output_location="",
            synthetic=True,
        )
        content = NOT_FOUND_BODY.format(self.paths.site_path("/"))
        output_path = out_dir / NOT_FOUND_FILENAME
        self._write_page(output_path, document, content, menu)
        return output_path

    def _write_feed(self, out_dir: Path) -> Path:
        feed = FeedBuilder(self.config.website, self.resolver, self.env)
        output_path = out_dir / FEED_FILENAME
        output_path.write_text(feed.render(), encoding="utf-8")
        return output_path

    def _write_cname(self, out_dir: Path, result: BuildResult) -> None:
        domain = extract_domain(self.config.website.url)
        if not domain:
            return
        output_path = out_dir / CNAME_FILENAME
        try:
            output_path.write_text(f"{domain}\n", encoding="utf-8")
        except OSError as exc:
            result.warnings.append(f"could not write {output_path}: {exc}")
            return
        result.written.append(output_path)

    def _copy_static_assets(self, out_dir: Path) -> list[Path]:
        copied: list[Path] = []
        for name in self.config.static_dirs:
            source = self.config.content_dir / name
            if not source.is_dir():
                continue
            destination = out_dir / name
            shutil.copytree(source, destination, dirs_exist_ok=True)
            copied.append(destination)
        return copied


__all__ = ["SiteBuilder", "display_date", "extract_domain"]
