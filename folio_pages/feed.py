"""Build the RSS 2.0 feed listing every dated document.

Items are ordered newest first (ties keep document order) and link to absolute
URLs composed from ``website.url`` and the mounted directory URL of each
document. A hero image becomes an ``<enclosure>``.
"""

from __future__ import annotations

import dataclasses as dc
import datetime as dt
import mimetypes
import typing as typ
from email.utils import format_datetime

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from jinja2 import Environment

    from .config import WebsiteConfig
    from .documents import Document
    from .paths import PathResolver

FEED_TEMPLATE = "rss.xml.jinja"
DEFAULT_ENCLOSURE_TYPE = "image/png"


@dc.dataclass(slots=True)
class FeedItem:
    """One ``<item>`` of the RSS channel."""

    title: str
    link: str
    description: str
    pub_date: str
    enclosure_url: str | None = None
    enclosure_type: str = DEFAULT_ENCLOSURE_TYPE


def dated_documents(documents: cabc.Iterable[Document]) -> list[Document]:
    """Return documents carrying a publication date, newest first."""
    dated = [document for document in documents if document.metadata.date is not None]
    return sorted(
        dated, key=lambda doc: typ.cast("dt.date", doc.metadata.date), reverse=True
    )


def rfc822_date(value: dt.date) -> str:
    """Format a calendar date as an RFC 822 timestamp at midnight UTC."""
    moment = dt.datetime(value.year, value.month, value.day, tzinfo=dt.UTC)
    return format_datetime(moment)


class FeedBuilder:
    """Render the site feed from a resolved document set."""

    def __init__(
        self, website: WebsiteConfig, resolver: PathResolver, env: Environment
    ) -> None:
        self.website = website
        self.resolver = resolver
        self.template = env.get_template(FEED_TEMPLATE)

    def items(self) -> list[FeedItem]:
        """Return feed items for every dated document."""
        paths = self.resolver.paths
        items: list[FeedItem] = []
        for document in dated_documents(self.resolver.documents):
            metadata = document.metadata
            item = FeedItem(
                title=metadata.title or document.stem,
                link=f"{self.website.url.rstrip('/')}{self.resolver.url_for(document)}",
                description=metadata.description or "",
                pub_date=rfc822_date(typ.cast("dt.date", metadata.date)),
            )
            if metadata.image:
                image_path = f"/{metadata.image.lstrip('/')}"
                item.enclosure_url = paths.absolute(self.website.url, image_path)
                guessed, _ = mimetypes.guess_type(image_path)
                item.enclosure_type = guessed or DEFAULT_ENCLOSURE_TYPE
            items.append(item)
        return items

    def render(self) -> str:
        """Return the complete RSS document."""
        xml = self.template.render(
            website=self.website,
            channel_link=self.website.url or self.resolver.paths.site_path("/"),
            items=self.items(),
        )
        if not xml.endswith("\n"):
            xml += "\n"
        return xml


__all__ = ["FeedBuilder", "FeedItem", "dated_documents", "rfc822_date"]
