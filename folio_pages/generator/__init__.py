"""Rewrite, aggregate, and render documents into a complete static site."""

from .link_rewriter import LinkRewriter
from .listing import ListingRenderer
from .models import BuildResult, LinkModel, MonthGroup, YearGroup
from .renderer import HtmlContentRenderer
from .site_builder import SiteBuilder

__all__ = [
    "BuildResult",
    "HtmlContentRenderer",
    "LinkModel",
    "LinkRewriter",
    "ListingRenderer",
    "MonthGroup",
    "SiteBuilder",
    "YearGroup",
]
