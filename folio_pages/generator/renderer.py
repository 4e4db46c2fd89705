"""Render rewritten Markdown bodies into HTML with highlighted code blocks."""

from __future__ import annotations

import re

from markdown import Markdown
from markupsafe import Markup
from pygments.formatters.html import HtmlFormatter

FENCED_INDENT_PATTERN = re.compile(r"^[ ]{1,3}([`~]{3,})", re.MULTILINE)
CODEHILITE_CLASS = "codehilite"


class HtmlContentRenderer:
    """Convert document bodies to HTML using a shared Markdown configuration."""

    def __init__(self, pygments_style: str = "monokai") -> None:
        """Initialize a renderer for the given Pygments style.

        Parameters
        ----------
        pygments_style : str, optional
            Name of the Pygments style used for fenced code blocks. Defaults to
            ``"monokai"``.
        """
        self.pygments_style = pygments_style
        self._formatter = HtmlFormatter(style=pygments_style, cssclass=CODEHILITE_CLASS)

    @property
    def stylesheet(self) -> str:
        """Return the CSS used for highlighted code blocks."""
        return self._formatter.get_style_defs(f".{CODEHILITE_CLASS}")

    def markdown(self, text: str) -> Markup:
        """Render ``text`` to HTML; raw HTML such as rewritten images passes through."""
        normalized = FENCED_INDENT_PATTERN.sub(r"\1", text)
        if not normalized.strip():
            return Markup("")
        md = Markdown(
            extensions=["fenced_code", "codehilite", "tables", "sane_lists", "toc"],
            extension_configs={
                "codehilite": {
                    "linenums": False,
                    "guess_lang": False,
                    "css_class": CODEHILITE_CLASS,
                    "pygments_style": self.pygments_style,
                }
            },
        )
        return Markup(md.convert(normalized))


__all__ = ["HtmlContentRenderer"]
