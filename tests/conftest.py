"""Shared fixtures for folio tests.

Fixtures here lay out small content trees on disk so tests can drive the
loader and the site builder against real files.
"""

from __future__ import annotations

import typing as typ
from textwrap import dedent

import pytest

if typ.TYPE_CHECKING:
    from pathlib import Path

WriteTree = typ.Callable[[dict[str, str | bytes]], "Path"]


def write_tree(root: Path, files: dict[str, str | bytes]) -> Path:
    """Write ``files`` (relative path to text or bytes) below ``root``."""
    for relative, content in files.items():
        target = root / relative
        target.parent.mkdir(parents=True, exist_ok=True)
        if isinstance(content, bytes):
            target.write_bytes(content)
        else:
            target.write_text(dedent(content).lstrip(), encoding="utf-8")
    return root


@pytest.fixture
def site_tree(tmp_path: Path) -> WriteTree:
    """Return a helper that writes a content tree into a fresh site root."""
    root = tmp_path / "site"
    root.mkdir()

    def _write(files: dict[str, str | bytes]) -> Path:
        return write_tree(root, files)

    return _write


BLOG_CONFIG = """
    website:
      url: https://example.com:8443/
      name: Example
      basePath: ""
      devPath: /preview
    menu:
      - title: Home
        path: index.md
      - title: Blog
        path: blog/index.md
      - title: Gone
        path: missing.md
    build:
      output_dir: public
"""

BLOG_FILES: dict[str, str | bytes] = {
    "config.yaml": BLOG_CONFIG,
    "index.md": """
        ---
        title: Home
        ---
        Read [the first post](blog/first.md) or [something external](https://example.org/a.md).
    """,
    "blog/index.md": """
        ---
        title: Blog
        type: list
        ---
    """,
    "blog/first.md": """
        ---
        title: First Post
        date: 2024-01-05
        author: Ada
        tags: [Python]
        image: /images/hero.png
        description: The very first post.
        ---
        ![Hero](/images/hero.png)

        Back to [the blog](index.md) or [home](../index.md).
    """,
    "blog/second.md": """
        ---
        title: Second Post
        date: 2024-02-10
        tags: python, web
        ---
        See [the first post](first.md) and [a missing page](nowhere.md).
    """,
    "images/hero.png": b"\x89PNG\r\n\x1a\n",
    "css/site.css": "body { margin: 0; }\n",
}


@pytest.fixture
def blog_site(site_tree: WriteTree) -> Path:
    """Write a small blog and return the path of its ``config.yaml``."""
    root = site_tree(BLOG_FILES)
    return root / "config.yaml"
