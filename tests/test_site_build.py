"""End-to-end tests for :class:`folio_pages.generator.SiteBuilder`.

Each test lays out a small blog on disk (see ``conftest.BLOG_FILES``), runs a
full build, and inspects the written HTML with BeautifulSoup. The RSS feed is
parsed with :mod:`xml.etree.ElementTree` since it is plain XML.
"""

from __future__ import annotations

import datetime as dt
import typing as typ
import xml.etree.ElementTree as ET
from pathlib import Path

import pytest
from bs4 import BeautifulSoup

from folio_pages.config import load_site_config
from folio_pages.generator import SiteBuilder
from folio_pages.generator.site_builder import display_date, extract_domain

if typ.TYPE_CHECKING:
    from folio_pages.generator.models import BuildResult

    from conftest import WriteTree


def _build(config_path: Path, *, base_path: str | None = None) -> BuildResult:
    config = load_site_config(config_path).with_base_path(base_path)
    return SiteBuilder(config).run()


def _soup(path: Path) -> BeautifulSoup:
    return BeautifulSoup(path.read_text(encoding="utf-8"), "html.parser")


@pytest.fixture
def built_blog(blog_site: Path) -> tuple[Path, BuildResult]:
    """Build the sample blog at the domain root and return its output dir."""
    result = _build(blog_site)
    return blog_site.parent / "public", result


def test_build_writes_every_page(built_blog: tuple[Path, BuildResult]) -> None:
    out, result = built_blog
    expected = [
        "index.html",
        "blog/index.html",
        "blog/first-post/index.html",
        "blog/second-post/index.html",
        "authors/ada/index.html",
        "tags/python/index.html",
        "tags/web/index.html",
        "404.html",
        "rss.xml",
        "CNAME",
        "images/hero.png",
        "css/site.css",
    ]
    for relative in expected:
        assert (out / relative).is_file(), f"{relative} should be written"
    assert out / "404.html" in result.written
    assert result.warnings == []


def test_cname_contains_host_without_port(
    built_blog: tuple[Path, BuildResult],
) -> None:
    out, _ = built_blog
    assert (out / "CNAME").read_text(encoding="utf-8") == "example.com\n"


def test_body_links_are_rewritten(built_blog: tuple[Path, BuildResult]) -> None:
    out, _ = built_blog
    home = _soup(out / "index.html")
    link = home.find("a", string="the first post")
    assert link is not None
    assert link["href"] == "/blog/first-post/"
    external = home.find("a", string="something external")
    assert external is not None
    assert external["href"] == "https://example.org/a.md"

    second = _soup(out / "blog/second-post/index.html")
    assert second.find("a", string="the first post")["href"] == "/blog/first-post/"
    assert second.find("a", string="a missing page")["href"] == "nowhere.md"

    first = _soup(out / "blog/first-post/index.html")
    assert first.find("a", string="the blog")["href"] == "/blog/"
    assert first.find("a", string="home")["href"] == "/"
    image = first.find("img", alt="Hero")
    assert image is not None
    assert "max-width:800px" in image["style"]


def test_menu_targets_resolve_or_fall_back_to_root(
    built_blog: tuple[Path, BuildResult],
) -> None:
    out, _ = built_blog
    soup = _soup(out / "blog/first-post/index.html")
    menu = [(a.get_text(strip=True), a["href"]) for a in soup.select("nav .nav-link")]
    assert menu == [("Home", "/"), ("Blog", "/blog/"), ("Gone", "/")]


def test_post_page_shows_metadata(built_blog: tuple[Path, BuildResult]) -> None:
    out, _ = built_blog
    soup = _soup(out / "blog/first-post/index.html")
    assert soup.title is not None
    assert soup.title.get_text(strip=True) == "First Post - Example"
    assert soup.find("h3").get_text(strip=True) == "First Post"
    author = soup.select_one(".author-line a")
    assert author is not None
    assert author["href"] == "/authors/ada/"
    assert [a["href"] for a in soup.select(".tags-line a")] == ["/tags/python/"]
    og_image = soup.find("meta", attrs={"property": "og:image"})
    assert og_image is not None
    assert og_image["content"] == "https://example.com:8443/images/hero.png"
    assert "Jan 5, 2024" in soup.get_text()


def test_blog_index_lists_posts_newest_first(
    built_blog: tuple[Path, BuildResult],
) -> None:
    out, _ = built_blog
    soup = _soup(out / "blog/index.html")
    titles = [
        a.get_text(strip=True)
        for a in soup.select(".blog-list li > a.text-decoration-none")
    ]
    assert titles == ["Second Post", "First Post"]
    months = [h.get_text(strip=True) for h in soup.select(".blog-list h5")]
    assert months == ["February", "January"]


def test_synthetic_pages_aggregate_by_tag_and_author(
    built_blog: tuple[Path, BuildResult],
) -> None:
    out, _ = built_blog
    python = _soup(out / "tags/python/index.html")
    assert python.find("h3").get_text(strip=True) == "Posts tagged with Python"
    titles = [
        a.get_text(strip=True)
        for a in python.select(".blog-list li > a.text-decoration-none")
    ]
    assert titles == ["Second Post", "First Post"]

    ada = _soup(out / "authors/ada/index.html")
    titles = [
        a.get_text(strip=True)
        for a in ada.select(".blog-list li > a.text-decoration-none")
    ]
    assert titles == ["First Post"]


def test_not_found_page_links_home(built_blog: tuple[Path, BuildResult]) -> None:
    out, _ = built_blog
    soup = _soup(out / "404.html")
    assert soup.find("a", string="home")["href"] == "/"
    assert "404 Not Found" in soup.title.get_text()


def test_feed_lists_dated_documents_newest_first(
    built_blog: tuple[Path, BuildResult],
) -> None:
    out, _ = built_blog
    channel = ET.fromstring((out / "rss.xml").read_bytes()).find("channel")
    assert channel is not None
    assert channel.findtext("title") == "Example"
    items = channel.findall("item")
    assert [item.findtext("title") for item in items] == ["Second Post", "First Post"]
    first = items[1]
    assert first.findtext("link") == "https://example.com:8443/blog/first-post/"
    assert first.findtext("description") == "The very first post."
    assert first.findtext("pubDate") == "Fri, 05 Jan 2024 00:00:00 +0000"
    enclosure = first.find("enclosure")
    assert enclosure is not None
    assert enclosure.get("url") == "https://example.com:8443/images/hero.png"
    assert enclosure.get("type") == "image/png"
    assert items[0].find("enclosure") is None


def test_base_path_mounts_every_link(blog_site: Path) -> None:
    _build(blog_site, base_path="/sub")
    out = blog_site.parent / "public"
    soup = _soup(out / "blog/first-post/index.html")
    menu = [a["href"] for a in soup.select("nav .nav-link")]
    assert menu == ["/sub/", "/sub/blog/", "/sub/"]
    assert soup.select_one("a.navbar-brand")["href"] == "/sub/"
    assert soup.find("a", string="home")["href"] == "/sub/"
    stylesheets = [link["href"] for link in soup.find_all("link", rel="stylesheet")]
    assert stylesheets == ["/sub/css/bootstrap.min.css"]
    hero = soup.find("img", alt="featured image")
    assert hero is not None
    assert hero["src"] == "/sub/images/hero.png"
    assert soup.select_one(".author-line a")["href"] == "/sub/authors/ada/"

    not_found = _soup(out / "404.html")
    assert not_found.find("a", string="home")["href"] == "/sub/"

    channel = ET.fromstring((out / "rss.xml").read_bytes()).find("channel")
    links = [item.findtext("link") for item in channel.findall("item")]
    assert links[1] == "https://example.com:8443/sub/blog/first-post/"


def test_colliding_slugs_last_write_wins(site_tree: WriteTree) -> None:
    root = site_tree(
        {
            "config.yaml": "website:\n  name: Clash\n",
            "blog/a.md": "---\ntitle: Same\n---\nFrom A\n",
            "blog/b.md": "---\ntitle: Same\n---\nFrom B\n",
        }
    )
    _build(root / "config.yaml")
    page = (root / "public/blog/same/index.html").read_text(encoding="utf-8")
    assert "From B" in page
    assert "From A" not in page


def test_output_directory_is_not_treated_as_content(site_tree: WriteTree) -> None:
    root = site_tree(
        {
            "config.yaml": "website:\n  name: Nested\n",
            "index.md": "Home\n",
            "public/stale.md": "Left over\n",
        }
    )
    _build(root / "config.yaml")
    assert (root / "public/index.html").is_file()
    assert not (root / "public/public").exists()


def test_cname_failure_becomes_warning(site_tree: WriteTree) -> None:
    root = site_tree(
        {
            "config.yaml": "website:\n  url: https://example.com\n",
            "index.md": "Home\n",
        }
    )
    (root / "public/CNAME").mkdir(parents=True)
    result = _build(root / "config.yaml")
    assert len(result.warnings) == 1
    assert "CNAME" in result.warnings[0]
    assert (root / "public/index.html").is_file()


def test_no_cname_without_site_url(site_tree: WriteTree) -> None:
    root = site_tree({"config.yaml": "website:\n  name: Local\n", "index.md": "Hi\n"})
    result = _build(root / "config.yaml")
    assert not (root / "public/CNAME").exists()
    assert result.warnings == []


@pytest.mark.parametrize(
    ("url", "expected"),
    [
        ("https://example.com", "example.com"),
        ("https://example.com:8443/path", "example.com"),
        ("http://sub.example.org/", "sub.example.org"),
        ("example.com", "example.com"),
        ("", ""),
    ],
)
def test_extract_domain(url: str, expected: str) -> None:
    assert extract_domain(url) == expected


def test_display_date() -> None:
    assert display_date(dt.date(2006, 1, 2)) == "Jan 2, 2006"
    assert display_date(dt.date(2024, 11, 30)) == "Nov 30, 2024"
    assert display_date(None) == ""
