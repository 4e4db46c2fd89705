"""Behaviour tests for highlighted code blocks.

These pytest-bdd scenarios prove that fenced code samples, including fences
indented inside list items, render as Pygments ``codehilite`` blocks in the
built pages and that the page carries the matching stylesheet.

Usage
-----
Run ``pytest tests/bdd/test_code_highlighting.py -v`` after installing the test
extra. The feature file ``code_highlighting.feature`` drives the scenario.
"""

from __future__ import annotations

import typing as typ
from pathlib import Path

import pytest
from bs4 import BeautifulSoup
from pytest_bdd import given, scenarios, then, when

from folio_pages.config import load_site_config
from folio_pages.generator import SiteBuilder

FEATURE_FILE = (
    Path(__file__).resolve().parents[2] / "features" / "code_highlighting.feature"
)
scenarios(FEATURE_FILE)


@pytest.fixture
def scenario_state() -> dict[str, object]:
    """Return a mutable dict used to share scenario state across BDD steps."""
    return {}


@given("a post with an indented fenced code block")
def given_post(tmp_path: Path, scenario_state: dict[str, object]) -> None:
    """Write a config and a post whose code fence is nested in a list."""
    (tmp_path / "config.yaml").write_text(
        "website:\n  name: Code\nbuild:\n  pygments_style: friendly\n",
        encoding="utf-8",
    )
    (tmp_path / "post.md").write_text(
        "---\n"
        "title: Code Sample\n"
        "---\n"
        "- **Example** shows a loop\n\n"
        "  ```python\n"
        "  for item in items:\n"
        "      print(item)\n"
        "  ```\n",
        encoding="utf-8",
    )
    scenario_state["config_path"] = tmp_path / "config.yaml"
    scenario_state["page"] = tmp_path / "public" / "code-sample" / "index.html"


@when("the site is built")
def when_built(scenario_state: dict[str, object]) -> None:
    """Run a full build for the scenario's config."""
    config = load_site_config(typ.cast("Path", scenario_state["config_path"]))
    SiteBuilder(config).run()
    page = typ.cast("Path", scenario_state["page"])
    scenario_state["soup"] = BeautifulSoup(
        page.read_text(encoding="utf-8"), "html.parser"
    )


@then("the post contains a highlighted code block")
def then_highlighted(scenario_state: dict[str, object]) -> None:
    """Assert the code block rendered through codehilite."""
    soup = typ.cast("BeautifulSoup", scenario_state["soup"])
    block = soup.select_one("div.codehilite")
    assert block is not None, "expected a codehilite block"
    assert "print(item)" in block.get_text()
    assert block.select("span"), "expected Pygments token spans"


@then("the page embeds the Pygments stylesheet")
def then_stylesheet(scenario_state: dict[str, object]) -> None:
    """Assert the page carries CSS rules for the codehilite class."""
    soup = typ.cast("BeautifulSoup", scenario_state["soup"])
    styles = " ".join(style.get_text() for style in soup.find_all("style"))
    assert ".codehilite" in styles
