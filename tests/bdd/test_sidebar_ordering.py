"""Behaviour tests for sidebar ordering inside a category.

The scenario in ``features/sidebar_ordering.feature`` writes a ``basics``
category whose files sort alphabetically in the opposite order to their
``sidebar_position`` values, builds the site, and checks both the rendered
sidebar and the previous/next links.
"""

from __future__ import annotations

import collections.abc as cabc
import typing as typ
from pathlib import Path

import pytest
from bs4 import BeautifulSoup
from pytest_bdd import given, scenarios, then, when

from knowledge_site.builder import SiteBuilder
from knowledge_site.config import load_site_config

FEATURE_FILE = (
    Path(__file__).resolve().parents[2] / "features" / "sidebar_ordering.feature"
)
scenarios(FEATURE_FILE)


@pytest.fixture
def scenario_state() -> dict[str, object]:
    """Return a mutable dict used to share scenario state across BDD steps."""
    return {}


@given(
    "a notebook whose basics category holds Ownership at position 2 and "
    "Variables at position 1"
)
def given_basics_category(
    site_factory: cabc.Callable[..., Path], scenario_state: dict[str, object]
) -> None:
    """Write a notebook with a positioned ``basics`` category."""
    scenario_state["config_path"] = site_factory(
        {
            "intro.md": "---\ntitle: Intro\nsidebar_position: 1\n---\nStart here.\n",
            "basics/_category_.json": '{"label": "Basics", "position": 2}',
            "basics/ownership.md": "---\ntitle: Ownership\nsidebar_position: 2\n---\n"
            "Moves and borrows.\n",
            "basics/variables.md": "---\ntitle: Variables\nsidebar_position: 1\n---\n"
            "Bindings.\n",
        }
    )


@when("I build the notebook")
def when_build(tmp_path: Path, scenario_state: dict[str, object]) -> None:
    """Build the notebook into a fresh output directory."""
    config_path = typ.cast("Path", scenario_state["config_path"])
    out = tmp_path / "out"
    SiteBuilder(load_site_config(config_path), output_dir=out).run()
    scenario_state["out"] = out


def _page(scenario_state: dict[str, object], relative: str) -> BeautifulSoup:
    out = typ.cast("Path", scenario_state["out"])
    return BeautifulSoup((out / relative).read_text(encoding="utf-8"), "html.parser")


@then("the sidebar lists Variables above Ownership")
def then_sidebar_order(scenario_state: dict[str, object]) -> None:
    """Verify the category lists its documents by position."""
    soup = _page(scenario_state, "docs/intro/index.html")
    category = soup.select_one("details.menu__details")
    assert category is not None, "expected the Basics category in the sidebar"
    assert category.select_one("summary").get_text() == "Basics"
    labels = [link.get_text() for link in category.select("a.menu__link")]
    assert labels == ["Variables", "Ownership"], (
        f"expected Variables above Ownership, got {labels!r}"
    )


@then("the Variables page links forward to Ownership")
def then_pagination(scenario_state: dict[str, object]) -> None:
    """Verify previous/next links follow the sidebar order."""
    soup = _page(scenario_state, "docs/basics/variables/index.html")
    previous = soup.select_one(".pagination-nav__link--prev")
    following = soup.select_one(".pagination-nav__link--next")
    assert previous is not None and following is not None
    assert previous["href"] == "/notes/docs/intro"
    assert following["href"] == "/notes/docs/basics/ownership"
    assert following.select_one(".pagination-nav__label").get_text() == "Ownership"
