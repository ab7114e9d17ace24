"""Behaviour tests for navbar entries that point at missing pages.

The scenario drives the ``build`` command exactly as a reader of the CLI would
and checks that the error names the unresolved target and that no output
directory appears.
"""

from __future__ import annotations

import collections.abc as cabc
import typing as typ
from pathlib import Path

import pytest
from pytest_bdd import given, parsers, scenarios, then, when

from knowledge_site import cli

FEATURE_FILE = (
    Path(__file__).resolve().parents[2] / "features" / "broken_navigation.feature"
)
scenarios(FEATURE_FILE)


@pytest.fixture
def scenario_state() -> dict[str, object]:
    """Return a mutable dict used to share scenario state across BDD steps."""
    return {}


@given(parsers.parse('a notebook whose navbar links to "{target}"'))
def given_broken_navbar(
    target: str,
    site_factory: cabc.Callable[..., Path],
    scenario_state: dict[str, object],
) -> None:
    """Write a notebook with one valid and one dangling navbar entry."""
    scenario_state["config_path"] = site_factory(
        config={
            "theme": {
                "navbar": {
                    "items": [
                        {"label": "Start", "to": "/docs/intro"},
                        {"label": "Docs", "to": target},
                    ]
                }
            }
        }
    )


@when("I try to build the notebook")
def when_try_build(
    tmp_path: Path,
    scenario_state: dict[str, object],
    capsys: pytest.CaptureFixture[str],
) -> None:
    """Run ``build`` and capture its exit status and stderr."""
    out = tmp_path / "out"
    config_path = typ.cast("Path", scenario_state["config_path"])
    with pytest.raises(SystemExit) as excinfo:
        cli.build(config=config_path, output_dir=out)
    scenario_state["out"] = out
    scenario_state["code"] = excinfo.value.code
    scenario_state["stderr"] = capsys.readouterr().err


@then(parsers.parse('the build fails with an error naming "{target}"'))
def then_error_names_target(target: str, scenario_state: dict[str, object]) -> None:
    """Verify the exit status and the reported target."""
    assert scenario_state["code"] == 1
    stderr = typ.cast("str", scenario_state["stderr"])
    assert stderr.strip() == f"navbar: entry 'Docs' links to missing target '{target}'"


@then("no output directory is written")
def then_nothing_written(scenario_state: dict[str, object]) -> None:
    """Verify the failed build left nothing behind."""
    out = typ.cast("Path", scenario_state["out"])
    assert not out.exists()
    leftovers = [p for p in out.parent.iterdir() if p.name.startswith(".knowledge-site-")]
    assert not leftovers
