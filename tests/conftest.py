"""Shared fixtures that build throwaway knowledge sites under ``tmp_path``.

``site_factory`` writes a ``site.yaml`` (a small base configuration merged with
per-test overrides), the requested documents under ``docs/`` and optional
static files, then returns the configuration path. ``load_site`` reads a
configuration with a fixed date and ``compose_site`` runs the loader and
composer over such a site so navigation tests can start from a
:class:`~knowledge_site.navigation.NavigationModel`.
"""

from __future__ import annotations

import collections.abc as cabc
import copy
import datetime as dt
import typing as typ
from pathlib import Path

import pytest
from ruamel.yaml import YAML

from knowledge_site.config import SiteConfig, load_site_config
from knowledge_site.content import ContentLoader, ContentSet
from knowledge_site.navigation import NavigationComposer, NavigationModel

FIXED_DAY = dt.date(2024, 5, 1)

BASE_CONFIG: dict[str, typ.Any] = {
    "title": "Test Notes",
    "tagline": "Notes kept for tests",
    "url": "https://example.test",
    "base_url": "/notes/",
    "homepage": {
        "primary_cta": {"label": "Start", "to": "/docs/intro"},
        "secondary_cta": None,
    },
    "theme": {
        "navbar": {
            "title": "Test Notes",
            "items": [{"label": "Start", "to": "/docs/intro"}],
        },
        "footer": {
            "links": [
                {
                    "title": "More",
                    "items": [{"label": "Rust", "href": "https://www.rust-lang.org/"}],
                }
            ],
            "copyright": "© {year} Tests",
        },
    },
}

DEFAULT_DOCS = {
    "intro.md": "---\ntitle: Intro\nsidebar_position: 1\n---\nWelcome to the notes.\n",
}

SiteFactory = cabc.Callable[..., Path]


def _merge(
    base: dict[str, typ.Any], overrides: dict[str, typ.Any]
) -> dict[str, typ.Any]:
    """Return ``base`` updated recursively with ``overrides`` (lists replace)."""
    merged = copy.deepcopy(base)
    for key, value in overrides.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def _write_yaml(data: object, path: Path) -> None:
    """Dump ``data`` as YAML with ruamel's safe dumper."""
    yaml = YAML(typ="safe")
    yaml.default_flow_style = False
    with path.open("w", encoding="utf-8") as handle:
        yaml.dump(data, handle)


@pytest.fixture
def site_factory(tmp_path: Path) -> SiteFactory:
    """Return a callable that writes a site tree and returns its config path."""

    def _factory(
        docs: dict[str, str] | None = None,
        *,
        config: dict[str, typ.Any] | None = None,
        static: dict[str, str] | None = None,
    ) -> Path:
        docs_dir = tmp_path / "docs"
        docs_dir.mkdir(exist_ok=True)
        for name, text in (DEFAULT_DOCS if docs is None else docs).items():
            target = docs_dir / name
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text(text, encoding="utf-8")
        for name, text in (static or {}).items():
            target = tmp_path / "static" / name
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text(text, encoding="utf-8")
        config_path = tmp_path / "site.yaml"
        _write_yaml(_merge(BASE_CONFIG, config or {}), config_path)
        return config_path

    return _factory


def _load_content(site: SiteConfig) -> ContentSet:
    return ContentLoader(site.docs.path, route_base=site.docs_route).load()


@pytest.fixture
def load_site() -> cabc.Callable[[Path], SiteConfig]:
    """Return a loader that reads a config with the fixed test date."""

    def _load(config_path: Path) -> SiteConfig:
        return load_site_config(config_path, today=FIXED_DAY)

    return _load


@pytest.fixture
def compose_site(
    load_site: cabc.Callable[[Path], SiteConfig],
) -> cabc.Callable[[Path], tuple[SiteConfig, ContentSet, NavigationModel]]:
    """Return a helper running the loader and composer over a site config."""

    def _compose(config_path: Path) -> tuple[SiteConfig, ContentSet, NavigationModel]:
        site = load_site(config_path)
        content = _load_content(site)
        return site, content, NavigationComposer(site).compose(content)

    return _compose
