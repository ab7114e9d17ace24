"""Utility helpers shared by the site configuration loader."""

from __future__ import annotations

import datetime as dt
import re
import typing as typ

from pygments.styles import get_style_by_name
from pygments.util import ClassNotFound

from .models import SiteConfigError

CAMEL_BOUNDARY = re.compile(r"(?<!^)(?=[A-Z])")
CSS_VARIABLE_NAME = re.compile(r"^[a-z][a-z0-9-]*$")


def _snake_case(key: str) -> str:
    return CAMEL_BOUNDARY.sub("_", key).lower()


def _normalize_keys(payload: typ.Mapping[str, typ.Any]) -> dict[str, typ.Any]:
    """Return ``payload`` with camelCase keys rewritten to snake_case."""
    return {_snake_case(str(key)): value for key, value in payload.items()}


def _mapping(value: object, where: str) -> dict[str, typ.Any]:
    """Return ``value`` as a snake_case keyed dict or raise ``SiteConfigError``."""
    match value:
        case None:
            return {}
        case dict():
            return _normalize_keys(value)
        case _:
            msg = f"'{where}' must be a mapping."
            raise SiteConfigError(msg)


def _sequence(value: object, where: str) -> list[typ.Any]:
    """Return ``value`` as a list or raise ``SiteConfigError``."""
    match value:
        case None:
            return []
        case list() | tuple():
            return list(value)
        case _:
            msg = f"'{where}' must be a list."
            raise SiteConfigError(msg)


def _optional_str(value: object | None) -> str | None:
    """Return a stripped string value or None when empty."""
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _required_str(payload: typ.Mapping[str, typ.Any], key: str, where: str) -> str:
    """Return the non-empty string stored under ``key``."""
    value = _optional_str(payload.get(key))
    if value is None:
        msg = f"'{where}' requires '{key}'."
        raise SiteConfigError(msg)
    return value


def _bool(value: object, where: str, *, default: bool) -> bool:
    """Interpret YAML booleans strictly; strings like ``"no"`` are rejected."""
    if value is None:
        return default
    if isinstance(value, bool):
        return value
    msg = f"'{where}' must be true or false, got {value!r}."
    raise SiteConfigError(msg)


def _choice(value: object, where: str, choices: tuple[str, ...], default: str) -> str:
    """Return ``value`` when it is one of ``choices``."""
    text = _optional_str(value) or default
    if text not in choices:
        allowed = ", ".join(choices)
        msg = f"'{where}' must be one of {allowed}, got {text!r}."
        raise SiteConfigError(msg)
    return text


def _normalize_base_url(value: object) -> str:
    """Return a base URL that starts and ends with a slash."""
    text = _optional_str(value) or "/"
    if not text.startswith("/"):
        msg = f"'base_url' must start with '/', got {text!r}."
        raise SiteConfigError(msg)
    if not text.endswith("/"):
        text = f"{text}/"
    return text


def _validate_pygments_style(name: str, where: str) -> str:
    """Ensure ``name`` refers to an installed Pygments style."""
    try:
        get_style_by_name(name)
    except ClassNotFound as exc:
        msg = f"'{where}' names unknown Pygments style {name!r}."
        raise SiteConfigError(msg) from exc
    return name


def _palette_entries(value: object, where: str) -> tuple[tuple[str, str], ...]:
    """Return sorted ``(css-variable, value)`` pairs for a palette mapping."""
    if value is None:
        return ()
    if not isinstance(value, dict):
        msg = f"'{where}' must be a mapping of colour names to values."
        raise SiteConfigError(msg)
    entries: list[tuple[str, str]] = []
    for key, colour in value.items():
        name = str(key).strip().replace("_", "-").lower()
        if not CSS_VARIABLE_NAME.match(name):
            msg = f"'{where}' has invalid colour name {key!r}."
            raise SiteConfigError(msg)
        text = _optional_str(colour)
        if text is None or any(char in text for char in ";{}<>"):
            msg = f"'{where}.{key}' has invalid colour value {colour!r}."
            raise SiteConfigError(msg)
        entries.append((name, text))
    return tuple(sorted(entries))


def _render_copyright(template: str, today: dt.date) -> str:
    """Substitute ``{year}`` in the copyright template with ``today.year``."""
    return template.replace("{year}", str(today.year)).strip()


__all__ = [
    "_bool",
    "_choice",
    "_mapping",
    "_normalize_base_url",
    "_normalize_keys",
    "_optional_str",
    "_palette_entries",
    "_render_copyright",
    "_required_str",
    "_sequence",
    "_validate_pygments_style",
]
