"""Load site configuration YAML into typed dataclasses."""

from __future__ import annotations

import datetime as dt
import logging
from pathlib import Path

from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

from .helpers import (
    _bool,
    _choice,
    _mapping,
    _normalize_base_url,
    _optional_str,
    _palette_entries,
    _render_copyright,
    _required_str,
    _sequence,
    _validate_pygments_style,
)
from .models import (
    COLOR_MODES,
    FOOTER_STYLES,
    NAV_POSITIONS,
    AnnouncementBarConfig,
    ColorModeConfig,
    DocsConfig,
    FooterConfig,
    FooterLinkConfig,
    FooterLinkGroupConfig,
    HeroConfig,
    HeroLinkConfig,
    LocaleConfig,
    LogoConfig,
    NavbarConfig,
    NavItemConfig,
    PaletteConfig,
    PrismConfig,
    SiteConfig,
    SiteConfigError,
    StylesheetConfig,
)

logger = logging.getLogger(__name__)

DEFAULT_HERO_TITLE = "Quick refresher for busy engineers"
DEFAULT_HERO_SUBTITLE = "A giant, collapsible Rust Cheatsheet for fast recall"
DEFAULT_HERO_DESCRIPTION = "A living Rust Cheatsheet built from the Rust Book (2021)."
DEFAULT_HERO_CTA = {"label": "Start reading now →", "to": "/docs/intro"}
DEFAULT_HERO_SECONDARY_LEDE = "Or jump straight to the"
DEFAULT_HERO_SECONDARY_CTA = {"label": "full Cheatsheet", "to": "/docs/cheatsheet"}


def load_site_config(path: Path, *, today: dt.date | None = None) -> SiteConfig:
    """Load the YAML file describing the site and validate every section.

    Parameters
    ----------
    path : Path
        Filesystem path to the site configuration file (usually ``site.yaml``).
        Relative ``docs.path``, ``static_dir`` and ``output_dir`` values are
        resolved against the directory containing this file.
    today : datetime.date, optional
        Date used to resolve ``{year}`` in the footer copyright. Defaults to
        the current UTC date; tests pass a fixed date.

    Returns
    -------
    SiteConfig
        Frozen configuration record consumed by the navigation composer and
        the page renderer.

    Raises
    ------
    FileNotFoundError
        If the configuration file does not exist at ``path``.
    SiteConfigError
        If the YAML cannot be parsed, the top-level structure is not a mapping,
        or a required field is missing or malformed.

    Examples
    --------
    >>> from pathlib import Path
    >>> from knowledge_site.config import load_site_config
    >>> site = load_site_config(Path("site.yaml"))  # doctest: +SKIP
    >>> site.base_url  # doctest: +SKIP
    '/rust-up-knowledge/'
    """
    if not path.exists():
        msg = f"Configuration file '{path}' not found."
        raise FileNotFoundError(msg)

    loader = YAML(typ="safe")
    loader.version = (1, 2)
    try:
        with path.open("r", encoding="utf-8") as handle:
            loaded = loader.load(handle) or {}
    except YAMLError as exc:
        msg = f"Configuration file '{path}' is not valid YAML: {exc}"
        raise SiteConfigError(msg) from exc
    if not isinstance(loaded, dict):
        msg = "Top-level YAML structure must be a mapping."
        raise SiteConfigError(msg)

    raw = _mapping(loaded, "site")
    root = path.resolve().parent
    current = today or dt.datetime.now(dt.UTC).date()

    title = _required_str(raw, "title", "site")
    url = _required_str(raw, "url", "site").rstrip("/")
    base_url = _normalize_base_url(raw.get("base_url"))
    theme = _mapping(raw.get("theme") or raw.get("theme_config"), "theme")

    site = SiteConfig(
        title=title,
        tagline=_optional_str(raw.get("tagline")) or "",
        url=url,
        base_url=base_url,
        favicon=_optional_str(raw.get("favicon")),
        organization_name=_optional_str(raw.get("organization_name")),
        project_name=_optional_str(raw.get("project_name")),
        i18n=_build_locale_config(raw.get("i18n")),
        stylesheets=_build_stylesheets(raw.get("stylesheets")),
        announcement_bar=_build_announcement_bar(theme.get("announcement_bar")),
        navbar=_build_navbar_config(theme.get("navbar"), default_title=title),
        footer=_build_footer_config(theme.get("footer"), today=current),
        color_mode=_build_color_mode(theme.get("color_mode")),
        palette=_build_palette(theme.get("palette")),
        prism=_build_prism_config(theme.get("prism")),
        hero=_build_hero_config(raw.get("homepage")),
        docs=_build_docs_config(raw.get("docs"), root=root),
        static_dir=_resolve_path(root, raw.get("static_dir"), "static"),
        output_dir=_resolve_path(root, raw.get("output_dir"), "build"),
    )
    logger.debug("loaded site config %r from %s", site.title, path)
    return site


def _resolve_path(root: Path, value: object, default: str) -> Path:
    """Return ``value`` (or ``default``) as a path anchored at ``root``."""
    candidate = Path(_optional_str(value) or default)
    if candidate.is_absolute():
        return candidate
    return root / candidate


def _build_locale_config(payload: object) -> LocaleConfig:
    """Build the locale list and check the default locale is part of it."""
    data = _mapping(payload, "i18n")
    default_locale = _optional_str(data.get("default_locale")) or "en"
    locales = tuple(
        str(locale).strip()
        for locale in _sequence(data.get("locales"), "i18n.locales")
        if str(locale).strip()
    ) or (default_locale,)
    if default_locale not in locales:
        msg = (
            f"'i18n.default_locale' {default_locale!r} is not listed in "
            f"'i18n.locales' ({', '.join(locales)})."
        )
        raise SiteConfigError(msg)
    return LocaleConfig(default_locale=default_locale, locales=locales)


def _build_stylesheets(entries: object) -> tuple[StylesheetConfig, ...]:
    """Build the list of external stylesheets."""
    sheets: list[StylesheetConfig] = []
    for entry in _sequence(entries, "stylesheets"):
        match entry:
            case str() as href:
                sheets.append(StylesheetConfig(href=href))
            case dict():
                data = _mapping(entry, "stylesheets[]")
                sheets.append(
                    StylesheetConfig(
                        href=_required_str(data, "href", "stylesheets[]"),
                        type=_optional_str(data.get("type")) or "text/css",
                    )
                )
            case _:
                msg = "Stylesheet entries must be strings or mappings."
                raise SiteConfigError(msg)
    return tuple(sheets)


def _build_announcement_bar(payload: object) -> AnnouncementBarConfig | None:
    """Build the announcement bar, or ``None`` when it is not configured."""
    if payload is None:
        return None
    data = _mapping(payload, "announcement_bar")
    return AnnouncementBarConfig(
        id=_required_str(data, "id", "announcement_bar"),
        content=_required_str(data, "content", "announcement_bar"),
        background_color=_optional_str(data.get("background_color")) or "#ffffff",
        text_color=_optional_str(data.get("text_color")) or "#000000",
        is_closeable=_bool(
            data.get("is_closeable"), "announcement_bar.is_closeable", default=True
        ),
    )


def _build_nav_item(payload: object, where: str) -> NavItemConfig:
    """Build one navbar entry, recursing into dropdown ``items``."""
    data = _mapping(payload, where)
    label = _required_str(data, "label", where)
    to = _optional_str(data.get("to"))
    href = _optional_str(data.get("href"))
    children = tuple(
        _build_nav_item(child, f"{where}.items[{index}]")
        for index, child in enumerate(_sequence(data.get("items"), f"{where}.items"))
    )
    if not (to or href or children):
        msg = f"Navbar entry '{label}' needs 'to', 'href', or 'items'."
        raise SiteConfigError(msg)
    return NavItemConfig(
        label=label,
        position=_choice(
            data.get("position"), f"{where}.position", NAV_POSITIONS, "left"
        ),
        to=to,
        href=href,
        items=children,
    )


def _build_navbar_config(payload: object, *, default_title: str) -> NavbarConfig:
    """Build the navbar, defaulting its title to the site title."""
    data = _mapping(payload, "navbar")
    logo_raw = data.get("logo")
    logo = None
    if logo_raw is not None:
        logo_data = _mapping(logo_raw, "navbar.logo")
        logo = LogoConfig(
            src=_required_str(logo_data, "src", "navbar.logo"),
            alt=_optional_str(logo_data.get("alt")) or "",
        )
    items = tuple(
        _build_nav_item(entry, f"navbar.items[{index}]")
        for index, entry in enumerate(_sequence(data.get("items"), "navbar.items"))
    )
    return NavbarConfig(
        title=_optional_str(data.get("title")) or default_title,
        logo=logo,
        hide_on_scroll=_bool(
            data.get("hide_on_scroll"), "navbar.hide_on_scroll", default=False
        ),
        items=items,
    )


def _build_footer_config(payload: object, *, today: dt.date) -> FooterConfig:
    """Build footer link groups and resolve the copyright year."""
    data = _mapping(payload, "footer")
    groups: list[FooterLinkGroupConfig] = []
    for index, group in enumerate(_sequence(data.get("links"), "footer.links")):
        where = f"footer.links[{index}]"
        group_data = _mapping(group, where)
        links: list[FooterLinkConfig] = []
        for item in _sequence(group_data.get("items"), f"{where}.items"):
            item_data = _mapping(item, f"{where}.items[]")
            link = FooterLinkConfig(
                label=_required_str(item_data, "label", f"{where}.items[]"),
                to=_optional_str(item_data.get("to")),
                href=_optional_str(item_data.get("href")),
            )
            if not link.target:
                msg = f"Footer link '{link.label}' needs 'to' or 'href'."
                raise SiteConfigError(msg)
            links.append(link)
        groups.append(
            FooterLinkGroupConfig(
                title=_optional_str(group_data.get("title")) or "",
                items=tuple(links),
            )
        )
    return FooterConfig(
        style=_choice(data.get("style"), "footer.style", FOOTER_STYLES, "dark"),
        links=tuple(groups),
        copyright=_render_copyright(str(data.get("copyright") or ""), today),
    )


def _build_color_mode(payload: object) -> ColorModeConfig:
    data = _mapping(payload, "color_mode")
    return ColorModeConfig(
        default_mode=_choice(
            data.get("default_mode"), "color_mode.default_mode", COLOR_MODES, "light"
        ),
        respect_prefers_color_scheme=_bool(
            data.get("respect_prefers_color_scheme"),
            "color_mode.respect_prefers_color_scheme",
            default=False,
        ),
        disable_switch=_bool(
            data.get("disable_switch"), "color_mode.disable_switch", default=False
        ),
    )


def _build_palette(payload: object) -> PaletteConfig:
    data = _mapping(payload, "palette")
    return PaletteConfig(
        light=_palette_entries(data.get("light"), "palette.light"),
        dark=_palette_entries(data.get("dark"), "palette.dark"),
    )


def _build_prism_config(payload: object) -> PrismConfig:
    """Build the highlight style pair, rejecting unknown Pygments styles."""
    data = _mapping(payload, "prism")
    base = PrismConfig()
    theme = _optional_str(data.get("theme")) or base.theme
    dark_theme = _optional_str(data.get("dark_theme")) or base.dark_theme
    return PrismConfig(
        theme=_validate_pygments_style(theme, "prism.theme"),
        dark_theme=_validate_pygments_style(dark_theme, "prism.dark_theme"),
    )


def _build_hero_link(payload: object, where: str) -> HeroLinkConfig:
    data = _mapping(payload, where)
    return HeroLinkConfig(
        label=_required_str(data, "label", where),
        to=_required_str(data, "to", where),
    )


def _build_hero_config(payload: object) -> HeroConfig:
    """Build the homepage hero copy, falling back to the notebook defaults."""
    data = _mapping(payload, "homepage")
    secondary_raw = data.get("secondary_cta", DEFAULT_HERO_SECONDARY_CTA)
    return HeroConfig(
        title=_optional_str(data.get("title")) or DEFAULT_HERO_TITLE,
        subtitle=_optional_str(data.get("subtitle")) or DEFAULT_HERO_SUBTITLE,
        description=_optional_str(data.get("description")) or DEFAULT_HERO_DESCRIPTION,
        logo=_optional_str(data.get("logo")),
        primary_cta=_build_hero_link(
            data.get("primary_cta") or DEFAULT_HERO_CTA, "homepage.primary_cta"
        ),
        secondary_lede=_optional_str(data.get("secondary_lede"))
        or DEFAULT_HERO_SECONDARY_LEDE,
        secondary_cta=(
            _build_hero_link(secondary_raw, "homepage.secondary_cta")
            if secondary_raw
            else None
        ),
    )


def _build_docs_config(payload: object, *, root: Path) -> DocsConfig:
    data = _mapping(payload, "docs")
    route_base_path = str(data.get("route_base_path", "docs") or "").strip("/")
    return DocsConfig(
        path=_resolve_path(root, data.get("path"), "docs"),
        route_base_path=route_base_path,
    )


__all__ = ["load_site_config"]
