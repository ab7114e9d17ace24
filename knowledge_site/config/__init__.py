"""Load and validate the site configuration YAML for knowledge site builds.

This subpackage parses the project's ``site.yaml`` file, accepts Docusaurus
style camelCase spellings alongside snake_case keys, resolves relative paths
against the file's directory, and produces frozen dataclasses
(:class:`SiteConfig`, :class:`NavbarConfig`, etc.) that the navigation
composer and page renderer consume. The primary entry point is
:func:`load_site_config`, which rejects missing or malformed settings with
:class:`SiteConfigError` before any content is read.

Examples
--------
>>> from pathlib import Path
>>> from knowledge_site.config import load_site_config
>>> site = load_site_config(Path("site.yaml"))  # doctest: +SKIP
>>> site.url_for("/docs/intro")  # doctest: +SKIP
'/rust-up-knowledge/docs/intro'
"""

from .loader import load_site_config
from .models import (
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

__all__ = [
    "AnnouncementBarConfig",
    "ColorModeConfig",
    "DocsConfig",
    "FooterConfig",
    "FooterLinkConfig",
    "FooterLinkGroupConfig",
    "HeroConfig",
    "HeroLinkConfig",
    "LocaleConfig",
    "LogoConfig",
    "NavItemConfig",
    "NavbarConfig",
    "PaletteConfig",
    "PrismConfig",
    "SiteConfig",
    "SiteConfigError",
    "StylesheetConfig",
    "load_site_config",
]
