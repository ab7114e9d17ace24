"""Typed dataclasses describing the knowledge site configuration."""

from __future__ import annotations

import dataclasses as dc
from pathlib import Path

from knowledge_site.errors import SiteConfigError

NAV_POSITIONS = ("left", "right")
FOOTER_STYLES = ("light", "dark")
COLOR_MODES = ("light", "dark")


@dc.dataclass(frozen=True, slots=True)
class LocaleConfig:
    """Locale metadata; only ``default_locale`` affects rendering (``<html lang>``)."""

    default_locale: str = "en"
    locales: tuple[str, ...] = ("en",)


@dc.dataclass(frozen=True, slots=True)
class StylesheetConfig:
    """External stylesheet linked from every page head."""

    href: str
    type: str = "text/css"


@dc.dataclass(frozen=True, slots=True)
class AnnouncementBarConfig:
    """Banner rendered above the navbar on every page.

    ``content`` is trusted HTML taken verbatim from the configuration file.
    """

    id: str
    content: str
    background_color: str = "#ffffff"
    text_color: str = "#000000"
    is_closeable: bool = True


@dc.dataclass(frozen=True, slots=True)
class LogoConfig:
    """Navbar logo image, relative to the static directory."""

    src: str
    alt: str = ""


@dc.dataclass(frozen=True, slots=True)
class NavItemConfig:
    """Navbar entry: internal link, external link, or dropdown submenu."""

    label: str
    position: str = "left"
    to: str | None = None
    href: str | None = None
    items: tuple[NavItemConfig, ...] = ()

    @property
    def target(self) -> str | None:
        """Return the configured link target, preferring ``to``."""
        return self.to or self.href


@dc.dataclass(frozen=True, slots=True)
class NavbarConfig:
    """Top navigation bar settings."""

    title: str
    logo: LogoConfig | None = None
    hide_on_scroll: bool = False
    items: tuple[NavItemConfig, ...] = ()


@dc.dataclass(frozen=True, slots=True)
class FooterLinkConfig:
    """Footer hyperlink metadata."""

    label: str
    to: str | None = None
    href: str | None = None

    @property
    def target(self) -> str:
        """Return the configured link target, preferring ``to``."""
        return self.to or self.href or ""


@dc.dataclass(frozen=True, slots=True)
class FooterLinkGroupConfig:
    """Titled column of footer links."""

    title: str
    items: tuple[FooterLinkConfig, ...]


@dc.dataclass(frozen=True, slots=True)
class FooterConfig:
    """Footer style, link groups, and resolved copyright HTML."""

    style: str = "dark"
    links: tuple[FooterLinkGroupConfig, ...] = ()
    copyright: str = ""


@dc.dataclass(frozen=True, slots=True)
class ColorModeConfig:
    """Light/dark mode behaviour of the rendered site."""

    default_mode: str = "light"
    respect_prefers_color_scheme: bool = False
    disable_switch: bool = False


@dc.dataclass(frozen=True, slots=True)
class PaletteConfig:
    """CSS custom properties emitted for the light and dark themes."""

    light: tuple[tuple[str, str], ...] = ()
    dark: tuple[tuple[str, str], ...] = ()


@dc.dataclass(frozen=True, slots=True)
class PrismConfig:
    """Pygments style pair used for code blocks in light and dark mode."""

    theme: str = "default"
    dark_theme: str = "dracula"


@dc.dataclass(frozen=True, slots=True)
class DocsConfig:
    """Location of the content tree and the URL segment it is served under."""

    path: Path = Path("docs")
    route_base_path: str = "docs"


@dc.dataclass(frozen=True, slots=True)
class HeroLinkConfig:
    """Call-to-action link in the homepage hero."""

    label: str
    to: str


@dc.dataclass(frozen=True, slots=True)
class HeroConfig:
    """Copy shown by the fixed-layout homepage."""

    title: str
    subtitle: str
    description: str
    logo: str | None
    primary_cta: HeroLinkConfig
    secondary_lede: str
    secondary_cta: HeroLinkConfig | None = None


@dc.dataclass(frozen=True, slots=True)
class SiteConfig:
    """Single immutable record of site-wide presentation settings."""

    title: str
    tagline: str
    url: str
    base_url: str
    navbar: NavbarConfig
    footer: FooterConfig
    hero: HeroConfig
    favicon: str | None = None
    organization_name: str | None = None
    project_name: str | None = None
    i18n: LocaleConfig = dc.field(default_factory=LocaleConfig)
    stylesheets: tuple[StylesheetConfig, ...] = ()
    announcement_bar: AnnouncementBarConfig | None = None
    color_mode: ColorModeConfig = dc.field(default_factory=ColorModeConfig)
    palette: PaletteConfig = dc.field(default_factory=PaletteConfig)
    prism: PrismConfig = dc.field(default_factory=PrismConfig)
    docs: DocsConfig = dc.field(default_factory=DocsConfig)
    static_dir: Path = Path("static")
    output_dir: Path = Path("build")

    def url_for(self, route: str) -> str:
        """Return the site-absolute URL for a route such as ``/docs/intro``."""
        return self.base_url + route.lstrip("/")

    @property
    def docs_route(self) -> str:
        """Return the route prefix documents are served under (``/docs``)."""
        segment = self.docs.route_base_path.strip("/")
        return f"/{segment}" if segment else ""


__all__ = [
    "COLOR_MODES",
    "FOOTER_STYLES",
    "NAV_POSITIONS",
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
]
