"""Render pages of the knowledge site into complete HTML documents.

:class:`PageRenderer` is a pure function of ``(page, navigation, site)``: it
reads templates and document assets but never the clock, so rendering the same
triple twice yields byte-identical HTML. Document pages go through the
Markdown pipeline in :mod:`knowledge_site.generator.renderer`; fixed layouts
(the homepage hero and the 404 page) render their own templates directly.

Example
-------
>>> from pathlib import Path
>>> from knowledge_site.config import load_site_config
>>> from knowledge_site.content import ContentLoader
>>> from knowledge_site.generator import GenericDocumentPage, PageRenderer
>>> from knowledge_site.navigation import NavigationComposer
>>> site = load_site_config(Path("site.yaml"))  # doctest: +SKIP
>>> content = ContentLoader(site.docs.path).load()  # doctest: +SKIP
>>> navigation = NavigationComposer(site).compose(content)  # doctest: +SKIP
>>> page = GenericDocumentPage(content.documents[0])  # doctest: +SKIP
>>> PageRenderer().render(page, navigation, site).output_path  # doctest: +SKIP
'docs/intro/index.html'
"""

from __future__ import annotations

import collections.abc as cabc
import json
import logging
import typing as typ
from pathlib import Path

from jinja2 import Environment, FileSystemLoader

from knowledge_site.navigation import (
    SidebarCategory,
    is_external,
    normalize_route,
    split_target,
)

from .link_rewriter import DocumentLinkExtension
from .models import (
    FixedLayoutPage,
    GenericDocumentPage,
    RenderedPage,
    output_path_for,
)
from .renderer import HtmlContentRenderer

if typ.TYPE_CHECKING:
    from knowledge_site.config import SiteConfig
    from knowledge_site.content import Document
    from knowledge_site.navigation import NavigationModel

    from .models import Page

logger = logging.getLogger(__name__)

SITE_CSS = "assets/site.css"
SITEMAP = "sitemap.xml"


class PageRenderer:
    """Turn pages into HTML using the packaged (or supplied) Jinja templates."""

    def __init__(self, *, templates_dir: Path | None = None) -> None:
        """Initialize the Jinja environment.

        Parameters
        ----------
        templates_dir : Path, optional
            Directory containing the ``*.jinja`` templates. Defaults to the
            templates shipped inside the package.
        """
        default_templates = Path(__file__).resolve().parents[1] / "templates"
        self.templates_dir = templates_dir or default_templates
        self.env = Environment(
            loader=FileSystemLoader(self.templates_dir),
            autoescape=True,
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=True,
        )
        self.env.tests["category"] = lambda item: isinstance(item, SidebarCategory)

    def render(
        self, page: Page, navigation: NavigationModel, site: SiteConfig
    ) -> RenderedPage:
        """Render ``page`` with the shared navigation chrome.

        Returns
        -------
        RenderedPage
            HTML plus the broken references and document assets discovered
            while converting the page body.
        """
        match page:
            case GenericDocumentPage(document=document):
                return self._render_document(document, navigation, site)
            case FixedLayoutPage():
                return self._render_fixed(page, navigation, site)
        msg = f"unsupported page type: {type(page).__name__}"
        raise TypeError(msg)

    def stylesheet(self, site: SiteConfig) -> str:
        """Return ``assets/site.css``: palette variables plus highlight styles."""
        renderer = HtmlContentRenderer(site.prism.theme, site.prism.dark_theme)
        return self.env.get_template("site.css.jinja").render(
            site=site, pygments_css=renderer.stylesheet
        )

    def sitemap(self, site: SiteConfig, routes: cabc.Iterable[str]) -> str:
        """Return ``sitemap.xml`` listing every route in sorted order."""
        origin = site.url.rstrip("/")
        urls = [origin + site.url_for(route) for route in sorted(routes)]
        return self.env.get_template("sitemap.jinja").render(urls=urls)

    def _render_document(
        self,
        document: Document,
        navigation: NavigationModel,
        site: SiteConfig,
    ) -> RenderedPage:
        links = DocumentLinkExtension(document, navigation, site)
        renderer = HtmlContentRenderer(
            site.prism.theme, site.prism.dark_theme, link_extension=links
        )
        result = renderer.convert(document.body)
        previous, following = navigation.neighbours(document.route)
        context = self._base_context(navigation, site, route=document.route)
        context.update(
            {
                "document": document,
                "content": result.html,
                "toc": () if document.hide_table_of_contents else result.toc,
                "previous": previous,
                "next": following,
                "html_title": f"{document.title} | {site.title}",
                "description": document.description or site.tagline,
            }
        )
        html = self.env.get_template("doc_page.jinja").render(**context)
        if links.broken:
            logger.debug(
                "%s: %d unresolved reference(s)", document.route, len(links.broken)
            )
        return RenderedPage(
            route=document.route,
            output_path=output_path_for(document.route),
            html=html,
            broken=tuple(links.broken),
            assets=tuple(dict.fromkeys(links.assets)),
        )

    def _render_fixed(
        self, page: FixedLayoutPage, navigation: NavigationModel, site: SiteConfig
    ) -> RenderedPage:
        context = self._base_context(navigation, site, route=page.route)
        context.update(
            {
                "page": page,
                "hero": site.hero,
                "html_title": page.title,
                "description": page.description or site.tagline,
            }
        )
        html = self.env.get_template(page.template).render(**context)
        return RenderedPage(
            route=page.route,
            output_path=page.output_name or output_path_for(page.route),
            html=html,
        )

    @staticmethod
    def _base_context(
        navigation: NavigationModel, site: SiteConfig, *, route: str
    ) -> dict[str, typ.Any]:
        theme = {
            "defaultMode": site.color_mode.default_mode,
            "respectPrefersColorScheme": site.color_mode.respect_prefers_color_scheme,
        }
        return {
            "site": site,
            "navigation": navigation,
            "active_route": route,
            "stylesheet_href": site.url_for("/" + SITE_CSS),
            "theme_json": json.dumps(theme, sort_keys=True),
            "href_for": lambda target: href_for(site, target),
        }


def href_for(site: SiteConfig, target: str) -> str:
    """Return the URL written for a configured target (base URL applied)."""
    if is_external(target):
        return target
    path, suffix = split_target(target)
    if not path:
        return target
    return site.url_for(normalize_route(path, site.base_url)) + suffix


__all__ = ["SITEMAP", "SITE_CSS", "PageRenderer", "href_for"]
