"""Fixed-layout pages: the homepage hero and the 404 page.

These pages are not backed by content documents. The homepage carries the
hero copy from :class:`~knowledge_site.config.HeroConfig` and is skipped when
a document already claims the ``/`` route (for example a docs-only site whose
intro uses ``slug: /``).

>>> from knowledge_site.homepage import NOT_FOUND_PAGE
>>> NOT_FOUND_PAGE.output_name
'404.html'
"""

from __future__ import annotations

import logging
import typing as typ

from .generator import FixedLayoutPage
from .navigation import HOME_ROUTE

if typ.TYPE_CHECKING:
    from .config import SiteConfig
    from .navigation import NavigationModel

logger = logging.getLogger(__name__)

NOT_FOUND_ROUTE = "/404"
NOT_FOUND_PAGE = FixedLayoutPage(
    route=NOT_FOUND_ROUTE,
    template="not_found.jinja",
    title="Page Not Found",
    output_name="404.html",
)


def home_page(site: SiteConfig) -> FixedLayoutPage:
    """Return the hero homepage for ``site``."""
    return FixedLayoutPage(
        route=HOME_ROUTE,
        template="home_page.jinja",
        title=site.title,
        description=site.hero.description,
    )


def fixed_pages(
    site: SiteConfig, navigation: NavigationModel
) -> list[FixedLayoutPage]:
    """Return the fixed-layout pages to render alongside the documents."""
    pages: list[FixedLayoutPage] = []
    if any(doc.route == HOME_ROUTE for doc in navigation.documents):
        logger.info("a document is served at '/'; skipping the hero homepage")
    else:
        pages.append(home_page(site))
    pages.append(NOT_FOUND_PAGE)
    return pages


__all__ = ["NOT_FOUND_PAGE", "NOT_FOUND_ROUTE", "fixed_pages", "home_page"]
