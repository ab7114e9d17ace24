"""Compose the navigation model from the site configuration and content set.

The composer merges the declarative navbar and footer entries from
:class:`~knowledge_site.config.SiteConfig` with the discovered documents. It
resolves internal targets to routes (prefixing the base URL), passes external
URLs through untouched, and orders the sidebar by explicit position with
lexicographic source path as the tie-breaker so repeated builds are identical.

Internal targets that do not resolve are broken references. Without a
collector the composer raises :class:`BrokenReferenceError` listing all of
them; with a :class:`ReferenceCollector` it records them and keeps going so the
site builder can report navigation and page errors together.
"""

from __future__ import annotations

import collections.abc as cabc
import logging
import posixpath
import typing as typ
from urllib.parse import urlsplit

from knowledge_site.content import Category, ContentSet, Document
from knowledge_site.errors import BrokenReference, ReferenceCollector

from .models import (
    FooterColumn,
    NavigationModel,
    NavLink,
    SidebarCategory,
    SidebarDoc,
    SidebarItem,
    flatten_sidebar,
)

if typ.TYPE_CHECKING:
    from pathlib import Path

    from knowledge_site.config import FooterLinkConfig, NavItemConfig, SiteConfig

logger = logging.getLogger(__name__)

HOME_ROUTE = "/"


def is_external(target: str) -> bool:
    """Return True for targets that carry a scheme or are protocol-relative."""
    return target.startswith("//") or bool(urlsplit(target).scheme)


def split_target(target: str) -> tuple[str, str]:
    """Split ``target`` into its path and the ``?query#fragment`` suffix."""
    cuts = [index for index in (target.find("?"), target.find("#")) if index != -1]
    cut = min(cuts, default=len(target))
    return target[:cut], target[cut:]


def normalize_route(path: str, base_url: str) -> str:
    """Map a site path (with or without the base URL) to a route."""
    if base_url != "/" and (path + "/").startswith(base_url):
        path = "/" + path[len(base_url) :]
    return posixpath.normpath("/" + path.lstrip("/"))


def static_file_exists(static_dir: Path, route: str) -> bool:
    """Return True when ``route`` names a file inside ``static_dir``."""
    relative = route.strip("/")
    return bool(relative) and (static_dir / relative).is_file()


class NavigationComposer:
    """Build a :class:`NavigationModel` for one site configuration."""

    def __init__(self, site: SiteConfig) -> None:
        self.site = site

    def compose(
        self,
        content: ContentSet | cabc.Sequence[Document],
        *,
        collector: ReferenceCollector | None = None,
    ) -> NavigationModel:
        """Return the navbar, footer, and ordered sidebar for ``content``.

        Parameters
        ----------
        content : ContentSet or sequence of Document
            Loaded documents; a bare sequence gets default categories.
        collector : ReferenceCollector, optional
            Receives broken references instead of raising immediately.

        Raises
        ------
        BrokenReferenceError
            When ``collector`` is omitted and a navbar, footer, or homepage
            call-to-action entry points at a route no document provides.
        """
        if isinstance(content, ContentSet):
            documents = content.documents
            categories = content.categories
        else:
            documents = tuple(content)
            categories = {}
        own_collector = collector is None
        sink = ReferenceCollector() if collector is None else collector

        routes = frozenset({HOME_ROUTE, *(doc.route for doc in documents)})
        navbar = tuple(
            self._nav_link(item, routes, sink) for item in self.site.navbar.items
        )
        footer = tuple(
            FooterColumn(
                title=group.title,
                links=tuple(
                    self._footer_link(link, routes, sink) for link in group.items
                ),
            )
            for group in self.site.footer.links
        )
        owns_root = any(doc.route == HOME_ROUTE for doc in documents)
        hero_links = () if owns_root else self._hero_links(routes, sink)
        sidebar = self._build_sidebar(documents, categories)
        by_route = {doc.route: doc for doc in documents}
        model = NavigationModel(
            navbar_left=tuple(link for link in navbar if link.position == "left"),
            navbar_right=tuple(link for link in navbar if link.position == "right"),
            sidebar=sidebar,
            footer=footer,
            documents=tuple(by_route[item.route] for item in flatten_sidebar(sidebar)),
            routes=routes,
            hero_links=hero_links,
            sources={doc.source_path: doc.route for doc in documents},
        )
        if own_collector:
            sink.raise_if_any()
        return model

    def resolve(
        self,
        target: str,
        routes: frozenset[str],
        *,
        source: str,
        label: str | None,
        collector: ReferenceCollector,
    ) -> tuple[str, str | None, bool]:
        """Return ``(href, route, external)`` for a configured link target."""
        if is_external(target):
            return target, None, True
        path, suffix = split_target(target)
        route = normalize_route(path or HOME_ROUTE, self.site.base_url)
        if route not in routes and not static_file_exists(self.site.static_dir, route):
            collector.add(BrokenReference(source=source, target=target, label=label))
        return self.site.url_for(route) + suffix, route, False

    def _nav_link(
        self,
        item: NavItemConfig,
        routes: frozenset[str],
        collector: ReferenceCollector,
    ) -> NavLink:
        """Resolve one navbar entry, recursing into dropdown children."""
        children = tuple(
            self._nav_link(child, routes, collector) for child in item.items
        )
        if item.to:
            href, route, external = self.resolve(
                item.to, routes, source="navbar", label=item.label, collector=collector
            )
        elif item.href:
            href, route, external = item.href, None, True
        else:
            href, route, external = "#", None, False
        return NavLink(
            label=item.label,
            href=href,
            position=item.position,
            external=external,
            route=route,
            items=children,
        )

    def _footer_link(
        self,
        link: FooterLinkConfig,
        routes: frozenset[str],
        collector: ReferenceCollector,
    ) -> NavLink:
        if link.to:
            href, route, external = self.resolve(
                link.to, routes, source="footer", label=link.label, collector=collector
            )
        else:
            href, route, external = link.target, None, True
        return NavLink(label=link.label, href=href, external=external, route=route)

    def _hero_links(
        self, routes: frozenset[str], collector: ReferenceCollector
    ) -> tuple[NavLink, ...]:
        """Resolve the homepage call-to-action targets."""
        hero = self.site.hero
        links: list[NavLink] = []
        for cta in (hero.primary_cta, hero.secondary_cta):
            if cta is None:
                continue
            href, route, external = self.resolve(
                cta.to, routes, source="homepage", label=cta.label, collector=collector
            )
            links.append(
                NavLink(label=cta.label, href=href, external=external, route=route)
            )
        return tuple(links)

    def _build_sidebar(
        self,
        documents: cabc.Sequence[Document],
        categories: cabc.Mapping[str, Category],
    ) -> tuple[SidebarItem, ...]:
        """Arrange documents into the ordered category tree."""
        children: dict[str, list[tuple[tuple[bool, float, str], SidebarItem]]] = {}
        category_paths: set[str] = set()
        for doc in documents:
            directory = doc.category or ""
            entry = SidebarDoc(
                doc_id=doc.doc_id,
                label=doc.sidebar_label,
                route=doc.route,
                href=self.site.url_for(doc.route),
            )
            children.setdefault(directory, []).append(
                (_sort_key(doc.position, doc.source_path), entry)
            )
            current = directory
            while current:
                category_paths.add(current)
                current = posixpath.dirname(current)

        def _build(directory: str) -> tuple[SidebarItem, ...]:
            entries = list(children.get(directory, []))
            for path in sorted(category_paths):
                if posixpath.dirname(path) != directory:
                    continue
                category = categories.get(path) or Category(
                    path=path, label=posixpath.basename(path)
                )
                node = SidebarCategory(
                    path=path,
                    label=category.label,
                    collapsed=category.collapsed,
                    collapsible=category.collapsible,
                    items=_build(path),
                )
                entries.append((_sort_key(category.position, path), node))
            _warn_on_shared_positions(directory, entries)
            entries.sort(key=lambda pair: pair[0])
            return tuple(item for _key, item in entries)

        return _build("")


def _sort_key(position: float | None, path: str) -> tuple[bool, float, str]:
    """Order positioned items first, then by position, then by path."""
    return (position is None, position if position is not None else 0.0, path)


def _warn_on_shared_positions(
    directory: str, entries: list[tuple[tuple[bool, float, str], SidebarItem]]
) -> None:
    """Log sections where two items declare the same explicit position."""
    seen: dict[float, str] = {}
    for (unpositioned, position, path), _item in sorted(entries, key=lambda p: p[0]):
        if unpositioned:
            continue
        if position in seen:
            logger.warning(
                "sidebar position %g in section '%s' is shared by '%s' and '%s'; "
                "ordering them by path",
                position,
                directory or "/",
                seen[position],
                path,
            )
            continue
        seen[position] = path


__all__ = [
    "HOME_ROUTE",
    "NavigationComposer",
    "is_external",
    "normalize_route",
    "split_target",
    "static_file_exists",
]
