"""Dataclasses making up the composed navigation model."""

from __future__ import annotations

import dataclasses as dc
import typing as typ

if typ.TYPE_CHECKING:
    from knowledge_site.content import Document


@dc.dataclass(frozen=True, slots=True)
class NavLink:
    """A resolved navbar or footer entry.

    Attributes
    ----------
    label : str
        Text shown to readers.
    href : str
        URL written into the page; internal targets carry the base URL.
    position : str
        ``"left"`` or ``"right"`` placement in the navbar.
    external : bool
        True when the target is passed through verbatim.
    route : str | None
        Site route of an internal target, used to mark the active entry.
    items : tuple[NavLink, ...]
        Children of a dropdown entry; empty for plain links.
    """

    label: str
    href: str
    position: str = "left"
    external: bool = False
    route: str | None = None
    items: tuple[NavLink, ...] = ()

    @property
    def is_dropdown(self) -> bool:
        """Return True when the entry groups other entries."""
        return bool(self.items)


@dc.dataclass(frozen=True, slots=True)
class FooterColumn:
    """Titled group of resolved footer links."""

    title: str
    links: tuple[NavLink, ...]


@dc.dataclass(frozen=True, slots=True)
class SidebarDoc:
    """Sidebar link to a document."""

    doc_id: str
    label: str
    route: str
    href: str


@dc.dataclass(frozen=True, slots=True)
class SidebarCategory:
    """Collapsible sidebar group mirroring a content subdirectory."""

    path: str
    label: str
    collapsed: bool
    collapsible: bool
    items: tuple[SidebarItem, ...]

    def contains(self, route: str) -> bool:
        """Return True when ``route`` is anywhere below this category."""
        for item in self.items:
            match item:
                case SidebarDoc(route=item_route) if item_route == route:
                    return True
                case SidebarCategory() if item.contains(route):
                    return True
        return False


SidebarItem = SidebarDoc | SidebarCategory


def flatten_sidebar(items: tuple[SidebarItem, ...]) -> list[SidebarDoc]:
    """Return the documents of a sidebar tree in reading order."""
    flat: list[SidebarDoc] = []
    for item in items:
        match item:
            case SidebarDoc():
                flat.append(item)
            case SidebarCategory():
                flat.extend(flatten_sidebar(item.items))
    return flat


@dc.dataclass(frozen=True, slots=True)
class NavigationModel:
    """Navbar, sidebar, and footer structure shared by every page.

    Attributes
    ----------
    navbar_left, navbar_right : tuple[NavLink, ...]
        Navbar entries in configuration order, split by placement.
    sidebar : tuple[SidebarItem, ...]
        Root level of the ordered sidebar tree.
    footer : tuple[FooterColumn, ...]
        Footer link groups with resolved URLs.
    documents : tuple[Document, ...]
        Documents in sidebar order.
    routes : frozenset[str]
        Every route that resolves to a page, including the homepage.
    hero_links : tuple[NavLink, ...]
        Resolved homepage call-to-action links; empty when a document owns
        the root route and no hero is rendered.
    sources : dict[str, str]
        Document source path to route, for rewriting relative ``.md`` links.
    """

    navbar_left: tuple[NavLink, ...]
    navbar_right: tuple[NavLink, ...]
    sidebar: tuple[SidebarItem, ...]
    footer: tuple[FooterColumn, ...]
    documents: tuple[Document, ...]
    routes: frozenset[str]
    hero_links: tuple[NavLink, ...] = ()
    sources: dict[str, str] = dc.field(default_factory=dict, compare=False)

    def flattened(self) -> list[SidebarDoc]:
        """Return sidebar documents in reading order."""
        return flatten_sidebar(self.sidebar)

    def neighbours(self, route: str) -> tuple[SidebarDoc | None, SidebarDoc | None]:
        """Return the previous and next documents around ``route``."""
        flat = self.flattened()
        for idx, item in enumerate(flat):
            if item.route == route:
                previous = flat[idx - 1] if idx > 0 else None
                following = flat[idx + 1] if idx + 1 < len(flat) else None
                return previous, following
        return None, None

    def hrefs(self) -> frozenset[str]:
        """Return every URL the navbar, footer, sidebar, and hero write into pages."""
        pending = [*self.navbar_left, *self.navbar_right, *self.hero_links]
        for column in self.footer:
            pending.extend(column.links)
        found = {doc.href for doc in self.flattened()}
        while pending:
            link = pending.pop()
            found.add(link.href)
            pending.extend(link.items)
        return frozenset(found)

    def route_for_source(self, source_path: str) -> str | None:
        """Return the route of the document stored at ``source_path``."""
        return self.sources.get(source_path)


__all__ = [
    "FooterColumn",
    "NavLink",
    "NavigationModel",
    "SidebarCategory",
    "SidebarDoc",
    "SidebarItem",
    "flatten_sidebar",
]
