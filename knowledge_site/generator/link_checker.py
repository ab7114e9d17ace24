"""Verify that every internal ``href``/``src`` in rendered pages resolves."""

from __future__ import annotations

import collections.abc as cabc
import posixpath
import typing as typ
from html.parser import HTMLParser
from urllib.parse import unquote, urljoin

from knowledge_site.errors import BrokenReference
from knowledge_site.navigation import is_external, split_target

if typ.TYPE_CHECKING:
    from knowledge_site.config import SiteConfig

CHECKED_ATTRIBUTES = {"a": "href", "img": "src", "link": "href", "script": "src"}
ASSET_TAGS = frozenset({"img", "link", "script"})
IGNORED_PREFIXES = ("#", "mailto:", "tel:", "data:", "javascript:")


class _ReferenceParser(HTMLParser):
    """Collect link targets from anchors, images, stylesheets, and scripts."""

    def __init__(self) -> None:
        super().__init__(convert_charrefs=True)
        self.targets: list[tuple[str, str]] = []

    def handle_starttag(
        self, tag: str, attrs: list[tuple[str, str | None]]
    ) -> None:
        attribute = CHECKED_ATTRIBUTES.get(tag)
        if attribute is None:
            return
        for name, value in attrs:
            if name == attribute and value:
                self.targets.append((tag, value))


class LinkChecker:
    """Check rendered HTML against the routes and files of one build.

    Parameters
    ----------
    site : SiteConfig
        Supplies the base URL every internal target must live under.
    routes : Iterable[str]
        Routes that produce a page.
    files : Iterable[str]
        POSIX paths, relative to the output root, of every non-page file the
        build writes (static files, copied assets, generated CSS).
    skip : Iterable[str], optional
        URLs already validated elsewhere (navigation entries), never re-reported.
    """

    def __init__(
        self,
        site: SiteConfig,
        routes: cabc.Iterable[str],
        files: cabc.Iterable[str],
        *,
        skip: cabc.Iterable[str] = (),
    ) -> None:
        self.site = site
        self.routes = frozenset(routes)
        self.files = frozenset(files)
        self.skip = frozenset(skip)

    def check(self, route: str, html: str) -> list[BrokenReference]:
        """Return references in ``html`` (served at ``route``) that do not resolve."""
        parser = _ReferenceParser()
        parser.feed(html)
        parser.close()
        page_url = self.site.url_for(route)
        broken: list[BrokenReference] = []
        seen: set[str] = set()
        for tag, target in parser.targets:
            if target in seen or target in self.skip:
                continue
            seen.add(target)
            if self._resolves(page_url, target):
                continue
            kind = "asset" if tag in ASSET_TAGS else "link"
            broken.append(BrokenReference(source=route, target=target, kind=kind))
        return broken

    def _resolves(self, page_url: str, target: str) -> bool:
        if target.startswith(IGNORED_PREFIXES) or is_external(target):
            return True
        path, _suffix = split_target(target)
        if not path:
            return True
        absolute = posixpath.normpath(unquote(urljoin(page_url, path)))
        base = self.site.base_url
        if absolute + "/" == base:
            absolute = base
        if not absolute.startswith(base):
            return False
        relative = absolute[len(base) :].strip("/")
        if relative in self.files:
            return True
        return "/" + relative in self.routes


__all__ = ["LinkChecker"]
