"""Resolve links and images inside a document body against the site routes."""

from __future__ import annotations

import posixpath
import typing as typ
from urllib.parse import quote, unquote

from markdown.extensions import Extension
from markdown.treeprocessors import Treeprocessor

from knowledge_site.content.loader import CONTENT_SUFFIXES
from knowledge_site.errors import BrokenReference
from knowledge_site.navigation import (
    is_external,
    normalize_route,
    split_target,
    static_file_exists,
)

from .models import AssetCopy

if typ.TYPE_CHECKING:
    from pathlib import Path
    from xml.etree.ElementTree import Element

    from markdown import Markdown

    from knowledge_site.config import SiteConfig
    from knowledge_site.content import Document
    from knowledge_site.navigation import NavigationModel
else:  # pragma: no cover - type-checking fallback
    Markdown = typ.Any
    Element = typ.Any

DOC_ASSET_PREFIX = "assets/docs"


class DocumentLinkExtension(Extension):
    """Rewrite document links to site URLs and record what does not resolve.

    Relative links to other ``.md``/``.mdx`` files become the route of that
    document; relative images are scheduled for copying under
    ``assets/docs/``; absolute paths are checked against the routes and the
    static directory. Every internal target gains the base URL. After
    conversion :attr:`broken` and :attr:`assets` describe what was found.
    """

    def __init__(
        self, document: Document, navigation: NavigationModel, site: SiteConfig
    ) -> None:
        super().__init__()
        self.document = document
        self.navigation = navigation
        self.site = site
        self.broken: list[BrokenReference] = []
        self.assets: list[AssetCopy] = []

    def extendMarkdown(self, md: Markdown) -> None:  # type: ignore[override]  # noqa: N802
        """Register the link treeprocessor on the Markdown instance."""
        md.treeprocessors.register(
            DocumentLinkTreeprocessor(md, self), "knowledge_site_links", 15
        )

    def rewrite_link(self, target: str | None) -> str | None:
        """Return the site URL for an anchor target, or ``None`` to leave it."""
        if not target or target.startswith("#") or is_external(target):
            return None
        path, suffix = split_target(target)
        path = unquote(path)
        if not path:
            return None
        if path.startswith("/"):
            route = normalize_route(path, self.site.base_url)
            if route in self.navigation.routes or static_file_exists(
                self.site.static_dir, route
            ):
                return self._url(route) + suffix
            return self._broken(target)

        joined = self._join_source(path)
        if joined is None:
            return self._broken(target)
        if path.endswith(CONTENT_SUFFIXES):
            route = self.navigation.route_for_source(joined)
            if route is None:
                return self._broken(target)
            return self._url(route) + suffix
        if (self.document.file.parent / path).is_file():
            return self._asset_url(joined) + suffix
        route = posixpath.normpath(
            posixpath.join(posixpath.dirname(self.document.route), path)
        )
        if route in self.navigation.routes:
            return self._url(route) + suffix
        return self._broken(target)

    def rewrite_image(self, target: str | None) -> str | None:
        """Return the site URL for an image source, or ``None`` to leave it."""
        if not target or is_external(target) or target.startswith("data:"):
            return None
        path, _suffix = split_target(target)
        path = unquote(path)
        if path.startswith("/"):
            route = normalize_route(path, self.site.base_url)
            if static_file_exists(self.site.static_dir, route):
                return self._url(route)
            return self._broken(target, kind="asset")
        joined = self._join_source(path)
        if joined is None or not (self.document.file.parent / path).is_file():
            return self._broken(target, kind="asset")
        return self._asset_url(joined)

    def _join_source(self, path: str) -> str | None:
        """Join ``path`` onto the document directory; ``None`` if it escapes."""
        base_dir = posixpath.dirname(self.document.source_path)
        joined = posixpath.normpath(posixpath.join(base_dir, path))
        if joined == ".." or joined.startswith("../"):
            return None
        return joined

    def _asset_url(self, joined: str) -> str:
        output_path = f"{DOC_ASSET_PREFIX}/{joined}"
        self.assets.append(
            AssetCopy(
                source=self._docs_root() / joined,
                output_path=output_path,
            )
        )
        return self._url("/" + output_path)

    def _url(self, route: str) -> str:
        """Return the percent-encoded site URL for a decoded route."""
        return quote(self.site.url_for(route))

    def _docs_root(self) -> Path:
        depth = self.document.source_path.count("/") + 1
        return self.document.file.parents[depth - 1]

    def _broken(self, target: str, *, kind: str = "link") -> None:
        self.broken.append(
            BrokenReference(source=self.document.route, target=target, kind=kind)
        )


class DocumentLinkTreeprocessor(Treeprocessor):
    """Apply :class:`DocumentLinkExtension` rewrites to anchors and images."""

    def __init__(self, md: Markdown, extension: DocumentLinkExtension) -> None:
        super().__init__(md)
        self.extension = extension

    def run(self, root: Element) -> Element:  # pragma: no cover - Markdown API
        """Rewrite anchors and images in the parsed markdown tree."""
        for element in root.iter():
            match element.tag:
                case "a":
                    rewritten = self.extension.rewrite_link(element.get("href"))
                    if rewritten:
                        element.set("href", rewritten)
                case "img":
                    rewritten = self.extension.rewrite_image(element.get("src"))
                    if rewritten:
                        element.set("src", rewritten)
        return root


__all__ = ["DOC_ASSET_PREFIX", "DocumentLinkExtension", "DocumentLinkTreeprocessor"]
