"""Page variants and render results shared by the page generation pipeline."""

from __future__ import annotations

import dataclasses as dc
import typing as typ

if typ.TYPE_CHECKING:
    from pathlib import Path

    from knowledge_site.content import Document
    from knowledge_site.errors import BrokenReference


@dc.dataclass(frozen=True, slots=True)
class GenericDocumentPage:
    """A page rendered from a content document through the Markdown pipeline."""

    document: Document

    @property
    def route(self) -> str:
        """Return the document route."""
        return self.document.route


@dc.dataclass(frozen=True, slots=True)
class FixedLayoutPage:
    """A hard-coded layout (homepage hero, 404) that bypasses the document pipeline.

    Attributes
    ----------
    route : str
        Route the page is served under.
    template : str
        Jinja template rendering the whole page body.
    title : str
        Text used in the ``<title>`` element.
    description : str
        ``<meta name="description">`` content.
    output_name : str | None
        Explicit output file name relative to the output root; derived from
        ``route`` when ``None``.
    """

    route: str
    template: str
    title: str
    description: str = ""
    output_name: str | None = None


Page = GenericDocumentPage | FixedLayoutPage


@dc.dataclass(frozen=True, slots=True)
class AssetCopy:
    """A document-relative asset to copy into the output tree."""

    source: Path
    output_path: str


@dc.dataclass(frozen=True, slots=True)
class TocEntry:
    """Table-of-contents entry for a ``##``/``###`` heading."""

    level: int
    anchor: str
    label: str


@dc.dataclass(frozen=True, slots=True)
class RenderedPage:
    """The HTML of one page plus everything discovered while rendering it.

    Attributes
    ----------
    route : str
        Route of the rendered page.
    output_path : str
        POSIX path of the HTML file relative to the output root.
    html : str
        Complete HTML document.
    broken : tuple[BrokenReference, ...]
        Links and images in the Markdown body that did not resolve.
    assets : tuple[AssetCopy, ...]
        Document-relative files that must be copied next to the output.
    """

    route: str
    output_path: str
    html: str
    broken: tuple[BrokenReference, ...] = ()
    assets: tuple[AssetCopy, ...] = ()


def output_path_for(route: str) -> str:
    """Return the HTML file serving ``route`` (``/docs/a`` -> ``docs/a/index.html``)."""
    stripped = route.strip("/")
    return f"{stripped}/index.html" if stripped else "index.html"


__all__ = [
    "AssetCopy",
    "FixedLayoutPage",
    "GenericDocumentPage",
    "Page",
    "RenderedPage",
    "TocEntry",
    "output_path_for",
]
