"""Dataclasses describing the discovered content tree."""

from __future__ import annotations

import dataclasses as dc
import typing as typ

if typ.TYPE_CHECKING:
    from pathlib import Path


@dc.dataclass(frozen=True, slots=True)
class Document:
    """One unit of published content (a page of notes).

    Attributes
    ----------
    source_path : str
        POSIX path of the source file relative to the docs directory.
    file : Path
        Absolute path of the source file; relative assets resolve against it.
    doc_id : str
        Stable identifier (source path without extension, ``id`` applied).
    route : str
        Site route such as ``/docs/ownership``, without the base URL.
    title : str
        Page title from front matter, the leading ``# H1``, or the file name.
    sidebar_label : str
        Label used in the sidebar; defaults to ``title``.
    position : float | None
        Explicit ``sidebar_position``, or ``None`` when omitted.
    category : str | None
        POSIX path of the containing directory, ``None`` at the docs root.
    description : str | None
        Optional summary used for the ``<meta name="description">`` tag.
    body : str
        Markdown body with front matter, leading H1, and MDX imports removed.
    discovery_index : int
        Position of the file in lexicographic discovery order.
    hide_table_of_contents : bool
        Suppress the right-hand table of contents on this page.
    front_matter : dict[str, object]
        The raw front matter mapping, for templates that need extra keys.
    """

    source_path: str
    file: Path
    doc_id: str
    route: str
    title: str
    sidebar_label: str
    position: float | None
    category: str | None
    description: str | None
    body: str
    discovery_index: int
    hide_table_of_contents: bool = False
    front_matter: dict[str, object] = dc.field(default_factory=dict, compare=False)


@dc.dataclass(frozen=True, slots=True)
class Category:
    """A content subdirectory shown as a collapsible sidebar group."""

    path: str
    label: str
    position: float | None = None
    collapsed: bool = True
    collapsible: bool = True


@dc.dataclass(frozen=True, slots=True)
class ContentSet:
    """Documents in discovery order plus the categories that contain them."""

    documents: tuple[Document, ...]
    categories: dict[str, Category] = dc.field(default_factory=dict, compare=False)

    def by_route(self) -> dict[str, Document]:
        """Return documents keyed by route."""
        return {doc.route: doc for doc in self.documents}


__all__ = ["Category", "ContentSet", "Document"]
