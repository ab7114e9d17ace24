"""Discover Markdown/MDX documents and category metadata under a docs root.

:class:`ContentLoader` walks the docs directory in lexicographic path order,
splits each file's front matter from its body, validates the metadata fields
the navigation composer relies on, and resolves every document's route. Any
problem is recorded against the offending file; once the walk finishes, all
problems are raised together as :class:`ContentLoadError` so a single build
reports every malformed file.

Example
-------
>>> from pathlib import Path
>>> from knowledge_site.content import load_documents
>>> docs = load_documents(Path("docs"))  # doctest: +SKIP
>>> [doc.route for doc in docs][:2]  # doctest: +SKIP
['/docs/intro', '/docs/cheatsheet']
"""

from __future__ import annotations

import json
import logging
import posixpath
import re
import typing as typ
from pathlib import Path

from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

from knowledge_site.errors import ContentLoadError, ContentParseError, SiteConfigError

from .frontmatter import ParsedContent, split_front_matter
from .models import Category, ContentSet, Document

logger = logging.getLogger(__name__)

CONTENT_SUFFIXES = (".md", ".mdx")
CATEGORY_FILES = ("_category_.json", "_category_.yml", "_category_.yaml")
INDEX_STEMS = ("index", "readme")
STRING_FIELDS = ("title", "sidebar_label", "slug", "description", "id")
BOOL_FIELDS = ("draft", "hide_table_of_contents")
H1_PATTERN = re.compile(r"^#[ \t]+(.+?)[ \t]*#*[ \t]*$")
MDX_STATEMENT_PATTERN = re.compile(r"^(?:import|export)\s")
FENCE_PATTERN = re.compile(r"^\s*(`{3,}|~{3,})")


def _humanize(name: str) -> str:
    """Turn a file or directory name into a readable label."""
    words = re.sub(r"[-_]+", " ", name).strip()
    return words[:1].upper() + words[1:] if words else name


def _is_hidden(relative: Path) -> bool:
    return any(part.startswith(("_", ".")) for part in relative.parts)


def _strip_mdx_statements(body: str) -> str:
    """Drop top-level MDX ``import``/``export`` lines outside code fences."""
    kept: list[str] = []
    fence: str | None = None
    for line in body.splitlines(keepends=True):
        match = FENCE_PATTERN.match(line)
        if match:
            marker = match.group(1)
            if fence is None:
                fence = marker[0]
            elif marker[0] == fence:
                fence = None
        elif fence is None and MDX_STATEMENT_PATTERN.match(line):
            continue
        kept.append(line)
    return "".join(kept)


def _extract_heading(body: str) -> tuple[str | None, str]:
    """Return the leading ``# H1`` text and the body without it."""
    lines = body.splitlines(keepends=True)
    for idx, line in enumerate(lines):
        if not line.strip():
            continue
        match = H1_PATTERN.match(line.rstrip("\r\n"))
        if match:
            return match.group(1).strip(), "".join(lines[idx + 1 :]).lstrip("\r\n")
        break
    return None, body


def _normalize_slug(slug: str) -> str:
    """Collapse duplicate slashes and drop trailing ones (``/`` stays ``""``)."""
    normalized = posixpath.normpath("/" + slug.strip().strip("/"))
    return "" if normalized == "/" else normalized


class ContentLoader:
    """Load every document and category below ``docs_dir``."""

    def __init__(self, docs_dir: Path, *, route_base: str = "/docs") -> None:
        """Initialize the loader.

        Parameters
        ----------
        docs_dir : Path
            Root directory of the content tree.
        route_base : str, optional
            Route prefix documents are served under; ``""`` serves them from
            the site root.
        """
        self.docs_dir = docs_dir
        self.route_base = "/" + route_base.strip("/") if route_base.strip("/") else ""

    def load(self) -> ContentSet:
        """Return all non-draft documents and their categories.

        Raises
        ------
        SiteConfigError
            If ``docs_dir`` does not exist.
        ContentLoadError
            If any content or category file is malformed, or two documents
            resolve to the same route.
        """
        if not self.docs_dir.is_dir():
            msg = f"Content directory '{self.docs_dir}' does not exist."
            raise SiteConfigError(msg)

        errors: list[ContentParseError] = []
        documents: list[Document] = []
        routes: dict[str, str] = {}
        for index, path in enumerate(self._discover()):
            try:
                document = self._load_document(path, index)
            except ContentParseError as exc:
                errors.append(exc)
                continue
            if document is None:
                continue
            previous = routes.get(document.route)
            if previous is not None:
                errors.append(
                    ContentParseError(
                        path,
                        1,
                        f"route '{document.route}' is already used by '{previous}'",
                    )
                )
                continue
            routes[document.route] = document.source_path
            documents.append(document)

        categories: dict[str, Category] = {}
        for directory in self._category_dirs(documents):
            try:
                categories[directory] = self._load_category(directory)
            except ContentParseError as exc:
                errors.append(exc)

        if errors:
            raise ContentLoadError(errors)
        logger.info(
            "loaded %d documents in %d categories from %s",
            len(documents),
            len(categories),
            self.docs_dir,
        )
        return ContentSet(documents=tuple(documents), categories=categories)

    def _discover(self) -> list[Path]:
        """Return content files sorted by their POSIX relative path."""
        found = [
            path
            for path in self.docs_dir.rglob("*")
            if path.is_file()
            and path.suffix.lower() in CONTENT_SUFFIXES
            and not _is_hidden(path.relative_to(self.docs_dir))
        ]
        return sorted(
            found, key=lambda item: item.relative_to(self.docs_dir).as_posix()
        )

    @staticmethod
    def _category_dirs(documents: list[Document]) -> list[str]:
        """Return every directory (and ancestor) that contains a document."""
        dirs: set[str] = set()
        for doc in documents:
            current = doc.category
            while current:
                dirs.add(current)
                parent = posixpath.dirname(current)
                current = parent or None
        return sorted(dirs)

    def _load_document(self, path: Path, index: int) -> Document | None:
        """Parse one content file, returning ``None`` for drafts."""
        try:
            text = path.read_text(encoding="utf-8")
        except UnicodeDecodeError as exc:
            raise ContentParseError(path, 1, "file is not valid UTF-8") from exc
        parsed = split_front_matter(text, path)
        meta = self._validate_metadata(parsed, path)
        if meta.get("draft"):
            logger.debug("skipping draft %s", path)
            return None

        relative = path.relative_to(self.docs_dir)
        source_path = relative.as_posix()
        directory = posixpath.dirname(source_path)
        stem = typ.cast("str | None", meta.get("id")) or relative.stem
        doc_id = posixpath.join(directory, stem) if directory else stem

        body = parsed.body
        if path.suffix.lower() == ".mdx":
            body = _strip_mdx_statements(body)
        heading, body = _extract_heading(body)
        title = typ.cast("str | None", meta.get("title")) or heading or _humanize(stem)

        return Document(
            source_path=source_path,
            file=path,
            doc_id=doc_id,
            route=self._route(directory, relative.stem, meta.get("slug")),
            title=title,
            sidebar_label=typ.cast("str | None", meta.get("sidebar_label")) or title,
            position=typ.cast("float | None", meta.get("sidebar_position")),
            category=directory or None,
            description=typ.cast("str | None", meta.get("description")),
            body=body,
            discovery_index=index,
            hide_table_of_contents=bool(meta.get("hide_table_of_contents", False)),
            front_matter=dict(parsed.metadata),
        )

    def _route(self, directory: str, stem: str, slug: object) -> str:
        """Resolve the route from the file location or a ``slug`` override."""
        if isinstance(slug, str):
            if slug.startswith("/"):
                relative = _normalize_slug(slug)
            else:
                relative = _normalize_slug(posixpath.join(directory, slug))
        elif stem.lower() in INDEX_STEMS:
            relative = _normalize_slug(directory)
        else:
            relative = _normalize_slug(posixpath.join(directory, stem))
        return (self.route_base + relative) or "/"

    @staticmethod
    def _validate_metadata(parsed: ParsedContent, path: Path) -> dict[str, object]:
        """Check the types of front matter fields used by the build."""
        meta = dict(parsed.metadata)
        position = meta.get("sidebar_position")
        if position is not None:
            if isinstance(position, bool) or not isinstance(position, int | float):
                raise ContentParseError(
                    path,
                    parsed.line_of("sidebar_position"),
                    f"sidebar_position must be a number, got {position!r}",
                )
            meta["sidebar_position"] = float(position)
        for key in STRING_FIELDS:
            value = meta.get(key)
            if value is None:
                continue
            if isinstance(value, bool) or not isinstance(value, str | int | float):
                raise ContentParseError(
                    path, parsed.line_of(key), f"{key} must be a string, got {value!r}"
                )
            meta[key] = str(value).strip() or None
        for key in BOOL_FIELDS:
            value = meta.get(key)
            if value is not None and not isinstance(value, bool):
                raise ContentParseError(
                    path, parsed.line_of(key), f"{key} must be true or false"
                )
        return meta

    def _load_category(self, directory: str) -> Category:
        """Read ``_category_`` metadata for ``directory`` or build defaults."""
        folder = self.docs_dir / directory
        label = _humanize(posixpath.basename(directory))
        for name in CATEGORY_FILES:
            candidate = folder / name
            if candidate.is_file():
                data = _read_category_file(candidate)
                return _build_category(directory, label, data, candidate)
        return Category(path=directory, label=label)


def _read_category_file(path: Path) -> dict[str, object]:
    """Parse a JSON or YAML category file into a mapping."""
    text = path.read_text(encoding="utf-8")
    if path.suffix == ".json":
        try:
            loaded = json.loads(text) if text.strip() else {}
        except json.JSONDecodeError as exc:
            msg = f"malformed JSON: {exc.msg}"
            raise ContentParseError(path, exc.lineno, msg) from exc
    else:
        loader = YAML(typ="safe")
        loader.version = (1, 2)
        try:
            loaded = loader.load(text) or {}
        except YAMLError as exc:
            mark = getattr(exc, "problem_mark", None)
            line = int(mark.line) + 1 if mark is not None else 1
            raise ContentParseError(path, line, "malformed YAML") from exc
    if not isinstance(loaded, dict):
        raise ContentParseError(path, 1, "category file must contain a mapping")
    return loaded


def _build_category(
    directory: str, default_label: str, data: dict[str, object], path: Path
) -> Category:
    """Validate category fields and build a :class:`Category`."""
    position = data.get("position")
    if position is not None and (
        isinstance(position, bool) or not isinstance(position, int | float)
    ):
        raise ContentParseError(path, 1, f"position must be a number, got {position!r}")
    for key in ("collapsed", "collapsible"):
        value = data.get(key)
        if value is not None and not isinstance(value, bool):
            raise ContentParseError(path, 1, f"{key} must be true or false")
    label = data.get("label")
    return Category(
        path=directory,
        label=str(label).strip() if label else default_label,
        position=float(position) if position is not None else None,
        collapsed=typ.cast("bool", data.get("collapsed", True)),
        collapsible=typ.cast("bool", data.get("collapsible", True)),
    )


def load_documents(docs_dir: Path, *, route_base: str = "/docs") -> list[Document]:
    """Return the documents under ``docs_dir`` in discovery order."""
    return list(ContentLoader(docs_dir, route_base=route_base).load().documents)


__all__ = ["ContentLoader", "load_documents"]
