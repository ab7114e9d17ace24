"""Fatal build errors raised by the knowledge site pipeline.

Every error that aborts a build derives from :class:`SiteBuildError`, which
exposes :meth:`SiteBuildError.problems` so the CLI can print an aggregated list
instead of a single traceback. Configuration errors surface before any content
is read; content and reference errors collect every problem found in a pass.

Examples
--------
>>> from knowledge_site.errors import BrokenReference, BrokenReferenceError
>>> err = BrokenReferenceError(
...     [BrokenReference(source="navbar", target="/docs/missing-page", label="Docs")]
... )
>>> err.problems()
["navbar: entry 'Docs' links to missing target '/docs/missing-page'"]
"""

from __future__ import annotations

import dataclasses as dc
import typing as typ

if typ.TYPE_CHECKING:
    import collections.abc as cabc
    from pathlib import Path


class SiteBuildError(Exception):
    """Base class for errors that abort a site build."""

    def problems(self) -> list[str]:
        """Return human-readable descriptions of every problem found."""
        return [str(self)]


class SiteConfigError(SiteBuildError, ValueError):
    """Raised when the site configuration is invalid or incomplete."""


class ContentParseError(SiteBuildError, ValueError):
    """Raised when a content file or category file cannot be parsed.

    Attributes
    ----------
    path : Path
        Path of the offending file.
    line : int
        1-based line number the problem was detected on.
    reason : str
        Description of what is wrong with the file.
    """

    def __init__(self, path: Path, line: int, reason: str) -> None:
        self.path = path
        self.line = line
        self.reason = reason
        super().__init__(f"{path}:{line}: {reason}")


class ContentLoadError(SiteBuildError):
    """Raised when one or more content files failed to load."""

    def __init__(self, errors: cabc.Sequence[ContentParseError]) -> None:
        self.errors = list(errors)
        noun = "error" if len(self.errors) == 1 else "errors"
        super().__init__(f"{len(self.errors)} content {noun} found")

    def problems(self) -> list[str]:
        """Return one line per failed file."""
        return [str(error) for error in self.errors]


@dc.dataclass(frozen=True, slots=True)
class BrokenReference:
    """A link or asset reference that does not resolve.

    Attributes
    ----------
    source : str
        Where the reference was found (``navbar``, ``footer`` or a page route).
    target : str
        The unresolved link target or asset path, verbatim.
    label : str | None
        Label of the navigation entry, when the reference came from one.
    kind : str
        ``"link"`` for page links or ``"asset"`` for static files.
    """

    source: str
    target: str
    label: str | None = None
    kind: str = "link"

    def describe(self) -> str:
        """Return a one-line description naming the source and the target."""
        noun = "asset" if self.kind == "asset" else "target"
        if self.label:
            return (
                f"{self.source}: entry '{self.label}' links to missing "
                f"{noun} '{self.target}'"
            )
        return f"{self.source}: missing {noun} '{self.target}'"


class BrokenReferenceError(SiteBuildError):
    """Raised when navigation, page bodies, or assets reference missing targets."""

    def __init__(self, references: cabc.Iterable[BrokenReference]) -> None:
        self.references = list(references)
        noun = "reference" if len(self.references) == 1 else "references"
        summary = "; ".join(ref.describe() for ref in self.references)
        super().__init__(f"{len(self.references)} broken {noun}: {summary}")

    def problems(self) -> list[str]:
        """Return one line per broken reference."""
        return [ref.describe() for ref in self.references]


class ReferenceCollector:
    """Accumulate broken references across build stages."""

    def __init__(self) -> None:
        self._references: list[BrokenReference] = []
        self._seen: set[BrokenReference] = set()

    def __len__(self) -> int:
        return len(self._references)

    def add(self, reference: BrokenReference) -> None:
        """Record ``reference`` once, keeping first-seen order."""
        if reference in self._seen:
            return
        self._seen.add(reference)
        self._references.append(reference)

    def extend(self, references: cabc.Iterable[BrokenReference]) -> None:
        """Record every reference in ``references``."""
        for reference in references:
            self.add(reference)

    @property
    def references(self) -> list[BrokenReference]:
        """Return the recorded references in discovery order."""
        return list(self._references)

    def raise_if_any(self) -> None:
        """Raise :class:`BrokenReferenceError` when anything was recorded."""
        if self._references:
            raise BrokenReferenceError(self._references)


__all__ = [
    "BrokenReference",
    "BrokenReferenceError",
    "ContentLoadError",
    "ContentParseError",
    "ReferenceCollector",
    "SiteBuildError",
    "SiteConfigError",
]
