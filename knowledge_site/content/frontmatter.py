r"""Split YAML front matter from Markdown content files.

A content file may begin with a header block delimited by ``---`` lines. The
block is parsed with ruamel.yaml's safe loader (YAML 1.2) and must be a
mapping. Problems are reported as :class:`ContentParseError` carrying the
file path and the 1-based line the problem was found on.

Example
-------
>>> from pathlib import Path
>>> parsed = split_front_matter("---\ntitle: Ownership\n---\nBody\n", Path("a.md"))
>>> parsed.metadata["title"], parsed.body, parsed.body_line
('Ownership', 'Body\n', 4)
"""

from __future__ import annotations

import dataclasses as dc
import re
import typing as typ

from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

from knowledge_site.errors import ContentParseError

if typ.TYPE_CHECKING:
    from pathlib import Path

DELIMITER = "---"
KEY_PATTERN = r"^{key}\s*:"


@dc.dataclass(frozen=True, slots=True)
class ParsedContent:
    """Front matter mapping and the body that follows it.

    Attributes
    ----------
    metadata : dict[str, object]
        Parsed header mapping; empty when the file has no header block.
    body : str
        Text following the closing delimiter.
    body_line : int
        1-based line number on which ``body`` starts in the source file.
    header_lines : tuple[str, ...]
        Raw header lines, kept so field errors can point at the right line.
    """

    metadata: dict[str, object]
    body: str
    body_line: int
    header_lines: tuple[str, ...] = ()

    def line_of(self, key: str) -> int:
        """Return the source line declaring ``key``, or the header's first line."""
        pattern = re.compile(KEY_PATTERN.format(key=re.escape(key)))
        for offset, line in enumerate(self.header_lines):
            if pattern.match(line):
                return offset + 2
        return 1


def _yaml_error_line(exc: YAMLError) -> int:
    """Return the 0-based header line a YAML error points at, if known."""
    for attr in ("problem_mark", "context_mark"):
        mark = getattr(exc, attr, None)
        if mark is not None:
            return int(mark.line)
    return 0


def split_front_matter(text: str, path: Path) -> ParsedContent:
    """Return the front matter and body of ``text``.

    Parameters
    ----------
    text : str
        Full content of the file.
    path : Path
        Path used in error messages.

    Returns
    -------
    ParsedContent
        Parsed metadata and body. Files without a leading delimiter are
        returned with empty metadata and the whole text as body.

    Raises
    ------
    ContentParseError
        If the header block is never closed, is not valid YAML, or does not
        contain a mapping.
    """
    text = text.removeprefix("\ufeff")
    lines = text.splitlines(keepends=True)
    if not lines or lines[0].rstrip() != DELIMITER:
        return ParsedContent(metadata={}, body=text, body_line=1)

    closing = next(
        (idx for idx in range(1, len(lines)) if lines[idx].rstrip() == DELIMITER),
        None,
    )
    if closing is None:
        raise ContentParseError(path, 1, "front matter block is never closed")

    header_lines = tuple(line.rstrip("\r\n") for line in lines[1:closing])
    header = "\n".join(header_lines)
    body = "".join(lines[closing + 1 :])
    loader = YAML(typ="safe")
    loader.version = (1, 2)
    try:
        loaded = loader.load(header) if header.strip() else None
    except YAMLError as exc:
        line = _yaml_error_line(exc) + 2
        problem = getattr(exc, "problem", None) or "invalid YAML"
        msg = f"malformed front matter: {problem}"
        raise ContentParseError(path, line, msg) from exc

    match loaded:
        case None:
            metadata: dict[str, object] = {}
        case dict():
            metadata = {str(key): value for key, value in loaded.items()}
        case _:
            raise ContentParseError(path, 2, "front matter must be a mapping of keys")

    return ParsedContent(
        metadata=metadata,
        body=body,
        body_line=closing + 2,
        header_lines=header_lines,
    )


__all__ = ["ParsedContent", "split_front_matter"]
