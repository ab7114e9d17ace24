"""Utilities for rendering markdown and syntax-highlighted code snippets."""

from __future__ import annotations

import dataclasses as dc
import re
import typing as typ
from html import escape

from markdown import Markdown
from pygments.formatters.html import HtmlFormatter

from .models import TocEntry

if typ.TYPE_CHECKING:
    from markdown.extensions import Extension
else:  # pragma: no cover - type-checking fallback
    Extension = typ.Any

CODE_BLOCK_PATTERN = re.compile(
    r"^(?P<fence>`{3,}|~{3,})(?P<lang>[A-Za-z0-9_+#.-]+)?[^\n]*\n"
    r"(?P<body>.*?)^(?P=fence)[ \t]*$",
    re.DOTALL | re.MULTILINE,
)
FENCED_INDENT_PATTERN = re.compile(r"^[ ]{1,3}([`~]{3,})", re.MULTILINE)
FENCE_OPEN_PATTERN = re.compile(
    r"^(?P<fence>`{3,}|~{3,})"
    r"(?P<lang>[A-Za-z0-9_+#.-]+)?(?P<extras>,[^\s{]*)?(?P<meta>[^\r\n]*)$",
    re.MULTILINE,
)
HIGHLIGHT_RANGE_PATTERN = re.compile(r"\{([\d,\s-]+)\}")
TITLE_PATTERN = re.compile(r"""title=(?P<quote>["'])(?P<title>.*?)(?P=quote)""")
DETAILS_OPEN_PATTERN = re.compile(
    r"^(?P<indent>[ ]*)<details(?![^>]*\bmarkdown=)(?P<attrs>[^>]*)>", re.MULTILINE
)
ADMONITION_PATTERN = re.compile(r"^:::(?P<kind>[a-z]+)(?:[ \t]+(?P<title>.+?))?[ \t]*$")
ADMONITION_CLOSE = ":::"
CODEHILITE_OPEN_TAG = re.compile(r'<div class="codehilite">')


@dc.dataclass(frozen=True, slots=True)
class MarkdownResult:
    """Rendered HTML plus the headings collected for the table of contents."""

    html: str
    toc: tuple[TocEntry, ...] = ()


def _expand_ranges(ranges: str) -> list[int]:
    """Expand ``"1,3-5"`` into ``[1, 3, 4, 5]``."""
    lines: list[int] = []
    for chunk in ranges.split(","):
        part = chunk.strip()
        if not part:
            continue
        if "-" in part:
            start, _, end = part.partition("-")
            if start.strip().isdigit() and end.strip().isdigit():
                lines.extend(range(int(start), int(end) + 1))
        elif part.isdigit():
            lines.append(int(part))
    return lines


class HtmlContentRenderer:
    """Render markdown and code snippets with a light/dark highlight pair."""

    def __init__(
        self,
        light_style: str = "default",
        dark_style: str = "dracula",
        link_extension: Extension | None = None,
    ) -> None:
        """Initialize a renderer with a Pygments style pair and link extension.

        Parameters
        ----------
        light_style : str, optional
            Pygments style used when the page is in light mode.
        dark_style : str, optional
            Pygments style used when the page is in dark mode.
        link_extension : Extension, optional
            Markdown extension used to resolve links and images; pass ``None``
            to leave them untouched.
        """
        self.light_style = light_style
        self.dark_style = dark_style
        self._light_formatter = HtmlFormatter(style=light_style, cssclass="codehilite")
        self._dark_formatter = HtmlFormatter(style=dark_style, cssclass="codehilite")
        self._link_extension = link_extension

    @property
    def stylesheet(self) -> str:
        """Return highlight CSS scoped to ``data-theme`` on the root element."""
        light = self._light_formatter.get_style_defs(
            "html[data-theme='light'] .codehilite"
        )
        dark = self._dark_formatter.get_style_defs(
            "html[data-theme='dark'] .codehilite"
        )
        return f"{light}\n{dark}\n"

    def markdown(self, text: str) -> str:
        """Render markdown into HTML using the configured extensions."""
        return self.convert(text).html

    def convert(self, text: str) -> MarkdownResult:
        """Render markdown and collect ``##``/``###`` headings."""
        normalized = self._normalize(text)
        if not normalized.strip():
            return MarkdownResult(html="")
        extensions: list[Extension | str] = [
            "fenced_code",
            "codehilite",
            "tables",
            "sane_lists",
            "md_in_html",
            "toc",
        ]
        if self._link_extension:
            extensions.append(self._link_extension)
        md = Markdown(
            extensions=extensions,
            extension_configs={
                "codehilite": {
                    "linenums": False,
                    "guess_lang": False,
                    "css_class": "codehilite",
                },
                "toc": {"toc_depth": "2-3"},
            },
            output_format="html",
        )
        html = md.convert(normalized)
        toc = tuple(_flatten_toc(getattr(md, "toc_tokens", [])))
        return MarkdownResult(html=self._annotate_codehilite(html, normalized), toc=toc)

    def _annotate_codehilite(self, html: str, source_markdown: str) -> str:
        """Attach language metadata to each highlighted block in converted markdown."""
        languages = [
            match.group("lang") or "text"
            for match in CODE_BLOCK_PATTERN.finditer(source_markdown)
        ]
        if not languages:
            return html
        lang_iter = iter(languages)

        def _repl(match: re.Match[str]) -> str:
            lang = next(lang_iter, "text")
            return (
                f'<div class="codehilite" data-language="{escape(lang, quote=True)}">'
            )

        return CODEHILITE_OPEN_TAG.sub(_repl, html, len(languages))

    def _normalize(self, text: str) -> str:
        """Rewrite Docusaurus-flavoured syntax into what Python-Markdown parses."""
        converted = self._convert_admonitions(text)
        converted = DETAILS_OPEN_PATTERN.sub(
            lambda m: f'{m.group("indent")}<details markdown="1"{m.group("attrs")}>',
            converted,
        )
        return self._normalize_fenced_blocks(converted)

    @staticmethod
    def _normalize_fenced_blocks(text: str) -> str:
        """Drop labels like ``rust,no_run`` and map line highlights to ``hl_lines``."""
        without_indent = FENCED_INDENT_PATTERN.sub(r"\1", text)

        def _rewrite(match: re.Match[str]) -> str:
            fence = match.group("fence")
            language = match.group("lang") or ""
            meta = match.group("meta") or ""
            opening = f"{fence}{language}"
            ranges = HIGHLIGHT_RANGE_PATTERN.search(meta)
            if ranges and language:
                lines = _expand_ranges(ranges.group(1))
                if lines:
                    opening += ' hl_lines="' + " ".join(map(str, lines)) + '"'
            title = TITLE_PATTERN.search(meta)
            if title and language:
                label = escape(title.group("title"), quote=True)
                return f'<div class="code-title">{label}</div>\n\n{opening}'
            return opening

        return FENCE_OPEN_PATTERN.sub(_rewrite, without_indent)

    @staticmethod
    def _convert_admonitions(text: str) -> str:
        """Turn ``:::note Title`` blocks into ``md_in_html`` admonition divs."""
        output: list[str] = []
        depth = 0
        in_fence = False
        for line in text.splitlines():
            stripped = line.strip()
            if stripped.startswith(("```", "~~~")):
                in_fence = not in_fence
                output.append(line)
                continue
            if in_fence:
                output.append(line)
                continue
            opening = ADMONITION_PATTERN.match(stripped)
            if opening:
                kind = opening.group("kind")
                title = opening.group("title") or kind.title()
                output.extend(
                    [
                        "",
                        f'<div class="admonition admonition-{kind}" markdown="1">',
                        f'<p class="admonition-title">{escape(title)}</p>',
                        "",
                    ]
                )
                depth += 1
                continue
            if stripped == ADMONITION_CLOSE and depth:
                output.extend(["", "</div>", ""])
                depth -= 1
                continue
            output.append(line)
        output.extend(["", "</div>"] * depth)
        return "\n".join(output) + ("\n" if text.endswith("\n") else "")


def _flatten_toc(tokens: list[dict[str, typ.Any]]) -> list[TocEntry]:
    """Flatten Python-Markdown ``toc_tokens`` into ordered entries."""
    entries: list[TocEntry] = []
    for token in tokens:
        entries.append(
            TocEntry(
                level=int(token["level"]),
                anchor=str(token["id"]),
                label=str(token["name"]),
            )
        )
        entries.extend(_flatten_toc(token.get("children", [])))
    return entries


__all__ = ["CODE_BLOCK_PATTERN", "HtmlContentRenderer", "MarkdownResult"]
