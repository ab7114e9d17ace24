"""Page rendering: Markdown conversion, link resolution, and HTML templates."""

from .link_checker import LinkChecker
from .link_rewriter import DOC_ASSET_PREFIX, DocumentLinkExtension
from .models import (
    AssetCopy,
    FixedLayoutPage,
    GenericDocumentPage,
    Page,
    RenderedPage,
    TocEntry,
    output_path_for,
)
from .page_renderer import SITE_CSS, SITEMAP, PageRenderer, href_for
from .renderer import CODE_BLOCK_PATTERN, HtmlContentRenderer, MarkdownResult

__all__ = [
    "CODE_BLOCK_PATTERN",
    "DOC_ASSET_PREFIX",
    "SITEMAP",
    "SITE_CSS",
    "AssetCopy",
    "DocumentLinkExtension",
    "FixedLayoutPage",
    "GenericDocumentPage",
    "HtmlContentRenderer",
    "LinkChecker",
    "MarkdownResult",
    "Page",
    "PageRenderer",
    "RenderedPage",
    "TocEntry",
    "href_for",
    "output_path_for",
]
