"""Discover and parse the Markdown/MDX content tree."""

from .frontmatter import ParsedContent, split_front_matter
from .loader import ContentLoader, load_documents
from .models import Category, ContentSet, Document

__all__ = [
    "Category",
    "ContentLoader",
    "ContentSet",
    "Document",
    "ParsedContent",
    "load_documents",
    "split_front_matter",
]
