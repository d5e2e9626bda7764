"""Read side of the imported corpus: index + front-matter/markdown documents."""

from src.content.front_matter import FrontMatter, ParsedDocument, dump_document, parse_document
from src.content.repository import BlogContentRepository, PageContentRepository

__all__ = [
    "BlogContentRepository",
    "dump_document",
    "FrontMatter",
    "PageContentRepository",
    "ParsedDocument",
    "parse_document",
]
