import copy
from dataclasses import dataclass
from enum import Enum

from bs4 import BeautifulSoup, CData, NavigableString, Tag

from src.ingestion.domain.text import collapse_whitespace

NON_CONTENT_SELECTOR = "script,style,noscript,iframe,header,footer,nav,aside,form"
FALLBACK_SELECTOR = "body"

BLOG_CONTENT_SELECTORS: tuple[str, ...] = (
    "main article",
    "article .blog-item-content",
    "article .entry-content",
    "article .sqs-html-content",
    "article",
    "main .sqs-layout",
    "main",
    "#page",
    FALLBACK_SELECTOR,
)
BLOG_MIN_TEXT_LENGTH = 120

PAGE_CONTENT_SELECTORS: tuple[str, ...] = (
    "main article",
    "main .sqs-layout",
    "main",
    "#page",
    "article",
    ".main-content",
    FALLBACK_SELECTOR,
)
PAGE_MIN_TEXT_LENGTH = 100

BLOCK_TAGS = frozenset(
    {
        "address", "article", "aside", "blockquote", "body", "br", "dd", "details", "div", "dl", "dt",
        "figcaption", "figure", "footer", "form", "h1", "h2", "h3", "h4", "h5", "h6", "header", "hr",
        "li", "main", "nav", "ol", "p", "pre", "section", "summary", "table", "tbody", "td", "tfoot",
        "th", "thead", "title", "tr", "ul",
    }
)


class SelectorOutcome(str, Enum):
    SUFFICIENT = "sufficient"
    THIN = "thin"
    ABSENT = "absent"


@dataclass(frozen=True)
class ExtractedContent:
    selector: str
    html: str
    text: str


def parse_html(html: str) -> BeautifulSoup:
    return BeautifulSoup(html or "", "lxml")


def _collect_text(node: Tag, parts: list[str]) -> None:
    for child in node.children:
        if isinstance(child, Tag):
            block = child.name in BLOCK_TAGS
            if block:
                parts.append(" ")
            _collect_text(child, parts)
            if block:
                parts.append(" ")
        elif type(child) in (NavigableString, CData):
            parts.append(str(child))


def text_of(node: Tag) -> str:
    """Collapsed text of ``node``; inline nodes are joined as-is, block boundaries become a space."""
    parts: list[str] = []
    _collect_text(node, parts)
    return collapse_whitespace("".join(parts))


def strip_non_content(node: Tag) -> Tag:
    clone = copy.copy(node)
    for element in clone.select(NON_CONTENT_SELECTOR):
        element.decompose()
    return clone


class ContentExtractor:
    """Picks the main content region of a page from an ordered selector chain.

    Each candidate is cloned and stripped of non-content tags before its text
    is measured. The first candidate with enough text wins; ``body`` is always
    accepted so every document yields a result.
    """

    def __init__(self, selectors: tuple[str, ...], min_text_length: int) -> None:
        if not selectors or selectors[-1] != FALLBACK_SELECTOR:
            selectors = (*selectors, FALLBACK_SELECTOR)
        self.selectors = selectors
        self.min_text_length = min_text_length

    def evaluate(self, soup: BeautifulSoup, selector: str) -> tuple[SelectorOutcome, ExtractedContent | None]:
        candidate = soup.select_one(selector)
        if candidate is None:
            return SelectorOutcome.ABSENT, None

        clone = strip_non_content(candidate)
        text = text_of(clone)
        content = ExtractedContent(selector=selector, html=clone.decode_contents(), text=text)
        if len(text) >= self.min_text_length:
            return SelectorOutcome.SUFFICIENT, content
        return SelectorOutcome.THIN, content

    def extract(self, soup: BeautifulSoup) -> ExtractedContent:
        for selector in self.selectors:
            outcome, content = self.evaluate(soup, selector)
            if outcome is SelectorOutcome.SUFFICIENT:
                return content
            if selector == FALLBACK_SELECTOR and content is not None:
                return content

        # 沒有 <body> 的文件 (例如空字串) 退回整份文件
        clone = strip_non_content(soup)
        return ExtractedContent(
            selector=FALLBACK_SELECTOR,
            html=clone.decode_contents(),
            text=text_of(clone),
        )


def blog_content_extractor() -> ContentExtractor:
    return ContentExtractor(BLOG_CONTENT_SELECTORS, BLOG_MIN_TEXT_LENGTH)


def page_content_extractor() -> ContentExtractor:
    return ContentExtractor(PAGE_CONTENT_SELECTORS, PAGE_MIN_TEXT_LENGTH)


def meta_content(soup: BeautifulSoup, prop: str) -> str:
    tag = soup.select_one(f'meta[property="{prop}"]')
    if tag is None:
        return ""
    return collapse_whitespace(tag.get("content") or "")


def first_text(soup: BeautifulSoup, selector: str) -> str:
    tag = soup.select_one(selector)
    if tag is None:
        return ""
    return text_of(tag)


def first_attr(soup: BeautifulSoup, selector: str, attr: str) -> str:
    tag = soup.select_one(selector)
    if tag is None:
        return ""
    return collapse_whitespace(tag.get(attr) or "")
