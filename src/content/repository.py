import json
import re
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from src.config.logger_config import logger
from src.content.front_matter import parse_document

VALID_SLUG = re.compile(r"^[a-z0-9-]+$")
DEFAULT_CONTENT_DIR = Path("content")

_MD_IMAGE = re.compile(r"!\[[^\]]*]\([^)]*\)")
_MD_LINK = re.compile(r"\[([^\]]+)]\([^)]*\)")
_MD_MARKUP = re.compile(r"[`*_>#~-]")
_WHITESPACE = re.compile(r"\s+")


@dataclass(frozen=True)
class BlogIndexItem:
    slug: str
    title: str
    date: str
    source: str
    excerpt: str


@dataclass(frozen=True)
class BlogPost:
    slug: str
    title: str
    date: str
    source: str
    excerpt: str
    content_markdown: str


@dataclass(frozen=True)
class PageIndexItem:
    slug: str
    title: str
    type: str
    source: str


@dataclass(frozen=True)
class ImportedPageDocument:
    slug: str
    title: str
    type: str
    source: str
    content_markdown: str


def normalize_slug(slug: str) -> str:
    return (slug or "").strip().lower()


def excerpt_from_markdown(markdown: str, max_length: int = 200) -> str:
    plain = _MD_IMAGE.sub("", markdown or "")
    plain = _MD_LINK.sub(r"\1", plain)
    plain = _MD_MARKUP.sub("", plain)
    plain = _WHITESPACE.sub(" ", plain).strip()
    return plain[:max_length]


def _text(value: Any) -> str:
    return str(value if value is not None else "").strip()


def _timestamp(value: str) -> float | None:
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.timestamp()


class _MarkdownRepository:
    index_key = ""

    def __init__(self, index_path: Path, documents_dir: Path) -> None:
        self.index_path = Path(index_path)
        self.documents_dir = Path(documents_dir)

    def _read_index_items(self) -> list[dict[str, Any]]:
        try:
            raw = self.index_path.read_text(encoding="utf-8")
        except FileNotFoundError:
            logger.warning("Index not found: {}", str(self.index_path))
            return []
        try:
            parsed = json.loads(raw)
        except json.JSONDecodeError as exc:
            logger.warning("Index is not valid JSON: {} ({})", str(self.index_path), exc.msg)
            return []
        items = parsed.get(self.index_key) if isinstance(parsed, dict) else None
        return [item for item in items if isinstance(item, dict)] if isinstance(items, list) else []

    def _read_document(self, slug: str) -> tuple[str, str] | None:
        """Return ``(normalized_slug, raw_text)``, or None for invalid or unknown slugs."""
        normalized = normalize_slug(slug)
        if not VALID_SLUG.match(normalized):
            return None
        try:
            text = (self.documents_dir / f"{normalized}.md").read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        return normalized, text


class BlogContentRepository(_MarkdownRepository):
    index_key = "posts"

    def __init__(self, content_dir: str | Path = DEFAULT_CONTENT_DIR) -> None:
        content_path = Path(content_dir)
        super().__init__(content_path / "blog-index.json", content_path / "blog")

    def get_index(self) -> list[BlogIndexItem]:
        posts = [
            BlogIndexItem(
                slug=normalize_slug(_text(item.get("slug"))),
                title=_text(item.get("title")),
                date=_text(item.get("date")),
                source=_text(item.get("source")),
                excerpt=_text(item.get("excerpt")),
            )
            for item in self._read_index_items()
        ]
        posts = [post for post in posts if post.slug]
        dated = [post for post in posts if _timestamp(post.date) is not None]
        undated = [post for post in posts if _timestamp(post.date) is None]
        dated.sort(key=lambda post: _timestamp(post.date), reverse=True)
        return dated + undated

    def get_document_by_slug(self, slug: str) -> BlogPost | None:
        found = self._read_document(slug)
        if found is None:
            return None
        normalized, text = found
        parsed = parse_document(text)
        fm = parsed.front_matter
        return BlogPost(
            slug=_text(fm.slug) or normalized,
            title=_text(fm.title) or normalized,
            date=_text(fm.date),
            source=_text(fm.source),
            excerpt=_text(fm.excerpt) or excerpt_from_markdown(parsed.body),
            content_markdown=parsed.body,
        )


class PageContentRepository(_MarkdownRepository):
    index_key = "pages"

    def __init__(self, content_dir: str | Path = DEFAULT_CONTENT_DIR) -> None:
        content_path = Path(content_dir)
        super().__init__(content_path / "pages-index.json", content_path / "pages")

    def get_index(self) -> list[PageIndexItem]:
        pages = [
            PageIndexItem(
                slug=normalize_slug(_text(item.get("slug"))),
                title=_text(item.get("title")),
                type=_text(item.get("type")),
                source=_text(item.get("source")),
            )
            for item in self._read_index_items()
        ]
        return [page for page in pages if page.slug]

    def get_document_by_slug(self, slug: str) -> ImportedPageDocument | None:
        found = self._read_document(slug)
        if found is None:
            return None
        normalized, text = found
        parsed = parse_document(text)
        fm = parsed.front_matter
        indexed = next((page for page in self.get_index() if page.slug == normalized), None)
        return ImportedPageDocument(
            slug=_text(fm.slug) or (indexed.slug if indexed else "") or normalized,
            title=_text(fm.title) or (indexed.title if indexed else "") or normalized,
            type=_text(fm.type) or (indexed.type if indexed else "") or "page",
            source=_text(fm.source) or (indexed.source if indexed else ""),
            content_markdown=parsed.body,
        )

    def get_home_page(self) -> ImportedPageDocument | None:
        pages = self.get_index()
        home_typed = next((page.slug for page in pages if page.type.lower() == "home"), None)
        candidates = ["home", "index", home_typed, pages[0].slug if pages else None]

        seen: set[str] = set()
        for candidate in candidates:
            if not candidate:
                continue
            slug = normalize_slug(candidate)
            if slug in seen:
                continue
            seen.add(slug)
            page = self.get_document_by_slug(slug)
            if page is not None:
                return page
        return None
