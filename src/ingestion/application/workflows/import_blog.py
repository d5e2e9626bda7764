from typing import Any, Sequence

import aiohttp
from src.config.logger_config import logger

from src.content.front_matter import BLOG_FIELDS, FrontMatter, dump_document
from src.ingestion.application.ports import (
    DocumentSinkPort,
    IndexSinkPort,
    ManifestStorePort,
    MarkdownConverterPort,
    PageFetcherPort,
)
from src.ingestion.application.workflows.import_documents import (
    ImportDocumentsWorkflow,
    ImportWorkflowConfig,
)
from src.ingestion.domain.errors import ManifestError
from src.ingestion.domain.extraction import (
    ContentExtractor,
    blog_content_extractor,
    first_attr,
    first_text,
    meta_content,
    parse_html,
)
from src.ingestion.domain.models import FeedItem, ImportedPost
from src.ingestion.domain.rules import BLOG_POST_PATH, canonical_origin, normalize_blog_url
from src.ingestion.domain.slugs import SlugAllocator, slug_from_url
from src.ingestion.domain.text import excerpt_from_text, to_iso_date, utc_now_iso
from src.ingestion.infrastructure.feed import parse_rss_items


class ImportBlogWorkflow(ImportDocumentsWorkflow[FeedItem, ImportedPost]):
    """Imports blog posts listed in the RSS feed, or in the route manifest when the feed is unavailable."""

    label = "blog"

    def __init__(
        self,
        origin: str,
        feed_url: str,
        manifest_store: ManifestStorePort,
        fetcher: PageFetcherPort,
        document_sink: DocumentSinkPort,
        index_sink: IndexSinkPort,
        extractor: ContentExtractor | None = None,
        converter: MarkdownConverterPort | None = None,
        config: ImportWorkflowConfig | None = None,
    ) -> None:
        super().__init__(
            fetcher=fetcher,
            document_sink=document_sink,
            index_sink=index_sink,
            extractor=extractor or blog_content_extractor(),
            converter=converter,
            config=config,
        )
        self.origin = canonical_origin(origin)
        self.feed_url = feed_url
        self.manifest_store = manifest_store

    async def load_sources(self, session: aiohttp.ClientSession) -> list[FeedItem]:
        items = await self.load_feed_items(session)
        if not items:
            items = self.load_manifest_items()
        return items

    async def load_feed_items(self, session: aiohttp.ClientSession) -> list[FeedItem]:
        page = await self.fetcher.fetch(
            session,
            self.feed_url,
            retries=self.config.fetch_retries,
            body_types=None,
            operation="fetch_feed",
        )
        if page is None:
            logger.warning("RSS unavailable (network error)")
            return []
        if not page.ok:
            logger.warning("RSS unavailable (HTTP {})", page.status)
            return []

        items = parse_rss_items(page.text or "", self.origin)
        logger.info("RSS: parsed {} items", len(items))
        return items

    def load_manifest_items(self) -> list[FeedItem]:
        try:
            manifest = self.manifest_store.read_manifest()
        except ManifestError as exc:
            logger.warning("Routes fallback unavailable ({})", exc)
            return []

        items: list[FeedItem] = []
        for route in manifest.routes:
            if route.type != "blogPost" and not BLOG_POST_PATH.match(route.pathname):
                continue
            link = normalize_blog_url(route.url, self.origin)
            if link:
                items.append(FeedItem(title="", link=link, published_at=""))
        logger.info("Routes fallback: parsed {} posts", len(items))
        return items

    def source_url(self, source: FeedItem) -> str:
        return source.link

    async def import_one(
        self,
        session: aiohttp.ClientSession,
        source: FeedItem,
        allocator: SlugAllocator,
    ) -> ImportedPost:
        soup = parse_html(await self.fetch_html(session, source.link))
        content = self.extractor.extract(soup)
        excerpt = excerpt_from_text(content.text)
        base_slug = slug_from_url(source.link, "post")

        title = (
            source.title
            or meta_content(soup, "og:title")
            or first_text(soup, "article h1")
            or first_text(soup, "h1")
            or base_slug
        )
        page_date = meta_content(soup, "article:published_time") or first_attr(soup, "time[datetime]", "datetime")
        date = to_iso_date(source.published_at) or to_iso_date(page_date) or utc_now_iso()

        slug = allocator.allocate(base_slug)
        body = self.render_body(content)
        front_matter = FrontMatter(title=title, date=date, slug=slug, source=source.link, excerpt=excerpt)
        self.document_sink.write_document(slug, dump_document(front_matter, BLOG_FIELDS, body))
        logger.debug("Imported post {} from {}", slug, source.link)
        return ImportedPost(slug=slug, title=title, date=date, source=source.link, excerpt=excerpt)

    def sort_entries(self, entries: list[ImportedPost]) -> list[ImportedPost]:
        return sorted(entries, key=lambda post: post.date, reverse=True)

    def build_index(self, entries: Sequence[ImportedPost]) -> dict[str, Any]:
        return {
            "source": self.origin,
            "generatedAtISO": utc_now_iso(),
            "posts": [post.to_dict() for post in entries],
        }
