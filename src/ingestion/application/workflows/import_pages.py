from typing import Any, Sequence

import aiohttp
from src.config.logger_config import logger

from src.content.front_matter import PAGE_FIELDS, FrontMatter, dump_document
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
from src.ingestion.domain.extraction import (
    ContentExtractor,
    first_text,
    meta_content,
    page_content_extractor,
    parse_html,
)
from src.ingestion.domain.models import ImportedPage, Route
from src.ingestion.domain.slugs import SlugAllocator, slug_from_pathname
from src.ingestion.domain.text import utc_now_iso

IMPORTABLE_ROUTE_TYPES = frozenset({"home", "page", "assessment"})


class ImportPagesWorkflow(ImportDocumentsWorkflow[Route, ImportedPage]):
    """Imports every non-blog route of the manifest as a generic page."""

    label = "pages"

    def __init__(
        self,
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
            extractor=extractor or page_content_extractor(),
            converter=converter,
            config=config,
        )
        self.manifest_store = manifest_store

    async def load_sources(self, session: aiohttp.ClientSession) -> list[Route]:
        # 找不到 manifest 屬於致命錯誤，直接往上拋
        manifest = self.manifest_store.read_manifest()
        routes = [route for route in manifest.routes if route.type in IMPORTABLE_ROUTE_TYPES]
        logger.info("Routes: {} of {} are importable pages", len(routes), len(manifest.routes))
        return routes

    def source_url(self, source: Route) -> str:
        return source.url

    async def import_one(
        self,
        session: aiohttp.ClientSession,
        source: Route,
        allocator: SlugAllocator,
    ) -> ImportedPage:
        soup = parse_html(await self.fetch_html(session, source.url))
        base_slug = slug_from_pathname(source.pathname)
        title = (
            first_text(soup, "title")
            or meta_content(soup, "og:title")
            or first_text(soup, "main h1")
            or first_text(soup, "h1")
            or base_slug
        )

        content = self.extractor.extract(soup)
        body = self.render_body(content)
        slug = allocator.allocate(base_slug)
        front_matter = FrontMatter(title=title, slug=slug, source=source.url, type=source.type)
        self.document_sink.write_document(slug, dump_document(front_matter, PAGE_FIELDS, body))
        logger.debug("Imported page {} from {}", slug, source.url)
        return ImportedPage(slug=slug, title=title, type=source.type, source=source.url)

    def sort_entries(self, entries: list[ImportedPage]) -> list[ImportedPage]:
        return sorted(entries, key=lambda page: page.slug)

    def build_index(self, entries: Sequence[ImportedPage]) -> dict[str, Any]:
        return {
            "generatedAtISO": utc_now_iso(),
            "pages": [page.to_dict() for page in entries],
        }
