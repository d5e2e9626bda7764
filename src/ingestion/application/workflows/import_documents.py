from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Generic, Sequence, TypeVar

import aiohttp
from tqdm import tqdm
from src.config.logger_config import logger

from src.ingestion.application.ports import (
    DocumentSinkPort,
    IndexSinkPort,
    MarkdownConverterPort,
    PageFetcherPort,
)
from src.ingestion.domain.errors import PageFetchError
from src.ingestion.domain.extraction import ContentExtractor, ExtractedContent
from src.ingestion.domain.models import ImportSummary
from src.ingestion.domain.slugs import SlugAllocator
from src.ingestion.infrastructure.markdown_converter import Html2TextConverter

SourceT = TypeVar("SourceT")
EntryT = TypeVar("EntryT")


@dataclass(frozen=True)
class ImportWorkflowConfig:
    user_agent: str = "site-corpus-importer/1.0"
    fetch_retries: int = 1
    connector_limit_per_host: int = 1
    connector_ttl_dns_cache: int = 300
    show_progress: bool = True


class ImportDocumentsWorkflow(ABC, Generic[SourceT, EntryT]):
    """Fetch → extract → convert → persist, one source item at a time.

    Subclasses decide where items come from, how one item becomes a document,
    and how the index is ordered. A failing item is logged and counted; the
    index is written even when nothing was imported.
    """

    label = "documents"

    def __init__(
        self,
        fetcher: PageFetcherPort,
        document_sink: DocumentSinkPort,
        index_sink: IndexSinkPort,
        extractor: ContentExtractor,
        converter: MarkdownConverterPort | None = None,
        config: ImportWorkflowConfig | None = None,
    ) -> None:
        self.fetcher = fetcher
        self.document_sink = document_sink
        self.index_sink = index_sink
        self.extractor = extractor
        self.converter = converter or Html2TextConverter()
        self.config = config or ImportWorkflowConfig()

    @abstractmethod
    async def load_sources(self, session: aiohttp.ClientSession) -> list[SourceT]:
        """Source items in processing order; duplicates are removed by the caller."""

    @abstractmethod
    def source_url(self, source: SourceT) -> str: ...

    @abstractmethod
    async def import_one(
        self,
        session: aiohttp.ClientSession,
        source: SourceT,
        allocator: SlugAllocator,
    ) -> EntryT:
        """Fetch, convert and persist one item. Raises PageFetchError for fetch failures."""

    def sort_entries(self, entries: list[EntryT]) -> list[EntryT]:
        return entries

    @abstractmethod
    def build_index(self, entries: Sequence[EntryT]) -> dict[str, Any]: ...

    def deduplicate(self, sources: Sequence[SourceT]) -> list[SourceT]:
        seen: set[str] = set()
        unique: list[SourceT] = []
        for source in sources:
            key = self.source_url(source)
            if key in seen:
                continue
            seen.add(key)
            unique.append(source)
        return unique

    async def run(self) -> ImportSummary:
        connector = aiohttp.TCPConnector(
            limit_per_host=self.config.connector_limit_per_host,
            ttl_dns_cache=self.config.connector_ttl_dns_cache,
        )
        headers = {"User-Agent": self.config.user_agent}
        allocator = SlugAllocator()
        imported: list[EntryT] = []
        failed_total = 0

        async with aiohttp.ClientSession(connector=connector, headers=headers) as session:
            sources = self.deduplicate(await self.load_sources(session))
            with tqdm(
                total=len(sources),
                desc=f"Import {self.label}",
                unit=" page",
                leave=True,
                disable=not self.config.show_progress,
            ) as progress:
                for source in sources:
                    try:
                        imported.append(await self.import_one(session, source, allocator))
                    except PageFetchError as exc:
                        failed_total += 1
                        logger.warning("Failed {}", exc)
                    except Exception as exc:
                        failed_total += 1
                        logger.exception(
                            "Failed {} with error type {}: {}",
                            self.source_url(source),
                            type(exc).__name__,
                            exc,
                        )
                    progress.update(1)

        entries = self.sort_entries(imported)
        index_path = self.index_sink.write_index(self.build_index(entries))
        logger.info("Import complete: {} imported, {} failed", len(entries), failed_total)
        logger.info("Wrote {}", str(index_path))
        return ImportSummary(
            source_total=len(sources),
            imported_total=len(entries),
            failed_total=failed_total,
            index_path=index_path,
        )

    async def fetch_html(self, session: aiohttp.ClientSession, url: str) -> str:
        page = await self.fetcher.fetch(
            session,
            url,
            retries=self.config.fetch_retries,
            operation=f"import_{self.label}",
        )
        if page is None:
            raise PageFetchError(url, "network error")
        if not page.ok:
            raise PageFetchError(url, f"HTTP {page.status}")
        if not page.is_html:
            raise PageFetchError(url, f"Not HTML ({page.content_type or 'unknown content-type'})")
        return page.text or ""

    def render_body(self, content: ExtractedContent) -> str:
        markdown = self.converter.convert(content.html).strip()
        # 轉換結果為空時退回純文字
        return markdown or content.text
