from dataclasses import dataclass

import aiohttp
from tqdm import tqdm
from src.config.logger_config import logger

from src.ingestion.application.ports import ManifestStorePort, PageFetcherPort
from src.ingestion.domain.links import LinkExtractor, regex_link_extractor
from src.ingestion.domain.models import CrawlState, CrawlSummary, FetchedPage, Route, RouteManifest
from src.ingestion.domain.rules import (
    DEFAULT_ASSESSMENT_PATH,
    canonical_origin,
    classify_route,
    normalize_url,
    pathname_of,
)
from src.ingestion.domain.text import utc_now_iso


@dataclass(frozen=True)
class CrawlWorkflowConfig:
    user_agent: str = "site-corpus-crawler/1.0"
    assessment_path: str = DEFAULT_ASSESSMENT_PATH
    fetch_retries: int = 1
    connector_limit_per_host: int = 1
    connector_ttl_dns_cache: int = 300
    show_progress: bool = True


class CrawlRoutesWorkflow:
    """Breadth-first, same-origin discovery of every HTML route reachable from the seeds.

    URLs are fetched one at a time. Each canonical URL is enqueued at most once
    and fetched at most once; the manifest order comes from an explicit sort,
    not from fetch order.
    """

    def __init__(
        self,
        origin: str,
        seeds: tuple[str, ...] | list[str],
        fetcher: PageFetcherPort,
        manifest_store: ManifestStorePort,
        config: CrawlWorkflowConfig | None = None,
        link_extractor: LinkExtractor | None = None,
    ) -> None:
        self.origin = canonical_origin(origin)
        self.seeds = tuple(seeds)
        self.fetcher = fetcher
        self.manifest_store = manifest_store
        self.config = config or CrawlWorkflowConfig()
        self.link_extractor = link_extractor or regex_link_extractor(self.origin)

    def seed_state(self) -> CrawlState:
        state = CrawlState()
        for seed in self.seeds:
            normalized = normalize_url(seed, self.origin, self.origin)
            if normalized is None:
                logger.warning("Ignoring seed outside {}: {}", self.origin, seed)
                continue
            state.enqueue(normalized)
        return state

    async def run(self) -> CrawlSummary:
        state = self.seed_state()
        connector = aiohttp.TCPConnector(
            limit_per_host=self.config.connector_limit_per_host,
            ttl_dns_cache=self.config.connector_ttl_dns_cache,
        )
        headers = {"User-Agent": self.config.user_agent}
        async with aiohttp.ClientSession(connector=connector, headers=headers) as session:
            with tqdm(
                total=len(state.frontier),
                desc="Crawl",
                unit=" url",
                leave=True,
                disable=not self.config.show_progress,
            ) as progress:
                while state.frontier:
                    current_url = state.frontier.popleft()
                    enqueued = await self._visit(session, state, current_url)
                    progress.total = (progress.total or 0) + enqueued
                    progress.update(1)

        manifest = self.build_manifest(state)
        manifest_path = self.manifest_store.write_manifest(manifest)
        logger.info("Discovered {} HTML routes from {}", len(manifest.routes), self.origin)
        logger.info("Wrote {}", str(manifest_path))
        return CrawlSummary(
            discovered_total=len(state.discovered),
            visited_total=len(state.visited),
            route_total=len(manifest.routes),
            failed_total=state.failed_total,
            manifest_path=manifest_path,
        )

    async def _visit(self, session: aiohttp.ClientSession, state: CrawlState, current_url: str) -> int:
        """Fetch one URL and enqueue its new links. Returns how many URLs were enqueued."""
        if current_url in state.visited:
            return 0
        state.visited.add(current_url)

        page = await self.fetcher.fetch(
            session,
            current_url,
            retries=self.config.fetch_retries,
            operation="crawl",
        )
        if page is None:
            state.failed_total += 1
            logger.warning("Skipping {} (network error)", current_url)
            return 0
        if not page.ok:
            state.failed_total += 1
            logger.warning("Skipping {} (HTTP {})", current_url, page.status)
            return 0

        final_url = self.resolve_final_url(page)
        if not page.is_html:
            logger.debug("Skipping {} (content-type {})", final_url, page.content_type or "unknown")
            return 0

        state.html_routes.add(final_url)
        enqueued = 0
        for link in self.link_extractor(page.text or "", final_url):
            if state.enqueue(link):
                enqueued += 1
        return enqueued

    def resolve_final_url(self, page: FetchedPage) -> str:
        # 轉址到站外或無法正規化時，沿用原本的請求網址
        return normalize_url(page.final_url, self.origin, self.origin) or page.requested_url

    def build_manifest(self, state: CrawlState) -> RouteManifest:
        routes: list[Route] = []
        for url in state.html_routes:
            pathname = pathname_of(url)
            routes.append(
                Route(
                    url=url,
                    pathname=pathname,
                    type=classify_route(pathname, self.config.assessment_path),
                )
            )
        routes.sort(key=lambda route: route.pathname)
        return RouteManifest(
            origin=self.origin,
            discovered_at=utc_now_iso(),
            routes=tuple(routes),
        )
