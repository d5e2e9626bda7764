from __future__ import annotations
import asyncio
from dataclasses import replace
from datetime import datetime, timezone
from pathlib import Path

from src.config.logger_config import logger
from src.config.settings import SiteSettings
from src.ingestion.application.workflows.crawl_routes import CrawlRoutesWorkflow, CrawlWorkflowConfig
from src.ingestion.domain.models import CrawlSummary
from src.ingestion.infrastructure.http_client import SiteHttpClient
from src.ingestion.infrastructure.manifest_store import JsonManifestStore
from src.ingestion.infrastructure.raw_sink import FetchEventJsonlSink


DEFAULT_FETCH_LOG_DIR = Path("logs/fetch")


async def run_crawl_async(
    *,
    settings: SiteSettings | None = None,
    fetch_log_dir: str | Path | None = DEFAULT_FETCH_LOG_DIR,
    workflow_config: CrawlWorkflowConfig | None = None,
    show_progress: bool = True,
) -> CrawlSummary:
    settings = settings or SiteSettings.from_env()
    run_id = build_run_id("crawl")
    event_sink = FetchEventJsonlSink(fetch_log_dir, run_id=run_id) if fetch_log_dir is not None else None

    config = workflow_config or CrawlWorkflowConfig(
        user_agent=settings.user_agent("crawler"),
        assessment_path=settings.assessment_path,
    )
    workflow = CrawlRoutesWorkflow(
        origin=settings.origin,
        seeds=settings.seeds,
        fetcher=SiteHttpClient(event_sink=event_sink, run_id=run_id),
        manifest_store=JsonManifestStore(settings.routes_file),
        config=replace(config, show_progress=show_progress),
    )
    try:
        return await workflow.run()
    finally:
        close_fetch_log(event_sink)


def run_crawl(
    *,
    settings: SiteSettings | None = None,
    fetch_log_dir: str | Path | None = DEFAULT_FETCH_LOG_DIR,
    workflow_config: CrawlWorkflowConfig | None = None,
    show_progress: bool = True,
) -> CrawlSummary:
    return asyncio.run(
        run_crawl_async(
            settings=settings,
            fetch_log_dir=fetch_log_dir,
            workflow_config=workflow_config,
            show_progress=show_progress,
        )
    )


def build_run_id(stage: str) -> str:
    return datetime.now(timezone.utc).strftime(f"{stage}_%Y%m%dT%H%M%S%fZ")


def close_fetch_log(event_sink: FetchEventJsonlSink | None) -> None:
    if event_sink is None:
        return
    event_sink.close()
    logger.info("Fetch log {}: {}", str(event_sink.file_path), event_sink.outcome_counts or "no requests")
