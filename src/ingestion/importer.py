from __future__ import annotations
import asyncio
from dataclasses import replace
from pathlib import Path

from src.config.settings import SiteSettings
from src.ingestion.application.workflows.import_blog import ImportBlogWorkflow
from src.ingestion.application.workflows.import_documents import ImportWorkflowConfig
from src.ingestion.application.workflows.import_pages import ImportPagesWorkflow
from src.ingestion.crawl import DEFAULT_FETCH_LOG_DIR, build_run_id, close_fetch_log
from src.ingestion.domain.models import ImportSummary
from src.ingestion.infrastructure.fs_sink import JsonIndexSink, MarkdownFileSink
from src.ingestion.infrastructure.http_client import SiteHttpClient
from src.ingestion.infrastructure.manifest_store import JsonManifestStore
from src.ingestion.infrastructure.raw_sink import FetchEventJsonlSink


async def run_import_blog_async(
    *,
    settings: SiteSettings | None = None,
    fetch_log_dir: str | Path | None = DEFAULT_FETCH_LOG_DIR,
    workflow_config: ImportWorkflowConfig | None = None,
    show_progress: bool = True,
) -> ImportSummary:
    settings = settings or SiteSettings.from_env()
    run_id = build_run_id("import_blog")
    event_sink = FetchEventJsonlSink(fetch_log_dir, run_id=run_id) if fetch_log_dir is not None else None
    config = workflow_config or ImportWorkflowConfig(user_agent=settings.user_agent("blog-importer"))

    workflow = ImportBlogWorkflow(
        origin=settings.origin,
        feed_url=settings.feed_url,
        manifest_store=JsonManifestStore(settings.routes_file),
        fetcher=SiteHttpClient(event_sink=event_sink, run_id=run_id),
        document_sink=MarkdownFileSink(settings.blog_dir),
        index_sink=JsonIndexSink(settings.blog_index_file),
        config=replace(config, show_progress=show_progress),
    )
    try:
        return await workflow.run()
    finally:
        close_fetch_log(event_sink)


async def run_import_pages_async(
    *,
    settings: SiteSettings | None = None,
    fetch_log_dir: str | Path | None = DEFAULT_FETCH_LOG_DIR,
    workflow_config: ImportWorkflowConfig | None = None,
    show_progress: bool = True,
) -> ImportSummary:
    settings = settings or SiteSettings.from_env()
    run_id = build_run_id("import_pages")
    event_sink = FetchEventJsonlSink(fetch_log_dir, run_id=run_id) if fetch_log_dir is not None else None
    config = workflow_config or ImportWorkflowConfig(user_agent=settings.user_agent("pages-importer"))

    workflow = ImportPagesWorkflow(
        manifest_store=JsonManifestStore(settings.routes_file),
        fetcher=SiteHttpClient(event_sink=event_sink, run_id=run_id),
        document_sink=MarkdownFileSink(settings.pages_dir),
        index_sink=JsonIndexSink(settings.pages_index_file),
        config=replace(config, show_progress=show_progress),
    )
    try:
        return await workflow.run()
    finally:
        close_fetch_log(event_sink)


def run_import_blog(**kwargs) -> ImportSummary:
    return asyncio.run(run_import_blog_async(**kwargs))


def run_import_pages(**kwargs) -> ImportSummary:
    return asyncio.run(run_import_pages_async(**kwargs))
