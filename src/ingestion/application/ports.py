from pathlib import Path
from typing import Any, Protocol, runtime_checkable

import aiohttp

from src.ingestion.domain.models import FetchedPage, RouteManifest


@runtime_checkable
class PageFetcherPort(Protocol):
    async def fetch(
        self,
        session: aiohttp.ClientSession,
        url: str,
        retries: int = 1,
        *,
        body_types: tuple[str, ...] | None = ("text/html",),
        operation: str = "fetch_page",
    ) -> FetchedPage | None: ...
    """Fetch one URL; None on network failure."""


@runtime_checkable
class ManifestStorePort(Protocol):
    def write_manifest(self, manifest: RouteManifest) -> Path: ...

    def read_manifest(self) -> RouteManifest: ...
    """Raises ManifestError when the manifest is missing or unreadable."""


@runtime_checkable
class DocumentSinkPort(Protocol):
    def write_document(self, slug: str, text: str) -> Path: ...


@runtime_checkable
class IndexSinkPort(Protocol):
    def write_index(self, payload: dict[str, Any]) -> Path: ...


@runtime_checkable
class MarkdownConverterPort(Protocol):
    def convert(self, html: str) -> str: ...
