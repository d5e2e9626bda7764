"""Infrastructure adapters for ingestion."""

from src.ingestion.infrastructure.fs_sink import JsonIndexSink, MarkdownFileSink
from src.ingestion.infrastructure.http_client import SiteHttpClient
from src.ingestion.infrastructure.manifest_store import JsonManifestStore
from src.ingestion.infrastructure.markdown_converter import Html2TextConverter
from src.ingestion.infrastructure.raw_sink import FetchEventJsonlSink

__all__ = [
    "FetchEventJsonlSink",
    "Html2TextConverter",
    "JsonIndexSink",
    "JsonManifestStore",
    "MarkdownFileSink",
    "SiteHttpClient",
]
