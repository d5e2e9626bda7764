"""Domain models and deterministic rules for site ingestion."""

from src.ingestion.domain.errors import IngestionError, ManifestError, PageFetchError
from src.ingestion.domain.models import (
    CrawlState,
    CrawlSummary,
    FeedItem,
    FetchedPage,
    ImportedPage,
    ImportedPost,
    ImportSummary,
    Route,
    RouteManifest,
    RouteType,
)
from src.ingestion.domain.rules import classify_route, normalize_pathname, normalize_url
from src.ingestion.domain.slugs import SlugAllocator, allocate_slug, slugify

__all__ = [
    "allocate_slug",
    "classify_route",
    "CrawlState",
    "CrawlSummary",
    "FeedItem",
    "FetchedPage",
    "ImportedPage",
    "ImportedPost",
    "ImportSummary",
    "IngestionError",
    "ManifestError",
    "normalize_pathname",
    "normalize_url",
    "PageFetchError",
    "Route",
    "RouteManifest",
    "RouteType",
    "SlugAllocator",
    "slugify",
]
