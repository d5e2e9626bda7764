from collections import deque
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Literal

RouteType = Literal["home", "blogIndex", "blogPost", "page", "assessment"]


@dataclass(frozen=True)
class Route:
    url: str
    pathname: str
    type: RouteType

    def to_dict(self) -> dict[str, Any]:
        return {"url": self.url, "pathname": self.pathname, "type": self.type}


@dataclass(frozen=True)
class RouteManifest:
    origin: str
    discovered_at: str
    routes: tuple[Route, ...]

    def to_dict(self) -> dict[str, Any]:
        return {
            "origin": self.origin,
            "discoveredAtISO": self.discovered_at,
            "routes": [route.to_dict() for route in self.routes],
        }


@dataclass
class CrawlState:
    """Mutable bookkeeping for a single crawl run.

    ``discovered`` holds every URL ever enqueued and ``visited`` every URL
    actually dequeued; a URL enters ``frontier`` at most once.
    """

    frontier: deque[str] = field(default_factory=deque)
    discovered: set[str] = field(default_factory=set)
    visited: set[str] = field(default_factory=set)
    html_routes: set[str] = field(default_factory=set)
    failed_total: int = 0

    def enqueue(self, url: str) -> bool:
        if url in self.discovered:
            return False
        self.discovered.add(url)
        self.frontier.append(url)
        return True


@dataclass(frozen=True)
class FetchedPage:
    requested_url: str
    final_url: str
    status: int
    content_type: str
    text: str | None = None

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300

    @property
    def is_html(self) -> bool:
        return "text/html" in self.content_type.lower()


@dataclass(frozen=True)
class FeedItem:
    title: str
    link: str
    published_at: str


@dataclass(frozen=True)
class ImportedPost:
    slug: str
    title: str
    date: str
    source: str
    excerpt: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "slug": self.slug,
            "title": self.title,
            "date": self.date,
            "source": self.source,
            "excerpt": self.excerpt,
        }


@dataclass(frozen=True)
class ImportedPage:
    slug: str
    title: str
    type: str
    source: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "slug": self.slug,
            "title": self.title,
            "type": self.type,
            "source": self.source,
        }


@dataclass(frozen=True)
class CrawlSummary:
    discovered_total: int
    visited_total: int
    route_total: int
    failed_total: int
    manifest_path: Path | None = None


@dataclass(frozen=True)
class ImportSummary:
    source_total: int
    imported_total: int
    failed_total: int
    index_path: Path | None = None
