# 站點與輸出路徑的設定
import os
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

DEFAULT_ORIGIN = "https://www.essentialfitness.co"
DEFAULT_SEED_PATHS = ("/", "/blog", "/dad-ready-assessment")
DEFAULT_ASSESSMENT_PATH = "/dad-ready-assessment"
DEFAULT_CONTENT_DIR = Path("content")
DEFAULT_FEED_PATH = "/blog?format=rss"


def _default_seeds() -> tuple[str, ...]:
    return tuple(f"{DEFAULT_ORIGIN}{path}" for path in DEFAULT_SEED_PATHS)


@dataclass(frozen=True)
class SiteSettings:
    origin: str = DEFAULT_ORIGIN
    seeds: tuple[str, ...] = field(default_factory=_default_seeds)
    assessment_path: str = DEFAULT_ASSESSMENT_PATH
    content_dir: Path = DEFAULT_CONTENT_DIR
    feed_path: str = DEFAULT_FEED_PATH

    @classmethod
    def from_env(cls) -> "SiteSettings":
        origin = os.getenv("SITE_ORIGIN", DEFAULT_ORIGIN).rstrip("/")
        raw_seeds = os.getenv("SITE_SEEDS", "")
        seeds = tuple(s.strip() for s in raw_seeds.split(",") if s.strip())
        if not seeds:
            seeds = tuple(f"{origin}{path}" for path in DEFAULT_SEED_PATHS)
        return cls(
            origin=origin,
            seeds=seeds,
            assessment_path=os.getenv("SITE_ASSESSMENT_PATH", DEFAULT_ASSESSMENT_PATH),
            content_dir=Path(os.getenv("SITE_CONTENT_DIR", str(DEFAULT_CONTENT_DIR))),
            feed_path=os.getenv("SITE_FEED_PATH", DEFAULT_FEED_PATH),
        )

    @property
    def feed_url(self) -> str:
        return f"{self.origin}{self.feed_path}"

    @property
    def routes_file(self) -> Path:
        return self.content_dir / "routes.json"

    @property
    def blog_dir(self) -> Path:
        return self.content_dir / "blog"

    @property
    def blog_index_file(self) -> Path:
        return self.content_dir / "blog-index.json"

    @property
    def pages_dir(self) -> Path:
        return self.content_dir / "pages"

    @property
    def pages_index_file(self) -> Path:
        return self.content_dir / "pages-index.json"

    def user_agent(self, component: str) -> str:
        return f"site-corpus-{component}/1.0 (+{self.origin})"
