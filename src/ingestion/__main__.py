import argparse
import sys
from dataclasses import replace
from pathlib import Path

from src.config.logger_config import logger
from src.config.settings import SiteSettings
from src.ingestion.crawl import run_crawl
from src.ingestion.importer import run_import_blog, run_import_pages

STAGES = ("crawl", "import-blog", "import-pages")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="python -m src.ingestion", description="Crawl a site and import it as markdown.")
    parser.add_argument("stage", choices=(*STAGES, "all"))
    parser.add_argument("--origin", help="site origin, overrides SITE_ORIGIN")
    parser.add_argument("--content-dir", type=Path, help="output directory, overrides SITE_CONTENT_DIR")
    parser.add_argument("--no-progress", action="store_true", help="disable progress bars")
    return parser


def resolve_settings(args: argparse.Namespace) -> SiteSettings:
    settings = SiteSettings.from_env()
    if args.origin:
        origin = args.origin.rstrip("/")
        seeds = tuple(seed.replace(settings.origin, origin, 1) for seed in settings.seeds)
        settings = replace(settings, origin=origin, seeds=seeds)
    if args.content_dir:
        settings = replace(settings, content_dir=args.content_dir)
    return settings


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    settings = resolve_settings(args)
    show_progress = not args.no_progress
    stages = STAGES if args.stage == "all" else (args.stage,)

    try:
        for stage in stages:
            if stage == "crawl":
                print(run_crawl(settings=settings, show_progress=show_progress))
            elif stage == "import-blog":
                print(run_import_blog(settings=settings, show_progress=show_progress))
            else:
                print(run_import_pages(settings=settings, show_progress=show_progress))
    except Exception as exc:
        logger.exception("Stage {} aborted: {}", stage, exc)
        return 1
    return 0


# python -m src.ingestion crawl
if __name__ == "__main__":
    sys.exit(main())
