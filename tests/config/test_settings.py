import os
import unittest
from pathlib import Path
from unittest.mock import patch

from src.config.settings import DEFAULT_ORIGIN, SiteSettings


class SiteSettingsTests(unittest.TestCase):
    def test_from_env_defaults(self):
        with patch.dict(os.environ, {}, clear=True):
            settings = SiteSettings.from_env()

        self.assertEqual(settings.origin, DEFAULT_ORIGIN)
        self.assertEqual(
            settings.seeds,
            (f"{DEFAULT_ORIGIN}/", f"{DEFAULT_ORIGIN}/blog", f"{DEFAULT_ORIGIN}/dad-ready-assessment"),
        )
        self.assertEqual(settings.routes_file, Path("content/routes.json"))
        self.assertEqual(settings.feed_url, f"{DEFAULT_ORIGIN}/blog?format=rss")

    def test_from_env_overrides(self):
        env = {
            "SITE_ORIGIN": "https://site.test/",
            "SITE_SEEDS": "https://site.test/, https://site.test/start ,",
            "SITE_ASSESSMENT_PATH": "/quiz",
            "SITE_CONTENT_DIR": "build/content",
            "SITE_FEED_PATH": "/feed.xml",
        }
        with patch.dict(os.environ, env, clear=True):
            settings = SiteSettings.from_env()

        self.assertEqual(settings.origin, "https://site.test")
        self.assertEqual(settings.seeds, ("https://site.test/", "https://site.test/start"))
        self.assertEqual(settings.assessment_path, "/quiz")
        self.assertEqual(settings.blog_dir, Path("build/content/blog"))
        self.assertEqual(settings.pages_index_file, Path("build/content/pages-index.json"))
        self.assertEqual(settings.feed_url, "https://site.test/feed.xml")
        self.assertEqual(settings.user_agent("crawler"), "site-corpus-crawler/1.0 (+https://site.test)")
