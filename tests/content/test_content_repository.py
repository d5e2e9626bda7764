import json
import unittest

from src.content.repository import (
    BlogContentRepository,
    PageContentRepository,
    excerpt_from_markdown,
)
from tests.utils.tempdir import managed_temp_dir


def write(path, text):
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")


class BlogContentRepositoryTests(unittest.TestCase):
    def test_missing_index_is_empty(self):
        with managed_temp_dir("repo_blog_missing") as tmp:
            self.assertEqual(BlogContentRepository(tmp).get_index(), [])

    def test_invalid_index_is_empty(self):
        with managed_temp_dir("repo_blog_invalid") as tmp:
            write(tmp / "blog-index.json", "{oops")
            self.assertEqual(BlogContentRepository(tmp).get_index(), [])

    def test_index_sorted_newest_first_with_undated_last(self):
        with managed_temp_dir("repo_blog_sorted") as tmp:
            posts = [
                {"slug": "old", "title": "Old", "date": "2022-01-01T00:00:00.000Z"},
                {"slug": "undated", "title": "Undated", "date": ""},
                {"slug": "new", "title": "New", "date": "2024-01-01T00:00:00.000Z"},
                {"title": "No slug"},
            ]
            write(tmp / "blog-index.json", json.dumps({"posts": posts}))
            index = BlogContentRepository(tmp).get_index()
            self.assertEqual([post.slug for post in index], ["new", "old", "undated"])
            self.assertEqual(index[2].excerpt, "")

    def test_document_defaults_from_slug_and_body(self):
        with managed_temp_dir("repo_blog_defaults") as tmp:
            write(tmp / "blog" / "bare.md", "Some **bold** text with a [link](https://x.test).\n")
            post = BlogContentRepository(tmp).get_document_by_slug("  BARE ")
            self.assertIsNotNone(post)
            self.assertEqual(post.slug, "bare")
            self.assertEqual(post.title, "bare")
            self.assertEqual(post.date, "")
            self.assertEqual(post.excerpt, "Some bold text with a link.")

    def test_invalid_or_unknown_slug_is_none(self):
        with managed_temp_dir("repo_blog_invalid_slug") as tmp:
            write(tmp / "secret.md", "nope")
            repository = BlogContentRepository(tmp)
            self.assertIsNone(repository.get_document_by_slug("../secret"))
            self.assertIsNone(repository.get_document_by_slug("a/b"))
            self.assertIsNone(repository.get_document_by_slug("missing"))


class PageContentRepositoryTests(unittest.TestCase):
    def test_document_falls_back_to_index_entry(self):
        with managed_temp_dir("repo_pages_fallback") as tmp:
            write(
                tmp / "pages-index.json",
                json.dumps({"pages": [{"slug": "about", "title": "About", "type": "page", "source": "https://site.test/about"}]}),
            )
            write(tmp / "pages" / "about.md", "Plain body")
            page = PageContentRepository(tmp).get_document_by_slug("about")
            self.assertEqual(page.title, "About")
            self.assertEqual(page.source, "https://site.test/about")
            self.assertEqual(page.content_markdown, "Plain body")

    def test_home_page_prefers_typed_home_over_first_page(self):
        with managed_temp_dir("repo_pages_home") as tmp:
            write(
                tmp / "pages-index.json",
                json.dumps(
                    {
                        "pages": [
                            {"slug": "about", "title": "About", "type": "page"},
                            {"slug": "welcome", "title": "Welcome", "type": "home"},
                        ]
                    }
                ),
            )
            write(tmp / "pages" / "about.md", '---\ntitle: "About"\n---\n\nAbout')
            write(tmp / "pages" / "welcome.md", '---\ntitle: "Welcome"\ntype: "home"\n---\n\nHi')
            home = PageContentRepository(tmp).get_home_page()
            self.assertEqual(home.slug, "welcome")
            self.assertEqual(home.type, "home")

    def test_home_page_falls_back_to_first_page(self):
        with managed_temp_dir("repo_pages_first") as tmp:
            write(tmp / "pages-index.json", json.dumps({"pages": [{"slug": "about", "title": "About", "type": "page"}]}))
            write(tmp / "pages" / "about.md", "About")
            self.assertEqual(PageContentRepository(tmp).get_home_page().slug, "about")

    def test_no_pages_means_no_home(self):
        with managed_temp_dir("repo_pages_empty") as tmp:
            self.assertIsNone(PageContentRepository(tmp).get_home_page())


class ExcerptFromMarkdownTests(unittest.TestCase):
    def test_strips_images_links_and_markup(self):
        markdown = "# Title\n\n![alt](a.png) See [the guide](https://x.test) for *more*."
        self.assertEqual(excerpt_from_markdown(markdown), "Title See the guide for more.")
        self.assertEqual(len(excerpt_from_markdown("a" * 500)), 200)
