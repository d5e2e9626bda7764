import unittest

from src.ingestion.domain.extraction import (
    BLOG_MIN_TEXT_LENGTH,
    ContentExtractor,
    SelectorOutcome,
    blog_content_extractor,
    first_attr,
    first_text,
    meta_content,
    page_content_extractor,
    parse_html,
    text_of,
)

LONG_TEXT = "Strength training for busy parents starts with a plan you can repeat every week. " * 3


class ContentExtractorTests(unittest.TestCase):
    def test_first_sufficient_candidate_wins(self):
        soup = parse_html(
            "<html><body><nav>Home Blog About</nav><main><article>"
            f"<h1>Title</h1><p>{LONG_TEXT}</p><script>var x = 1;</script>"
            "</article></main><footer>Copyright</footer></body></html>"
        )
        content = blog_content_extractor().extract(soup)
        self.assertEqual(content.selector, "main article")
        self.assertIn("Strength training", content.text)
        self.assertNotIn("var x", content.text)
        self.assertNotIn("<script", content.html)
        self.assertIn("<h1>Title</h1>", content.html)

    def test_thin_candidates_fall_through_to_body(self):
        soup = parse_html(
            "<html><body><main><p>Too short.</p></main>"
            f"<div class='content'><p>{LONG_TEXT}</p></div>"
            "<header>Site header</header><form>Subscribe</form></body></html>"
        )
        content = page_content_extractor().extract(soup)
        self.assertEqual(content.selector, "body")
        self.assertIn("Too short.", content.text)
        self.assertIn("Strength training", content.text)
        self.assertNotIn("Site header", content.text)
        self.assertNotIn("Subscribe", content.text)

    def test_body_is_accepted_even_when_thin(self):
        soup = parse_html("<html><body><p>Hi</p></body></html>")
        content = blog_content_extractor().extract(soup)
        self.assertEqual(content.selector, "body")
        self.assertEqual(content.text, "Hi")

    def test_stripping_does_not_mutate_the_document(self):
        soup = parse_html(f"<html><body><main><nav>Menu</nav><p>{LONG_TEXT}</p></main></body></html>")
        page_content_extractor().extract(soup)
        self.assertIsNotNone(soup.select_one("nav"))

    def test_evaluate_reports_outcomes(self):
        extractor = ContentExtractor(("article", "body"), min_text_length=BLOG_MIN_TEXT_LENGTH)
        soup = parse_html("<html><body><article>short</article></body></html>")
        self.assertEqual(extractor.evaluate(soup, "main")[0], SelectorOutcome.ABSENT)
        self.assertEqual(extractor.evaluate(soup, "article")[0], SelectorOutcome.THIN)
        soup = parse_html(f"<html><body><article>{LONG_TEXT}</article></body></html>")
        self.assertEqual(extractor.evaluate(soup, "article")[0], SelectorOutcome.SUFFICIENT)

    def test_body_is_appended_when_missing_from_chain(self):
        extractor = ContentExtractor(("article",), min_text_length=10)
        self.assertEqual(extractor.selectors[-1], "body")

    def test_empty_document_yields_empty_content(self):
        content = page_content_extractor().extract(parse_html(""))
        self.assertEqual(content.text, "")


class MetadataHelpersTests(unittest.TestCase):
    def test_meta_heading_and_attr_lookups(self):
        soup = parse_html(
            "<html><head><title> Site | About </title>"
            '<meta property="og:title" content="  OG   Title ">'
            '<meta property="article:published_time" content="2024-01-02T03:04:05Z">'
            "</head><body><article><h1>Heading</h1>"
            '<time datetime="2023-12-31">Dec 31</time></article></body></html>'
        )
        self.assertEqual(meta_content(soup, "og:title"), "OG Title")
        self.assertEqual(meta_content(soup, "article:published_time"), "2024-01-02T03:04:05Z")
        self.assertEqual(meta_content(soup, "og:description"), "")
        self.assertEqual(first_text(soup, "title"), "Site | About")
        self.assertEqual(first_text(soup, "article h1"), "Heading")
        self.assertEqual(first_attr(soup, "time[datetime]", "datetime"), "2023-12-31")
        self.assertEqual(first_text(soup, "main h1"), "")


class TextOfTests(unittest.TestCase):
    def test_inline_elements_join_without_extra_spaces(self):
        soup = parse_html("<p>Read the <a>guide</a>, then <b>lift</b>. Don't s<em>kip</em> it.</p>")
        self.assertEqual(text_of(soup), "Read the guide, then lift. Don't skip it.")

    def test_block_boundaries_become_spaces(self):
        soup = parse_html("<div><h1>Plan</h1><p>Week one</p><ul><li>Squat</li><li>Row</li></ul>done</div>")
        self.assertEqual(text_of(soup), "Plan Week one Squat Row done")

    def test_comments_are_ignored(self):
        soup = parse_html("<p>kept<!-- hidden --> text</p>")
        self.assertEqual(text_of(soup), "kept text")

    def test_excerpt_source_text_has_no_stray_spaces(self):
        body = "Read the <a href='/guide'>guide</a>, then <b>lift</b>. " * 6
        soup = parse_html(f"<html><body><main><article><p>{body}</p></article></main></body></html>")
        content = blog_content_extractor().extract(soup)
        self.assertEqual(content.selector, "main article")
        self.assertTrue(content.text.startswith("Read the guide, then lift. Read the guide"))
