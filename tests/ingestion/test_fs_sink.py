import json
import sys
import unittest

from pathvalidate import ValidationError

from src.ingestion.infrastructure.fs_sink import JsonIndexSink, MarkdownFileSink
from tests.utils.tempdir import managed_temp_dir


class MarkdownFileSinkTests(unittest.TestCase):
    def test_write_document_uses_slug_filename(self):
        with managed_temp_dir("fs_sink_md") as tmp:
            sink = MarkdownFileSink(tmp / "blog")
            file_path = sink.write_document("my-post", "---\ntitle: \"T\"\n---\n\nBody\n")

            self.assertEqual(file_path, tmp / "blog" / "my-post.md")
            self.assertEqual(file_path.read_text(encoding="utf-8"), "---\ntitle: \"T\"\n---\n\nBody\n")

    def test_write_document_overwrites(self):
        with managed_temp_dir("fs_sink_overwrite") as tmp:
            sink = MarkdownFileSink(tmp)
            sink.write_document("home", "old")
            file_path = sink.write_document("home", "new")
            self.assertEqual(file_path.read_text(encoding="utf-8"), "new")

    @unittest.skipIf(sys.platform == "win32", "reserved device name on Windows")
    def test_windows_device_names_are_valid_slugs(self):
        with managed_temp_dir("fs_sink_reserved") as tmp:
            sink = MarkdownFileSink(tmp)
            for slug in ("con", "aux", "nul", "com1"):
                file_path = sink.write_document(slug, "text")
                self.assertEqual(file_path.name, f"{slug}.md")
                self.assertTrue(file_path.exists())

    def test_rejects_unsafe_filename(self):
        with managed_temp_dir("fs_sink_unsafe") as tmp:
            sink = MarkdownFileSink(tmp)
            with self.assertRaises(ValidationError):
                sink.write_document("a/b", "text")


class JsonIndexSinkTests(unittest.TestCase):
    def test_write_index_is_pretty_printed_with_trailing_newline(self):
        with managed_temp_dir("fs_sink_index") as tmp:
            sink = JsonIndexSink(tmp / "nested" / "blog-index.json")
            file_path = sink.write_index({"posts": [{"title": "Café"}]})

            raw = file_path.read_text(encoding="utf-8")
            self.assertTrue(raw.endswith("}\n"))
            self.assertIn('  "posts": [', raw)
            self.assertIn("Café", raw)
            self.assertEqual(json.loads(raw), {"posts": [{"title": "Café"}]})
