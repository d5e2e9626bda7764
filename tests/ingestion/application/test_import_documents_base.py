import unittest

from src.ingestion.application.workflows.import_documents import ImportDocumentsWorkflow, ImportWorkflowConfig
from src.ingestion.domain.extraction import page_content_extractor
from tests.utils.site_fakes import FakeDocumentSink, FakeFetcher, FakeIndexSink


def make_kwargs():
    return {
        "fetcher": FakeFetcher({}),
        "document_sink": FakeDocumentSink(),
        "index_sink": FakeIndexSink(),
        "extractor": page_content_extractor(),
        "config": ImportWorkflowConfig(show_progress=False),
    }


class ListedUrlsWorkflow(ImportDocumentsWorkflow[str, str]):
    def __init__(self, urls, **kwargs):
        super().__init__(**kwargs)
        self.urls = urls

    async def load_sources(self, session):
        return list(self.urls)

    def source_url(self, source):
        return source

    async def import_one(self, session, source, allocator):
        return allocator.allocate("doc")

    def build_index(self, entries):
        return {"entries": list(entries)}


class ImportDocumentsWorkflowTests(unittest.IsolatedAsyncioTestCase):
    def test_incomplete_subclass_fails_at_construction(self):
        class MissingIndex(ImportDocumentsWorkflow[str, str]):
            async def load_sources(self, session):
                return []

            def source_url(self, source):
                return source

            async def import_one(self, session, source, allocator):
                return source

        with self.assertRaises(TypeError):
            MissingIndex(**make_kwargs())

    def test_base_class_cannot_be_instantiated(self):
        with self.assertRaises(TypeError):
            ImportDocumentsWorkflow(**make_kwargs())

    async def test_complete_subclass_runs_with_deduplicated_sources(self):
        kwargs = make_kwargs()
        workflow = ListedUrlsWorkflow(["https://site.test/a", "https://site.test/b", "https://site.test/a"], **kwargs)

        summary = await workflow.run()

        self.assertEqual(summary.source_total, 2)
        self.assertEqual(summary.imported_total, 2)
        self.assertEqual(kwargs["index_sink"].payloads, [{"entries": ["doc", "doc-2"]}])
