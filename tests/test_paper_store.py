"""
被追踪论文库测试
"""

import shutil
import tempfile
import unittest

from agents.errors import InvalidArgumentError, NotFoundError, UpstreamError
from storage.json_store import JsonFileStorage
from tracker.paper_store import PaperStore


class FakeTitleSource:

    def __init__(self, titles=None, error=None):
        self.titles = titles or {}
        self.error = error
        self.calls = []

    def fetch_record_title(self, paper_id):
        self.calls.append(paper_id)
        if self.error:
            raise self.error
        return self.titles.get(paper_id, "Untitled")


class TestPaperStore(unittest.TestCase):

    def setUp(self):
        self.tmpdir = tempfile.mkdtemp()
        self.storage = JsonFileStorage(self.tmpdir)
        self.source = FakeTitleSource({"2670073": "Logical quantum processor", "42": "Answer"})
        self.store = PaperStore(self.storage, self.source)

    def tearDown(self):
        shutil.rmtree(self.tmpdir, ignore_errors=True)

    def test_add_and_list(self):
        paper = self.store.add("2670073")
        self.assertEqual(paper.title, "Logical quantum processor")
        self.store.add("42")
        self.assertEqual([p.paper_id for p in self.store.list()], ["2670073", "42"])

    def test_add_twice_keeps_one_entry(self):
        self.store.add("42")
        self.store.add("42")
        self.assertEqual([p.paper_id for p in self.store.list()], ["42"])
        self.assertEqual(self.source.calls, ["42"])

    def test_add_invalid(self):
        with self.assertRaises(InvalidArgumentError):
            self.store.add("12a3")
        self.assertEqual(self.source.calls, [])

    def test_add_fails_without_title(self):
        self.source.error = UpstreamError("HTTP 500")
        with self.assertRaises(UpstreamError):
            self.store.add("42")
        self.assertEqual(self.store.list(), [])

        self.source.error = NotFoundError("404")
        with self.assertRaises(NotFoundError):
            self.store.add("42")
        self.assertEqual(self.store.list(), [])

    def test_remove_is_total(self):
        self.store.add("2670073")
        self.store.add("42")
        self.assertTrue(self.store.remove("42"))
        self.assertNotIn("42", [p.paper_id for p in self.store.list()])
        self.assertFalse(self.store.remove("42"))
        self.assertEqual([p.paper_id for p in self.store.list()], ["2670073"])

    def test_remove_unknown_without_file(self):
        self.assertFalse(self.store.remove("1"))

    def test_get(self):
        self.store.add("42")
        self.assertEqual(self.store.get("42"), "Answer")
        self.assertIsNone(self.store.get("43"))

    def test_list_empty(self):
        self.assertEqual(self.store.list(), [])


if __name__ == "__main__":
    unittest.main()
