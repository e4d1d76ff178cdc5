"""
INSPIRE 客户端单元测试（MagicMock 替代 requests.Session，不访问网络）
"""

import unittest
from unittest.mock import MagicMock

import requests

from agents.errors import NetworkError, NotFoundError, UpstreamError
from agents.inspire_agent import InspireClient


def _response(status=200, payload=None, text=""):
    resp = MagicMock()
    resp.status_code = status
    resp.text = text
    if isinstance(payload, Exception):
        resp.json.side_effect = payload
    else:
        resp.json.return_value = payload
    return resp


class TestInspireClient(unittest.TestCase):

    def setUp(self):
        self.session = MagicMock()
        self.session.headers = {}
        self.client = InspireClient(session=self.session, delay=0)

    def test_search_query_parameters(self):
        self.session.get.return_value = _response(payload={"hits": {"hits": [{"id": 1}]}})

        items = self.client.search_citing_records("2670073")

        self.assertEqual(items, [{"id": 1}])
        args, kwargs = self.session.get.call_args
        self.assertEqual(args[0], "https://inspirehep.net/api/literature")
        self.assertEqual(kwargs["params"], {
            "sort": "mostrecent",
            "size": 25,
            "page": 1,
            "q": "refersto:recid:2670073",
        })
        self.assertEqual(
            self.session.headers["Accept"], "application/vnd+inspire.record.ui+json",
        )

    def test_search_no_hits_returns_empty(self):
        self.session.get.return_value = _response(payload={"hits": {"hits": [], "total": 0}})
        self.assertEqual(self.client.search_citing_records("1"), [])

    def test_search_transport_failure(self):
        self.session.get.side_effect = requests.ConnectionError("boom")
        with self.assertRaises(NetworkError):
            self.client.search_citing_records("1")

    def test_search_timeout(self):
        self.session.get.side_effect = requests.Timeout("slow")
        with self.assertRaises(NetworkError):
            self.client.search_citing_records("1")

    def test_search_server_error(self):
        self.session.get.return_value = _response(status=502, text="bad gateway")
        with self.assertRaises(UpstreamError):
            self.client.search_citing_records("1")

    def test_search_malformed_json(self):
        self.session.get.return_value = _response(payload=ValueError("not json"))
        with self.assertRaises(UpstreamError):
            self.client.search_citing_records("1")

    def test_search_missing_hits(self):
        self.session.get.return_value = _response(payload={"unexpected": True})
        with self.assertRaises(UpstreamError):
            self.client.search_citing_records("1")

    def test_fetch_title(self):
        self.session.get.return_value = _response(payload={
            "metadata": {"titles": [{"title": "Logical quantum processor"}, {"title": "Other"}]},
        })
        self.assertEqual(self.client.fetch_record_title("2670073"), "Logical quantum processor")
        self.assertEqual(
            self.session.get.call_args[0][0],
            "https://inspirehep.net/api/literature/2670073",
        )

    def test_fetch_title_defaults_to_untitled(self):
        self.session.get.return_value = _response(payload={"metadata": {}})
        self.assertEqual(self.client.fetch_record_title("1"), "Untitled")

    def test_fetch_title_malformed(self):
        for metadata in ({"titles": ["plain string"]}, {"titles": "oops"},
                         {"titles": [{"title": 7}]}):
            with self.subTest(metadata=metadata):
                self.session.get.return_value = _response(payload={"metadata": metadata})
                with self.assertRaises(UpstreamError):
                    self.client.fetch_record_title("1")

    def test_fetch_title_not_found(self):
        self.session.get.return_value = _response(status=404)
        with self.assertRaises(NotFoundError):
            self.client.fetch_record_title("999999999")

    def test_custom_base_url_and_page_size(self):
        client = InspireClient(
            base_url="https://example.org/api/literature/", page_size=10,
            session=self.session, delay=0,
        )
        self.session.get.return_value = _response(payload={"hits": {"hits": []}})
        client.search_citing_records("5")
        args, kwargs = self.session.get.call_args
        self.assertEqual(args[0], "https://example.org/api/literature")
        self.assertEqual(kwargs["params"]["size"], 10)


if __name__ == "__main__":
    unittest.main()
