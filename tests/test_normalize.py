"""
INSPIRE 记录归一化测试
"""

import unittest

from agents.errors import UpstreamError
from tracker.normalize import NormalizationPolicy, normalize_record


class TestNormalizeRecord(unittest.TestCase):

    def test_prefers_allow_listed_source(self):
        record = {"metadata": {
            "titles": [
                {"title": "Publisher title", "source": "Elsevier"},
                {"title": "arXiv title", "source": "arXiv"},
            ],
            "abstracts": [
                {"value": "Publisher abstract", "source": "Elsevier"},
                {"value": "APS abstract", "source": "APS"},
            ],
        }}
        citation = normalize_record(record)
        self.assertEqual(citation.title, "arXiv title")
        self.assertEqual(citation.source, "arXiv")
        self.assertEqual(citation.abstract, "APS abstract")

    def test_falls_back_to_first_entry(self):
        record = {"metadata": {
            "titles": [{"title": "First", "source": "Springer"}, {"title": "Second"}],
            "abstracts": [{"value": "Only abstract"}],
        }}
        citation = normalize_record(record)
        self.assertEqual(citation.title, "First")
        self.assertEqual(citation.source, "Springer")
        self.assertEqual(citation.abstract, "Only abstract")

    def test_defaults_when_fields_missing(self):
        citation = normalize_record({"metadata": {}})
        self.assertEqual(citation.title, "N/A")
        self.assertEqual(citation.abstract, "N/A")
        self.assertEqual(citation.source, "Unknown")
        self.assertEqual(citation.identifier, "N/A")

    def test_title_without_source(self):
        citation = normalize_record({"metadata": {"titles": [{"title": "No source"}]}})
        self.assertEqual(citation.source, "Unknown")

    def test_identifier_from_ads_link(self):
        record = {"metadata": {
            "external_system_identifiers": [
                {"url_name": "CDS", "url_link": "https://cds.cern.ch/record/1"},
                {"url_name": "ADS Abstract Service",
                 "url_link": "https://ui.adsabs.harvard.edu/abs/arXiv:2401.01234"},
            ],
            "dois": [{"value": "10.1103/PhysRevLett.1"}],
        }}
        self.assertEqual(normalize_record(record).identifier, "2401.01234")

    def test_identifier_falls_back_to_doi(self):
        record = {"metadata": {"dois": [{"value": "10.1103/PhysRevLett.1"}, {"value": "x"}]}}
        self.assertEqual(normalize_record(record).identifier, "10.1103/PhysRevLett.1")

    def test_custom_policy(self):
        policy = NormalizationPolicy(
            preferred_sources=("Elsevier",), identifier_url_name="CDS",
        )
        record = {"metadata": {
            "titles": [
                {"title": "arXiv title", "source": "arXiv"},
                {"title": "Publisher title", "source": "Elsevier"},
            ],
            "external_system_identifiers": [
                {"url_name": "CDS", "url_link": "cds:2879461"},
            ],
        }}
        citation = normalize_record(record, policy)
        self.assertEqual(citation.title, "Publisher title")
        self.assertEqual(citation.identifier, "2879461")


    def test_malformed_shapes_raise_upstream_error(self):
        malformed = [
            "not a hit",
            {"metadata": ["not", "a", "dict"]},
            {"metadata": {"titles": ["just a string"]}},
            {"metadata": {"titles": {"title": "dict instead of list"}}},
            {"metadata": {"abstracts": [42]}},
            {"metadata": {"titles": [{"title": ["nested"]}]}},
            {"metadata": {"external_system_identifiers": ["ADS"]}},
            {"metadata": {"dois": ["10.1103/x"]}},
        ]
        for record in malformed:
            with self.subTest(record=record):
                with self.assertRaises(UpstreamError):
                    normalize_record(record)

    def test_null_fields_use_defaults(self):
        citation = normalize_record({"metadata": {"titles": None, "dois": None}})
        self.assertEqual(citation.title, "N/A")
        self.assertEqual(citation.identifier, "N/A")

if __name__ == "__main__":
    unittest.main()
