"""
消息文本清洗测试
"""

import unittest

from utils.text_clean import clean_abstract, clean_title, truncate


class TestTextClean(unittest.TestCase):

    def test_inline_math_in_title(self):
        self.assertEqual(
            clean_title("Non-Abelian $\\mathbb{Z}_2$ topological\n  order"),
            "Non-Abelian Z_2 topological order",
        )

    def test_abstract_math_and_units(self):
        abstract = (
            "We measure $\\alpha_s$ at $\\sqrt{s}=13~\\mathrm{TeV}$.\n"
            "Display math $$E = mc^{2}$$ is kept readable."
        )
        self.assertEqual(
            clean_abstract(abstract),
            "We measure alpha_s at s=13 TeV. Display math E = mc^2 is kept readable.",
        )

    def test_plain_text_untouched(self):
        self.assertEqual(clean_abstract("No math here."), "No math here.")
        self.assertEqual(clean_abstract("N/A"), "N/A")

    def test_truncate(self):
        self.assertEqual(truncate("short", 10), "short")
        self.assertEqual(truncate("a" * 20, 10), "aaaaaaa...")


if __name__ == "__main__":
    unittest.main()
