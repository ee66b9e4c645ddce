import unittest

from ats_checker.core.config.analysis import get_analysis_config, get_analysis_value
from ats_checker.schemas.analysis import status_for_score


class AnalysisConfigTests(unittest.TestCase):
    def test_loader_and_value_lookup(self):
        config = get_analysis_config()
        self.assertIsInstance(config, dict)
        self.assertEqual(get_analysis_value("extraction.pdf.min_chars"), 100)
        self.assertEqual(get_analysis_value("extraction.txt.min_chars"), 50)
        self.assertEqual(get_analysis_value("missing.path", "fallback"), "fallback")

    def test_status_bands(self):
        cases = {0: "poor", 60: "poor", 61: "fair", 75: "fair", 76: "good", 85: "good", 86: "excellent", 100: "excellent"}
        for score, expected in cases.items():
            with self.subTest(score=score):
                self.assertEqual(status_for_score(score), expected)


if __name__ == "__main__":
    unittest.main()
