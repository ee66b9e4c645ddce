import unittest

from ats_checker.schemas.analysis import SECTION_KEYS, SectionScores
from ats_checker.services.fallback import build_fallback


class FallbackBuilderTests(unittest.TestCase):
    def test_fallback_invariants_hold_for_any_reason(self):
        for reason in ("Request timeout after 25s", "", "API configuration error", "x" * 5000, None):
            with self.subTest(reason=reason):
                result = build_fallback("resume.pdf", reason)
                self.assertEqual(result.overall_score, 0)
                self.assertFalse(result.is_from_gemini)
                self.assertEqual(len(result.suggestions), 6)
                for key in ("keywords", "formatting", "structure", "length"):
                    section = getattr(result.sections, key)
                    self.assertEqual(section.score, 0)
                    self.assertEqual(section.status, "poor")
                self.assertEqual(result.keyword_analysis.matched, [])
                self.assertEqual(result.keyword_analysis.missing, [])
                self.assertEqual(result.keyword_analysis.density, 0)

    def test_reason_is_carried_for_diagnostics(self):
        result = build_fallback("resume.pdf", "Request timeout after 25s")
        self.assertEqual(result.resume_text, "Analysis failed: Request timeout after 25s")
        self.assertEqual(result.file_name, "resume.pdf")

    def test_missing_reason_uses_generic_message(self):
        result = build_fallback("resume.pdf")
        self.assertEqual(result.resume_text, "Analysis failed: Unable to extract readable text from file")

    def test_suggestions_are_deterministic(self):
        self.assertEqual(build_fallback("a.pdf", "one").suggestions, build_fallback("b.txt", "two").suggestions)

    def test_serializes_with_camel_case_keys(self):
        body = build_fallback("resume.pdf", "boom").model_dump(mode="json", by_alias=True)
        self.assertEqual(body["overallScore"], 0)
        self.assertIs(body["isFromGemini"], False)
        self.assertIn("keywordAnalysis", body)
        self.assertIn("analysisDate", body)


    def test_section_keys_match_section_scores(self):
        self.assertEqual(SECTION_KEYS, ("keywords", "formatting", "structure", "length"))
        self.assertEqual(SECTION_KEYS, tuple(SectionScores.model_fields))


if __name__ == "__main__":
    unittest.main()
