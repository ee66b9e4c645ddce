import json
import unittest

from ats_checker.services.response_parser import parse_model_reply


class ResponseParserTests(unittest.TestCase):
    def test_embedded_object_is_extracted_from_noise(self):
        payload = {
            "overallScore": 72,
            "sections": {
                "keywords": {"score": 70, "status": "fair"},
                "formatting": {"score": 80, "status": "good"},
                "structure": {"score": 90, "status": "excellent"},
                "length": {"score": 50, "status": "poor"},
            },
            "keywordAnalysis": {"matched": ["python", "sql"], "missing": ["kubernetes"], "density": 2.5},
            "suggestions": ["Quantify achievements", "Add a skills section"],
        }
        reply = f"noise {json.dumps(payload)} trailing"

        result = parse_model_reply(reply, "cv.pdf")

        self.assertEqual(result.overall_score, 72)
        self.assertTrue(result.is_from_gemini)
        self.assertEqual(result.file_name, "cv.pdf")
        self.assertEqual(result.sections.structure.status, "excellent")
        self.assertEqual(result.keyword_analysis.matched, ["python", "sql"])
        self.assertEqual(result.keyword_analysis.density, 2.5)
        self.assertEqual(result.suggestions, ["Quantify achievements", "Add a skills section"])
        self.assertIsNone(result.resume_text)

    def test_fenced_json_reply(self):
        reply = '```json\n{"overallScore": 64, "suggestions": ["Use standard headings"]}\n```'
        result = parse_model_reply(reply, "cv.docx")
        self.assertEqual(result.overall_score, 64)
        self.assertEqual(result.suggestions, ["Use standard headings"])

    def test_reply_without_braces_returns_zero_result(self):
        result = parse_model_reply("I cannot analyze this resume right now.", "cv.pdf")
        self.assertEqual(result.overall_score, 0)
        self.assertFalse(result.is_from_gemini)
        self.assertEqual(result.suggestions, ["Unable to analyze resume. Please try again."])

    def test_undecodable_json_returns_zero_result(self):
        result = parse_model_reply("{overallScore: eighty}", "cv.pdf")
        self.assertEqual(result.overall_score, 0)
        self.assertFalse(result.is_from_gemini)

    def test_non_object_json_returns_zero_result(self):
        result = parse_model_reply('[{"overallScore": 70}]', "cv.pdf")
        self.assertFalse(result.is_from_gemini)
        self.assertEqual(result.overall_score, 0)

    def test_mistyped_sections_are_defaulted_and_score_kept(self):
        result = parse_model_reply('{"overallScore": 70, "sections": "great"}', "cv.pdf")

        self.assertTrue(result.is_from_gemini)
        self.assertEqual(result.overall_score, 70)
        for key in ("keywords", "formatting", "structure", "length"):
            section = getattr(result.sections, key)
            self.assertEqual((section.score, section.status), (0, "poor"))

    def test_mistyped_suggestions_are_defaulted(self):
        result = parse_model_reply('{"overallScore": 72, "suggestions": "Add metrics"}', "cv.pdf")

        self.assertTrue(result.is_from_gemini)
        self.assertEqual(result.overall_score, 72)
        self.assertEqual(result.suggestions, [])

    def test_unparseable_density_is_defaulted(self):
        reply = '{"overallScore": 81, "keywordAnalysis": {"matched": ["python"], "density": "2.3%"}}'
        result = parse_model_reply(reply, "cv.pdf")

        self.assertTrue(result.is_from_gemini)
        self.assertEqual(result.overall_score, 81)
        self.assertEqual(result.keyword_analysis.matched, ["python"])
        self.assertEqual(result.keyword_analysis.density, 0.0)

    def test_mistyped_scores_are_defaulted(self):
        reply = '{"overallScore": "high", "sections": {"keywords": {"score": [1], "status": "good"}, "length": 5}}'
        result = parse_model_reply(reply, "cv.pdf")

        self.assertTrue(result.is_from_gemini)
        self.assertEqual(result.overall_score, 0)
        self.assertEqual((result.sections.keywords.score, result.sections.keywords.status), (0, "good"))
        self.assertEqual((result.sections.length.score, result.sections.length.status), (0, "poor"))

    def test_missing_fields_are_defaulted(self):
        result = parse_model_reply("{}", "cv.txt")

        self.assertTrue(result.is_from_gemini)
        self.assertEqual(result.overall_score, 0)
        for key in ("keywords", "formatting", "structure", "length"):
            section = getattr(result.sections, key)
            self.assertEqual((section.score, section.status), (0, "poor"))
        self.assertEqual(result.keyword_analysis.matched, [])
        self.assertEqual(result.keyword_analysis.missing, [])
        self.assertEqual(result.keyword_analysis.density, 0.0)
        self.assertEqual(result.suggestions, [])

    def test_scores_are_clamped_and_missing_status_derived(self):
        reply = '{"overallScore": 140.4, "sections": {"keywords": {"score": 77}, "length": {"score": -3, "status": "fair"}}}'
        result = parse_model_reply(reply, "cv.pdf")

        self.assertEqual(result.overall_score, 100)
        self.assertEqual((result.sections.keywords.score, result.sections.keywords.status), (77, "good"))
        # Model-supplied statuses are kept even when they disagree with the score.
        self.assertEqual((result.sections.length.score, result.sections.length.status), (0, "fair"))
        self.assertEqual(result.sections.formatting.status, "poor")

    def test_defaulting_is_idempotent(self):
        reply = 'prefix {"overallScore": 55} suffix'
        first = parse_model_reply(reply, "cv.pdf")
        second = parse_model_reply(reply, "cv.pdf")
        self.assertEqual(
            first.model_dump(exclude={"analysis_date"}),
            second.model_dump(exclude={"analysis_date"}),
        )


if __name__ == "__main__":
    unittest.main()
