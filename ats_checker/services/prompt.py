from __future__ import annotations

OUTPUT_SCHEMA_EXAMPLE = """{
  "overallScore": 85,
  "sections": {
    "keywords": {"score": 85, "status": "good"},
    "formatting": {"score": 78, "status": "fair"},
    "structure": {"score": 88, "status": "excellent"},
    "length": {"score": 75, "status": "fair"}
  },
  "keywordAnalysis": {
    "matched": ["keyword1", "keyword2"],
    "missing": ["keyword3", "keyword4"],
    "density": 2.3
  },
  "suggestions": [
    "Suggestion 1",
    "Suggestion 2",
    "Suggestion 3"
  ]
}"""

SCORING_GUIDELINES = (
    "Scoring guidelines:\n"
    "- Keywords: 0-100 (based on relevant technical skills, industry terms, and job-specific keywords)\n"
    "- Formatting: 0-100 (based on clean layout, consistent formatting, readability)\n"
    "- Structure: 0-100 (based on logical organization, clear sections, professional presentation)\n"
    "- Length: 0-100 (based on appropriate length for experience level, typically 1-2 pages)\n\n"
    'Status levels: "poor" (0-60), "fair" (61-75), "good" (76-85), "excellent" (86-100)'
)


def build_analysis_prompt(resume_text: str, job_description: str | None = None) -> str:
    job_text = (job_description or "").strip()
    if job_text:
        target = (
            f"JOB DESCRIPTION:\n{job_text}\n\n"
            "Please analyze how well the resume matches this specific job description."
        )
    else:
        target = "Please provide a general ATS analysis."

    return (
        "You are an expert ATS (Applicant Tracking System) analyzer. "
        "Analyze the following resume and provide a comprehensive ATS score and feedback.\n\n"
        f"RESUME TEXT:\n{resume_text}\n\n"
        f"{target}\n\n"
        f"Provide your analysis in the following JSON format:\n{OUTPUT_SCHEMA_EXAMPLE}\n\n"
        f"{SCORING_GUIDELINES}\n\n"
        "Return only the JSON response, no additional text."
    )
