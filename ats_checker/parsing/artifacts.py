from __future__ import annotations

import re

# Structural PDF markup that survives a failed text decode.
PDF_ARTIFACT_PATTERNS: tuple[re.Pattern[str], ...] = (
    re.compile(r"/\w+\s+\d+\s+\d+\s+R"),
    re.compile(r"BT\s+ET"),
    re.compile(r"Td\s+Tj"),
    re.compile(r"stream.*endstream", re.IGNORECASE),
    re.compile(r"/Font\s+\d+\s+\d+\s+R"),
    re.compile(r"/Type\s+/Page"),
    re.compile(r"/MediaBox\s+\["),
    re.compile(r"/Parent\s+\d+\s+\d+\s+R"),
)


def looks_like_binary_artifact(text: str) -> bool:
    if not text:
        return False
    return any(pattern.search(text) for pattern in PDF_ARTIFACT_PATTERNS)
