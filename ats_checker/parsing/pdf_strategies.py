from __future__ import annotations

import asyncio
import logging
import re
from dataclasses import dataclass
from functools import cmp_to_key, partial
from io import BytesIO
from typing import Awaitable, Callable, Sequence

from pypdf import PdfReader

from ats_checker.core.config.analysis import get_analysis_value
from ats_checker.parsing.artifacts import looks_like_binary_artifact
from ats_checker.parsing.models import PdfFragment
from ats_checker.services.errors import ExtractionFailed

logger = logging.getLogger(__name__)

PdfStrategy = Callable[[bytes], Awaitable[str]]
AcceptancePredicate = Callable[[str], bool]

LETTER_RUN_RE = re.compile(r"[a-zA-Z]{3,}")
WHITESPACE_RE = re.compile(r"\s+")
HORIZONTAL_SPACE_RE = re.compile(r"[^\S\n]+")
BLANK_LINES_RE = re.compile(r"\n\s*\n")


@dataclass(frozen=True)
class PdfReaderConfig:
    name: str
    strict: bool
    extraction_mode: str


DEFAULT_READER_CONFIGS: tuple[PdfReaderConfig, ...] = (
    PdfReaderConfig(name="lenient-plain", strict=False, extraction_mode="plain"),
    PdfReaderConfig(name="strict-plain", strict=True, extraction_mode="plain"),
    PdfReaderConfig(name="lenient-layout", strict=False, extraction_mode="layout"),
)


@dataclass(frozen=True)
class PdfStrategyStep:
    name: str
    run: PdfStrategy
    accept: AcceptancePredicate


def _min_pdf_chars() -> int:
    return int(get_analysis_value("extraction.pdf.min_chars", 100))


def is_acceptable_candidate(text: str, *, min_chars: int | None = None) -> bool:
    threshold = _min_pdf_chars() if min_chars is None else min_chars
    return bool(text) and len(text) > threshold and not looks_like_binary_artifact(text)


def collapse_whitespace(text: str) -> str:
    return WHITESPACE_RE.sub(" ", text).strip()


def collapse_layout_whitespace(text: str) -> str:
    text = HORIZONTAL_SPACE_RE.sub(" ", text)
    text = re.sub(r" ?\n ?", "\n", text)
    text = BLANK_LINES_RE.sub("\n", text)
    return text.strip()


# Layout-aware extraction


def _fragment_position(cm: Sequence[float], tm: Sequence[float]) -> tuple[float, float]:
    # Translation part of tm x cm.
    x = tm[4] * cm[0] + tm[5] * cm[2] + cm[4]
    y = tm[4] * cm[1] + tm[5] * cm[3] + cm[5]
    return float(x), float(y)


def collect_page_fragments(page) -> list[PdfFragment]:
    fragments: list[PdfFragment] = []

    def visitor(text, cm, tm, font_dict, font_size):
        if not text or not text.strip():
            return
        x, y = _fragment_position(cm, tm)
        fragments.append(PdfFragment(text=text.strip(), x=x, y=y))

    page.extract_text(visitor_text=visitor)
    return fragments


def order_fragments(fragments: Sequence[PdfFragment], *, row_tolerance: float) -> list[PdfFragment]:
    """Top-to-bottom, then left-to-right for fragments sharing a row."""

    def compare(a: PdfFragment, b: PdfFragment) -> int:
        if abs(a.y - b.y) > row_tolerance:
            return -1 if a.y > b.y else 1
        if a.x == b.x:
            return 0
        return -1 if a.x < b.x else 1

    return sorted(fragments, key=cmp_to_key(compare))


def join_fragments(fragments: Sequence[PdfFragment], *, line_break_threshold: float) -> str:
    lines: list[str] = []
    current: list[str] = []
    last_y: float | None = None
    for fragment in fragments:
        if last_y is not None and abs(fragment.y - last_y) > line_break_threshold and current:
            lines.append(" ".join(current))
            current = []
        current.append(fragment.text)
        last_y = fragment.y
    if current:
        lines.append(" ".join(current))
    return "\n".join(lines)


def extract_layout_text(content: bytes) -> str:
    row_tolerance = float(get_analysis_value("extraction.pdf.same_row_tolerance", 5))
    line_break_threshold = float(get_analysis_value("extraction.pdf.line_break_threshold", 10))

    reader = PdfReader(BytesIO(content))
    pages: list[str] = []
    for page in reader.pages:
        ordered = order_fragments(collect_page_fragments(page), row_tolerance=row_tolerance)
        pages.append(join_fragments(ordered, line_break_threshold=line_break_threshold))

    text = collapse_layout_whitespace("\n\n".join(pages))
    if len(text) < _min_pdf_chars():
        raise ExtractionFailed("Insufficient text extracted from PDF")
    if not LETTER_RUN_RE.search(text):
        raise ExtractionFailed("Extracted content appears to be PDF code, not readable text")
    return text


async def layout_strategy(content: bytes) -> str:
    return await asyncio.to_thread(extract_layout_text, content)


# Alternate reader configurations


def extract_with_reader_config(content: bytes, config: PdfReaderConfig) -> str:
    reader = PdfReader(BytesIO(content), strict=config.strict)
    parts = [page.extract_text(extraction_mode=config.extraction_mode) or "" for page in reader.pages]
    return collapse_whitespace("\n".join(parts))


def extract_with_reader_configs(content: bytes, configs: Sequence[PdfReaderConfig]) -> str:
    for config in configs:
        try:
            text = extract_with_reader_config(content, config)
        except Exception as exc:  # noqa: BLE001 - next configuration is tried
            logger.info("pdf_reader_config_failed config=%s: %s", config.name, exc)
            continue
        if is_acceptable_candidate(text):
            return text
        logger.info("pdf_reader_config_rejected config=%s chars=%s", config.name, len(text))
    raise ExtractionFailed("All PDF reader configurations failed")


def make_reader_config_strategy(configs: Sequence[PdfReaderConfig] = DEFAULT_READER_CONFIGS) -> PdfStrategy:
    attempts = tuple(configs)

    async def strategy(content: bytes) -> str:
        return await asyncio.to_thread(extract_with_reader_configs, content, attempts)

    return strategy


# Optical recognition


def ocr_pdf_pages(content: bytes, *, scale: float, language: str, tesseract_cmd: str | None = None) -> str:
    import fitz  # PyMuPDF
    import pytesseract
    from PIL import Image

    if tesseract_cmd:
        pytesseract.pytesseract.tesseract_cmd = tesseract_cmd

    document = fitz.open(stream=content, filetype="pdf")
    try:
        matrix = fitz.Matrix(scale, scale)
        chunks: list[str] = []
        for page in document:
            pixmap = page.get_pixmap(matrix=matrix)
            with Image.open(BytesIO(pixmap.tobytes("png"))) as image:
                chunks.append(pytesseract.image_to_string(image, lang=language) or "")
    finally:
        document.close()
    return collapse_whitespace("\n".join(chunks))


def make_ocr_strategy(*, scale: float = 2.0, language: str = "eng", tesseract_cmd: str | None = None) -> PdfStrategy:
    async def strategy(content: bytes) -> str:
        return await asyncio.to_thread(
            partial(ocr_pdf_pages, content, scale=scale, language=language, tesseract_cmd=tesseract_cmd)
        )

    return strategy


# Raw byte scan


def scan_raw_bytes(content: bytes, *, chunk_size: int | None = None) -> str:
    size = chunk_size or int(get_analysis_value("extraction.pdf.raw_scan_chunk_bytes", 4096))
    words: list[str] = []
    for start in range(0, len(content), size):
        chunk = content[start : start + size].decode("utf-8", errors="replace")
        words.extend(LETTER_RUN_RE.findall(chunk))
    return collapse_whitespace(" ".join(words))


async def raw_scan_strategy(content: bytes) -> str:
    return await asyncio.to_thread(scan_raw_bytes, content)


# Chain


def build_pdf_strategy_chain(
    *,
    reader_configs: Sequence[PdfReaderConfig] = DEFAULT_READER_CONFIGS,
    ocr_enabled: bool = True,
    ocr_scale: float = 2.0,
    ocr_language: str = "eng",
    tesseract_cmd: str | None = None,
) -> list[PdfStrategyStep]:
    steps = [
        PdfStrategyStep(name="layout", run=layout_strategy, accept=is_acceptable_candidate),
        PdfStrategyStep(
            name="reader-configs",
            run=make_reader_config_strategy(reader_configs),
            accept=is_acceptable_candidate,
        ),
    ]
    if ocr_enabled:
        steps.append(
            PdfStrategyStep(
                name="ocr",
                run=make_ocr_strategy(scale=ocr_scale, language=ocr_language, tesseract_cmd=tesseract_cmd),
                accept=is_acceptable_candidate,
            )
        )
    steps.append(PdfStrategyStep(name="raw-scan", run=raw_scan_strategy, accept=is_acceptable_candidate))
    return steps


async def run_strategy_chain(content: bytes, steps: Sequence[PdfStrategyStep]) -> tuple[str, str] | None:
    """Return ``(strategy_name, text)`` for the first accepted candidate, else ``None``."""
    for step in steps:
        try:
            candidate = await step.run(content)
        except Exception as exc:  # noqa: BLE001 - next strategy is tried
            logger.info("pdf_strategy_failed strategy=%s: %s", step.name, exc)
            continue
        if candidate and step.accept(candidate):
            logger.info("pdf_strategy_accepted strategy=%s chars=%s", step.name, len(candidate))
            return step.name, candidate
        logger.info("pdf_strategy_rejected strategy=%s chars=%s", step.name, len(candidate or ""))
    return None
