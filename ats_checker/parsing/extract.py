from __future__ import annotations

import asyncio
import codecs
import logging
from io import BytesIO
from typing import Sequence
from zipfile import ZipFile

import defusedxml.ElementTree as ET
from docx import Document

from ats_checker.core.config import settings
from ats_checker.core.config.analysis import get_analysis_value
from ats_checker.parsing.models import (
    DOCX_MEDIA_TYPE,
    PDF_MEDIA_TYPE,
    TXT_MEDIA_TYPE,
    ExtractedText,
    UploadedDocument,
)
from ats_checker.parsing.pdf_strategies import (
    PdfStrategyStep,
    build_pdf_strategy_chain,
    run_strategy_chain,
)
from ats_checker.services.errors import ExtractionFailed, TooShort, UnsupportedFormat

logger = logging.getLogger(__name__)

PLACEHOLDER_LEAD_IN = "Resume Analysis - "
PLACEHOLDER_MARKER = "This PDF appears to contain scanned content"


def detect_source_type(document: UploadedDocument) -> str:
    media_type = (document.media_type or "").split(";")[0].strip().lower()
    extension = document.extension
    if media_type == PDF_MEDIA_TYPE or extension == "pdf":
        return "pdf"
    if media_type == DOCX_MEDIA_TYPE or extension == "docx":
        return "docx"
    if media_type == TXT_MEDIA_TYPE or extension == "txt":
        return "txt"
    raise UnsupportedFormat("Unsupported file format. Please upload a PDF, DOCX, or TXT file.")


def is_placeholder_text(text: str) -> bool:
    return PLACEHOLDER_MARKER in text or PLACEHOLDER_LEAD_IN in text


def build_placeholder_text(document: UploadedDocument) -> str:
    size_mb = document.size / 1024 / 1024
    return (
        f"{PLACEHOLDER_LEAD_IN}{document.filename}\n\n"
        f"{PLACEHOLDER_MARKER} or encoded text that cannot be automatically extracted.\n\n"
        "To get accurate ATS analysis, please:\n"
        "1. Convert this PDF to a Word document (.docx) or text file (.txt)\n"
        "2. Ensure the document contains selectable text, not just images\n"
        "3. If this is a scanned document, use OCR software to convert it to text first\n\n"
        "File Information:\n"
        f"- Name: {document.filename}\n"
        f"- Size: {size_mb:.2f} MB\n"
        "- Type: PDF (may contain scanned content)\n\n"
        "For best results, recreate your resume in a text-based format and upload again."
    )


def extract_txt_text(content: bytes) -> str:
    text = ""
    encodings = ("utf-8-sig", "latin-1")
    if content.startswith((codecs.BOM_UTF16_LE, codecs.BOM_UTF16_BE)):
        encodings = ("utf-16", *encodings)
    for encoding in encodings:
        try:
            text = content.decode(encoding)
            break
        except UnicodeDecodeError:
            continue
    min_chars = int(get_analysis_value("extraction.txt.min_chars", 50))
    if len(text) < min_chars:
        raise TooShort("Text file appears to be too short to be a valid resume")
    return text


def _extract_docx_text_fallback(content: bytes) -> str:
    with ZipFile(BytesIO(content)) as archive:
        raw = archive.read("word/document.xml")
    root = ET.fromstring(raw)
    paragraphs: list[str] = []
    for paragraph in root.iter():
        if not paragraph.tag.endswith("}p"):
            continue
        texts = [node.text for node in paragraph.iter() if node.tag.endswith("}t") and node.text]
        if texts:
            paragraphs.append("".join(texts))
    return "\n".join(paragraphs)


def extract_docx_text(content: bytes) -> str:
    try:
        document = Document(BytesIO(content))
        text = "\n".join(paragraph.text for paragraph in document.paragraphs)
    except Exception as exc:  # noqa: BLE001 - zip/xml reader is tried next
        logger.info("docx_parser_failed parser=python-docx: %s", exc)
        try:
            text = _extract_docx_text_fallback(content)
        except Exception as fallback_exc:
            raise ExtractionFailed("Unable to extract text from DOCX file") from fallback_exc

    min_chars = int(get_analysis_value("extraction.docx.min_chars", 50))
    if len(text) < min_chars:
        raise ExtractionFailed("Unable to extract text from DOCX file")
    return text


class TextExtractor:
    def __init__(self, pdf_strategies: Sequence[PdfStrategyStep] | None = None):
        self._pdf_strategies = list(pdf_strategies) if pdf_strategies is not None else None

    def _strategies(self) -> list[PdfStrategyStep]:
        if self._pdf_strategies is None:
            self._pdf_strategies = build_pdf_strategy_chain(
                ocr_enabled=settings.ocr_enabled,
                ocr_scale=settings.ocr_scale,
                ocr_language=settings.ocr_language,
                tesseract_cmd=settings.tesseract_cmd,
            )
        return self._pdf_strategies

    async def extract(self, document: UploadedDocument) -> ExtractedText:
        source_type = detect_source_type(document)
        if source_type == "txt":
            text = extract_txt_text(document.content)
            return ExtractedText(text=text, source_type="txt", strategy="text-decode")
        if source_type == "docx":
            text = await asyncio.to_thread(extract_docx_text, document.content)
            return ExtractedText(text=text, source_type="docx", strategy="docx")
        return await self._extract_pdf(document)

    async def _extract_pdf(self, document: UploadedDocument) -> ExtractedText:
        outcome = await run_strategy_chain(document.content, self._strategies())
        if outcome is not None:
            strategy, text = outcome
            return ExtractedText(text=text, source_type="pdf", strategy=strategy)

        logger.warning("pdf_strategies_exhausted file=%s size=%s", document.filename, document.size)
        return ExtractedText(
            text=build_placeholder_text(document),
            source_type="pdf",
            strategy="placeholder",
            is_placeholder=True,
        )


async def extract_text(document: UploadedDocument) -> ExtractedText:
    return await TextExtractor().extract(document)
