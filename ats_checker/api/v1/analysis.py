from fastapi import APIRouter, File, Form, HTTPException, Request, UploadFile, status

from ats_checker.core.config import settings
from ats_checker.core.rate_limit import rate_limit
from ats_checker.parsing.artifacts import looks_like_binary_artifact
from ats_checker.parsing.extract import extract_text
from ats_checker.parsing.models import UploadedDocument
from ats_checker.schemas.analysis import AnalysisResult, ExtractTextResponse
from ats_checker.services.analysis_service import get_resume_analyzer
from ats_checker.services.errors import ResumeAnalysisError

router = APIRouter()

UPLOAD_CHUNK_BYTES = 1024 * 64


async def read_upload(file: UploadFile) -> UploadedDocument:
    filename = file.filename or "uploaded-file"
    limit = settings.max_upload_bytes

    chunks: list[bytes] = []
    total = 0
    while True:
        chunk = await file.read(UPLOAD_CHUNK_BYTES)
        if not chunk:
            break
        total += len(chunk)
        if total > limit:
            raise HTTPException(
                status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
                detail=f"File too large. Maximum allowed size is {limit // (1024 * 1024)} MB.",
            )
        chunks.append(chunk)

    return UploadedDocument(
        content=b"".join(chunks),
        media_type=file.content_type or "",
        filename=filename,
        size=total,
    )


@router.post("/analyze", response_model=AnalysisResult)
@rate_limit()
async def analyze_resume(
    request: Request,
    file: UploadFile = File(...),
    job_description: str | None = Form(default=None),
):
    _ = request
    document = await read_upload(file)
    return await get_resume_analyzer().analyze_document(document, job_description or None)


@router.post("/extract-text", response_model=ExtractTextResponse)
@rate_limit()
async def extract_resume_text(request: Request, file: UploadFile = File(...)):
    _ = request
    document = await read_upload(file)
    try:
        extracted = await extract_text(document)
    except ResumeAnalysisError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc

    return ExtractTextResponse(
        filename=document.filename,
        source_type=extracted.source_type,
        strategy=extracted.strategy,
        is_placeholder=extracted.is_placeholder,
        characters=len(extracted.text),
        looks_like_artifact=looks_like_binary_artifact(extracted.text),
        preview=extracted.text[:200],
    )
