from fastapi import APIRouter, File, Form, HTTPException, Request, UploadFile, status

from ats_checker.api.v1.analysis import read_upload
from ats_checker.core.config import settings
from ats_checker.core.rate_limit import rate_limit
from ats_checker.schemas.analysis import NavigateRequest, ViewStateResponse
from ats_checker.services.analysis_service import get_resume_analyzer
from ats_checker.services.view_state import UPLOAD, InvalidViewTransition, ViewController, ViewSessionStore

router = APIRouter()

view_sessions = ViewSessionStore(max_sessions=settings.view_session_limit)


def _state(session_id: str, controller: ViewController) -> ViewStateResponse:
    return ViewStateResponse(session_id=session_id, view=controller.view, result=controller.result)


def _conflict(exc: InvalidViewTransition) -> HTTPException:
    return HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc))


@router.get("/sessions/{session_id}/view", response_model=ViewStateResponse)
async def get_view(session_id: str):
    return _state(session_id, view_sessions.get(session_id))


@router.post("/sessions/{session_id}/navigate", response_model=ViewStateResponse)
async def navigate(session_id: str, payload: NavigateRequest):
    controller = view_sessions.get(session_id)
    try:
        controller.navigate(payload.view)
    except InvalidViewTransition as exc:
        raise _conflict(exc) from exc
    return _state(session_id, controller)


@router.post("/sessions/{session_id}/analyze", response_model=ViewStateResponse)
@rate_limit()
async def analyze_in_session(
    request: Request,
    session_id: str,
    file: UploadFile = File(...),
    job_description: str | None = Form(default=None),
):
    _ = request
    controller = view_sessions.get(session_id)
    if controller.view != UPLOAD:
        raise _conflict(InvalidViewTransition("Open the upload view before analyzing."))

    document = await read_upload(file)
    result = await get_resume_analyzer().analyze_document(document, job_description or None)
    try:
        controller.complete_analysis(result)
    except InvalidViewTransition as exc:
        raise _conflict(exc) from exc
    return _state(session_id, controller)


@router.post("/sessions/{session_id}/analyze-another", response_model=ViewStateResponse)
async def analyze_another(session_id: str):
    controller = view_sessions.get(session_id)
    try:
        controller.analyze_another()
    except InvalidViewTransition as exc:
        raise _conflict(exc) from exc
    return _state(session_id, controller)
