"""Server-rendered dashboard page bound to a session cookie.

A session is only stored once the visitor submits a scan; until then the
page is rendered from an empty state.
"""

from pathlib import Path
from typing import Optional

from fastapi import APIRouter, File, HTTPException, Request, UploadFile
from fastapi.responses import HTMLResponse, RedirectResponse
from fastapi.templating import Jinja2Templates

from controllers.scan_controller import get_store, submit_scan
from models.session_models import ScanSessionState
from services.scan.session import ScanSession
from views.presentation import page_view

TEMPLATES_DIR = Path(__file__).resolve().parent.parent / "templates"
SESSION_COOKIE = "orbitaleye_session"

router = APIRouter(include_in_schema=False)
templates = Jinja2Templates(directory=str(TEMPLATES_DIR))


def _existing_session(request: Request) -> Optional[ScanSession]:
    return get_store(request).find(request.cookies.get(SESSION_COOKIE))


def _back_to_index(session: Optional[ScanSession]) -> RedirectResponse:
    response = RedirectResponse(url="/", status_code=303)
    if session is not None:
        response.set_cookie(SESSION_COOKIE, session.session_id, httponly=True, samesite="lax")
    return response


@router.get("/", response_class=HTMLResponse)
async def index(request: Request):
    """Render the dashboard for the caller's session."""
    session = _existing_session(request)
    state = session.state if session is not None else ScanSessionState()
    response = templates.TemplateResponse(request, "index.html", {"view": page_view(state)})
    if session is not None:
        response.set_cookie(SESSION_COOKIE, session.session_id, httponly=True, samesite="lax")
    return response


@router.post("/scan")
async def scan(request: Request, file: Optional[UploadFile] = File(None)):
    """Handle the file picker; an empty selection leaves the page as it was."""
    existing = _existing_session(request)
    if file is None or not file.filename:
        return _back_to_index(existing)
    session = existing or get_store(request).create()
    try:
        await submit_scan(request, session, file)
    except HTTPException as exc:
        if exc.status_code != 400:
            raise
    return _back_to_index(session)


@router.post("/history/clear")
async def clear(request: Request):
    session = _existing_session(request)
    if session is not None:
        session.clear_history()
    return _back_to_index(session)


@router.post("/history/{item_id}/restore")
async def restore(request: Request, item_id: str):
    session = _existing_session(request)
    if session is not None:
        session.restore(item_id)
    return _back_to_index(session)
