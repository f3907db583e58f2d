"""JSON API for scan sessions."""

from fastapi import APIRouter, File, HTTPException, Request, UploadFile

from controllers.scan_controller import (
    clear_history,
    create_session,
    get_session,
    get_session_state,
    restore_history_item,
    submit_scan,
)

router = APIRouter(prefix="/api/sessions", tags=["scans"])


@router.post("")
async def create_session_route(request: Request):
    try:
        return await create_session(request)
    except HTTPException:
        raise
    except Exception as exc:
        raise HTTPException(status_code=500, detail=str(exc))


@router.get("/{session_id}")
async def get_session_route(request: Request, session_id: str):
    try:
        return await get_session_state(request, session_id)
    except HTTPException:
        raise
    except Exception as exc:
        raise HTTPException(status_code=500, detail=str(exc))


@router.post("/{session_id}/scans", summary="Classify an uploaded satellite image")
async def submit_scan_route(request: Request, session_id: str, file: UploadFile = File(...)):
    """Run decode and classification for the upload.

    Returns the projected session state. Classifier failures are reported in
    `state.error` with a 200 response, matching what the page shows.
    """
    try:
        session = get_session(request, session_id)
        return await submit_scan(request, session, file)
    except HTTPException:
        raise
    except Exception as exc:
        raise HTTPException(status_code=500, detail=str(exc))


@router.post("/{session_id}/history/{item_id}/restore")
async def restore_history_route(request: Request, session_id: str, item_id: str):
    try:
        return await restore_history_item(request, session_id, item_id)
    except HTTPException:
        raise
    except Exception as exc:
        raise HTTPException(status_code=500, detail=str(exc))


@router.delete("/{session_id}/history")
async def clear_history_route(request: Request, session_id: str):
    try:
        return await clear_history(request, session_id)
    except HTTPException:
        raise
    except Exception as exc:
        raise HTTPException(status_code=500, detail=str(exc))
