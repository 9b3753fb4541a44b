"""
Attempts API Endpoints
REST API for submitting and listing practice attempts.
"""
from typing import Optional
from fastapi import APIRouter, HTTPException, Query
import logging

from app.agents.orchestrator import run_orchestrator
from app.schemas.attempts import (
    AttemptSubmitRequest,
    AttemptSubmitResponse,
    AttemptListResponse
)
from app.services.cosmos_db_service import cosmos_db_service


logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("", response_model=AttemptSubmitResponse)
async def submit_attempt(request: AttemptSubmitRequest):
    """
    Save a completed practice attempt.

    Finds or creates the learner and the session, stores the attempt with
    its stroke summary, updates spaced repetition progress for the
    character and refreshes the session statistics.
    """
    missing = request.missing_fields()
    if missing:
        raise HTTPException(
            status_code=400,
            detail={
                "error": "Missing required fields",
                "missing_fields": missing
            }
        )

    try:
        state = await run_orchestrator(
            username=request.username,
            request_type="submit_attempt",
            input_data=request.model_dump()
        )
    except Exception as e:
        logger.error(f"Error saving practice attempt: {e}")
        raise HTTPException(status_code=500, detail="Failed to save practice attempt")

    if state.get("has_error"):
        status_code = state.get("error_status", 500)
        logger.error(f"Attempt pipeline error: {state.get('error_message')}")
        raise HTTPException(
            status_code=status_code,
            detail=state.get("error_message") if status_code < 500 else "Failed to save practice attempt"
        )

    response = state.get("response", {})
    return AttemptSubmitResponse(
        success=response.get("success", True),
        attempt_id=response.get("attempt_id"),
        message=response.get("message", "Practice attempt saved successfully"),
        progress=response.get("progress"),
        stroke_summary=response.get("stroke_summary") or None
    )


@router.get("", response_model=AttemptListResponse)
async def list_attempts(
    username: str = Query(..., min_length=1, description="Learner username"),
    character_id: Optional[str] = Query(default=None, description="Only attempts at this character"),
    limit: int = Query(default=50, ge=1, le=200)
):
    """
    Get a learner's attempts, newest first.

    An unknown username yields an empty list.
    """
    try:
        user = await cosmos_db_service.get_user_by_username(username)
        if not user:
            return AttemptListResponse(attempts=[], total=0)

        attempts = await cosmos_db_service.get_attempts(
            user["id"],
            character_id=character_id,
            limit=limit
        )
        return AttemptListResponse(attempts=attempts, total=len(attempts))

    except Exception as e:
        logger.error(f"Error fetching attempts: {e}")
        raise HTTPException(status_code=500, detail="Failed to fetch attempts")
