"""Assessment endpoints — submit answers, list history, view one session.

Submission accepts an optional ``X-User-ID`` header: without it the
session is recorded as a guest session.  History and detail require the
header, since anonymous callers have no history.
"""

from typing import Any

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

from riskcheck_rulesets.intake import IntakeController
from riskcheck_rulesets.models.session import AssessmentResult, SessionDetail, SessionSummary

from riskcheck_server.config import DEFAULT_PAGE_LIMIT, MAX_PAGE_LIMIT
from riskcheck_server.dependencies import (
    commit_session,
    get_controller,
    get_db,
    get_optional_user_id,
    get_user_id,
)

router = APIRouter(prefix="/assessments", tags=["assessments"])


# ------------------------------------------------------------------
# Request models
# ------------------------------------------------------------------

class SubmitAssessmentRequest(BaseModel):
    """Body for POST /assessments.

    ``answers`` maps question ids to raw answers, e.g.
    ``{"q_age": 34, "q_sex": "Female", "q_lump": "Yes", ...}``.  Values are
    checked by the SDK, which reports the offending question id.
    """
    answers: dict[str, Any]


# ------------------------------------------------------------------
# Endpoints
# ------------------------------------------------------------------

@router.post("", status_code=201)
async def submit_assessment(
    body: SubmitAssessmentRequest,
    user_id: str | None = Depends(get_optional_user_id),
    db: AsyncSession = Depends(get_db),
    controller: IntakeController = Depends(get_controller),
) -> AssessmentResult:
    """Score a completed questionnaire and record the session.

    Returns 201 with band, score, recommendations and the new session id.
    Returns 422 naming the offending field if the answers are incomplete,
    out of range, or answer a question that does not apply.  Returns 503 if
    the session could not be stored; no session id is reported then.
    """
    result = await controller.submit(db, owner_id=user_id, answers=body.answers)
    await commit_session(db)
    return result


@router.get("/history")
async def list_history(
    user_id: str = Depends(get_user_id),
    db: AsyncSession = Depends(get_db),
    controller: IntakeController = Depends(get_controller),
    limit: int = Query(DEFAULT_PAGE_LIMIT, ge=1, le=MAX_PAGE_LIMIT),
    offset: int = Query(0, ge=0),
) -> list[SessionSummary]:
    """List the caller's past sessions, newest first.  Empty list if none."""
    return await controller.history(db, owner_id=user_id, limit=limit, offset=offset)


@router.get("/{session_id}")
async def get_session_detail(
    session_id: int,
    user_id: str = Depends(get_user_id),
    db: AsyncSession = Depends(get_db),
    controller: IntakeController = Depends(get_controller),
) -> SessionDetail:
    """Return one of the caller's sessions with per-question contributions.

    Returns 404 if the session does not exist or belongs to someone else.
    """
    return await controller.get_session(db, session_id=session_id, owner_id=user_id)
