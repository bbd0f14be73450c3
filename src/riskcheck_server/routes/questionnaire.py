"""Questionnaire step endpoint — drives the interactive, branching flow.

The client posts the answers collected so far and receives the next
question to show, its position in the currently resolved sequence, and
whether it is the last one (so the UI can label the button "Get Results").
Nothing is stored; the final answers go to ``POST /assessments``.
"""

from typing import Any

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from riskcheck_rulesets.intake import IntakeController
from riskcheck_rulesets.models.session import QuestionnaireStep

from riskcheck_server.dependencies import get_controller

router = APIRouter(prefix="/questionnaire", tags=["questionnaire"])


class StepRequest(BaseModel):
    """Body for POST /questionnaire/step.  ``answers`` may be empty."""
    answers: dict[str, Any] = {}


@router.post("/step")
def next_step(
    body: StepRequest,
    controller: IntakeController = Depends(get_controller),
) -> QuestionnaireStep:
    """Return the next unanswered applicable question, or ``complete``."""
    return controller.next_step(body.answers)
