"""Session and step models — the contract between the SDK and API callers.

These models define what the intake controller returns.  They are
intentionally decoupled from the ORM models in ``riskcheck_db`` so that API
consumers never see database internals.

  - QuestionnaireStep: next question to present during the interactive flow
  - AssessmentResult: outcome of one successful submission
  - SessionSummary: lightweight history entry
  - SessionDetail: full stored session restated for display
"""

from datetime import datetime
from typing import Any

from pydantic import BaseModel

from riskcheck_rulesets.models.result import AnswerContribution, RiskBand


class QuestionPayload(BaseModel):
    """Flattened question for API consumers.

    Strips scoring details (weight, risk answer, recommendation) and
    presents only what the UI needs to render the question.
    """

    qid: str
    question: str
    question_type: str
    # Option strings for single_choice
    options: list[str] | None = None
    # {min, max} for integer
    constraints: dict | None = None
    required: bool = True


class QuestionnaireStep(BaseModel):
    """Where a respondent stands in the branching questionnaire.

    ``position`` is 1-based within the *resolved* sequence and ``total`` is
    that sequence's length, so both change as answers reshape the branch.
    When every applicable question is answered, ``complete`` is true and
    ``question`` is None.
    """

    complete: bool = False
    question: QuestionPayload | None = None
    position: int
    total: int
    is_last: bool = False


class AssessmentResult(BaseModel):
    """Externally visible result of a successful submission."""

    risk_band: RiskBand
    score: float
    recommendations: list[str]
    session_id: int


class SessionSummary(BaseModel):
    """History listing entry; answers and recommendations are omitted."""

    session_id: int
    created_at: datetime
    risk_band: RiskBand
    score: float


class SessionDetail(BaseModel):
    """Full stored session, with each answer paired to its question text."""

    session_id: int
    owner_id: str | None = None
    created_at: datetime
    risk_band: RiskBand
    score: float
    recommendations: list[str]
    answers: dict[str, Any]
    responses: list[AnswerContribution]
    catalog_version: str | None = None
