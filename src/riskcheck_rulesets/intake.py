"""IntakeController — orchestrates one risk-check submission end-to-end.

Stateless controller pattern: each call receives an ``AsyncSession`` from
the caller (typically a FastAPI endpoint), which controls transaction
boundaries.  The controller holds no reference to a session after returning.

Submission flow:
    1. Shape check: answers must be a mapping of qid -> int | str
    2. BranchResolver.check_submission: answers match the applicable set exactly
    3. ScoringEngine.evaluate: score, band, recommendations
    4. SessionLedger.record: persist the immutable session
    5. Return an AssessmentResult

Any failure in steps 1-3 short-circuits before the ledger is touched, so a
session only ever exists for a fully valid, scoreable submission.
"""

from __future__ import annotations

import logging
from typing import Any, Mapping

from sqlalchemy.ext.asyncio import AsyncSession

from riskcheck_db.models.session import RiskSession
from riskcheck_db.repository import SessionLedger

from riskcheck_rulesets.catalog import QuestionCatalog
from riskcheck_rulesets.errors import NotFound, ValidationError
from riskcheck_rulesets.models.result import RiskBand
from riskcheck_rulesets.models.session import (
    AssessmentResult,
    QuestionnaireStep,
    SessionDetail,
    SessionSummary,
)
from riskcheck_rulesets.resolver import BranchResolver
from riskcheck_rulesets.scoring import ScoringEngine

logger = logging.getLogger(__name__)


class IntakeController:
    """Front door of the risk stratification engine.

    Args:
        catalog: a loaded :class:`QuestionCatalog`
        scoring: optional pre-configured :class:`ScoringEngine` (e.g. with
            non-default thresholds); built from ``catalog`` when omitted
    """

    def __init__(
        self,
        catalog: QuestionCatalog,
        *,
        scoring: ScoringEngine | None = None,
    ) -> None:
        self._catalog = catalog
        self._resolver = BranchResolver(catalog)
        self._scoring = scoring or ScoringEngine(catalog)
        self._ledger = SessionLedger()

    @property
    def catalog(self) -> QuestionCatalog:
        return self._catalog

    @property
    def scoring(self) -> ScoringEngine:
        return self._scoring

    # ==================================================================
    # Interactive flow
    # ==================================================================

    def next_step(self, answers: Mapping[str, Any]) -> QuestionnaireStep:
        """Return the next question for a partial answer set.  Pure."""
        self._check_shape(answers)
        return self._resolver.next_step(answers)

    # ==================================================================
    # Submission
    # ==================================================================

    async def submit(
        self,
        db: AsyncSession,
        *,
        owner_id: str | None,
        answers: Mapping[str, Any],
    ) -> AssessmentResult:
        """Validate, score, and persist one submission.

        ``owner_id`` of None records a guest session.  The caller must
        ``await db.commit()`` to persist.

        Raises:
            ValidationError: the submission is malformed, incomplete, or
                answers a question that does not apply.  Nothing is recorded.
            PersistenceError: the session store failed.
        """
        self._check_shape(answers)
        try:
            self._resolver.check_submission(answers)
            result = self._scoring.evaluate(answers)
        except ValidationError as exc:
            logger.warning("Rejected submission from %s: %s", owner_id or "guest", exc)
            raise

        row = await self._ledger.record(
            db,
            owner_id=owner_id,
            answers=dict(answers),
            score=result.score,
            risk_band=result.risk_band.value,
            recommendations=list(result.recommendations),
            catalog_version=result.catalog_version,
        )
        logger.info(
            "Risk check session recorded with id=%s for %s (band=%s, score=%s)",
            row.id, owner_id or "guest", result.risk_band.value, result.score,
        )
        return AssessmentResult(
            risk_band=result.risk_band,
            score=result.score,
            recommendations=list(result.recommendations),
            session_id=row.id,
        )

    # ==================================================================
    # History & detail
    # ==================================================================

    async def history(
        self,
        db: AsyncSession,
        *,
        owner_id: str,
        limit: int | None = None,
        offset: int = 0,
    ) -> list[SessionSummary]:
        """List the owner's past sessions, newest first.

        An owner with no sessions gets an empty list.  Anonymous callers
        have no history, so ``owner_id`` is required.
        """
        if not owner_id:
            raise ValidationError("owner_id", "required", "History requires a caller identity")
        rows = await self._ledger.history_for(db, owner_id, limit=limit, offset=offset)
        return [
            SessionSummary(
                session_id=r.id,
                created_at=r.created_at,
                risk_band=RiskBand(r.risk_band),
                score=r.score,
            )
            for r in rows
        ]

    async def get_session(
        self,
        db: AsyncSession,
        *,
        session_id: int,
        owner_id: str,
    ) -> SessionDetail:
        """Return one session restated for display.

        Raises NotFound when the session does not exist *or* belongs to a
        different owner, so callers cannot probe for other people's ids.
        Guest sessions have no owner and are never returned.
        """
        row = await self._ledger.get(db, session_id)
        if not owner_id or row.owner_id != owner_id:
            logger.warning(
                "Session %s requested by %r but owned by %r", session_id, owner_id, row.owner_id
            )
            raise NotFound(session_id)
        return self._to_detail(row)

    # ==================================================================
    # Helpers
    # ==================================================================

    @staticmethod
    def _check_shape(answers: Any) -> None:
        """Basic payload shape: a mapping of string qids to int or str values."""
        if not isinstance(answers, Mapping):
            raise ValidationError("answers", "object keyed by question id")
        for qid, value in answers.items():
            if not isinstance(qid, str):
                raise ValidationError("answers", "question ids must be strings")
            if isinstance(value, bool) or not isinstance(value, (int, str)):
                raise ValidationError(qid, "integer or string value")

    def _to_detail(self, row: RiskSession) -> SessionDetail:
        return SessionDetail(
            session_id=row.id,
            owner_id=row.owner_id,
            created_at=row.created_at,
            risk_band=RiskBand(row.risk_band),
            score=row.score,
            recommendations=list(row.recommendations),
            answers=dict(row.answers),
            responses=self._scoring.contributions(row.answers),
            catalog_version=row.catalog_version,
        )
