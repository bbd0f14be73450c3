"""Async session ledger for RiskSession rows.

All public methods accept an ``AsyncSession`` so the caller controls
transaction boundaries.  ``record`` flushes so the database assigns the id
inside the caller's transaction; the caller commits (or rolls back, in which
case no part of the session becomes visible).

The ledger deliberately avoids business-logic validation; that belongs in
the SDK layer.  It exposes no update path: sessions are append-only, and the
only removal is the administrative :meth:`SessionLedger.purge`.

Driver and SQL errors are logged here and re-raised as
:class:`PersistenceError` so callers never see storage internals.
"""

import logging
from typing import Any

from sqlalchemy import Row, delete, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from riskcheck_db.errors import NotFound, PersistenceError
from riskcheck_db.models.session import RiskSession

logger = logging.getLogger(__name__)


class SessionLedger:
    """Append-only read/write operations on the ``risk_sessions`` table."""

    # ------------------------------------------------------------------
    # Create
    # ------------------------------------------------------------------

    async def record(
        self,
        db: AsyncSession,
        *,
        owner_id: str | None,
        answers: dict[str, Any],
        score: float,
        risk_band: str,
        recommendations: list[str],
        catalog_version: str | None = None,
    ) -> RiskSession:
        """Insert a new session row and return it with ``id`` and ``created_at`` set.

        The caller must ``await db.commit()`` to persist.
        """
        session = RiskSession(
            owner_id=owner_id,
            answers=dict(answers),
            score=score,
            risk_band=risk_band,
            recommendations=list(recommendations),
            catalog_version=catalog_version,
        )
        try:
            db.add(session)
            await db.flush()  # Atomic insert; populates id and created_at
        except SQLAlchemyError as exc:
            logger.error("Failed to record risk session for owner=%r", owner_id, exc_info=True)
            raise PersistenceError("Could not record the assessment session") from exc
        return session

    # ------------------------------------------------------------------
    # Read
    # ------------------------------------------------------------------

    async def get(self, db: AsyncSession, session_id: int) -> RiskSession:
        """Fetch a session by id.

        Raises:
            NotFound: if no session has this id.
        """
        try:
            row = await db.get(RiskSession, session_id)
        except SQLAlchemyError as exc:
            logger.error("Failed to read risk session %s", session_id, exc_info=True)
            raise PersistenceError("Could not read the assessment session") from exc
        if row is None:
            raise NotFound(session_id)
        return row

    async def history_for(
        self,
        db: AsyncSession,
        owner_id: str,
        *,
        limit: int | None = None,
        offset: int = 0,
    ) -> list[Row]:
        """List an owner's sessions, newest first.

        Only the summary columns (id, created_at, risk_band, score) are
        selected; answers and recommendations stay in storage.  Ties on
        ``created_at`` are broken by descending id.  Returns an empty list
        when the owner has no sessions.
        """
        stmt = (
            select(
                RiskSession.id,
                RiskSession.created_at,
                RiskSession.risk_band,
                RiskSession.score,
            )
            .where(RiskSession.owner_id == owner_id)
            .order_by(RiskSession.created_at.desc(), RiskSession.id.desc())
            .offset(offset)
        )
        if limit is not None:
            stmt = stmt.limit(limit)
        try:
            result = await db.execute(stmt)
        except SQLAlchemyError as exc:
            logger.error("Failed to list history for owner=%r", owner_id, exc_info=True)
            raise PersistenceError("Could not read assessment history") from exc
        return list(result.all())

    # ------------------------------------------------------------------
    # Administrative removal
    # ------------------------------------------------------------------

    async def purge(self, db: AsyncSession, session_id: int) -> None:
        """Permanently delete one session (administrative action only).

        Raises:
            NotFound: if no session has this id.
        """
        stmt = delete(RiskSession).where(RiskSession.id == session_id)
        try:
            result = await db.execute(stmt)
        except SQLAlchemyError as exc:
            logger.error("Failed to purge risk session %s", session_id, exc_info=True)
            raise PersistenceError("Could not delete the assessment session") from exc
        if result.rowcount == 0:
            raise NotFound(session_id)
        logger.info("Purged risk session %s", session_id)
