"""RiskSession ORM model — one immutable row per completed assessment.

Rows are created exactly once, when a submission has been validated and
scored, and are never updated afterwards: a ``before_update`` mapper event
rejects any flush that would modify a persisted row.  Removal is only
possible through the administrative purge in the repository.

JSON columns use JSONB on PostgreSQL and plain JSON elsewhere, and the
BIGINT identity key falls back to SQLite's INTEGER rowid, so the same model
runs against the in-memory SQLite database used in tests.
"""

from datetime import datetime, timezone

from sqlalchemy import (
    BigInteger,
    CheckConstraint,
    DateTime,
    Float,
    Index,
    Integer,
    JSON,
    String,
    Text,
    event,
)
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column

from riskcheck_db.errors import ImmutableSessionError
from riskcheck_db.models.base import Base

# Portable column types
_JSON = JSON().with_variant(JSONB(), "postgresql")
_ID = BigInteger().with_variant(Integer(), "sqlite")


class RiskSession(Base):
    """One row per completed risk assessment.

    ``owner_id`` is the caller identity supplied at submission time, or
    NULL for guest sessions.  Guests have no history.
    """

    __tablename__ = "risk_sessions"

    # --- Primary key ---
    # Monotonic identity assigned by the database on insert
    id: Mapped[int] = mapped_column(_ID, primary_key=True, autoincrement=True)

    # --- Identity ---
    owner_id: Mapped[str | None] = mapped_column(Text, nullable=True)

    # --- Submission ---
    # Answers exactly as submitted: {"q_age": 34, "q_sex": "Female", ...}
    answers: Mapped[dict] = mapped_column(_JSON, nullable=False)
    # Catalog version tag so we can trace which questions and weights applied
    catalog_version: Mapped[str | None] = mapped_column(Text, nullable=True)

    # --- Evaluation (copied from the EvaluationResult) ---
    score: Mapped[float] = mapped_column(Float, nullable=False)
    risk_band: Mapped[str] = mapped_column(String(10), nullable=False)
    # Ordered list of advisory strings
    recommendations: Mapped[list] = mapped_column(_JSON, nullable=False)

    # --- Timestamps ---
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    # --- Table-level constraints ---
    __table_args__ = (
        CheckConstraint("score >= 0", name="ck_score_non_negative"),
        CheckConstraint(
            "risk_band IN ('Low', 'Medium', 'High')",
            name="ck_risk_band_values",
        ),
        # History listing: WHERE owner_id = ? ORDER BY created_at DESC
        Index("ix_owner_created", "owner_id", "created_at"),
        # Purged ids are never handed out again on SQLite
        {"sqlite_autoincrement": True},
    )

    def __repr__(self) -> str:
        return (
            f"<RiskSession(id={self.id}, owner={self.owner_id!r}, "
            f"band={self.risk_band!r}, score={self.score})>"
        )


@event.listens_for(RiskSession, "before_update")
def _reject_update(mapper, connection, target: RiskSession) -> None:
    raise ImmutableSessionError(
        f"RiskSession {target.id} is append-only and cannot be updated"
    )
