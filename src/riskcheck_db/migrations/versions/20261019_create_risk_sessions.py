"""Create the append-only risk_sessions table.

One row per completed assessment.  Rows are never updated; history listings
filter by owner and sort by creation time, served by ix_owner_created.
Column types carry SQLite variants so the same revision applies to a local
development database.

Revision ID: 20261019_risk_sessions
Revises:
Create Date: 2026-10-19
"""

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import JSONB

# revision identifiers, used by Alembic.
revision = "20261019_risk_sessions"
down_revision = None
branch_labels = None
depends_on = None

_JSON = sa.JSON().with_variant(JSONB(), "postgresql")
_ID = sa.BigInteger().with_variant(sa.Integer(), "sqlite")


def upgrade() -> None:
    op.create_table(
        "risk_sessions",
        sa.Column("id", _ID, sa.Identity(always=False), primary_key=True),
        # NULL for guest sessions
        sa.Column("owner_id", sa.Text, nullable=True),
        # Submission
        sa.Column("answers", _JSON, nullable=False),
        sa.Column("catalog_version", sa.Text, nullable=True),
        # Evaluation
        sa.Column("score", sa.Float, nullable=False),
        sa.Column("risk_band", sa.String(10), nullable=False),
        sa.Column("recommendations", _JSON, nullable=False),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
        sa.CheckConstraint("score >= 0", name="ck_score_non_negative"),
        sa.CheckConstraint(
            "risk_band IN ('Low', 'Medium', 'High')",
            name="ck_risk_band_values",
        ),
        sqlite_autoincrement=True,
    )
    op.create_index("ix_owner_created", "risk_sessions", ["owner_id", "created_at"])


def downgrade() -> None:
    op.drop_index("ix_owner_created", table_name="risk_sessions")
    op.drop_table("risk_sessions")
