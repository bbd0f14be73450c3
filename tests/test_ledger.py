"""SessionLedger tests against an in-memory SQLite database.

The ORM model uses portable column variants, so the real ledger runs on
``sqlite+aiosqlite`` here.  A StaticPool keeps the single in-memory
connection alive for the whole test.
"""

from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.pool import StaticPool

from riskcheck_db.engine import build_session_factory, create_tables
from riskcheck_db.errors import ImmutableSessionError, NotFound, PersistenceError
from riskcheck_db.repository import SessionLedger


# =====================================================================
# Fixtures
# =====================================================================


@pytest_asyncio.fixture
async def engine():
    eng = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    await create_tables(eng)
    yield eng
    await eng.dispose()


@pytest_asyncio.fixture
async def factory(engine):
    return build_session_factory(engine)


@pytest.fixture
def ledger():
    return SessionLedger()


async def _record(ledger, db, owner_id="u1", score=0.0, risk_band="Low", **kwargs):
    return await ledger.record(
        db,
        owner_id=owner_id,
        answers=kwargs.pop("answers", {"q_age": 34, "q_sex": "Male"}),
        score=score,
        risk_band=risk_band,
        recommendations=kwargs.pop("recommendations", ["advice"]),
        catalog_version=kwargs.pop("catalog_version", "v1"),
    )


# =====================================================================
# Record & read
# =====================================================================


class TestRecord:
    """Inserts are atomic and assign increasing ids."""

    @pytest.mark.asyncio
    async def test_record_assigns_id_and_timestamp(self, factory, ledger):
        async with factory() as db:
            row = await _record(ledger, db)
            await db.commit()
        assert row.id is not None
        assert row.created_at is not None

    @pytest.mark.asyncio
    async def test_ids_strictly_increase(self, factory, ledger):
        async with factory() as db:
            ids = [(await _record(ledger, db)).id for _ in range(3)]
            await db.commit()
        assert ids == sorted(ids)
        assert len(set(ids)) == 3

    @pytest.mark.asyncio
    async def test_round_trip(self, factory, ledger):
        answers = {"q_age": "34", "q_sex": "Female", "q_lump": "Yes"}
        async with factory() as db:
            row = await _record(
                ledger, db, score=25, risk_band="Medium", answers=answers,
                recommendations=["medium advice", "lump advice"],
            )
            await db.commit()
            session_id = row.id

        async with factory() as db:
            stored = await ledger.get(db, session_id)
        assert stored.owner_id == "u1"
        assert stored.answers == answers
        assert stored.score == 25
        assert stored.risk_band == "Medium"
        assert stored.recommendations == ["medium advice", "lump advice"]
        assert stored.catalog_version == "v1"

    @pytest.mark.asyncio
    async def test_guest_session(self, factory, ledger):
        async with factory() as db:
            row = await _record(ledger, db, owner_id=None)
            await db.commit()
        async with factory() as db:
            assert (await ledger.get(db, row.id)).owner_id is None

    @pytest.mark.asyncio
    async def test_rollback_leaves_nothing(self, factory, ledger):
        async with factory() as db:
            row = await _record(ledger, db)
            session_id = row.id
            await db.rollback()
        async with factory() as db:
            with pytest.raises(NotFound):
                await ledger.get(db, session_id)

    @pytest.mark.asyncio
    async def test_check_constraint_maps_to_persistence_error(self, factory, ledger):
        async with factory() as db:
            with pytest.raises(PersistenceError):
                await _record(ledger, db, score=10, risk_band="Extreme")

    @pytest.mark.asyncio
    async def test_get_missing(self, factory, ledger):
        async with factory() as db:
            with pytest.raises(NotFound) as exc_info:
                await ledger.get(db, 12345)
        assert exc_info.value.session_id == 12345


# =====================================================================
# History
# =====================================================================


class TestHistory:
    """Per-owner listing, newest first, summary columns only."""

    @pytest.mark.asyncio
    async def test_newest_first_and_isolated(self, factory, ledger):
        async with factory() as db:
            a = await _record(ledger, db, owner_id="u1", score=0)
            await _record(ledger, db, owner_id="u2", score=5)
            b = await _record(ledger, db, owner_id="u1", score=25, risk_band="Medium")
            await _record(ledger, db, owner_id=None, score=45, risk_band="High")
            await db.commit()

        async with factory() as db:
            rows = await ledger.history_for(db, "u1")
        assert [r.id for r in rows] == [b.id, a.id]
        assert rows[0].risk_band == "Medium"
        assert rows[0].score == 25
        assert set(rows[0]._fields) == {"id", "created_at", "risk_band", "score"}

    @pytest.mark.asyncio
    async def test_empty_history(self, factory, ledger):
        async with factory() as db:
            assert await ledger.history_for(db, "nobody") == []

    @pytest.mark.asyncio
    async def test_limit_offset(self, factory, ledger):
        async with factory() as db:
            ids = [(await _record(ledger, db)).id for _ in range(4)]
            await db.commit()
        async with factory() as db:
            rows = await ledger.history_for(db, "u1", limit=2, offset=1)
        assert [r.id for r in rows] == [ids[2], ids[1]]


# =====================================================================
# Immutability & purge
# =====================================================================


class TestAppendOnly:
    """Recorded sessions cannot be modified; only purge removes them."""

    @pytest.mark.asyncio
    async def test_update_rejected(self, factory, ledger):
        async with factory() as db:
            row = await _record(ledger, db)
            await db.commit()

        async with factory() as db:
            stored = await ledger.get(db, row.id)
            stored.score = 99
            with pytest.raises(ImmutableSessionError):
                await db.flush()
            await db.rollback()

        async with factory() as db:
            assert (await ledger.get(db, row.id)).score == 0

    @pytest.mark.asyncio
    async def test_purge(self, factory, ledger):
        async with factory() as db:
            row = await _record(ledger, db)
            await db.commit()

        async with factory() as db:
            await ledger.purge(db, row.id)
            await db.commit()

        async with factory() as db:
            with pytest.raises(NotFound):
                await ledger.get(db, row.id)

    @pytest.mark.asyncio
    async def test_purged_id_not_reused(self, factory, ledger):
        """Purging the newest session must not free its id for the next one."""
        async with factory() as db:
            await _record(ledger, db)
            newest = await _record(ledger, db)
            await db.commit()

        async with factory() as db:
            await ledger.purge(db, newest.id)
            await db.commit()

        async with factory() as db:
            replacement = await _record(ledger, db)
            await db.commit()
        assert replacement.id > newest.id

    @pytest.mark.asyncio
    async def test_purge_missing(self, factory, ledger):
        async with factory() as db:
            with pytest.raises(NotFound):
                await ledger.purge(db, 404)


# =====================================================================
# Driver failures
# =====================================================================


class TestDriverFailures:
    """SQLAlchemy errors never leak past the ledger."""

    @pytest.mark.asyncio
    async def test_flush_failure(self, ledger):
        db = MagicMock()
        db.flush = AsyncMock(side_effect=SQLAlchemyError("connection reset by peer"))
        with pytest.raises(PersistenceError) as exc_info:
            await _record(ledger, db)
        assert "connection reset" not in str(exc_info.value)
        assert isinstance(exc_info.value.__cause__, SQLAlchemyError)

    @pytest.mark.asyncio
    async def test_read_failure(self, ledger):
        db = MagicMock()
        db.get = AsyncMock(side_effect=SQLAlchemyError("timeout"))
        with pytest.raises(PersistenceError):
            await ledger.get(db, 1)

    @pytest.mark.asyncio
    async def test_history_failure(self, ledger):
        db = MagicMock()
        db.execute = AsyncMock(side_effect=SQLAlchemyError("timeout"))
        with pytest.raises(PersistenceError):
            await ledger.history_for(db, "u1")
