"""FastAPI dependency injection — provides DB sessions, controller, catalog, and caller identity.

Each request that touches the database gets a fresh ``AsyncSession`` via
``get_db()``.  The session is committed on success and rolled back on error,
matching the SDK convention where the ledger calls ``flush()`` but never
``commit()``.
"""

import hmac
from typing import AsyncGenerator

from fastapi import Header, HTTPException, Request
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from riskcheck_db.engine import get_session_factory
from riskcheck_rulesets.catalog import QuestionCatalog
from riskcheck_rulesets.errors import PersistenceError
from riskcheck_rulesets.intake import IntakeController


# ------------------------------------------------------------------
# Database session (transaction boundary)
# ------------------------------------------------------------------

async def commit_session(db: AsyncSession) -> None:
    """Commit ``db`` now, mapping driver failures to ``PersistenceError``.

    Write endpoints call this before building their response: FastAPI runs
    the code after ``yield`` in :func:`get_db` only once the response has
    started, too late to turn a failed commit into an error status.
    """
    try:
        await db.commit()
    except SQLAlchemyError as exc:
        await db.rollback()
        raise PersistenceError("Could not commit the transaction") from exc


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """Yield an async DB session; commit on success, rollback on error.

    The trailing commit only finalises read-only requests.  Endpoints that
    record or remove sessions commit through :func:`commit_session` so that
    no session id is reported to the caller unless it was actually stored.
    """
    factory = get_session_factory()
    async with factory() as session:
        try:
            yield session
            await commit_session(session)
        except Exception:
            await session.rollback()
            raise


# ------------------------------------------------------------------
# Controller & catalog from app.state
# ------------------------------------------------------------------

def get_controller(request: Request) -> IntakeController:
    """Return the IntakeController singleton from ``app.state``."""
    return request.app.state.controller


def get_catalog(request: Request) -> QuestionCatalog:
    """Return the QuestionCatalog singleton from ``app.state``."""
    return request.app.state.catalog


# ------------------------------------------------------------------
# Caller identity from the X-User-ID header
# ------------------------------------------------------------------

def _check_proxy_secret(request: Request, x_proxy_secret: str | None) -> None:
    """Reject identity headers that did not come through the trusted gateway.

    Only enforced when ``TRUSTED_PROXY_SECRET`` is configured.
    """
    expected_secret: str | None = request.app.state.settings.trusted_proxy_secret
    if not expected_secret:
        return
    if not x_proxy_secret:
        raise HTTPException(status_code=403, detail="X-Proxy-Secret header is required")
    # Constant-time comparison to prevent timing side-channels.
    if not hmac.compare_digest(x_proxy_secret, expected_secret):
        raise HTTPException(status_code=403, detail="Invalid proxy secret")


async def get_user_id(
    request: Request,
    x_user_id: str | None = Header(None, alias="X-User-ID"),
    x_proxy_secret: str | None = Header(None, alias="X-Proxy-Secret"),
) -> str:
    """Extract the caller identity from the ``X-User-ID`` header.

    Returns 401 if the header is missing: history and session detail are
    only available to a known caller.
    """
    if not x_user_id:
        raise HTTPException(status_code=401, detail="X-User-ID header is required")
    _check_proxy_secret(request, x_proxy_secret)
    return x_user_id


async def get_optional_user_id(
    request: Request,
    x_user_id: str | None = Header(None, alias="X-User-ID"),
    x_proxy_secret: str | None = Header(None, alias="X-Proxy-Secret"),
) -> str | None:
    """Like :func:`get_user_id`, but a missing header means a guest (None)."""
    if not x_user_id:
        return None
    _check_proxy_secret(request, x_proxy_secret)
    return x_user_id
