"""Admin endpoints — administrative removal of recorded sessions.

Sessions are append-only for everyone else; this is the only path that
removes one.  Protected by the ``ADMIN_API_KEY`` setting: every request
must include an ``X-Admin-Key`` header whose value matches it.  Returns 401
if the header is missing, 403 if admin access is disabled or the key is wrong.
"""

import hmac

from fastapi import APIRouter, Depends, Header, HTTPException, Request
from sqlalchemy.ext.asyncio import AsyncSession

from riskcheck_db.repository import SessionLedger

from riskcheck_server.dependencies import commit_session, get_db

router = APIRouter(prefix="/admin", tags=["admin"])


# ------------------------------------------------------------------
# Auth dependency
# ------------------------------------------------------------------

async def require_admin_key(
    request: Request,
    x_admin_key: str | None = Header(None, alias="X-Admin-Key"),
) -> str:
    """Validate the ``X-Admin-Key`` header against the configured admin key."""
    expected: str | None = request.app.state.settings.admin_api_key
    if not expected:
        raise HTTPException(
            status_code=403,
            detail="Admin endpoints are disabled (ADMIN_API_KEY not configured)",
        )
    if not x_admin_key:
        raise HTTPException(status_code=401, detail="X-Admin-Key header is required")
    if not hmac.compare_digest(x_admin_key, expected):
        raise HTTPException(status_code=403, detail="Invalid admin key")
    return x_admin_key


# ------------------------------------------------------------------
# Endpoints
# ------------------------------------------------------------------

_ledger = SessionLedger()


@router.delete("/sessions/{session_id}", status_code=204)
async def purge_session(
    session_id: int,
    db: AsyncSession = Depends(get_db),
    _admin: str = Depends(require_admin_key),
) -> None:
    """Permanently delete one session.  Returns 404 if it does not exist."""
    await _ledger.purge(db, session_id)
    await commit_session(db)
