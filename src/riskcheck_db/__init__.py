"""riskcheck_db — persistence layer for completed risk-check sessions.

This package provides the ORM model, async engine factory, and the
append-only session ledger.  It is designed to be consumed by the
riskcheck_rulesets intake controller and the FastAPI server.
"""

from riskcheck_db.engine import get_engine, get_session_factory
from riskcheck_db.errors import ImmutableSessionError, LedgerError, NotFound, PersistenceError
from riskcheck_db.models.session import RiskSession
from riskcheck_db.repository import SessionLedger

__all__ = [
    "ImmutableSessionError",
    "LedgerError",
    "NotFound",
    "PersistenceError",
    "RiskSession",
    "SessionLedger",
    "get_engine",
    "get_session_factory",
]
