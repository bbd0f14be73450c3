"""Error taxonomy for the risk-check SDK.

  - ValidationError  — malformed or incomplete submission; never persists
  - NotFound         — requested session does not exist (or is not the caller's)
  - PersistenceError — the session store failed to write or read

The storage errors live in ``riskcheck_db.errors`` so the persistence layer
stays independent of the rules package; they are re-exported here so callers
have a single import location.
"""

from riskcheck_db.errors import LedgerError, NotFound, PersistenceError


class RiskCheckError(Exception):
    """Base class for rule-level failures."""


class ValidationError(RiskCheckError, ValueError):
    """A submission failed shape, bounds, or applicability checks.

    Attributes:
        field: the offending question id (or ``"answers"`` for the payload
            as a whole)
        constraint: short machine-readable description of what was expected
            (e.g. ``"required"``, ``"integer between 10 and 100"``)
    """

    def __init__(self, field: str, constraint: str, message: str | None = None) -> None:
        self.field = field
        self.constraint = constraint
        super().__init__(message or f"{field}: {constraint}")


__all__ = [
    "LedgerError",
    "NotFound",
    "PersistenceError",
    "RiskCheckError",
    "ValidationError",
]
