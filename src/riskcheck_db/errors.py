"""Storage-layer exceptions raised by the session ledger.

Messages are safe to show to API callers: they name the session id at most
and never include SQL, driver messages, or connection details.  The original
driver exception is chained via ``raise ... from`` for server-side logs.
"""


class LedgerError(Exception):
    """Base class for session-ledger failures."""


class NotFound(LedgerError, LookupError):
    """The requested session does not exist."""

    def __init__(self, session_id: int | str) -> None:
        self.session_id = session_id
        super().__init__(f"Session not found: {session_id}")


class PersistenceError(LedgerError):
    """The session store failed to write or read."""


class ImmutableSessionError(LedgerError):
    """A flush attempted to modify a persisted, append-only session row."""
