"""
Journal API: Custom Exception Hierarchy
=======================================

What:  Application-specific exceptions, one per client-visible failure.
How:   Each exception class carries a static message, an HTTP status code and
       an optional server-side context dict. A single global handler
       (registered in main.py) renders every JournalError into the shared
       error envelope:

           {"code": <http status>, "msg": <static message>, "details": null | [...]}

Who:   Raised by the credential service, the principal resolver and the
       entry/account services; caught by the global handler.

Exception Hierarchy:
    JournalError (base)
    ├── InvalidTokenError        → 401 missing/malformed/expired/mis-signed token
    ├── ExpiredUserError         → 400 token is valid but its account is gone
    ├── MalformedRequestError    → 400 field validation failed (carries details)
    ├── EntryNotFoundError       → 404
    ├── EntryNoAccessError       → 403 entry exists but belongs to someone else
    ├── UserConflictError        → 409 duplicate signup
    ├── UsernameNotFoundError    → 404 signin for an unknown username
    ├── IncorrectPasswordError   → 403 signin with a wrong password
    ├── UserNoAccessError        → 403 deleting an account other than your own
    └── DatabaseError            → 500 storage failure (details logged only)

Messages are fixed strings. Nothing from an underlying exception is ever
interpolated into `msg`; diagnostic data goes into `context`, which is logged
and never returned.
"""

from typing import Any, Dict, List, Optional


class JournalError(Exception):
    """
    Base exception for all Journal API errors.

    Attributes:
        status_code: HTTP status returned to the client (also the `code` field)
        message:     Client-facing static message (the `msg` field)
        details:     Per-field validation failures, None for every other error
        context:     Debug info for server logs, never serialized
    """

    status_code: int = 500
    message: str = "Internal server error"

    def __init__(
        self,
        details: Optional[List[Dict[str, str]]] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        self.details = details
        self.context = context or {}
        super().__init__(self.message)

    def to_response(self) -> Dict[str, Any]:
        """Render the shared error envelope."""
        return {
            "code": self.status_code,
            "msg": self.message,
            "details": self.details,
        }


# ── Authentication ────────────────────────────────────────────────────────

class InvalidTokenError(JournalError):
    """Bearer token missing, malformed, mis-signed or expired."""

    status_code = 401
    message = "Invalid token"


class ExpiredUserError(JournalError):
    """
    The token verified, but the account it names no longer exists.

    Raised inside a transaction after re-resolving the principal, so a token
    issued before its account was deleted cannot read or write anything.
    """

    status_code = 400
    message = "Current user does not exist"


# ── Validation ────────────────────────────────────────────────────────────

class MalformedRequestError(JournalError):
    """
    One or more request fields failed validation.

    `details` holds one {location, msg, param} dict per failed rule.
    """

    status_code = 400
    message = "Malformed request"

    def __init__(
        self,
        details: List[Dict[str, str]],
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(details=details, context=context)


# ── Entries ───────────────────────────────────────────────────────────────

class EntryNotFoundError(JournalError):
    status_code = 404
    message = "Entry does not exist"


class EntryNoAccessError(JournalError):
    status_code = 403
    message = "You do not have access to this entry"


# ── Accounts ──────────────────────────────────────────────────────────────

class UserConflictError(JournalError):
    status_code = 409
    message = "Username already exists"


class UsernameNotFoundError(JournalError):
    status_code = 404
    message = "User not found"


class IncorrectPasswordError(JournalError):
    status_code = 403
    message = "Incorrect password"


class UserNoAccessError(JournalError):
    """The authenticated principal asked to delete a different account."""

    status_code = 403
    message = "Cannot delete a different user"


# ── Infrastructure ────────────────────────────────────────────────────────

class DatabaseError(JournalError):
    """
    A database operation failed unexpectedly.

    The client sees the generic 500 envelope; the SQLAlchemy error class and
    the failed operation are kept in `context` for the server log.
    """

    status_code = 500
    message = "Internal server error"
