"""
Journal API: Request Dependencies
=================================

What:  FastAPI dependencies shared by the route modules: the per-request
       database session, the credential service and the authenticated
       principal.
How:   Process-wide objects are created in the lifespan (main.py) and stored
       on `app.state`; these functions hand them to handlers per request.

Authentication:
    `get_principal` reads `Authorization: Bearer <token>` (scheme matched
    case-insensitively), verifies the token and returns the username it
    asserts. It does NOT check that the account still exists; the services
    re-resolve the account inside their own transaction.
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import AsyncGenerator, Optional

from fastapi import Depends, Header, Request
from sqlalchemy.ext.asyncio import AsyncSession

from journal_api.database import Database, open_session
from journal_api.exceptions import InvalidTokenError
from journal_api.services.credential_service import CredentialService

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Principal:
    """The username asserted by a verified token, and when that token lapses."""

    username: str
    expires_at: Optional[datetime] = None


def get_database(request: Request) -> Database:
    return request.app.state.database


def get_credentials(request: Request) -> CredentialService:
    return request.app.state.credentials


async def get_db_session(
    database: Database = Depends(get_database),
) -> AsyncGenerator[AsyncSession, None]:
    """One AsyncSession per request, always closed afterwards."""
    async with open_session(database) as session:
        yield session


def _extract_bearer_token(authorization: Optional[str]) -> Optional[str]:
    if not authorization:
        return None
    parts = authorization.split(None, 1)
    if len(parts) != 2 or parts[0].lower() != "bearer":
        return None
    token = parts[1].strip()
    return token or None


async def get_principal(
    request: Request,
    authorization: Optional[str] = Header(default=None),
    credentials: CredentialService = Depends(get_credentials),
) -> Principal:
    """
    Authenticate the request from its bearer token.

    Raises:
        InvalidTokenError: header missing, not a Bearer credential, or the
            token fails verification (→ 401)
    """
    token = _extract_bearer_token(authorization)
    if token is None:
        raise InvalidTokenError(context={"reason": "missing or malformed Authorization header"})

    claims = credentials.verify_token(token)
    logger.debug(
        "Token for %s issued %s, expires %s",
        claims.username, claims.issued_at, claims.expires_at or "never",
    )
    request.state.principal = claims.username
    return Principal(username=claims.username, expires_at=claims.expires_at)
