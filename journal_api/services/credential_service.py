"""
Journal API: Credential Service
===============================

What:  Password hashing/verification (bcrypt) and session token issuing/
       verification (HS256 JWT via PyJWT).
How:   One CredentialService is built at startup from Settings and stored on
       `app.state.credentials`. The signing secret lives only on that
       instance.
Who:   AccountService (hash on signup, verify on signin, issue tokens) and
       the `get_principal` dependency (verify tokens).

Token format:
    {"username": "<account>", "iat": <unix ts>, "exp": <unix ts>}
    `exp` is present only when a lifetime is configured (JWT_DELTA_MINUTES)
    or passed explicitly to issue_token().

bcrypt calls run in Starlette's threadpool, off the event loop.
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional

import bcrypt
import jwt
from starlette.concurrency import run_in_threadpool

from journal_api.config import Settings
from journal_api.exceptions import InvalidTokenError

logger = logging.getLogger(__name__)

JWT_ALGORITHM = "HS256"

# bcrypt only consumes the first 72 bytes of its input.
BCRYPT_MAX_PASSWORD_BYTES = 72


@dataclass(frozen=True)
class TokenClaims:
    """Verified contents of a session token."""

    username: str
    issued_at: Optional[datetime] = None
    expires_at: Optional[datetime] = None


def _password_bytes(plaintext: str) -> bytes:
    return plaintext.encode("utf-8")[:BCRYPT_MAX_PASSWORD_BYTES]


def _timestamp_to_datetime(value) -> Optional[datetime]:
    if value is None:
        return None
    return datetime.fromtimestamp(value, tz=timezone.utc)


class CredentialService:
    """
    Hashes passwords and signs/verifies session tokens.

    Args:
        secret:          HMAC signing secret (must be non-empty)
        token_lifetime:  default lifetime for issued tokens; None = no expiry
        bcrypt_rounds:   bcrypt work factor
    """

    def __init__(
        self,
        secret: str,
        token_lifetime: Optional[timedelta] = None,
        bcrypt_rounds: int = 12,
    ):
        if not secret:
            raise ValueError("CredentialService requires a non-empty signing secret")
        self._secret = secret
        self.token_lifetime = token_lifetime
        self.bcrypt_rounds = bcrypt_rounds

    @classmethod
    def from_settings(cls, settings: Settings) -> "CredentialService":
        lifetime = None
        if settings.jwt_delta_minutes is not None:
            lifetime = timedelta(minutes=settings.jwt_delta_minutes)
        return cls(
            secret=settings.jwt_secret,
            token_lifetime=lifetime,
            bcrypt_rounds=settings.bcrypt_rounds,
        )

    # ── Passwords ─────────────────────────────────────────────────────────

    def hash_password_sync(self, plaintext: str) -> str:
        """Salted bcrypt digest; two calls with the same input differ."""
        salt = bcrypt.gensalt(rounds=self.bcrypt_rounds)
        return bcrypt.hashpw(_password_bytes(plaintext), salt).decode("utf-8")

    def verify_password_sync(self, plaintext: str, digest: str) -> bool:
        """True iff `plaintext` matches `digest`. Never raises."""
        try:
            return bcrypt.checkpw(_password_bytes(plaintext), digest.encode("utf-8"))
        except ValueError:
            # Not a bcrypt digest (e.g. "Invalid salt")
            logger.warning("Stored password digest is not a valid bcrypt hash")
            return False

    async def hash_password(self, plaintext: str) -> str:
        return await run_in_threadpool(self.hash_password_sync, plaintext)

    async def verify_password(self, plaintext: str, digest: str) -> bool:
        return await run_in_threadpool(self.verify_password_sync, plaintext, digest)

    # ── Tokens ────────────────────────────────────────────────────────────

    def issue_token(self, username: str, ttl: Optional[timedelta] = None) -> str:
        """
        Sign a token asserting `username`.

        `ttl` overrides the configured lifetime for this token. With neither,
        the token has no `exp` claim and stays valid until the secret changes.
        """
        now = datetime.now(timezone.utc)
        payload = {"username": username, "iat": now}
        lifetime = ttl if ttl is not None else self.token_lifetime
        if lifetime is not None:
            payload["exp"] = now + lifetime
        return jwt.encode(payload, self._secret, algorithm=JWT_ALGORITHM)

    def verify_token(self, token: str) -> TokenClaims:
        """
        Verify signature, structure and expiry; return the claims.

        Raises:
            InvalidTokenError: bad signature, malformed, expired, or no
                usable username claim.
        """
        try:
            payload = jwt.decode(
                token,
                self._secret,
                algorithms=[JWT_ALGORITHM],
                options={"require": ["username"]},
            )
        except jwt.PyJWTError as e:
            raise InvalidTokenError(context={"reason": type(e).__name__}) from e

        username = payload.get("username")
        if not isinstance(username, str) or not username:
            raise InvalidTokenError(context={"reason": "username claim is not a non-empty string"})

        return TokenClaims(
            username=username,
            issued_at=_timestamp_to_datetime(payload.get("iat")),
            expires_at=_timestamp_to_datetime(payload.get("exp")),
        )
