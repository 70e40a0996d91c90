"""
Journal API: Credential Service Unit Tests
==========================================

What:  Password hashing and session token issue/verify.
How:   Real bcrypt at 4 rounds and real PyJWT; no database.
"""

from datetime import timedelta

import jwt
import pytest

from journal_api.config import Settings
from journal_api.exceptions import InvalidTokenError
from journal_api.services.credential_service import JWT_ALGORITHM, CredentialService

SECRET = "unit-test-secret-that-is-long-enough-for-hs256"


class TestPasswordHashing:
    def setup_method(self):
        self.service = CredentialService(secret=SECRET, bcrypt_rounds=4)

    @pytest.mark.asyncio
    async def test_hash_then_verify(self):
        digest = await self.service.hash_password("hunter2")
        assert digest != "hunter2"
        assert await self.service.verify_password("hunter2", digest) is True

    @pytest.mark.asyncio
    async def test_wrong_password_does_not_verify(self):
        digest = await self.service.hash_password("hunter2")
        assert await self.service.verify_password("hunter3", digest) is False

    def test_hashes_are_salted(self):
        """Same password twice must give different digests."""
        assert self.service.hash_password_sync("same") != self.service.hash_password_sync("same")

    def test_garbage_digest_verifies_false(self):
        assert self.service.verify_password_sync("anything", "not-a-bcrypt-digest") is False

    def test_long_passwords_are_truncated_consistently(self):
        """bcrypt sees only 72 bytes; hashing and verifying must agree on that."""
        long_password = "x" * 100
        digest = self.service.hash_password_sync(long_password)
        assert self.service.verify_password_sync(long_password, digest) is True
        assert self.service.verify_password_sync("x" * 72, digest) is True


class TestTokens:
    def setup_method(self):
        self.service = CredentialService(secret=SECRET, bcrypt_rounds=4)

    def test_issue_and_verify_round_trip(self):
        claims = self.service.verify_token(self.service.issue_token("dean"))
        assert claims.username == "dean"
        assert claims.issued_at is not None
        assert claims.expires_at is None

    def test_no_lifetime_means_no_exp_claim(self):
        payload = jwt.decode(self.service.issue_token("dean"), SECRET, algorithms=[JWT_ALGORITHM])
        assert payload["username"] == "dean"
        assert "exp" not in payload

    def test_configured_lifetime_sets_exp(self):
        service = CredentialService(secret=SECRET, token_lifetime=timedelta(minutes=30))
        payload = jwt.decode(service.issue_token("dean"), SECRET, algorithms=[JWT_ALGORITHM])
        assert payload["exp"] - payload["iat"] == 30 * 60

    def test_expired_token_rejected(self):
        token = self.service.issue_token("dean", ttl=timedelta(seconds=-10))
        with pytest.raises(InvalidTokenError):
            self.service.verify_token(token)

    def test_token_signed_with_other_secret_rejected(self):
        other = CredentialService(secret="a-completely-different-secret-of-decent-length")
        with pytest.raises(InvalidTokenError):
            self.service.verify_token(other.issue_token("dean"))

    def test_garbage_token_rejected(self):
        with pytest.raises(InvalidTokenError):
            self.service.verify_token("not.a.jwt")

    def test_token_without_username_rejected(self):
        token = jwt.encode({"sub": "dean"}, SECRET, algorithm=JWT_ALGORITHM)
        with pytest.raises(InvalidTokenError):
            self.service.verify_token(token)

    def test_non_string_username_rejected(self):
        token = jwt.encode({"username": 42}, SECRET, algorithm=JWT_ALGORITHM)
        with pytest.raises(InvalidTokenError):
            self.service.verify_token(token)

    def test_token_without_iat_accepted(self):
        """Tokens carrying only {username} are valid; iat is not required."""
        token = jwt.encode({"username": "dean"}, SECRET, algorithm=JWT_ALGORITHM)
        assert self.service.verify_token(token).username == "dean"


class TestConstruction:
    def test_empty_secret_refused(self):
        with pytest.raises(ValueError):
            CredentialService(secret="")

    def test_from_settings(self):
        settings = Settings(jwt_secret=SECRET, jwt_delta_minutes=5, bcrypt_rounds=4)
        service = CredentialService.from_settings(settings)
        assert service.token_lifetime == timedelta(minutes=5)
        assert service.bcrypt_rounds == 4

    def test_from_settings_without_delta(self):
        service = CredentialService.from_settings(Settings(jwt_secret=SECRET, jwt_delta_minutes=None))
        assert service.token_lifetime is None
