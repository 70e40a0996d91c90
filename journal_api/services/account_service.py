"""
Journal API: Account Service
============================

What:  Signup, signin, account listing and self-deletion.
How:   Stateless; each call receives the request's AsyncSession and the
       process-wide CredentialService. Every database read or write runs
       inside `transaction(db)`.
Who:   Called by the /users route handlers.

Flows:
    signup   hash password → INSERT account → commit → issue token
             duplicate username surfaces as IntegrityError on flush → 409
    signin   SELECT account → 404 if absent → bcrypt verify → 403 on
             mismatch → issue token
    delete   principal must equal the requested username (403), the account
             must still exist (400); its entries go with it (ON DELETE CASCADE)
"""

import logging
from typing import List

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from journal_api.database import transaction
from journal_api.exceptions import (
    ExpiredUserError,
    IncorrectPasswordError,
    UserConflictError,
    UsernameNotFoundError,
    UserNoAccessError,
)
from journal_api.models.account import Account
from journal_api.services.credential_service import CredentialService

logger = logging.getLogger(__name__)


class AccountService:
    """
    Business logic for the account lifecycle.

    Passwords are hashed before the transaction opens and verified after it
    closes, so no database connection is held during bcrypt work.
    """

    async def signup(
        self,
        db: AsyncSession,
        credentials: CredentialService,
        username: str,
        password: str,
    ) -> str:
        """
        Create an account and return a session token for it.

        Raises:
            UserConflictError: the username is already taken (→ 409)
            DatabaseError: storage failure (→ 500)
        """
        password_hash = await credentials.hash_password(password)

        async with transaction(db):
            db.add(Account(username=username, password_hash=password_hash))
            try:
                await db.flush()
            except IntegrityError as e:
                logger.info("Signup rejected, username taken: %s", username)
                raise UserConflictError(context={"username": username}) from e

        logger.info("Account created: %s", username)
        return credentials.issue_token(username)

    async def signin(
        self,
        db: AsyncSession,
        credentials: CredentialService,
        username: str,
        password: str,
    ) -> str:
        """
        Check a username/password pair and return a fresh token.

        Raises:
            UsernameNotFoundError: no such account (→ 404)
            IncorrectPasswordError: password does not match (→ 403)
        """
        async with transaction(db):
            account = await db.get(Account, username)
            if account is None:
                raise UsernameNotFoundError(context={"username": username})
            password_hash = account.password_hash

        if not await credentials.verify_password(password, password_hash):
            logger.warning("Signin failed, incorrect password for %s", username)
            raise IncorrectPasswordError(context={"username": username})

        return credentials.issue_token(username)

    async def list_usernames(self, db: AsyncSession) -> List[str]:
        """Every registered username, oldest account first."""
        async with transaction(db):
            result = await db.execute(
                select(Account.username).order_by(Account.created_at, Account.username)
            )
            return list(result.scalars().all())

    async def delete_account(self, db: AsyncSession, principal: str, username: str) -> None:
        """
        Delete the principal's own account and every entry it owns.

        Raises:
            UserNoAccessError: `username` is not the principal (→ 403)
            ExpiredUserError: the principal's account is already gone (→ 400)
        """
        if username != principal:
            logger.warning("Account deletion denied: %s tried to delete %s", principal, username)
            raise UserNoAccessError(context={"principal": principal, "username": username})

        async with transaction(db):
            account = await db.get(Account, principal)
            if account is None:
                raise ExpiredUserError(context={"username": principal})
            await db.delete(account)

        logger.info("Account deleted: %s", principal)


account_service = AccountService()
