"""
Journal API: Entry Service
==========================

What:  CRUD over journal entries, scoped to the authenticated principal.
How:   Every operation runs in one transaction that first re-resolves the
       principal's account (a valid token for a deleted account must not
       read or write anything), then looks up the entry and checks its owner.
Who:   Called by the /entries route handlers.

Check order for single-entry operations (first failure wins):
    1. account still exists          else ExpiredUserError    (400)
    2. entry exists                  else EntryNotFoundError  (404)
    3. entry.username == principal   else EntryNoAccessError  (403)
"""

import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from journal_api.database import transaction
from journal_api.exceptions import (
    EntryNoAccessError,
    EntryNotFoundError,
    ExpiredUserError,
)
from journal_api.models.account import Account, utcnow
from journal_api.models.entry import Entry
from journal_api.schemas.entry import EntryIndex, EntryIndexItem, EntryResponse

logger = logging.getLogger(__name__)

# entries.id is a 32-bit INTEGER; ids outside this range cannot exist.
MAX_ENTRY_ID = 2**31 - 1


class EntryService:
    """Stateless; receives the request's session on every call."""

    async def _resolve_account(self, db: AsyncSession, principal: str) -> Account:
        account = await db.get(Account, principal)
        if account is None:
            logger.warning("Token names a deleted account: %s", principal)
            raise ExpiredUserError(context={"username": principal})
        return account

    async def _get_owned_entry(self, db: AsyncSession, principal: str, entry_id: int) -> Entry:
        if not 1 <= entry_id <= MAX_ENTRY_ID:
            raise EntryNotFoundError(context={"entry_id": entry_id})
        entry = await db.get(Entry, entry_id)
        if entry is None:
            raise EntryNotFoundError(context={"entry_id": entry_id})
        if entry.username != principal:
            logger.warning(
                "Entry access denied: %s requested entry %s owned by %s",
                principal, entry_id, entry.username,
            )
            raise EntryNoAccessError(context={"entry_id": entry_id, "principal": principal})
        return entry

    async def list_entries(self, db: AsyncSession, principal: str) -> EntryIndex:
        """
        The principal's entries as {id, title, updatedAt}, in insertion order.

        Query plan:
            SELECT id, title, updated_at FROM entries
            WHERE username = :principal ORDER BY id
            → idx_entries_username
        """
        async with transaction(db):
            await self._resolve_account(db, principal)
            result = await db.execute(
                select(Entry.id, Entry.title, Entry.updated_at)
                .where(Entry.username == principal)
                .order_by(Entry.id)
            )
            rows = result.all()

        items = [
            EntryIndexItem(id=row.id, title=row.title, updated_at=row.updated_at)
            for row in rows
        ]
        return EntryIndex(count=len(items), user=principal, entries=items)

    async def create_entry(
        self, db: AsyncSession, principal: str, title: str, content: str
    ) -> EntryResponse:
        async with transaction(db):
            await self._resolve_account(db, principal)
            entry = Entry(title=title, content=content, username=principal)
            db.add(entry)
            await db.flush()
            await db.refresh(entry)

        logger.info("Entry %s created by %s", entry.id, principal)
        return EntryResponse.from_model(entry)

    async def get_entry(self, db: AsyncSession, principal: str, entry_id: int) -> EntryResponse:
        async with transaction(db):
            await self._resolve_account(db, principal)
            entry = await self._get_owned_entry(db, principal, entry_id)
        return EntryResponse.from_model(entry)

    async def replace_entry(
        self,
        db: AsyncSession,
        principal: str,
        entry_id: int,
        new_title: str,
        new_content: str,
    ) -> EntryResponse:
        """
        Overwrite title and content together and bump updatedAt.

        updated_at is set explicitly: the ORM only fires onupdate when a
        column value actually changes, and a replace with identical values
        still counts as a modification.
        """
        async with transaction(db):
            await self._resolve_account(db, principal)
            entry = await self._get_owned_entry(db, principal, entry_id)
            entry.title = new_title
            entry.content = new_content
            entry.updated_at = utcnow()
            await db.flush()
            await db.refresh(entry)

        logger.info("Entry %s replaced by %s", entry_id, principal)
        return EntryResponse.from_model(entry)

    async def delete_entry(self, db: AsyncSession, principal: str, entry_id: int) -> None:
        async with transaction(db):
            await self._resolve_account(db, principal)
            entry = await self._get_owned_entry(db, principal, entry_id)
            await db.delete(entry)

        logger.info("Entry %s deleted by %s", entry_id, principal)


entry_service = EntryService()
