"""
Journal API: Entry SQLAlchemy Model
===================================

What:  ORM model for the `entries` table (one journal note per row).
Who:   Read and written exclusively by EntryService.

Table Design:
    - Integer autoincrement id: ids grow monotonically and double as the
      insertion order used by the entry index.
    - username: foreign key to accounts.username with ON DELETE CASCADE.
      Ownership checks compare this column to the principal directly.
    - content may be the empty string but never NULL.
    - idx_entries_username: the entry index query filters by owner.
"""

from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import ForeignKey, Index, Integer, String, Text, text
from sqlalchemy.dialects.postgresql import TIMESTAMP
from sqlalchemy.orm import Mapped, mapped_column, relationship

from journal_api.database import Base
from journal_api.models.account import utcnow

if TYPE_CHECKING:
    from journal_api.models.account import Account


class Entry(Base):
    """
    A journal entry owned by exactly one account.

    State machine: nonexistent → existing → (updated)* → deleted.
    Deletion is physical; there is no soft-delete flag.
    """

    __tablename__ = "entries"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    title: Mapped[str] = mapped_column(String(255), nullable=False)

    content: Mapped[str] = mapped_column(
        Text,
        nullable=False,
        default="",
        server_default=text("''"),
    )

    username: Mapped[str] = mapped_column(
        String(255),
        ForeignKey("accounts.username", ondelete="CASCADE"),
        nullable=False,
        comment="Owning account",
    )

    created_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True),
        nullable=False,
        default=utcnow,
        server_default=text("CURRENT_TIMESTAMP"),
    )

    updated_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True),
        nullable=False,
        default=utcnow,
        onupdate=utcnow,
        server_default=text("CURRENT_TIMESTAMP"),
    )

    owner: Mapped["Account"] = relationship(back_populates="entries")

    # sqlite_autoincrement keeps SQLite from reusing the id of a deleted last row.
    __table_args__ = (
        Index("idx_entries_username", "username"),
        {"sqlite_autoincrement": True},
    )

    def __repr__(self) -> str:
        return f"<Entry(id={self.id}, username='{self.username}')>"
