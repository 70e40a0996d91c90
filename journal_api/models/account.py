"""
Journal API: Account SQLAlchemy Model
=====================================

What:  ORM model for the `accounts` table.
Who:   Written by AccountService (signup, delete); read by every protected
       operation to re-resolve the principal named in a token.

Table Design:
    - username is the primary key. There is no surrogate id, so the token's
      username claim is the lookup key and an account can never be renamed.
    - password_hash stores the bcrypt digest only.
    - Deleting a row removes all of its entries through the ON DELETE CASCADE
      foreign key declared on entries.username.
"""

from datetime import datetime, timezone
from typing import TYPE_CHECKING, List

from sqlalchemy import String, text
from sqlalchemy.dialects.postgresql import TIMESTAMP
from sqlalchemy.orm import Mapped, mapped_column, relationship

from journal_api.database import Base

if TYPE_CHECKING:
    from journal_api.models.entry import Entry


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Account(Base):
    """
    A registered user.

    Lifecycle:
        1. Created by POST /users/signup
        2. Never updated (username immutable, no password change endpoint)
        3. Deleted by DELETE /users, taking every owned entry with it
    """

    __tablename__ = "accounts"

    username: Mapped[str] = mapped_column(
        String(255),
        primary_key=True,
        comment="Unique, immutable account identity",
    )

    password_hash: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        comment="bcrypt digest of the password",
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

    # passive_deletes: the database cascade removes entries; the ORM does not
    # load them first.
    entries: Mapped[List["Entry"]] = relationship(
        back_populates="owner",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="Entry.id",
    )

    def __repr__(self) -> str:
        return f"<Account(username='{self.username}')>"
