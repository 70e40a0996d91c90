"""
Journal API: Entry Schemas
==========================

What:  Request bodies and response shapes for the /entries routes.

Wire names:
    POST body      {title, content}
    PUT body       {newTitle, newContent}
    full entry     {id, title, content, username, createdAt, updatedAt}
    index          {count, user, entries: [{id, title, updatedAt}]}

Response models are built from field names (populate_by_name) and
serialized by alias, which is what FastAPI does for response_model.
"""

from datetime import datetime
from typing import List

from pydantic import BaseModel, ConfigDict, Field

from journal_api.models.entry import Entry
from journal_api.schemas.account import BoundedStr


# ══════════════════════════════════════════════════════════════════════════
# Request Models
# ══════════════════════════════════════════════════════════════════════════


class EntryCreate(BaseModel):
    """Body of POST /entries. content is required but may be empty."""

    title: BoundedStr = Field(description="Entry title")
    content: str = Field(description="Entry text, may be empty")


class EntryReplace(BaseModel):
    """Body of PUT /entries/{id}: replaces both fields at once."""

    model_config = ConfigDict(populate_by_name=True)

    new_title: BoundedStr = Field(alias="newTitle", description="Replacement title")
    new_content: str = Field(alias="newContent", description="Replacement text, may be empty")


# ══════════════════════════════════════════════════════════════════════════
# Response Models
# ══════════════════════════════════════════════════════════════════════════


class EntryResponse(BaseModel):
    """Full entry record returned by create, get and replace."""

    model_config = ConfigDict(populate_by_name=True)

    id: int
    title: str
    content: str
    username: str = Field(description="Owning account")
    created_at: datetime = Field(alias="createdAt")
    updated_at: datetime = Field(alias="updatedAt")

    @classmethod
    def from_model(cls, entry: Entry) -> "EntryResponse":
        return cls(
            id=entry.id,
            title=entry.title,
            content=entry.content,
            username=entry.username,
            created_at=entry.created_at,
            updated_at=entry.updated_at,
        )


class EntryIndexItem(BaseModel):
    """Projection of an entry used in the index (no content)."""

    model_config = ConfigDict(populate_by_name=True)

    id: int
    title: str
    updated_at: datetime = Field(alias="updatedAt")


class EntryIndex(BaseModel):
    """GET /entries: the principal's entries in insertion order."""

    count: int = Field(description="Number of entries")
    user: str = Field(description="Username the index belongs to")
    entries: List[EntryIndexItem]
