"""
Journal API: Account Schemas
============================

What:  Request body for POST /users/signup and POST /users/signin.

Field rules:
    username, password: required JSON strings, surrounding whitespace
    trimmed, non-empty after trimming. Numbers, booleans and null are
    rejected rather than coerced. username is capped at 255 characters.
"""

from typing import Annotated

from pydantic import BaseModel, Field, StringConstraints

NonEmptyStr = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]

# Fits the VARCHAR(255) columns accounts.username and entries.title.
MAX_NAME_LENGTH = 255
BoundedStr = Annotated[
    str, StringConstraints(strip_whitespace=True, min_length=1, max_length=MAX_NAME_LENGTH)
]


class Credentials(BaseModel):
    """Username/password pair used by both signup and signin."""

    username: BoundedStr = Field(description="Account name", examples=["dean"])
    password: NonEmptyStr = Field(description="Plaintext password (never stored)", examples=["dean"])
