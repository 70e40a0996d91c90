"""
Journal API: ORM Models
=======================

Importing this package registers every table on `Base.metadata`, which
Alembic, the reset command and the test fixtures rely on.
"""

from journal_api.models.account import Account
from journal_api.models.entry import Entry

__all__ = ["Account", "Entry"]
