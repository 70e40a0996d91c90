"""
Journal API: Application Package Initializer
============================================

What: Marks the `journal_api` directory as a Python package.
Who:  Used by uvicorn (`journal_api.main:app`), Alembic, pytest and the
      `journal-reset-db` command.

Architecture Note:
    ┌─────────────────────────────────────┐
    │   Routes + Dependencies (HTTP)      │  ← auth header, validation, status codes
    ├─────────────────────────────────────┤
    │   Services (Business Logic)         │  ← credentials, ownership, transactions
    ├─────────────────────────────────────┤
    │   Models & Schemas (Data)           │  ← SQLAlchemy ORM + Pydantic
    ├─────────────────────────────────────┤
    │   Database (Persistence)            │  ← async engine, sessions, transactions
    └─────────────────────────────────────┘

    Routes never touch the database directly; every read or write goes
    through a service method that owns exactly one transaction.
"""

__version__ = "1.0.0"
