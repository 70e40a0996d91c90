"""Create accounts and entries tables

Revision ID: 001
Revises: None
Create Date: 2024-01-15 00:00:00.000000+00:00

What:  Initial schema. `accounts` keyed by username; `entries` owned by an
       account through a cascading foreign key.

Rollback: downgrade() drops both tables (all data lost).
"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "accounts",
        sa.Column("username", sa.String(255), nullable=False, comment="Unique, immutable account identity"),
        sa.Column("password_hash", sa.String(255), nullable=False, comment="bcrypt digest of the password"),
        sa.Column(
            "created_at",
            sa.TIMESTAMP(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.TIMESTAMP(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
        ),
        sa.PrimaryKeyConstraint("username", name="pk_accounts"),
    )

    op.create_table(
        "entries",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("content", sa.Text(), server_default=sa.text("''"), nullable=False),
        sa.Column("username", sa.String(255), nullable=False, comment="Owning account"),
        sa.Column(
            "created_at",
            sa.TIMESTAMP(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.TIMESTAMP(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
        ),
        sa.PrimaryKeyConstraint("id", name="pk_entries"),
        sa.ForeignKeyConstraint(
            ["username"],
            ["accounts.username"],
            name="fk_entries_username_accounts",
            ondelete="CASCADE",
        ),
    )

    op.create_index("idx_entries_username", "entries", ["username"])


def downgrade() -> None:
    op.drop_index("idx_entries_username", table_name="entries")
    op.drop_table("entries")
    op.drop_table("accounts")
