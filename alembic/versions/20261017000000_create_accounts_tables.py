"""Create accounts, save_data and transactions tables.

Revision ID: 20261017000000
Revises:
Create Date: 2026-10-17

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = "20261017000000"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "accounts",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("username", sa.String(length=15), nullable=False),
        sa.Column("role", sa.String(length=16), nullable=False, server_default="standard"),
        sa.Column("password_hash", sa.LargeBinary(), nullable=False),
        sa.Column("salt", sa.LargeBinary(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("banned", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("banned_at", sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        "ix_accounts_username_lower",
        "accounts",
        [sa.text("lower(username)")],
        unique=True,
    )
    op.create_table(
        "save_data",
        sa.Column("account_id", sa.Uuid(), nullable=False),
        sa.Column("save_one", postgresql.JSONB(astext_type=sa.Text()), nullable=True),
        sa.Column("save_two", postgresql.JSONB(astext_type=sa.Text()), nullable=True),
        sa.Column("save_three", postgresql.JSONB(astext_type=sa.Text()), nullable=True),
        sa.Column("saved_at_one", sa.DateTime(timezone=True), nullable=True),
        sa.Column("saved_at_two", sa.DateTime(timezone=True), nullable=True),
        sa.Column("saved_at_three", sa.DateTime(timezone=True), nullable=True),
        sa.ForeignKeyConstraint(["account_id"], ["accounts.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("account_id"),
    )
    op.create_table(
        "transactions",
        sa.Column("tx_id", sa.String(length=32), nullable=False),
        sa.Column("account_id", sa.Uuid(), nullable=False),
        sa.Column("first_name", sa.String(length=50), nullable=False),
        sa.Column("last_name", sa.String(length=50), nullable=False),
        sa.Column("address", sa.String(length=125), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("tx_id"),
    )
    op.create_index(
        op.f("ix_transactions_account_id"),
        "transactions",
        ["account_id"],
        unique=False,
    )


def downgrade() -> None:
    op.drop_index(op.f("ix_transactions_account_id"), table_name="transactions")
    op.drop_table("transactions")
    op.drop_table("save_data")
    op.drop_index("ix_accounts_username_lower", table_name="accounts")
    op.drop_table("accounts")
