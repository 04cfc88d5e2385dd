"""ORM model for player and admin accounts."""

import uuid

from sqlalchemy import Boolean, Column, DateTime, Index, LargeBinary, String, Uuid, func

from savekeep.models.base import Base


class Account(Base):
    """
    Account row. password_hash and salt never leave the store and the hasher.

    role: 'standard', 'upgraded' or 'admin'
    """

    __tablename__ = "accounts"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    username = Column(String(15), nullable=False)
    role = Column(String(16), nullable=False, default="standard")
    password_hash = Column(LargeBinary, nullable=False)
    salt = Column(LargeBinary, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False)
    banned = Column(Boolean, nullable=False, default=False)
    banned_at = Column(DateTime(timezone=True), nullable=True)


# Usernames are unique case-insensitively
Index("ix_accounts_username_lower", func.lower(Account.username), unique=True)
