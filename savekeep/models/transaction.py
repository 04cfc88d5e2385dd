"""ORM model for upgrade purchase records."""

from sqlalchemy import Column, DateTime, String, Uuid

from savekeep.models.base import Base


class Transaction(Base):
    """
    Record of an account upgrade. Card number, CVC and expiry are never stored.

    Not tied to the account by a foreign key: purchase records outlive deleted accounts.
    """

    __tablename__ = "transactions"

    tx_id = Column(String(32), primary_key=True)
    account_id = Column(Uuid, nullable=False, index=True)
    first_name = Column(String(50), nullable=False)
    last_name = Column(String(50), nullable=False)
    address = Column(String(125), nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False)
