"""SQLAlchemy ORM models."""

from savekeep.models.account import Account
from savekeep.models.base import Base
from savekeep.models.save_data import SLOT_COLUMNS, SaveData
from savekeep.models.transaction import Transaction

__all__ = ["Account", "Base", "SLOT_COLUMNS", "SaveData", "Transaction"]
