"""Row store for accounts, save slots and upgrade records.

Methods stage changes and flush; the caller owns the unit of work and decides
when to commit or roll back. SQLAlchemy errors propagate unchanged.
"""

from datetime import datetime
from typing import Any
from uuid import UUID

from sqlalchemy import delete, exists, func, select
from sqlalchemy.orm import Session

from savekeep.core.access import Role
from savekeep.models import SLOT_COLUMNS, Account, SaveData, Transaction


class AccountStore:
    """Account persistence over one SQLAlchemy session."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def commit(self) -> None:
        self.session.commit()

    def rollback(self) -> None:
        self.session.rollback()

    # Lookups

    def get_by_username(self, username: str) -> Account | None:
        return self.session.scalars(
            select(Account).where(func.lower(Account.username) == username.lower())
        ).first()

    def get_by_id(self, account_id: UUID) -> Account | None:
        return self.session.get(Account, account_id)

    def get(self, identifier: UUID | str) -> Account | None:
        """Look up by id when given a UUID, otherwise by username."""
        if isinstance(identifier, UUID):
            return self.get_by_id(identifier)
        return self.get_by_username(identifier)

    def username_exists(self, username: str) -> bool:
        return bool(
            self.session.scalar(
                select(exists().where(func.lower(Account.username) == username.lower()))
            )
        )

    def lock_for_update(self, account_id: UUID) -> Account | None:
        """Re-read the account row with a row lock held until commit."""
        return self.session.scalars(
            select(Account)
            .where(Account.id == account_id)
            .with_for_update()
            .execution_options(populate_existing=True)
        ).first()

    def count_accounts(self) -> int:
        return self.session.scalar(select(func.count()).select_from(Account)) or 0

    def list_page(self, offset: int, limit: int) -> list[Account]:
        return list(
            self.session.scalars(
                select(Account)
                .order_by(Account.created_at, Account.id)
                .offset(offset)
                .limit(limit)
            )
        )

    # Writes

    def add_account(
        self,
        account_id: UUID,
        username: str,
        role: Role,
        password_hash: bytes,
        salt: bytes,
        created_at: datetime,
    ) -> Account:
        account = Account(
            id=account_id,
            username=username,
            role=role.value,
            password_hash=password_hash,
            salt=salt,
            created_at=created_at,
            banned=False,
            banned_at=None,
        )
        self.session.add(account)
        self.session.flush()
        return account

    def add_admin(
        self,
        account_id: UUID,
        username: str,
        password_hash: bytes,
        salt: bytes,
        created_at: datetime,
    ) -> Account:
        """Admin accounts get their save-data row up front."""
        account = self.add_account(
            account_id, username, Role.ADMIN, password_hash, salt, created_at
        )
        self.init_save_data(account.id)
        return account

    def update_password(self, account: Account, password_hash: bytes, salt: bytes) -> None:
        account.password_hash = password_hash
        account.salt = salt
        self.session.flush()

    def add_transaction(
        self,
        tx_id: str,
        account_id: UUID,
        first_name: str,
        last_name: str,
        address: str,
        created_at: datetime,
    ) -> Transaction:
        tx = Transaction(
            tx_id=tx_id,
            account_id=account_id,
            first_name=first_name,
            last_name=last_name,
            address=address,
            created_at=created_at,
        )
        self.session.add(tx)
        self.session.flush()
        return tx

    def set_role(self, account: Account, role: Role) -> None:
        account.role = role.value
        self.session.flush()

    def init_save_data(self, account_id: UUID) -> SaveData:
        row = self.session.get(SaveData, account_id)
        if row is None:
            row = SaveData(account_id=account_id)
            self.session.add(row)
            self.session.flush()
        return row

    def record_upgrade(
        self,
        account: Account,
        tx_id: str,
        first_name: str,
        last_name: str,
        address: str,
        now: datetime,
    ) -> None:
        """Stage the three upgrade writes. Commit them together or not at all."""
        self.add_transaction(tx_id, account.id, first_name, last_name, address, now)
        self.set_role(account, Role.UPGRADED)
        self.init_save_data(account.id)

    def write_slot(self, account_id: UUID, slot: int, data: dict[str, Any], now: datetime) -> None:
        """Unconditional overwrite of one slot and its timestamp."""
        save_column, time_column = SLOT_COLUMNS[slot]
        row = self.init_save_data(account_id)
        setattr(row, save_column, data)
        setattr(row, time_column, now)
        self.session.flush()

    def read_slots(self, account_id: UUID) -> SaveData | None:
        return self.session.get(SaveData, account_id)

    def set_banned(self, account: Account, banned: bool, now: datetime | None) -> None:
        account.banned = banned
        account.banned_at = now if banned else None
        self.session.flush()

    def delete_account(self, account: Account) -> None:
        """Remove the account and its save-data row. Upgrade records are kept."""
        self.session.execute(delete(SaveData).where(SaveData.account_id == account.id))
        self.session.delete(account)
        self.session.flush()
