"""Account lifecycle: registration, login, password change, upgrade, saves, admin actions.

Every operation composes the password hasher, the token service and the
account store. Store failures are translated into ServiceError here; the role
and ban state that guard security-sensitive writes are always re-read from the
store rather than taken from the caller's token.

Operations that derive a password hash are coroutines: store access runs in a
worker thread and the derivation is awaited on the hasher's pool.
"""

import asyncio
import json
import logging
import math
import secrets
import uuid
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Any
from uuid import UUID

from sqlalchemy.exc import SQLAlchemyError

from savekeep.core.access import SAVE_ACCESS, Role, check_role
from savekeep.core.errors import ErrorKind, ServiceError, db_error, transaction_error
from savekeep.core.security import PasswordHasher
from savekeep.core.tokens import TokenClaims, TokenService
from savekeep.core.validation import (
    parse_identifier,
    validate_credentials,
    validate_password,
    validate_payment,
)
from savekeep.models import SLOT_COLUMNS, Account
from savekeep.services.account_store import AccountStore

logger = logging.getLogger(__name__)

DEFAULT_PAGE_SIZE = 20
DEFAULT_MAX_SAVE_DATA_BYTES = 2048


@dataclass(frozen=True)
class PaymentDetails:
    """Upgrade payment form. Only the name and address are persisted."""

    first_name: str
    last_name: str
    address: str
    card_number: str
    cvc: str
    exp_month: str
    exp_year: str


@dataclass(frozen=True)
class SlotState:
    slot: int
    data: dict[str, Any] | None
    saved_at: datetime | None


@dataclass(frozen=True)
class AccountPage:
    page: int
    pages: int
    accounts: list[Account]


def _utcnow() -> datetime:
    return datetime.now(UTC)


def generate_tx_id(account_id: UUID) -> str:
    """Placeholder transaction id: tx_ + 5 random digits + head and tail of the account id."""
    digits = 10000 + secrets.randbelow(90000)
    text = str(account_id)
    return f"tx_{digits}{text[:6]}{text[-6:]}"


class AccountService:
    """Account operations for one request (one store session)."""

    def __init__(
        self,
        store: AccountStore,
        hasher: PasswordHasher,
        tokens: TokenService,
        page_size: int = DEFAULT_PAGE_SIZE,
        max_save_bytes: int = DEFAULT_MAX_SAVE_DATA_BYTES,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self.store = store
        self.hasher = hasher
        self.tokens = tokens
        self.page_size = page_size
        self.max_save_bytes = max_save_bytes
        self._clock = clock

    @contextmanager
    def _reads(self) -> Iterator[None]:
        try:
            yield
        except SQLAlchemyError as e:
            self.store.rollback()
            raise db_error(e) from e

    @contextmanager
    def _writes(
        self,
        on_commit_error: Callable[[SQLAlchemyError], ServiceError] = db_error,
    ) -> Iterator[None]:
        """Unit of work: commit when the block succeeds, roll back on any failure."""
        try:
            yield
        except SQLAlchemyError as e:
            self.store.rollback()
            raise db_error(e) from e
        except Exception:
            self.store.rollback()
            raise
        try:
            self.store.commit()
        except SQLAlchemyError as e:
            self.store.rollback()
            raise on_commit_error(e) from e

    def _find(self, identifier: UUID | str) -> Account:
        with self._reads():
            account = self.store.get(identifier)
        if account is None:
            raise ServiceError(ErrorKind.ACCOUNT_NOT_FOUND)
        return account

    def _current_account(self, claims: TokenClaims) -> Account:
        """Stored account behind a token. Deleted accounts fail like bad credentials."""
        with self._reads():
            account = self.store.get_by_id(claims.id)
        if account is None:
            raise ServiceError(ErrorKind.INVALID_CREDENTIALS)
        if account.banned:
            raise ServiceError(ErrorKind.BANNED)
        return account

    # Registration and login

    def _ensure_username_free(self, username: str) -> None:
        with self._reads():
            taken = self.store.username_exists(username)
        if taken:
            raise ServiceError(ErrorKind.USERNAME_TAKEN)

    def _insert(
        self,
        account_id: UUID,
        username: str,
        role: Role,
        password_hash: bytes,
        salt: bytes,
    ) -> Account:
        with self._writes():
            if role is Role.ADMIN:
                account = self.store.add_admin(
                    account_id, username, password_hash, salt, self._clock()
                )
            else:
                account = self.store.add_account(
                    account_id, username, role, password_hash, salt, self._clock()
                )
        return account

    def _lookup(self, username: str) -> Account | None:
        with self._reads():
            return self.store.get_by_username(username)

    def _store_password(self, account: Account, password_hash: bytes, salt: bytes) -> None:
        with self._writes():
            self.store.update_password(account, password_hash, salt)

    async def _create(self, username: str, password: str, role: Role) -> Account:
        validate_credentials(username, password)
        await asyncio.to_thread(self._ensure_username_free, username)
        password_hash, salt = await self.hasher.hash(password)
        return await asyncio.to_thread(
            self._insert, uuid.uuid4(), username, role, password_hash, salt
        )

    async def register(self, username: str, password: str) -> str:
        """Create a standard account and return a token for it."""
        account = await self._create(username, password, Role.STANDARD)
        logger.info("Registered account id=%s", account.id)
        return self.tokens.issue(account.username, Role.STANDARD, account.id)

    async def register_admin(self, username: str, password: str) -> Account:
        """Create an admin account. The caller stays signed in as themselves; no token."""
        account = await self._create(username, password, Role.ADMIN)
        logger.info("Created admin account id=%s", account.id)
        return account

    async def authenticate(self, username: str, password: str) -> str:
        """
        Verify credentials and return a token.

        Unknown username and wrong password both raise INVALID_CREDENTIALS and
        both pay for one derivation. A banned account raises BANNED.
        """
        validate_credentials(username, password)
        account = await asyncio.to_thread(self._lookup, username)
        if account is None:
            await self.hasher.dummy_verify(password)
            logger.info("Authentication failed: no match")
            raise ServiceError(ErrorKind.INVALID_CREDENTIALS)
        if account.banned:
            logger.info("Authentication refused for banned account id=%s", account.id)
            raise ServiceError(ErrorKind.BANNED)
        if not await self.hasher.verify(password, account.password_hash, account.salt):
            logger.info("Authentication failed: no match")
            raise ServiceError(ErrorKind.INVALID_CREDENTIALS)
        return self.tokens.issue(account.username, Role(account.role), account.id)

    def refresh(self, claims: TokenClaims) -> str:
        """New token near expiry, carrying the stored role."""
        if not self.tokens.can_refresh(claims):
            raise ServiceError(ErrorKind.TOKEN_DURATION)
        account = self._current_account(claims)
        return self.tokens.refresh(claims, role=Role(account.role))

    async def change_password(self, claims: TokenClaims, password: str, new_password: str) -> None:
        """Re-check the current password, then replace hash and salt. No new token."""
        validate_password(password)
        validate_password(new_password)
        account = await asyncio.to_thread(self._current_account, claims)
        if not await self.hasher.verify(password, account.password_hash, account.salt):
            raise ServiceError(ErrorKind.INVALID_CREDENTIALS)
        password_hash, salt = await self.hasher.hash(new_password)
        await asyncio.to_thread(self._store_password, account, password_hash, salt)
        logger.info("Password changed for account id=%s", account.id)

    # Upgrade and saves

    def upgrade(self, claims: TokenClaims, payment: PaymentDetails) -> str:
        """
        Standard -> upgraded. The stored role is checked under a row lock, so a
        standard-role token replayed after an earlier upgrade is refused.

        The transaction record, the role change and the save-data row commit
        together; no payment is actually captured.
        """
        validate_payment(
            payment.first_name,
            payment.last_name,
            payment.address,
            payment.card_number,
            payment.cvc,
            payment.exp_month,
            payment.exp_year,
        )
        tx_id = generate_tx_id(claims.id)
        with self._writes(on_commit_error=transaction_error):
            account = self.store.lock_for_update(claims.id)
            if account is None:
                raise ServiceError(ErrorKind.INVALID_CREDENTIALS)
            if account.banned:
                raise ServiceError(ErrorKind.BANNED)
            if Role(account.role) is not Role.STANDARD:
                raise ServiceError(ErrorKind.UPGRADED)
            self.store.record_upgrade(
                account,
                tx_id,
                payment.first_name,
                payment.last_name,
                payment.address,
                self._clock(),
            )
        logger.info("Upgraded account id=%s tx_id=%s", account.id, tx_id)
        return self.tokens.issue(account.username, Role.UPGRADED, account.id)

    def _save_account(self, claims: TokenClaims) -> Account:
        """Stored account behind a save or load; its stored role must allow save access."""
        account = self._current_account(claims)
        check_role(account.role, SAVE_ACCESS, ErrorKind.NOT_UPGRADED)
        return account

    def save(self, claims: TokenClaims, slot: int, data: dict[str, Any]) -> None:
        if slot not in SLOT_COLUMNS:
            raise ServiceError(ErrorKind.INVALID_SLOT)
        try:
            size = len(json.dumps(data, separators=(",", ":")).encode("utf-8"))
        except (TypeError, ValueError) as e:
            raise ServiceError(ErrorKind.PAYLOAD) from e
        if size > self.max_save_bytes:
            raise ServiceError(ErrorKind.PAYLOAD)
        account = self._save_account(claims)
        with self._writes():
            self.store.write_slot(account.id, slot, data, self._clock())

    def load(self, claims: TokenClaims) -> list[SlotState]:
        """All three slots; missing slots (or a missing row) come back empty."""
        account = self._save_account(claims)
        with self._reads():
            row = self.store.read_slots(account.id)
        states = []
        for slot, (save_column, time_column) in SLOT_COLUMNS.items():
            states.append(
                SlotState(
                    slot=slot,
                    data=getattr(row, save_column) if row is not None else None,
                    saved_at=getattr(row, time_column) if row is not None else None,
                )
            )
        return states

    # Admin

    def list_accounts(self, page: int) -> AccountPage:
        if page < 1:
            raise ServiceError(ErrorKind.PARAMETER)
        with self._reads():
            count = self.store.count_accounts()
            pages = math.ceil(count / self.page_size)
            if page > pages:
                raise ServiceError(ErrorKind.PAGE)
            accounts = self.store.list_page((page - 1) * self.page_size, self.page_size)
        return AccountPage(page=page, pages=pages, accounts=accounts)

    def get_account(self, identifier: str) -> Account:
        return self._find(parse_identifier(identifier))

    def ban(self, identifier: str) -> Account:
        account = self._find(parse_identifier(identifier))
        if account.banned:
            raise ServiceError(ErrorKind.PRIOR_BAN)
        with self._writes():
            self.store.set_banned(account, True, self._clock())
        logger.info("Banned account id=%s", account.id)
        return account

    def unban(self, identifier: str) -> Account:
        account = self._find(parse_identifier(identifier))
        if not account.banned:
            raise ServiceError(ErrorKind.NOT_BANNED)
        with self._writes():
            self.store.set_banned(account, False, None)
        logger.info("Unbanned account id=%s", account.id)
        return account

    def delete(self, identifier: str) -> str:
        """Delete the account and its save data. Returns the deleted username."""
        account = self._find(parse_identifier(identifier))
        username = account.username
        account_id = account.id
        with self._writes():
            self.store.delete_account(account)
        logger.info("Deleted account id=%s", account_id)
        return username
