"""Password hashing with Argon2id on a dedicated worker pool.

Derivation is deliberately slow (that cost is the brute-force defence), so it
never runs on the request path: callers await a future while one of the pool's
threads does the work, holding no request thread meanwhile. argon2-cffi
releases the GIL during derivation, so the pool size bounds how many cores a
burst of logins can occupy.
"""

import asyncio
import hmac
import logging
import secrets
from concurrent.futures import ThreadPoolExecutor
from typing import TYPE_CHECKING

from argon2.low_level import Type, hash_secret_raw

if TYPE_CHECKING:
    from savekeep.core.config import Settings

logger = logging.getLogger(__name__)

ARGON2_TYPE = Type.ID


class PasswordHasher:
    """One-way salted hashing and verification of user passwords.

    hash() returns (hash, salt) as raw bytes; both are opaque to everything
    except this class and the account store.
    """

    def __init__(
        self,
        memory_cost_kib: int,
        time_cost: int,
        parallelism: int,
        hash_length: int = 64,
        salt_length: int = 16,
        max_workers: int = 4,
    ) -> None:
        self.memory_cost_kib = memory_cost_kib
        self.time_cost = time_cost
        self.parallelism = parallelism
        self.hash_length = hash_length
        self.salt_length = salt_length
        self._executor = ThreadPoolExecutor(
            max_workers=max_workers,
            thread_name_prefix="password-hash",
        )

    @classmethod
    def from_settings(cls, settings: "Settings") -> "PasswordHasher":
        return cls(
            memory_cost_kib=settings.ARGON2_MEMORY_COST_KIB,
            time_cost=settings.ARGON2_TIME_COST,
            parallelism=settings.ARGON2_PARALLELISM,
            hash_length=settings.ARGON2_HASH_LENGTH,
            salt_length=settings.ARGON2_SALT_LENGTH,
            max_workers=settings.PASSWORD_HASH_WORKERS,
        )

    def _derive(self, password: str, salt: bytes) -> bytes:
        return hash_secret_raw(
            secret=password.encode("utf-8"),
            salt=salt,
            time_cost=self.time_cost,
            memory_cost=self.memory_cost_kib,
            parallelism=self.parallelism,
            hash_len=self.hash_length,
            type=ARGON2_TYPE,
        )

    async def _run(self, password: str, salt: bytes) -> bytes:
        return await asyncio.wrap_future(self._executor.submit(self._derive, password, salt))

    async def hash(self, password: str) -> tuple[bytes, bytes]:
        """Hash a password with a fresh random salt. Returns (hash, salt).

        An entropy-source failure propagates; there is no fallback salt.
        """
        salt = secrets.token_bytes(self.salt_length)
        return await self._run(password, salt), salt

    async def verify(self, password: str, expected_hash: bytes, salt: bytes) -> bool:
        """Recompute the hash with the stored salt and compare in constant time."""
        derived = await self._run(password, bytes(salt))
        return hmac.compare_digest(derived, bytes(expected_hash))

    async def dummy_verify(self, password: str) -> bool:
        """Spend one derivation and return False. Used when no account matched."""
        await self._run(password, secrets.token_bytes(self.salt_length))
        return False

    def shutdown(self) -> None:
        self._executor.shutdown(wait=True)
        logger.debug("Password hash pool shut down")
