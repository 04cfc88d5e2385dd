"""Unit tests for savekeep.core.security: Argon2id hashing on the worker pool."""

import asyncio
import threading
import unittest
from unittest.mock import patch

from savekeep.core.security import PasswordHasher

from support import make_hasher, make_settings


class TestHashRoundTrip(unittest.TestCase):
    """verify accepts the hashed password and rejects anything else."""

    @classmethod
    def setUpClass(cls) -> None:
        cls.hasher = make_hasher()

    @classmethod
    def tearDownClass(cls) -> None:
        cls.hasher.shutdown()

    def test_verify_same_password(self) -> None:
        password_hash, salt = asyncio.run(self.hasher.hash("Str0ng!Pass"))
        self.assertTrue(asyncio.run(self.hasher.verify("Str0ng!Pass", password_hash, salt)))

    def test_verify_other_password(self) -> None:
        password_hash, salt = asyncio.run(self.hasher.hash("Str0ng!Pass"))
        self.assertFalse(asyncio.run(self.hasher.verify("Str0ng!Pasz", password_hash, salt)))
        self.assertFalse(asyncio.run(self.hasher.verify("", password_hash, salt)))

    def test_wrong_salt_fails(self) -> None:
        password_hash, _ = asyncio.run(self.hasher.hash("Str0ng!Pass"))
        _, other_salt = asyncio.run(self.hasher.hash("Str0ng!Pass"))
        self.assertFalse(asyncio.run(self.hasher.verify("Str0ng!Pass", password_hash, other_salt)))

    def test_fresh_salt_each_call(self) -> None:
        first_hash, first_salt = asyncio.run(self.hasher.hash("Str0ng!Pass"))
        second_hash, second_salt = asyncio.run(self.hasher.hash("Str0ng!Pass"))
        self.assertNotEqual(first_salt, second_salt)
        self.assertNotEqual(first_hash, second_hash)

    def test_lengths(self) -> None:
        password_hash, salt = asyncio.run(self.hasher.hash("Str0ng!Pass"))
        self.assertEqual(len(password_hash), 64)
        self.assertEqual(len(salt), 16)

    def test_dummy_verify_is_false(self) -> None:
        self.assertFalse(asyncio.run(self.hasher.dummy_verify("Str0ng!Pass")))


class TestHasherWorkerPool(unittest.TestCase):
    """Derivation runs on the dedicated pool, not the calling thread."""

    def test_derivation_runs_on_pool_thread(self) -> None:
        hasher = make_hasher()
        seen: list[str] = []
        derive = hasher._derive

        def recording(password: str, salt: bytes) -> bytes:
            seen.append(threading.current_thread().name)
            return derive(password, salt)

        try:
            with patch.object(hasher, "_derive", side_effect=recording):
                asyncio.run(hasher.hash("Str0ng!Pass"))
        finally:
            hasher.shutdown()
        self.assertEqual(len(seen), 1)
        self.assertTrue(seen[0].startswith("password-hash"))
        self.assertNotEqual(seen[0], threading.current_thread().name)

    def test_waiting_on_a_hash_leaves_the_event_loop_free(self) -> None:
        hasher = make_hasher()
        release = threading.Event()
        derive = hasher._derive

        def blocked(password: str, salt: bytes) -> bytes:
            release.wait(5)
            return derive(password, salt)

        async def scenario() -> bool:
            pending = asyncio.ensure_future(hasher.hash("Str0ng!Pass"))
            # the loop keeps running other work while the derivation is stuck
            await asyncio.sleep(0.05)
            finished_early = pending.done()
            release.set()
            await pending
            return finished_early

        try:
            with patch.object(hasher, "_derive", side_effect=blocked):
                self.assertFalse(asyncio.run(scenario()))
        finally:
            release.set()
            hasher.shutdown()

    def test_entropy_failure_propagates(self) -> None:
        hasher = make_hasher()
        try:
            with patch("savekeep.core.security.secrets.token_bytes", side_effect=OSError("no entropy")):
                with self.assertRaises(OSError):
                    asyncio.run(hasher.hash("Str0ng!Pass"))
        finally:
            hasher.shutdown()


class TestFromSettings(unittest.TestCase):
    def test_cost_parameters_come_from_settings(self) -> None:
        settings = make_settings(ARGON2_MEMORY_COST_KIB=64, ARGON2_TIME_COST=3, ARGON2_PARALLELISM=2)
        hasher = PasswordHasher.from_settings(settings)
        try:
            self.assertEqual(hasher.memory_cost_kib, 64)
            self.assertEqual(hasher.time_cost, 3)
            self.assertEqual(hasher.parallelism, 2)
            self.assertEqual(hasher.hash_length, 64)
        finally:
            hasher.shutdown()


if __name__ == "__main__":
    unittest.main()
