"""Shared builders for tests: cheap hashing, SQLite engine, wired services."""

from datetime import timedelta

from sqlalchemy import Engine, create_engine
from sqlalchemy.pool import StaticPool

from savekeep.core.config import Settings
from savekeep.core.database import create_session_factory
from savekeep.core.security import PasswordHasher
from savekeep.core.tokens import TokenService
from savekeep.models import Base
from savekeep.services.account_store import AccountStore
from savekeep.services.accounts import AccountService, PaymentDetails

DOMAIN = "games.example.com"
SECRET = "test-secret-0123456789abcdef0123456789"
STRONG_PASSWORD = "Str0ng!Pass"
OTHER_PASSWORD = "0ther#Passw0rd"


def make_settings(**overrides: object) -> Settings:
    """Settings with minimal Argon2 cost so tests stay fast."""
    values: dict[str, object] = {
        "SERVICE_DOMAIN": DOMAIN,
        "TOKEN_SECRET": SECRET,
        "TOKEN_DURATION_SEC": 900,
        "TOKEN_LEEWAY_SEC": 3,
        "TOKEN_REFRESH_THRESHOLD_SEC": 30,
        "ARGON2_MEMORY_COST_KIB": 8,
        "ARGON2_TIME_COST": 1,
        "ARGON2_PARALLELISM": 1,
        "PASSWORD_HASH_WORKERS": 2,
        "USERS_PAGE_SIZE": 20,
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


def make_hasher() -> PasswordHasher:
    return PasswordHasher(memory_cost_kib=8, time_cost=1, parallelism=1, max_workers=2)


def make_tokens(**kwargs: object) -> TokenService:
    params: dict[str, object] = {
        "domain": DOMAIN,
        "secret": SECRET,
        "duration": timedelta(seconds=900),
    }
    params.update(kwargs)
    return TokenService(**params)


def make_engine() -> Engine:
    """In-memory SQLite shared across threads, with all tables created."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    return engine


def make_service(engine: Engine, hasher: PasswordHasher, tokens: TokenService, **kwargs: object):
    """AccountService over a fresh session; returns (service, session)."""
    session = create_session_factory(engine)()
    service = AccountService(store=AccountStore(session), hasher=hasher, tokens=tokens, **kwargs)
    return service, session


def payment(**overrides: str) -> PaymentDetails:
    values = {
        "first_name": "Alice",
        "last_name": "Liddell",
        "address": "12 Rabbit Hole Lane, Oxford",
        "card_number": "4242424242424242",
        "cvc": "123",
        "exp_month": "09",
        "exp_year": "29",
    }
    values.update(overrides)
    return PaymentDetails(**values)
