"""
Create an admin account (e.g. the first one; admins are otherwise created by admins). Run from project root:
  python -m savekeep.scripts.create_admin USERNAME PASSWORD
Example:
  python -m savekeep.scripts.create_admin admin 'Adm1n!Passw0rd'
"""
import argparse
import asyncio
import logging
import sys

from dotenv import load_dotenv

from savekeep.core.config import get_settings
from savekeep.core.database import create_db_engine, create_session_factory
from savekeep.core.errors import ServiceError
from savekeep.core.security import PasswordHasher
from savekeep.core.tokens import TokenService
from savekeep.services.account_store import AccountStore
from savekeep.services.accounts import AccountService

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
    datefmt="%Y-%m-%dT%H:%M:%SZ",
)
logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Create a SaveKeep admin account.")
    parser.add_argument("username", help="Username (3-15 chars: letters, digits, '-', '_')")
    parser.add_argument(
        "password",
        help="Password (10-30 chars with upper, lower, digit and special character)",
    )
    args = parser.parse_args(argv)

    load_dotenv()
    settings = get_settings()
    engine = create_db_engine(settings)
    hasher = PasswordHasher.from_settings(settings)
    db = create_session_factory(engine)()
    try:
        service = AccountService(
            store=AccountStore(db),
            hasher=hasher,
            tokens=TokenService.from_settings(settings),
        )
        account = asyncio.run(service.register_admin(args.username.strip(), args.password))
        print(f"Created admin '{account.username}' with id {account.id}.")
        return 0
    except ServiceError as e:
        print(f"Could not create admin: {e.message}", file=sys.stderr)
        return 1
    finally:
        db.close()
        hasher.shutdown()
        engine.dispose()


if __name__ == "__main__":
    sys.exit(main())
