"""
Admin account management against the configured store.

    python scripts/manage_users.py add alice
    python scripts/manage_users.py check alice
"""

from __future__ import annotations

import argparse
import getpass
import logging
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from portfolio.config import get_settings
from portfolio.db import DuplicateUserError
from portfolio.dependencies import build_db_client
from portfolio.security import hash_password

logger = logging.getLogger(__name__)


def add_user(db, username: str, password: str) -> int:
    try:
        db.create_user(username, hash_password(password))
    except DuplicateUserError:
        logger.error("User %r already exists", username)
        return 1
    logger.info("Created user %r", username)
    return 0


def check_user(db, username: str) -> int:
    if db.get_user(username) is None:
        logger.info("User %r not found", username)
        return 1
    logger.info("User %r exists", username)
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Portfolio admin accounts")
    subparsers = parser.add_subparsers(dest="command", required=True)

    add_parser = subparsers.add_parser("add", help="Create an admin account")
    add_parser.add_argument("username")
    add_parser.add_argument(
        "--password",
        default=None,
        help="Password (prompted for when omitted)",
    )

    check_parser = subparsers.add_parser("check", help="Report whether a user exists")
    check_parser.add_argument("username")

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.INFO,
        format="%(name)s %(levelname)s %(asctime)s %(message)s",
        datefmt="%m/%d/%Y %I:%M:%S %p",
    )

    db = build_db_client(get_settings())
    try:
        if args.command == "add":
            password = args.password or getpass.getpass("Password: ")
            return add_user(db, args.username, password)
        return check_user(db, args.username)
    finally:
        db.close()


if __name__ == "__main__":
    raise SystemExit(main())
