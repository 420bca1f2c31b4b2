"""
Create a user (e.g. the first owner). Run from project root:
  python -m farmapp.scripts.create_user USERNAME EMAIL PASSWORD [role]
Example:
  python -m farmapp.scripts.create_user admin admin@farm.example your-secure-password owner
"""
import argparse
import logging
import sys

from sqlalchemy import or_

from farmapp.core.authz import ROLE_VALUES
from farmapp.core.database import session_scope
from farmapp.core.security import (
    PASSWORD_MAX_LEN,
    PASSWORD_MIN_LEN,
    USERNAME_MAX_LEN,
    USERNAME_MIN_LEN,
    hash_password,
)
from farmapp.models import User

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
    datefmt="%Y-%m-%dT%H:%M:%SZ",
)
logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Create a farm manager user (no registration UI).")
    parser.add_argument("username", help=f"Username ({USERNAME_MIN_LEN}-{USERNAME_MAX_LEN} chars)")
    parser.add_argument("email", help="Email address")
    parser.add_argument("password", help=f"Password ({PASSWORD_MIN_LEN}-{PASSWORD_MAX_LEN} chars)")
    parser.add_argument("role", nargs="?", default="owner", choices=list(ROLE_VALUES))
    args = parser.parse_args(argv)

    username = args.username.strip()
    email = args.email.strip().lower()
    if not (USERNAME_MIN_LEN <= len(username) <= USERNAME_MAX_LEN):
        logger.error("Invalid username length.")
        return 1
    if "@" not in email:
        logger.error("Invalid email address.")
        return 1
    if not (PASSWORD_MIN_LEN <= len(args.password) <= PASSWORD_MAX_LEN):
        logger.error("Password must be %s-%s characters.", PASSWORD_MIN_LEN, PASSWORD_MAX_LEN)
        return 1

    with session_scope() as db:
        existing = (
            db.query(User)
            .filter(or_(User.username == username, User.email == email))
            .first()
        )
        if existing:
            logger.error("User '%s' or email '%s' already exists.", username, email)
            return 1
        db.add(
            User(
                username=username,
                email=email,
                password_hash=hash_password(args.password),
                role=args.role,
                is_active=True,
            )
        )
    logger.info("Created user '%s' with role '%s'.", username, args.role)
    return 0


if __name__ == "__main__":
    sys.exit(main())
