#!/usr/bin/env python
"""Create an administrator account, or promote an existing user to admin.

Usage:
    python -m kiescompass.scripts.create_admin alice --email alice@example.com
    python -m kiescompass.scripts.create_admin existing_user   # promote only
"""

from __future__ import annotations

import argparse
import asyncio
import getpass
import sys
from collections.abc import Sequence

from kiescompass.db.connection import (
    create_all_tables,
    dispose_engine,
    get_database_type,
    get_session_context,
)
from kiescompass.db.repositories.user_repository import UserRepository
from kiescompass.services.security import hash_password


async def ensure_admin(
    username: str,
    *,
    email: str | None,
    firstname: str,
    lastname: str,
    password: str | None,
) -> str:
    """Promote ``username`` or create it as admin; returns what happened."""

    async with get_session_context() as session:
        users = UserRepository(session)
        user = await users.find_by_username(username)

        if user is not None:
            if user.role == "admin":
                return "unchanged"
            await users.update(user.id, {"role": "admin"})
            await session.commit()
            return "promoted"

        if not email or not password:
            raise ValueError("email and password are required to create a new admin")

        await users.create(
            username=username,
            email=email,
            firstname=firstname,
            lastname=lastname,
            password_hash=hash_password(password),
            role="admin",
        )
        await session.commit()
        return "created"


async def main(argv: Sequence[str] | None = None) -> int:
    """CLI entry point."""
    parser = argparse.ArgumentParser(description="Create or promote a KiesCompass admin")
    parser.add_argument("username")
    parser.add_argument("--email", help="Required when the user does not exist yet")
    parser.add_argument("--firstname", default="Admin")
    parser.add_argument("--lastname", default="User")
    parser.add_argument(
        "--password",
        help="Password for a new account (prompted when omitted)",
    )
    args = parser.parse_args(argv)

    if get_database_type() == "sqlite":
        await create_all_tables()

    password = args.password
    if args.email and password is None:
        password = getpass.getpass("Password: ")

    try:
        outcome = await ensure_admin(
            args.username,
            email=args.email,
            firstname=args.firstname,
            lastname=args.lastname,
            password=password,
        )
    except ValueError as exc:
        print(f"❌ {exc}", file=sys.stderr)
        return 1
    finally:
        await dispose_engine()

    print(f"✅ {args.username}: {outcome}")
    return 0


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
