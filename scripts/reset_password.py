"""Reset a user's password and require a change at next login.

Usage:
    python -m scripts.reset_password <email> [new_password]
If new_password is omitted, a random one is printed.
All imports use app.*.
"""

import asyncio
import secrets
import sys

from app.infrastructure.persistence.database import session_scope
from app.infrastructure.persistence.repositories import UserRepository
from app.infrastructure.security.password import get_password_hash


async def main() -> None:
    """Reset password for the user with email."""
    if len(sys.argv) < 2:
        print(
            "Usage: python -m scripts.reset_password <email> [new_password]",
            file=sys.stderr,
        )
        sys.exit(1)
    email = sys.argv[1]
    new_password = sys.argv[2] if len(sys.argv) > 2 else secrets.token_urlsafe(12)

    async with session_scope() as session:
        user_repo = UserRepository(session)
        user = await user_repo.get_by_email(email)
        if not user:
            print(f"User not found: {email}", file=sys.stderr)
            sys.exit(1)
        password_hash = await asyncio.to_thread(get_password_hash, new_password)
        await user_repo.update(
            user.id,
            {"password_hash": password_hash, "should_change_password": True},
        )
    print(f"Password reset for user {user.id} ({user.email})")
    if len(sys.argv) <= 2:
        print(f"Password: {new_password}")


if __name__ == "__main__":
    asyncio.run(main())
