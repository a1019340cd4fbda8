"""Create the administrator account (first user).

Usage:
    python -m scripts.create_admin <email> <name> [password]
If password is omitted, a random one is printed and a change is required at first login.
All imports use app.*.
"""

import asyncio
import secrets
import sys

from app.application.dtos.user import UserAdminCreate
from app.application.services.user_service import UserService
from app.domain.exceptions import MediaHubException
from app.infrastructure.persistence.database import session_scope
from app.infrastructure.persistence.repositories import UserRepository
from app.infrastructure.security.password import BcryptPasswordHasher


async def main() -> None:
    """Create an admin user through UserService (same rules as the API)."""
    if len(sys.argv) < 3:
        print(
            "Usage: python -m scripts.create_admin <email> <name> [password]",
            file=sys.stderr,
        )
        sys.exit(1)
    email = sys.argv[1]
    name = sys.argv[2]
    password = sys.argv[3] if len(sys.argv) > 3 else None
    generated = password is None
    if generated:
        password = secrets.token_urlsafe(12)

    try:
        async with session_scope() as session:
            service = UserService(UserRepository(session), BcryptPasswordHasher())
            user = await service.create_user(
                UserAdminCreate(
                    email=email,
                    password=password,
                    name=name,
                    should_change_password=generated,
                ),
                is_admin=True,
            )
    except MediaHubException as e:
        print(f"Could not create admin: {e.message}", file=sys.stderr)
        sys.exit(1)
    print(f"Created admin: {user.id} ({user.email})")
    if generated:
        print(f"Password: {password}")


if __name__ == "__main__":
    asyncio.run(main())
