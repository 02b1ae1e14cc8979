"""
Script to create the first super admin account.

Run this after deploying to create the account that manages stations and
users:
    python -m scripts.create_super_admin admin@example.org "Admin Name"

The password is read from the SUPER_ADMIN_PASSWORD environment variable
when set, otherwise prompted for.
"""

import asyncio
import getpass
import os
import sys
from pathlib import Path

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from obsdesk.config import settings
from obsdesk.crud.user import user as user_crud
from obsdesk.database import async_session, engine
from obsdesk.models.user import UserRole
from obsdesk.schemas.users import UserCreate


async def create_super_admin(email: str, name: str, password: str):
    """Create a super admin unless the email is already taken."""
    print("=" * 80)
    print("Synoptic Observation Desk - Super Admin Creation")
    print("=" * 80)
    print(f"\nConnecting to database: {settings.SQLALCHEMY_DATABASE_URI.split('://')[0]}")

    async with async_session() as db:
        if await user_crud.get_by_email(db, email=email):
            print(f"\n❌ A user with email {email} already exists")
            await engine.dispose()
            return False

        user_obj = await user_crud.create(
            db,
            obj_in=UserCreate(
                email=email,
                name=name,
                password=password,
                role=UserRole.SUPER_ADMIN,
            ),
        )

        print("\n" + "=" * 80)
        print("✅ SUPER ADMIN CREATED SUCCESSFULLY!")
        print("=" * 80)
        print(f"\nUser ID: {user_obj.id}")
        print(f"Email: {user_obj.email}")
        print(f"Role: {user_obj.role}")
        print("\nSign in without a station code:")
        print(f"  curl -X POST {settings.SERVER_HOST}{settings.API_V1_STR}/auth/sign-in \\")
        print(f"       -H 'Content-Type: application/json' \\")
        print(f"       -d '{{\"email\": \"{email}\", \"password\": \"...\"}}'")
        print("=" * 80 + "\n")

    await engine.dispose()
    return True


if __name__ == "__main__":
    if len(sys.argv) < 3:
        print("Usage: python -m scripts.create_super_admin <email> <name>")
        sys.exit(1)

    password = os.getenv("SUPER_ADMIN_PASSWORD") or getpass.getpass("Password (min 8 characters): ")
    created = asyncio.run(create_super_admin(sys.argv[1], sys.argv[2], password))
    sys.exit(0 if created else 1)
