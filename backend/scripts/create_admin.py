#!/usr/bin/env python3
"""
Script to create users for API Vault.

Users are created through the user store, so every creation lands in the
audit log exactly as a POST /users would.

Usage:
    python scripts/create_admin.py [admin|user|list]
"""

import asyncio
import getpass
import sys
from pathlib import Path

# Add the backend directory to the Python path
backend_dir = Path(__file__).parent.parent
sys.path.insert(0, str(backend_dir))

from app.core.database import AsyncSessionLocal, create_tables
from app.models.user import User
from app.schemas.users import UserCreate
from app.services.audit_service import AuditService
from app.services.repository import Repository
from app.services.user_service import (
    UserStore,
    validate_user_payload,
    PASSWORD_MIN_LENGTH,
)
from app.utils.exceptions import ValidationError, VaultException


def prompt_credentials(role: str) -> UserCreate:
    """Ask for a username and a confirmed password until both validate."""
    while True:
        username = input("Username: ").strip()
        password = getpass.getpass(f"Password (min {PASSWORD_MIN_LENGTH} characters): ")
        if password != getpass.getpass("Confirm Password: "):
            print("❌ Passwords do not match.")
            continue

        payload = UserCreate(username=username, password=password, role=role)
        try:
            validate_user_payload(payload)
        except ValidationError as e:
            print(f"❌ {e.message}")
            continue
        return payload


async def create_user(role: str):
    """Create a user with the given role interactively."""
    print(f"🔧 API Vault - create {role}")
    print("=" * 50)

    await create_tables()

    async with AsyncSessionLocal() as db:
        if role == "admin":
            admins = await Repository(db, User).find_all(User.role == "admin")
            if admins:
                print(f"⚠️  Found {len(admins)} existing admin user(s):")
                for admin in admins:
                    print(f"   - {admin.username}")
                if input("\nCreate another admin user? (y/N): ").strip().lower() != "y":
                    print("❌ Admin user creation cancelled.")
                    return 1

        payload = prompt_credentials(role)
        store = UserStore(db, AuditService(db))
        try:
            user = await store.register(payload)
        except VaultException as e:
            print(f"❌ Error creating user: {e.message}")
            return 1

        print("✅ User created successfully!")
        print(f"   Username: {user.username}")
        print(f"   Role: {user.role}")
        print(f"   User ID: {user.id}")
    return 0


async def list_users():
    """List all users in the system."""
    print("👥 API Vault - User List")
    print("=" * 50)

    async with AsyncSessionLocal() as db:
        users = await Repository(db, User).find_all()

    if not users:
        print("No users found.")
        return 0

    for user in users:
        marker = "👑" if user.is_admin() else "👤"
        print(f"{marker} {user.id:>4}  {user.username:<32} {user.role}")
    print(f"\nTotal: {len(users)}")
    return 0


def main():
    command = sys.argv[1] if len(sys.argv) > 1 else "admin"
    if command in ("admin", "user"):
        return asyncio.run(create_user(command))
    if command == "list":
        return asyncio.run(list_users())
    print(__doc__)
    return 2


if __name__ == "__main__":
    sys.exit(main())
