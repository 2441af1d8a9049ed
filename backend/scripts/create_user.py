#!/usr/bin/env python3
"""Create or update a user with a given role.

Registration through the API always yields a plain User; this is how
Manager and Admin accounts are made.
"""

import sys
from pathlib import Path

# make the campaignos package importable when run from a checkout
BASE_DIR = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(BASE_DIR))

from sqlmodel import Session, select  # noqa: E402

from campaignos.core.security import get_password_hash  # noqa: E402
from campaignos.db import engine, init_db  # noqa: E402
from campaignos.models import User, UserRole  # noqa: E402


def create_user():
    print("=" * 60)
    print("Create a CampaignOS user")
    print("=" * 60)

    email = input("Email: ").strip().lower()
    if not email:
        print("Error: email is required")
        return

    name = input("Name: ").strip()
    if not name:
        print("Error: name is required")
        return

    password = input("Password: ").strip()
    if len(password) < 8:
        print("Error: password must be at least 8 characters")
        return

    roles = ", ".join(role.value for role in UserRole)
    raw_role = input(f"Role ({roles}; default User): ").strip() or UserRole.USER.value
    try:
        role = UserRole(raw_role.capitalize())
    except ValueError:
        print(f"Error: unknown role {raw_role!r}")
        return

    init_db()
    with Session(engine) as session:
        existing = session.exec(select(User).where(User.email == email)).first()

        if existing:
            print(f"\nA user with email {email} already exists.")
            response = input("Update the existing user? (y/n): ").strip().lower()
            if response != "y":
                print("Cancelled")
                return
            user = existing
            user.name = name
            user.hashed_password = get_password_hash(password)
            user.role = role
            user.is_active = True
            user.touch()
        else:
            user = User(
                email=email,
                name=name,
                hashed_password=get_password_hash(password),
                role=role,
            )
        session.add(user)
        session.commit()
        session.refresh(user)

        print(f"\nUser {'updated' if existing else 'created'}.")
        print(f"  ID: {user.id}")
        print(f"  Email: {user.email}")
        print(f"  Name: {user.name}")
        print(f"  Role: {UserRole(user.role).value}")
        print("=" * 60)


if __name__ == "__main__":
    try:
        create_user()
    except KeyboardInterrupt:
        print("\n\nCancelled by user")
