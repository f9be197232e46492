"""CLI commands for management tasks."""

import asyncio
import sys

from sqlalchemy import select

from edustats.core.database import Base, async_session_maker, engine
from edustats.core.exceptions import ConflictError
from edustats.core.security import get_password_hash
from edustats.models.admin import Admin
from edustats.schemas.auth import RegisterRequest
from edustats.services import auth as auth_service

USAGE = """Usage: python -m edustats.cli <command>
Commands:
  init-db
  create-admin <username> <password>
  create-user <email> <password> <first_name> <last_name>"""


async def init_db() -> None:
    """Create every table that does not exist yet."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    await engine.dispose()
    print("✓ Database tables created")


async def create_admin(username: str, password: str) -> None:
    """Create a platform administrator."""
    async with async_session_maker() as db:
        result = await db.execute(select(Admin).where(Admin.username == username))
        if result.scalar_one_or_none():
            print(f"Error: Admin {username} already exists!")
            sys.exit(1)

        admin = Admin(username=username, password_hash=get_password_hash(password))
        db.add(admin)
        await db.commit()
        await db.refresh(admin)

        print("✓ Admin created successfully!")
        print(f"  ID: {admin.id}")
        print(f"  Username: {admin.username}")


async def create_user(email: str, password: str, first_name: str, last_name: str) -> None:
    """Create a teacher account with its free trial."""
    data = RegisterRequest(
        email=email,
        password=password,
        first_name=first_name,
        last_name=last_name,
    )
    async with async_session_maker() as db:
        try:
            user = await auth_service.register_user(db, data)
        except ConflictError as exc:
            print(f"Error: {exc.message}")
            sys.exit(1)

        print("✓ Teacher created successfully!")
        print(f"  ID: {user.id}")
        print(f"  Name: {user.full_name}")
        print(f"  Email: {user.email}")


def main() -> None:
    """CLI entry point."""
    if len(sys.argv) < 2:
        print(USAGE)
        sys.exit(1)

    command = sys.argv[1]

    if command == "init-db":
        asyncio.run(init_db())
    elif command == "create-admin":
        if len(sys.argv) != 4:
            print("Usage: python -m edustats.cli create-admin <username> <password>")
            sys.exit(1)

        _, _, username, password = sys.argv
        asyncio.run(create_admin(username, password))
    elif command == "create-user":
        if len(sys.argv) != 6:
            print("Usage: python -m edustats.cli create-user <email> <password> <first_name> <last_name>")
            sys.exit(1)

        _, _, email, password, first_name, last_name = sys.argv
        asyncio.run(create_user(email, password, first_name, last_name))
    else:
        print(f"Unknown command: {command}")
        print(USAGE)
        sys.exit(1)


if __name__ == "__main__":
    main()
