# scripts/manage_users.py

import asyncio
import argparse
import sys

from canteen.core.constants import Role
from canteen.crud.user import create_user_with_role, get_user_by_email
from canteen.db import async_session

# 🎯 USERS TO SEED
USERS_TO_SEED = [
    {"name": "Canteen Admin", "email": "admin@canteen.local", "password": "admin1234", "role": Role.admin},
    {"name": "Kitchen Staff", "email": "staff@canteen.local", "password": "staff1234", "role": Role.staff},
    {"name": "Asha", "email": "asha@canteen.local", "password": "student1234", "role": Role.student, "register_number": "21CS001"},
    {"name": "Ravi", "email": "ravi@canteen.local", "password": "student1234", "role": Role.student, "register_number": "21CS002"},
]

if sys.platform.startswith('win') and sys.version_info < (3, 10):
    asyncio.set_event_loop_policy(asyncio.WindowsSelectorEventLoopPolicy())


async def seed_users():
    async with async_session() as session:
        for user_data in USERS_TO_SEED:
            if await get_user_by_email(session, user_data["email"]):
                print(f"⚠️  User '{user_data['email']}' already exists. Skipping.")
                continue
            user = await create_user_with_role(
                session,
                name=user_data["name"],
                email=user_data["email"],
                password=user_data["password"],
                role=user_data["role"],
                register_number=user_data.get("register_number"),
            )
            print(f"✅ Created: {user.name} ({user.role})")
        print("✅ Done seeding users.\n")


async def create_user(name, email, password, role, register_number=None):
    async with async_session() as session:
        if await get_user_by_email(session, email):
            print(f"⚠️  User '{email}' already exists.")
            return
        user = await create_user_with_role(
            session,
            name=name,
            email=email,
            password=password,
            role=Role(role),
            register_number=register_number,
        )
        print(f"✅ Created: {user.name} ({user.role})")


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Manage canteen users")
    parser.add_argument("--seed", action="store_true", help="Seed initial users")
    parser.add_argument("--create", action="store_true", help="Create one user (any role, admin included)")
    parser.add_argument("--name", type=str, help="Display name")
    parser.add_argument("--email", type=str, help="Login email")
    parser.add_argument("--password", type=str, help="Initial password")
    parser.add_argument("--role", type=str, default="staff", choices=[r.value for r in Role])
    parser.add_argument("--register-number", type=str, default=None)

    args = parser.parse_args()

    if args.seed:
        asyncio.run(seed_users())
    elif args.create:
        if not (args.name and args.email and args.password):
            parser.error("--create needs --name, --email and --password")
        asyncio.run(create_user(args.name, args.email, args.password, args.role, args.register_number))
    else:
        print("❗ Usage:")
        print("  python -m scripts.manage_users --seed")
        print("  python -m scripts.manage_users --create --name Meena --email meena@canteen.local --password secret123 --role staff")
