from typing import Optional

from fastapi_users.password import PasswordHelper
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from canteen.core.constants import Role
from canteen.models.user import User

password_helper = PasswordHelper()


async def get_user_by_email(db: AsyncSession, email: str) -> Optional[User]:
    result = await db.execute(select(User).where(User.email == email.lower()))
    return result.scalar_one_or_none()


async def get_admin(db: AsyncSession) -> Optional[User]:
    result = await db.execute(select(User).where(User.role == Role.admin.value))
    return result.scalars().first()


async def create_user_with_role(
    db: AsyncSession,
    name: str,
    email: str,
    password: str,
    role: Role,
    register_number: Optional[str] = None,
) -> User:
    """Create an account directly, bypassing self-registration rules (seeding, admin setup)."""
    user = User(
        name=name,
        email=email.lower(),
        hashed_password=password_helper.hash(password),
        role=role.value,
        register_number=register_number,
        is_active=True,
        is_verified=True,
        is_superuser=role == Role.admin,
    )
    db.add(user)
    await db.commit()
    await db.refresh(user)
    return user
