# auth/dependencies.py
from typing import Optional

from fastapi import Depends

from canteen.auth.manager import UserManager
from canteen.auth.routes import get_current_user, get_jwt_strategy
from canteen.core.constants import Role
from canteen.core.errors import Forbidden
from canteen.models.user import User


def require_roles(*roles):
    """Route guard: the caller must be authenticated and hold one of ``roles``."""
    allowed = {r.value if isinstance(r, Role) else r for r in roles}

    async def _dep(user: User = Depends(get_current_user)) -> User:
        if user.role not in allowed:
            raise Forbidden(f"Requires role: {', '.join(sorted(allowed))}")
        return user

    return _dep


get_current_admin_user = require_roles(Role.admin)
get_current_customer = require_roles(Role.student, Role.staff)
get_any_member = require_roles(Role.student, Role.staff, Role.admin)


async def user_from_token(token: Optional[str], user_manager: UserManager) -> Optional[User]:
    """Resolve a raw JWT (websocket query param, view session) to an active user."""
    if not token:
        return None
    user = await get_jwt_strategy().read_token(token, user_manager)
    if user is None or not user.is_active:
        return None
    return user
