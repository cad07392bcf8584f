import logging
import uuid
from typing import Optional, Union

from fastapi import Request
from fastapi_users import BaseUserManager, InvalidPasswordException, UUIDIDMixin

from canteen.core.config import settings
from canteen.models.user import User
from canteen.schemas.user import UserCreate

log = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 6


class UserManager(UUIDIDMixin, BaseUserManager[User, uuid.UUID]):
    reset_password_token_secret = settings.jwt_secret
    verification_token_secret = settings.jwt_secret

    async def validate_password(self, password: str, user: Union[UserCreate, User]) -> None:
        if len(password) < MIN_PASSWORD_LENGTH:
            raise InvalidPasswordException(
                reason=f"Password should be at least {MIN_PASSWORD_LENGTH} characters"
            )

    async def on_after_register(self, user: User, request: Optional[Request] = None):
        log.info("👤 User registered: %s (%s)", user.email, user.role)
