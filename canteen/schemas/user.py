import uuid
from typing import Literal, Optional

from fastapi_users import schemas
from pydantic import Field


class UserRead(schemas.BaseUser[uuid.UUID]):
    name: str
    role: str
    register_number: Optional[str] = Field(default=None, serialization_alias="registerNumber")


class UserCreate(schemas.BaseUserCreate):
    name: str = Field(..., min_length=1, max_length=100)
    # Admins are seeded, never self-registered
    role: Literal["student", "staff"] = "student"
    register_number: Optional[str] = Field(default=None, max_length=50)
