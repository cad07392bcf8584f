from datetime import datetime
from typing import Optional

from pydantic import Field, field_validator

from canteen.schemas.base import CamelModel


class MenuItemBase(CamelModel):
    name: str = Field(..., min_length=1, max_length=100)
    category: str = Field(..., min_length=1, max_length=50)
    price: int = Field(..., ge=0)
    available: bool = True
    description: str = ""


class MenuItemCreate(MenuItemBase):
    pass


class MenuItemUpdate(CamelModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    category: Optional[str] = Field(default=None, min_length=1, max_length=50)
    price: Optional[int] = Field(default=None, ge=0)
    available: Optional[bool] = None
    description: Optional[str] = None

    @field_validator("name", "category", "price", "available", "description", mode="before")
    @classmethod
    def not_null(cls, v, info):
        # Fields may be omitted but never cleared
        if v is None:
            raise ValueError(f"{info.field_name} cannot be null")
        return v


class MenuItemRead(MenuItemBase):
    id: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
