from typing import List, Optional

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from canteen.auth.dependencies import get_current_admin_user
from canteen.core.errors import NotFound
from canteen.crud import menu as menu_crud
from canteen.db import get_db
from canteen.schemas.menu import MenuItemCreate, MenuItemRead, MenuItemUpdate

router = APIRouter(prefix="/menu", tags=["menu"])


@router.get("", response_model=List[MenuItemRead])
async def list_menu(
    category: Optional[str] = None,
    db: AsyncSession = Depends(get_db),
):
    """Get the menu, optionally filtered to one category"""
    return await menu_crud.get_menu_items(db, category)


@router.get("/{item_id}", response_model=MenuItemRead)
async def get_menu_item(item_id: str, db: AsyncSession = Depends(get_db)):
    item = await menu_crud.get_menu_item(db, item_id)
    if not item:
        raise NotFound("Menu item not found")
    return item


@router.post("", response_model=MenuItemRead, status_code=201)
async def create_menu_item(
    payload: MenuItemCreate,
    db: AsyncSession = Depends(get_db),
    user=Depends(get_current_admin_user),
):
    return await menu_crud.create_menu_item(db, payload)


@router.patch("/{item_id}", response_model=MenuItemRead)
async def update_menu_item(
    item_id: str,
    updates: MenuItemUpdate,
    db: AsyncSession = Depends(get_db),
    user=Depends(get_current_admin_user),
):
    item = await menu_crud.update_menu_item(db, item_id, updates)
    if not item:
        raise NotFound("Menu item not found")
    return item


@router.delete("/{item_id}")
async def delete_menu_item(
    item_id: str,
    db: AsyncSession = Depends(get_db),
    user=Depends(get_current_admin_user),
):
    item = await menu_crud.delete_menu_item(db, item_id)
    if not item:
        raise NotFound("Menu item not found")
    return {"message": "Menu item deleted"}
