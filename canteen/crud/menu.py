from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from canteen.models.menu_item import MenuItem
from canteen.schemas.menu import MenuItemCreate, MenuItemUpdate
import uuid


async def get_menu_items(db: AsyncSession, category: Optional[str] = None):
    """List menu items, optionally only one category"""
    query = select(MenuItem)
    if category:
        query = query.where(MenuItem.category == category)
    query = query.order_by(MenuItem.category, MenuItem.name)

    result = await db.execute(query)
    return result.scalars().all()


async def get_menu_item(db: AsyncSession, item_id: str) -> Optional[MenuItem]:
    result = await db.execute(select(MenuItem).where(MenuItem.id == item_id))
    return result.scalar_one_or_none()


async def get_menu_items_by_ids(db: AsyncSession, item_ids: list[str]) -> dict[str, MenuItem]:
    if not item_ids:
        return {}
    result = await db.execute(select(MenuItem).where(MenuItem.id.in_(item_ids)))
    return {item.id: item for item in result.scalars().all()}


async def create_menu_item(db: AsyncSession, item: MenuItemCreate) -> MenuItem:
    new_item = MenuItem(
        id=str(uuid.uuid4()),
        name=item.name.strip(),
        category=item.category.strip(),
        price=item.price,
        available=item.available,
        description=item.description or "",
    )
    db.add(new_item)
    await db.commit()
    await db.refresh(new_item)
    return new_item


async def update_menu_item(db: AsyncSession, item_id: str, updates: MenuItemUpdate) -> Optional[MenuItem]:
    item = await get_menu_item(db, item_id)
    if not item:
        return None

    for key, value in updates.model_dump(exclude_unset=True).items():
        setattr(item, key, value)

    await db.commit()
    await db.refresh(item)
    return item


async def delete_menu_item(db: AsyncSession, item_id: str) -> Optional[MenuItem]:
    item = await get_menu_item(db, item_id)
    if item:
        await db.delete(item)
        await db.commit()
    return item
