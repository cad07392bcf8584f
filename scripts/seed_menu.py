# scripts/seed_menu.py
import asyncio

from canteen.crud.menu import create_menu_item, get_menu_items
from canteen.db import async_session
from canteen.schemas.menu import MenuItemCreate

MENU_TO_SEED = [
    {"name": "Masala Dosa", "category": "Breakfast", "price": 60, "description": "Crisp dosa with potato masala"},
    {"name": "Idli Vada", "category": "Breakfast", "price": 45, "description": "Two idlis and a vada with chutney"},
    {"name": "Veg Meals", "category": "Lunch", "price": 90, "description": "Rice, sambar, rasam, two curries"},
    {"name": "Chicken Biryani", "category": "Lunch", "price": 140},
    {"name": "Samosa", "category": "Snacks", "price": 20},
    {"name": "Masala Chai", "category": "Drinks", "price": 15},
    {"name": "Cold Coffee", "category": "Drinks", "price": 50},
    {"name": "Fresh Lime Soda", "category": "Drinks", "price": 35},
]


async def seed_menu():
    async with async_session() as session:
        existing = {item.name for item in await get_menu_items(session)}
        for data in MENU_TO_SEED:
            if data["name"] in existing:
                print(f"⚠️  '{data['name']}' already on the menu. Skipping.")
                continue
            item = await create_menu_item(session, MenuItemCreate(**data))
            print(f"✅ Added {item.name} ({item.category}) ₹{item.price}")


if __name__ == "__main__":
    asyncio.run(seed_menu())
