import os
import tempfile

# Settings and the engine are built at import time, so configure env first
TEST_DB = os.path.join(tempfile.gettempdir(), "canteen_test.db")
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{TEST_DB}"
os.environ["JWT_SECRET"] = "test-secret"
os.environ["BILL_TTL_MINUTES"] = "30"

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

import canteen.models  # noqa: F401
from canteen.auth.routes import get_jwt_strategy
from canteen.core.constants import Role
from canteen.crud.menu import create_menu_item
from canteen.crud.user import create_user_with_role
from canteen.db import async_session, engine
from canteen.main import app
from canteen.models.base import Base
from canteen.realtime.hub import hub
from canteen.schemas.menu import MenuItemCreate


class FakeSocket:
    """Stands in for a websocket: records everything pushed to it."""

    def __init__(self, fail=False):
        self.messages = []
        self.fail = fail

    async def send_json(self, data):
        if self.fail:
            raise RuntimeError("socket closed")
        self.messages.append(data)

    def events(self):
        return [m["event"] for m in self.messages]


@pytest.fixture(autouse=True)
def reset_hub():
    hub.clear()
    yield
    hub.clear()


@pytest_asyncio.fixture
async def fresh_db():
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)
    yield
    await engine.dispose()


@pytest_asyncio.fixture
async def db(fresh_db):
    async with async_session() as session:
        yield session


@pytest_asyncio.fixture
async def client(fresh_db):
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as c:
        yield c


async def make_user(db, role: Role, email: str, name: str = None, register_number: str = None):
    return await create_user_with_role(
        db,
        name=name or email.split("@")[0].title(),
        email=email,
        password="password123",
        role=role,
        register_number=register_number,
    )


async def bearer(user) -> dict:
    token = await get_jwt_strategy().write_token(user)
    return {"Authorization": f"Bearer {token}"}


@pytest_asyncio.fixture
async def student(db):
    return await make_user(db, Role.student, "asha@example.com", name="Asha", register_number="21CS001")


@pytest_asyncio.fixture
async def other_student(db):
    return await make_user(db, Role.student, "ravi@example.com", name="Ravi")


@pytest_asyncio.fixture
async def staff(db):
    return await make_user(db, Role.staff, "kitchen@example.com", name="Kitchen")


@pytest_asyncio.fixture
async def admin(db):
    return await make_user(db, Role.admin, "admin@example.com", name="Admin")


@pytest_asyncio.fixture
async def student_headers(student):
    return await bearer(student)


@pytest_asyncio.fixture
async def other_student_headers(other_student):
    return await bearer(other_student)


@pytest_asyncio.fixture
async def staff_headers(staff):
    return await bearer(staff)


@pytest_asyncio.fixture
async def admin_headers(admin):
    return await bearer(admin)


@pytest_asyncio.fixture
async def menu(db):
    """A small menu keyed by short name."""
    items = {}
    for key, data in {
        "dosa": dict(name="Masala Dosa", category="Breakfast", price=80),
        "meals": dict(name="Veg Meals", category="Lunch", price=90),
        "chai": dict(name="Masala Chai", category="Drinks", price=15),
        "coffee": dict(name="Cold Coffee", category="Drinks", price=50),
        "biryani": dict(name="Biryani", category="Lunch", price=140, available=False),
    }.items():
        items[key] = await create_menu_item(db, MenuItemCreate(**data))
    return items


@pytest.fixture
def staff_socket():
    sock = FakeSocket()
    hub.join("staff", sock)
    return sock


async def count_rows(model) -> int:
    from sqlalchemy import func, select

    async with async_session() as session:
        result = await session.execute(select(func.count()).select_from(model))
        return result.scalar_one()
