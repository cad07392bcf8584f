from sqlalchemy import select

from canteen.db import async_session
from canteen.models import Order
from tests.conftest import count_rows


async def login(client, email, password="password123"):
    return await client.post("/ui/login", data={"email": email, "password": password})


async def test_root_redirects_to_views(client, fresh_db):
    resp = await client.get("/")
    assert resp.status_code == 302
    assert resp.headers["location"] == "/ui/"


async def test_login_page_renders(client, fresh_db):
    resp = await client.get("/ui/login")
    assert resp.status_code == 200
    assert "<form" in resp.text


async def test_bad_login_rerenders_form(client, student):
    resp = await login(client, "asha@example.com", "wrong")
    assert resp.status_code == 200
    assert "Invalid email or password." in resp.text


async def test_menu_page_lists_items(client, menu):
    resp = await client.get("/ui/menu", params={"category": "Drinks"})
    assert resp.status_code == 200
    assert "Masala Chai" in resp.text
    assert "Masala Dosa" not in resp.text


async def test_admin_page_requires_login(client, fresh_db):
    resp = await client.get("/ui/admin")
    assert resp.status_code == 303
    assert resp.headers["location"].startswith("/ui/login?error=")


async def test_student_cannot_open_admin(client, student):
    await login(client, "asha@example.com")
    resp = await client.get("/ui/admin")
    assert resp.status_code == 303


async def test_cart_to_order_flow(client, student, menu):
    resp = await login(client, "asha@example.com")
    assert resp.status_code == 303
    assert resp.headers["location"] == "/ui/menu"

    await client.post("/ui/cart/add", data={"menu_id": menu["dosa"].id, "qty": "2"})
    await client.post("/ui/cart/add", data={"menu_id": menu["chai"].id})

    cart = await client.get("/ui/cart")
    assert "Masala Dosa" in cart.text
    assert "175" in cart.text

    resp = await client.post("/ui/cart/submit")
    assert resp.status_code == 303
    assert resp.headers["location"].startswith("/ui/my-orders?success=")

    async with async_session() as session:
        order = (await session.execute(select(Order))).scalar_one()
    assert order.total == 175
    assert order.user_id == student.id

    page = await client.get("/ui/my-orders")
    assert order.token_number in page.text

    # cart was emptied
    again = await client.post("/ui/cart/submit")
    assert again.headers["location"].startswith("/ui/cart?error=")
    assert await count_rows(Order) == 1


async def test_submit_with_unavailable_item_keeps_cart(client, student, menu, db):
    await login(client, "asha@example.com")
    await client.post("/ui/cart/add", data={"menu_id": menu["dosa"].id})

    menu["dosa"].available = False
    await db.commit()

    resp = await client.post("/ui/cart/submit")
    assert resp.headers["location"].startswith("/ui/cart?error=")
    assert await count_rows(Order) == 0
    assert "Masala Dosa" in (await client.get("/ui/cart")).text


async def test_admin_advances_order(client, admin, student_headers, menu):
    placed = await client.post(
        "/cart/checkout", json={"items": [{"menuId": menu["meals"].id}]}, headers=student_headers
    )
    order_id = placed.json()["order"]["id"]

    await login(client, "admin@example.com")
    dashboard = await client.get("/ui/admin")
    assert dashboard.status_code == 200
    assert placed.json()["order"]["tokenNumber"] in dashboard.text

    resp = await client.post(f"/ui/admin/orders/{order_id}/status", data={"status": "ready"})
    assert resp.status_code == 303
    assert "success=" in resp.headers["location"]

    async with async_session() as session:
        order = await session.get(Order, order_id)
    assert order.status == "ready"


async def test_admin_edits_menu_item(client, admin, menu):
    await login(client, "admin@example.com")
    dashboard = await client.get("/ui/admin")
    assert f'action="/ui/admin/menu/{menu["dosa"].id}"' in dashboard.text

    resp = await client.post(f"/ui/admin/menu/{menu['dosa'].id}", data={
        "name": "Ghee Roast Dosa",
        "category": "Breakfast",
        "price": "95",
        "description": "Crisp and buttery",
    })
    assert resp.status_code == 303
    assert "success=" in resp.headers["location"]

    item = (await client.get(f"/menu/{menu['dosa'].id}")).json()
    assert item["name"] == "Ghee Roast Dosa"
    assert item["price"] == 95
    assert item["description"] == "Crisp and buttery"
    # checkbox left unticked
    assert item["available"] is False


async def test_admin_edit_keeps_availability_when_ticked(client, admin, menu):
    await login(client, "admin@example.com")
    await client.post(f"/ui/admin/menu/{menu['chai'].id}", data={
        "name": "Masala Chai", "category": "Drinks", "price": "20", "available": "on",
    })
    item = (await client.get(f"/menu/{menu['chai'].id}")).json()
    assert item["price"] == 20
    assert item["available"] is True


async def test_admin_edit_unknown_item(client, admin, fresh_db):
    await login(client, "admin@example.com")
    resp = await client.post("/ui/admin/menu/nope", data={
        "name": "X", "category": "Y", "price": "1",
    })
    assert resp.headers["location"].startswith("/ui/admin?error=")


async def test_student_cannot_edit_menu(client, student, menu):
    await login(client, "asha@example.com")
    resp = await client.post(f"/ui/admin/menu/{menu['dosa'].id}", data={
        "name": "Hacked", "category": "Breakfast", "price": "1",
    })
    assert resp.headers["location"].startswith("/ui/login?error=")
    assert (await client.get(f"/menu/{menu['dosa'].id}")).json()["name"] == "Masala Dosa"
