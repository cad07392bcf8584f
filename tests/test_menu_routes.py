async def test_list_menu_is_public(client, menu):
    resp = await client.get("/menu")
    assert resp.status_code == 200
    names = {i["name"] for i in resp.json()}
    assert names == {"Masala Dosa", "Veg Meals", "Masala Chai", "Cold Coffee", "Biryani"}


async def test_category_filter_returns_exact_subset(client, menu):
    resp = await client.get("/menu", params={"category": "Drinks"})
    assert resp.status_code == 200
    items = resp.json()
    assert {i["id"] for i in items} == {menu["chai"].id, menu["coffee"].id}
    assert all(i["category"] == "Drinks" for i in items)


async def test_category_filter_is_exact_match(client, menu):
    resp = await client.get("/menu", params={"category": "drinks"})
    assert resp.json() == []


async def test_get_menu_item(client, menu):
    resp = await client.get(f"/menu/{menu['dosa'].id}")
    assert resp.status_code == 200
    body = resp.json()
    assert body["name"] == "Masala Dosa"
    assert body["price"] == 80
    assert body["available"] is True
    assert "createdAt" in body


async def test_get_unknown_menu_item_is_404(client, menu):
    resp = await client.get("/menu/nope")
    assert resp.status_code == 404
    assert resp.json() == {"message": "Menu item not found"}


async def test_admin_creates_menu_item(client, admin_headers):
    payload = {"name": "Paneer Roll", "category": "Snacks", "price": 70, "description": "Spicy"}
    resp = await client.post("/menu", json=payload, headers=admin_headers)
    assert resp.status_code == 201
    body = resp.json()
    assert body["name"] == "Paneer Roll"
    assert body["available"] is True

    listed = await client.get("/menu", params={"category": "Snacks"})
    assert [i["id"] for i in listed.json()] == [body["id"]]


async def test_student_cannot_create_menu_item(client, student_headers):
    resp = await client.post(
        "/menu", json={"name": "X", "category": "Y", "price": 1}, headers=student_headers
    )
    assert resp.status_code == 403
    assert "message" in resp.json()


async def test_staff_cannot_create_menu_item(client, staff_headers):
    resp = await client.post(
        "/menu", json={"name": "X", "category": "Y", "price": 1}, headers=staff_headers
    )
    assert resp.status_code == 403


async def test_create_without_token_is_401(client, fresh_db):
    resp = await client.post("/menu", json={"name": "X", "category": "Y", "price": 1})
    assert resp.status_code == 401
    assert "message" in resp.json()


async def test_create_with_garbage_token_is_401(client, fresh_db):
    resp = await client.post(
        "/menu",
        json={"name": "X", "category": "Y", "price": 1},
        headers={"Authorization": "Bearer not-a-jwt"},
    )
    assert resp.status_code == 401


async def test_create_requires_price(client, admin_headers):
    resp = await client.post("/menu", json={"name": "X", "category": "Y"}, headers=admin_headers)
    assert resp.status_code == 400
    assert "price" in resp.json()["message"]


async def test_create_rejects_negative_price(client, admin_headers):
    resp = await client.post(
        "/menu", json={"name": "X", "category": "Y", "price": -5}, headers=admin_headers
    )
    assert resp.status_code == 400


async def test_patch_updates_only_given_fields(client, admin_headers, menu):
    resp = await client.patch(
        f"/menu/{menu['dosa'].id}", json={"price": 85, "available": False}, headers=admin_headers
    )
    assert resp.status_code == 200
    body = resp.json()
    assert body["price"] == 85
    assert body["available"] is False
    assert body["name"] == "Masala Dosa"
    assert body["category"] == "Breakfast"


async def test_patch_cannot_clear_required_field(client, admin_headers, menu):
    resp = await client.patch(f"/menu/{menu['dosa'].id}", json={"name": None}, headers=admin_headers)
    assert resp.status_code == 400


async def test_patch_unknown_item_is_404(client, admin_headers, menu):
    resp = await client.patch("/menu/nope", json={"price": 1}, headers=admin_headers)
    assert resp.status_code == 404


async def test_patch_requires_admin(client, student_headers, menu):
    resp = await client.patch(f"/menu/{menu['dosa'].id}", json={"price": 1}, headers=student_headers)
    assert resp.status_code == 403


async def test_delete_menu_item(client, admin_headers, menu):
    resp = await client.delete(f"/menu/{menu['chai'].id}", headers=admin_headers)
    assert resp.status_code == 200
    assert resp.json() == {"message": "Menu item deleted"}
    assert (await client.get(f"/menu/{menu['chai'].id}")).status_code == 404


async def test_delete_unknown_item_is_404(client, admin_headers, menu):
    resp = await client.delete("/menu/nope", headers=admin_headers)
    assert resp.status_code == 404


async def test_patch_cannot_null_description(client, admin_headers, menu):
    resp = await client.patch(
        f"/menu/{menu['dosa'].id}", json={"description": None}, headers=admin_headers
    )
    assert resp.status_code == 400
    assert "description" in resp.json()["message"]


async def test_patch_can_clear_description_with_empty_string(client, admin_headers, menu):
    resp = await client.patch(
        f"/menu/{menu['dosa'].id}", json={"description": ""}, headers=admin_headers
    )
    assert resp.status_code == 200
    assert resp.json()["description"] == ""
