def _items(product):
    return [
        {"productId": product["id"], "productName": product["name"], "quantity": 2, "price": product["price"]},
        {"productName": "Custom engraving", "quantity": 1, "price": "65"},
    ]


def test_order_is_public_and_returns_its_items(admin_client, client, product_payload, order_payload):
    product = admin_client.post("/api/products", json=product_payload).get_json()
    order_payload["items"] = _items(product)

    resp = client.post("/api/orders", json=order_payload)
    assert resp.status_code == 201
    order = resp.get_json()
    assert order["status"] == "new"
    assert order["paymentStatus"] == "pending"
    assert order["totalAmount"] == "243.00"
    assert len(order["items"]) == 2
    assert order["items"][1]["price"] == "65.00"


def test_items_are_snapshots_of_the_product(admin_client, client, product_payload, order_payload):
    product = admin_client.post("/api/products", json=product_payload).get_json()
    order_payload["items"] = _items(product)
    order_id = client.post("/api/orders", json=order_payload).get_json()["id"]

    admin_client.patch(f"/api/products/{product['id']}", json={"name": "Renamed Vase", "price": "120.00"})

    items = client.get(f"/api/orders/{order_id}").get_json()["items"]
    assert len(items) == 2
    snapshot = next(i for i in items if i["productId"] == product["id"])
    assert snapshot["productName"] == "Handcrafted Ceramic Vase"
    assert snapshot["price"] == "89.00"
    assert snapshot["quantity"] == 2


def test_deleting_the_product_keeps_order_items(admin_client, client, product_payload, order_payload):
    product = admin_client.post("/api/products", json=product_payload).get_json()
    order_payload["items"] = _items(product)
    order_id = client.post("/api/orders", json=order_payload).get_json()["id"]

    assert admin_client.delete(f"/api/products/{product['id']}").status_code == 204

    items = client.get(f"/api/orders/{order_id}").get_json()["items"]
    assert {i["productName"] for i in items} == {"Handcrafted Ceramic Vase", "Custom engraving"}


def test_custom_order_without_items(client, order_payload):
    order_payload.update({"isCustomOrder": True, "customOrderDetails": "A portrait of our dog, A3 size"})
    del order_payload["items"]
    order = client.post("/api/orders", json=order_payload).get_json()
    assert order["isCustomOrder"] is True
    assert order["items"] == []


def test_order_does_not_touch_stock(admin_client, client, product_payload, order_payload):
    product = admin_client.post("/api/products", json=product_payload).get_json()
    order_payload["items"] = [{"productId": product["id"], "productName": product["name"], "quantity": 50, "price": "89.00"}]
    assert client.post("/api/orders", json=order_payload).status_code == 201
    assert client.get(f"/api/products/{product['id']}").get_json()["stockQuantity"] == 5


def test_bad_item_rejects_the_whole_order(admin_client, client, order_payload):
    order_payload["items"] = [{"productName": "Vase", "quantity": 1}]
    resp = client.post("/api/orders", json=order_payload)
    assert resp.status_code == 400
    assert resp.get_json()["details"][0]["path"] == "items.0.price"
    assert admin_client.get("/api/orders").get_json() == []


def test_invalid_email_is_rejected(client, order_payload):
    order_payload["customerEmail"] = "not-an-email"
    assert client.post("/api/orders", json=order_payload).status_code == 400


def test_listing_orders_is_admin_only(admin_client, client, order_payload):
    client.post("/api/orders", json=order_payload)
    assert client.get("/api/orders").status_code == 401
    orders = admin_client.get("/api/orders").get_json()
    assert len(orders) == 1
    assert "items" not in orders[0]


def test_admin_can_set_any_status(admin_client, client, order_payload):
    order_id = client.post("/api/orders", json=order_payload).get_json()["id"]

    for status in ("delivered", "new", "cancelled", "in_progress"):
        resp = admin_client.patch(f"/api/orders/{order_id}", json={"status": status})
        assert resp.status_code == 200
        assert resp.get_json()["status"] == status


def test_status_outside_the_enum_is_rejected(admin_client, client, order_payload):
    order_id = client.post("/api/orders", json=order_payload).get_json()["id"]
    resp = admin_client.patch(f"/api/orders/{order_id}", json={"status": "shipped"})
    assert resp.status_code == 400
    assert client.get(f"/api/orders/{order_id}").get_json()["status"] == "new"


def test_order_update_is_admin_only(client, order_payload):
    order_id = client.post("/api/orders", json=order_payload).get_json()["id"]
    assert client.patch(f"/api/orders/{order_id}", json={"paymentStatus": "paid"}).status_code == 401
    assert client.get(f"/api/orders/{order_id}").get_json()["paymentStatus"] == "pending"


def test_unknown_order_is_404(admin_client, client):
    assert client.get("/api/orders/missing").status_code == 404
    assert admin_client.patch("/api/orders/missing", json={"status": "completed"}).status_code == 404
