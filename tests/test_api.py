import pytest
from fastapi.testclient import TestClient

from storefront.main import create_app

AUTH = {"Authorization": "Bearer good-token"}

ADDRESS = {
    "street": "221 Baker Street",
    "city": "Pune",
    "state": "MH",
    "zip_code": "411001",
    "phone": "9876543210",
    "landmark": "Near SBI Bank",
    "alternate_phone": "",
}


@pytest.fixture
def app(state, catalog_repo, order_repo, issue_repo, auth_client):
    return create_app(
        state_manager=state,
        catalog_repo=catalog_repo,
        order_repo=order_repo,
        issue_repo=issue_repo,
        auth_client=auth_client,
    )


@pytest.fixture
def client(app):
    with TestClient(app, headers={"X-Session-Id": "browser-1"}) as c:
        yield c


def test_health_reports_ram_sessions(client):
    res = client.get("/")
    assert res.status_code == 200
    assert res.json()["sessions"] == "ram"


def test_session_id_is_minted_when_missing(app):
    with TestClient(app) as c:
        res = c.get("/cart")
    assert res.headers["X-Session-Id"]


def test_category_page(client):
    res = client.get("/categories/fruits")
    body = res.json()
    assert res.status_code == 200
    assert body["status"] == "populated"
    assert [p["id"] for p in body["products"]] == ["f1"]


def test_add_to_cart_and_view(client):
    res = client.post("/cart/items", json={"product_id": "v1"})
    assert res.json()["notice"] == "Fresh Tomatoes (1kg) has been added to your cart."

    client.post("/cart/items", json={"product_id": "v1"})
    cart = client.get("/cart").json()

    assert cart["item_count"] == 2
    assert cart["subtotal"] == pytest.approx(9.98)
    assert cart["tax"] == pytest.approx(1.0)
    assert cart["total"] == pytest.approx(10.98)
    assert cart["delivery_fee"] == "Free"


def test_add_unknown_product_is_404(client):
    res = client.post("/cart/items", json={"product_id": "ghost"})
    assert res.status_code == 404


def test_cart_is_per_session(client, app):
    client.post("/cart/items", json={"product_id": "v1"})

    with TestClient(app, headers={"X-Session-Id": "browser-2"}) as other:
        assert other.get("/cart").json()["items"] == []


def test_quantity_zero_removes_line(client):
    client.post("/cart/items", json={"product_id": "v1"})

    res = client.patch("/cart/items/v1", json={"quantity": 0})

    assert res.json()["items"] == []
    assert res.json()["notice"] == "Item has been removed from your cart."


def test_negative_quantity_rejected(client):
    client.post("/cart/items", json={"product_id": "v1"})
    assert client.patch("/cart/items/v1", json={"quantity": -1}).status_code == 422


def test_remove_and_clear(client):
    client.post("/cart/items", json={"product_id": "v1"})
    client.post("/cart/items", json={"product_id": "v2"})

    res = client.delete("/cart/items/v2")
    assert res.json()["notice"] == "Organic Carrots (500g) has been removed from your cart."

    res = client.delete("/cart")
    assert res.json()["items"] == []


def test_restaurant_dish_add_and_decrement(client):
    res = client.post("/cart/restaurant-items", json={"restaurant_id": "r1", "food_id": "food-1"})
    assert res.json()["items"][0]["id"] == "restaurant-food:food-1"

    menu = client.get("/restaurants/r1/menu").json()
    assert menu["items_in_cart"] == 1

    res = client.delete("/cart/restaurant-items/food-1")
    assert res.json()["items"] == []


def test_unavailable_dish_is_404(client):
    res = client.post("/cart/restaurant-items", json={"restaurant_id": "r3", "food_id": "food-1"})
    assert res.status_code == 404


def test_checkout_requires_login(client):
    client.post("/cart/items", json={"product_id": "v1"})

    res = client.post("/checkout", json={"address": ADDRESS})

    assert res.status_code == 401
    assert res.json()["redirect_to"] == "/login"


def test_checkout_summary_with_empty_cart_redirects(client):
    res = client.get("/checkout/summary", headers=AUTH)

    assert res.status_code == 409
    assert res.json()["redirect_to"] == "/cart"


def test_checkout_reports_blank_fields(client, order_repo):
    client.post("/cart/items", json={"product_id": "v1"})

    res = client.post("/checkout", json={"address": dict(ADDRESS, phone="")}, headers=AUTH)

    assert res.status_code == 422
    assert res.json()["fields"] == ["phone"]
    assert order_repo.orders == []


def test_checkout_then_confirmation(client, order_repo):
    client.post("/cart/items", json={"product_id": "v1"})
    client.post("/cart/items", json={"product_id": "v1"})

    res = client.post("/checkout", json={"address": ADDRESS, "payment_method": "cash"}, headers=AUTH)

    assert res.status_code == 201
    result = res.json()
    assert result["total_amount"] == pytest.approx(10.98)
    assert result["redirect_to"] == f"/order-success?orderId={result['order_id']}"
    assert client.get("/cart").json()["items"] == []

    confirmation = client.get(f"/orders/{result['order_id']}", headers=AUTH).json()
    assert confirmation["status"] == "populated"
    assert confirmation["items"][0]["quantity"] == 2


def test_checkout_failure_keeps_cart(client, order_repo):
    client.post("/cart/items", json={"product_id": "v1"})
    order_repo.fail_items = True

    res = client.post("/checkout", json={"address": ADDRESS}, headers=AUTH)

    assert res.status_code == 502
    assert res.json()["notice"] == "Failed to place order. Please try again."
    assert len(client.get("/cart").json()["items"]) == 1


def test_support_chat_message_appears_immediately(client):
    res = client.post("/support/chat/messages", json={"text": "payment failed"})

    messages = res.json()["messages"]
    assert messages[-1]["text"] == "payment failed"
    assert messages[-1]["is_bot"] is False


def test_support_ticket_flow(client, issue_repo):
    client.post("/support/chat/ticket-form")

    res = client.post("/support/tickets", json={"title": "Late", "description": "Order is late", "category": "delivery"}, headers=AUTH)

    assert res.status_code == 201
    body = res.json()
    assert body["view"] == "conversation"
    assert body["notice"] == "Your issue has been reported. Our team will get back to you soon."
    assert issue_repo.issues[0].title == "Late"


def test_support_ticket_requires_login(client, issue_repo):
    res = client.post("/support/tickets", json={"title": "Late", "description": "Order is late"})

    assert res.status_code == 401
    assert issue_repo.issues == []


def test_viewing_chat_without_session_holds_no_widget(app):
    registry = app.state.chat_sessions

    with TestClient(app) as anonymous:
        session_ids = [anonymous.get("/support/chat").headers["X-Session-Id"] for _ in range(50)]

    assert len(set(session_ids)) == 50
    assert all(registry.peek(sid) is None for sid in session_ids)
