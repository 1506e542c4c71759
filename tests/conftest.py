from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

import pytest

from storefront.application.cart import CartStore
from storefront.domain.errors import DataStoreError
from storefront.domain.models import Address, Product, SupportIssue, User
from storefront.infrastructure.state_manager import StateManager
from storefront.interfaces.ICatalogRepository import ICatalogRepository
from storefront.interfaces.IIssueRepository import IIssueRepository
from storefront.interfaces.IOrderRepository import IOrderRepository

PRODUCTS = [
    {"id": "v1", "name": "Fresh Tomatoes (1kg)", "price": 4.99, "category": "vegetables", "image": "/placeholder.svg"},
    {"id": "v2", "name": "Organic Carrots (500g)", "price": 3.49, "category": "vegetables", "image": None},
    {"id": "f1", "name": "Red Apples (1kg)", "price": 5.99, "category": "fruits", "image": "https://cdn.example/apple.png"},
]

RESTAURANTS = [
    {"id": "r2", "name": "Spice Route", "description": "North Indian curries", "address": "12 MG Road", "is_active": True},
    {"id": "r1", "name": "Biryani House", "description": "Hyderabadi biryani", "address": "4 Park Street", "is_active": True, "image_url": "https://cdn.example/biryani.png"},
    {"id": "r3", "name": "Closed Cafe", "description": None, "address": None, "is_active": False},
]

FOODS = [
    {"id": "food-1", "restaurant_id": "r1", "name": "Chicken Biryani", "description": "Spicy", "price": 250.0, "is_available": True},
    {"id": "food-2", "restaurant_id": "r1", "name": "Veg Biryani", "description": "Mild", "price": 180.0, "image_url": "https://cdn.example/veg.png", "is_available": True},
]


class FakeCatalogRepository(ICatalogRepository):
    def __init__(self):
        self.products = [dict(p) for p in PRODUCTS]
        self.keywords = {"v1": ["tamatar"]}
        self.restaurants = [dict(r) for r in RESTAURANTS]
        self.foods = [dict(f) for f in FOODS]
        self.failing = set()
        self.calls: List[str] = []

    def _check(self, table):
        self.calls.append(table)
        if table in self.failing:
            raise DataStoreError(f"{table} unavailable", table=table, status=500)

    async def list_products(self, category=None):
        self._check("products")
        return [p for p in self.products if category is None or p["category"] == category]

    async def get_product(self, product_id):
        self._check("products")
        return next((p for p in self.products if p["id"] == product_id), None)

    async def list_product_keywords(self, product_id):
        self._check("product_keywords")
        return self.keywords.get(product_id, [])

    async def list_restaurants(self):
        self._check("restaurants")
        return sorted(self.restaurants, key=lambda r: r["name"])

    async def get_restaurant(self, restaurant_id):
        self._check("restaurants")
        return next((r for r in self.restaurants if r["id"] == restaurant_id), None)

    async def list_restaurant_foods(self, restaurant_id):
        self._check("restaurant_foods")
        foods = [f for f in self.foods if f["restaurant_id"] == restaurant_id and f["is_available"]]
        return sorted(foods, key=lambda f: f["name"])


class FakeOrderRepository(IOrderRepository):
    def __init__(self):
        self.orders: List[Dict[str, Any]] = []
        self.order_items: List[Dict[str, Any]] = []
        self.restaurant_orders: Dict[str, Dict[str, Any]] = {}
        self.fail_orders = False
        self.fail_items = False
        self.fail_reads = False

    async def create_order(self, order, access_token=None):
        if self.fail_orders:
            raise DataStoreError("orders insert rejected", table="orders", status=400)
        row = dict(order)
        row["id"] = f"{len(self.orders) + 1:08d}-aaaa-bbbb-cccc-000000000000"
        row["created_at"] = datetime(2025, 1, 1, 10, 0, tzinfo=timezone.utc).isoformat()
        self.orders.append(row)
        return row

    async def create_order_items(self, items, access_token=None):
        if self.fail_items:
            raise DataStoreError("order_items insert rejected", table="order_items", status=400)
        self.order_items.extend(dict(i) for i in items)

    async def get_order_with_items(self, order_id, user_id, access_token=None):
        if self.fail_reads:
            raise DataStoreError("orders read failed", table="orders", status=500)
        order = next((o for o in self.orders if o["id"] == order_id and o["user_id"] == user_id), None)
        if order is None:
            return None
        names = {p["id"]: p for p in PRODUCTS}
        joined = []
        for item in self.order_items:
            if item["order_id"] != order_id:
                continue
            product = names.get(item["product_id"], {})
            joined.append({
                "quantity": item["quantity"],
                "price": item["price"],
                "products": {"name": product.get("name"), "image": product.get("image")},
            })
        return dict(order, order_items=joined)

    async def get_restaurant_order(self, order_id, user_id, access_token=None):
        data = self.restaurant_orders.get(order_id)
        if data is None or data["order"]["user_id"] != user_id:
            return None
        return data


class FakeIssueRepository(IIssueRepository):
    def __init__(self):
        self.issues: List[SupportIssue] = []
        self.fail = False

    async def create_issue(self, issue, access_token=None):
        if self.fail:
            raise DataStoreError("issues insert rejected", table="issues", status=500)
        self.issues.append(issue)


class FakeAuthClient:
    def __init__(self):
        self.tokens = {"good-token": User(id="user-1", email="shopper@example.com", access_token="good-token")}

    async def get_user(self, access_token: str) -> Optional[User]:
        return self.tokens.get(access_token)

    async def aclose(self):
        pass


@pytest.fixture
def state():
    return StateManager()


@pytest.fixture
def cart(state):
    return CartStore(state, "session-1")


@pytest.fixture
def catalog_repo():
    return FakeCatalogRepository()


@pytest.fixture
def order_repo():
    return FakeOrderRepository()


@pytest.fixture
def issue_repo():
    return FakeIssueRepository()


@pytest.fixture
def auth_client():
    return FakeAuthClient()


@pytest.fixture
def user():
    return User(id="user-1", email="shopper@example.com", access_token="good-token")


@pytest.fixture
def tomatoes():
    return Product(**PRODUCTS[0])


@pytest.fixture
def carrots():
    return Product(**PRODUCTS[1])


@pytest.fixture
def address():
    return Address(
        street="221 Baker Street",
        city="Pune",
        state="MH",
        zip_code="411001",
        phone="9876543210",
        landmark="Near SBI Bank",
        alternate_phone="9123456780",
    )
