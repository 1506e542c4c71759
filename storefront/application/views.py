from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel

from storefront.domain.models import CartLine, Product, Restaurant, RestaurantFood


class ViewStatus(str, Enum):
    # "loading" is the request still being in flight, so it never appears here
    EMPTY = "empty"
    POPULATED = "populated"
    NOT_FOUND = "not_found"
    ERROR = "error"


class ViewModel(BaseModel):
    status: ViewStatus
    notice: Optional[str] = None
    redirect_to: Optional[str] = None


class CategoryView(ViewModel):
    category_id: str
    title: Optional[str] = None
    products: List[Product] = []


class ProductView(ViewModel):
    product: Optional[Product] = None
    also_known_as: List[str] = []
    back_to_category: Optional[str] = None


class RestaurantsView(ViewModel):
    restaurants: List[Restaurant] = []
    count: int = 0
    retry: bool = False


class RestaurantMenuView(ViewModel):
    restaurant: Optional[Restaurant] = None
    foods: List[RestaurantFood] = []
    items_in_cart: int = 0


class CartView(BaseModel):
    items: List[CartLine]
    item_count: int
    subtotal: float
    delivery_fee: str = "Free"
    tax: float
    total: float
    notice: Optional[str] = None


class ConfirmationLine(BaseModel):
    name: str
    image: Optional[str] = None
    description: Optional[str] = None
    quantity: int
    price: float
    line_total: float


class OrderConfirmationView(ViewModel):
    order_id: Optional[str] = None
    short_id: Optional[str] = None
    order_status: Optional[str] = None
    delivery_address: Optional[str] = None
    restaurant_name: Optional[str] = None
    restaurant_address: Optional[str] = None
    items: List[ConfirmationLine] = []
    total_amount: Optional[float] = None
    placed_at: Optional[datetime] = None
    estimated_delivery: Optional[str] = None
