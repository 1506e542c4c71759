from datetime import datetime
from enum import Enum
from typing import ClassVar, List, Optional

from pydantic import BaseModel, ConfigDict, Field

RESTAURANT_LINE_PREFIX = "restaurant-food:"


class IssueCategory(str, Enum):
    GENERAL = "general"
    ORDER = "order"
    DELIVERY = "delivery"
    PAYMENT = "payment"
    PRODUCT = "product"
    ACCOUNT = "account"


class IssuePriority(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    URGENT = "urgent"


class PaymentMethod(str, Enum):
    CARD = "card"
    CASH = "cash"


class Product(BaseModel):
    # Rows carry extra columns (created_by, timestamps...) we don't use
    model_config = ConfigDict(extra="ignore")

    id: str
    name: str
    price: float
    category: str = ""
    image: Optional[str] = None
    description: Optional[str] = None
    unit: Optional[str] = None
    brand: Optional[str] = None
    type: Optional[str] = None
    stock: Optional[int] = None

    # Only set for restaurant dishes funnelled into the cart
    restaurant_id: Optional[str] = None
    restaurant_name: Optional[str] = None
    restaurant_food_id: Optional[str] = None


class CartLine(Product):
    """A product snapshot plus how many of it the shopper wants."""
    # No floor; the cart stores whatever quantity it is handed
    quantity: int = 1

    @property
    def line_total(self) -> float:
        return self.price * self.quantity


class Address(BaseModel):
    street: str = ""
    city: str = ""
    state: str = ""
    zip_code: str = ""
    phone: str = ""
    landmark: str = ""
    alternate_phone: str = ""

    REQUIRED_FIELDS: ClassVar[tuple] = ("street", "city", "state", "zip_code", "phone")

    def missing_fields(self) -> List[str]:
        return [name for name in self.REQUIRED_FIELDS if not getattr(self, name).strip()]

    def format_delivery_address(self) -> str:
        return f"{self.street}, {self.city}, {self.state} {self.zip_code}, Landmark: {self.landmark}"


class Order(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: str
    user_id: Optional[str] = None
    total_amount: float
    status: str
    delivery_address: Optional[str] = None
    payment_method: Optional[str] = None
    delivery_notes: Optional[str] = None
    created_at: Optional[datetime] = None
    estimated_delivery: Optional[datetime] = None


class OrderItem(BaseModel):
    model_config = ConfigDict(extra="ignore")

    order_id: Optional[str] = None
    product_id: Optional[str] = None
    quantity: int
    price: float


class SupportIssue(BaseModel):
    user_id: str
    title: str
    description: str
    category: IssueCategory = IssueCategory.GENERAL
    priority: IssuePriority = IssuePriority.MEDIUM


class IssueForm(BaseModel):
    title: str = ""
    description: str = ""
    category: IssueCategory = IssueCategory.GENERAL
    priority: IssuePriority = IssuePriority.MEDIUM


class Restaurant(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: str
    name: str
    description: Optional[str] = None
    address: Optional[str] = None
    phone: Optional[str] = None
    image_url: Optional[str] = None
    is_active: bool = True


class RestaurantFood(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: str
    restaurant_id: str
    name: str
    description: Optional[str] = None
    price: float
    image_url: Optional[str] = None
    is_available: bool = True


class ChatMessage(BaseModel):
    id: str
    text: str
    is_bot: bool
    timestamp: datetime


class User(BaseModel):
    """The signed-in shopper, as returned by the auth API."""
    model_config = ConfigDict(extra="ignore")

    id: str
    email: Optional[str] = None
    access_token: Optional[str] = Field(None, exclude=True)
