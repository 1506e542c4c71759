from typing import List, Optional

from storefront.domain.models import RESTAURANT_LINE_PREFIX, CartLine, Product, Restaurant, RestaurantFood
from storefront.infrastructure.state_manager import StateManager


FALLBACK_FOOD_IMAGE = "https://via.placeholder.com/300x200?text=Food"


def restaurant_line_id(food_id: str) -> str:
    return f"{RESTAURANT_LINE_PREFIX}{food_id}"


def restaurant_food_product(food: RestaurantFood, restaurant: Optional[Restaurant]) -> Product:
    """Denormalize a dish (and its restaurant) into a cart-ready product."""
    return Product(
        id=restaurant_line_id(food.id),
        name=food.name,
        price=food.price,
        category=f"Restaurant • {restaurant.name}" if restaurant else "Restaurant",
        image=food.image_url or (restaurant.image_url if restaurant else None) or FALLBACK_FOOD_IMAGE,
        unit="portion",
        type="restaurant",
        restaurant_id=restaurant.id if restaurant else None,
        restaurant_name=restaurant.name if restaurant else None,
        restaurant_food_id=food.id,
    )


class CartStore:
    """
    The shopper's cart for one browser session.

    Lines are keyed by identifier (a product id, or ``restaurant-food:<id>``
    for dishes) and kept in insertion order. Every mutation is written back to
    the session store immediately.
    """

    def __init__(self, state: StateManager, session_id: str):
        self.state = state
        self.session_id = session_id
        self._lines: List[CartLine] = [CartLine(**raw) for raw in state.get_cart(session_id)]

    # --- reads ---

    def items(self) -> List[CartLine]:
        return list(self._lines)

    def get(self, line_id: str) -> Optional[CartLine]:
        for line in self._lines:
            if line.id == line_id:
                return line
        return None

    def is_empty(self) -> bool:
        return not self._lines

    def total(self) -> float:
        return sum(line.line_total for line in self._lines)

    def item_count(self) -> int:
        return sum(line.quantity for line in self._lines)

    # --- writes ---

    def add(self, product: Product):
        existing = self.get(product.id)
        if existing:
            existing.quantity += 1
        else:
            self._lines.append(CartLine(**product.model_dump(exclude={"quantity"}), quantity=1))
        self._save()

    def update_quantity(self, line_id: str, quantity: int):
        # No floor here: callers remove the line themselves when it hits zero
        line = self.get(line_id)
        if line is None:
            return
        line.quantity = quantity
        self._save()

    def remove(self, line_id: str):
        self._lines = [line for line in self._lines if line.id != line_id]
        self._save()

    def clear(self):
        self._lines = []
        self.state.clear_cart(self.session_id)

    def change_quantity(self, line_id: str, quantity: int):
        """What the +/- buttons do: going down to zero drops the line."""
        if quantity <= 0:
            self.remove(line_id)
        else:
            self.update_quantity(line_id, quantity)

    # --- restaurant dishes ---

    def add_restaurant_food(self, food: RestaurantFood, restaurant: Optional[Restaurant]):
        self.add(restaurant_food_product(food, restaurant))

    def increment_restaurant_food(self, food: RestaurantFood, restaurant: Optional[Restaurant]):
        line = self.get(restaurant_line_id(food.id))
        if line is None:
            self.add_restaurant_food(food, restaurant)
            return
        self.update_quantity(line.id, line.quantity + 1)

    def decrement_restaurant_food(self, food_id: str) -> bool:
        """Take one portion off. Returns True when the line was dropped."""
        line = self.get(restaurant_line_id(food_id))
        if line is None:
            return False
        if line.quantity <= 1:
            self.remove(line.id)
            return True
        self.update_quantity(line.id, line.quantity - 1)
        return False

    def restaurant_item_count(self, restaurant_id: str) -> int:
        return sum(
            line.quantity
            for line in self._lines
            if line.type == "restaurant" and line.restaurant_id == restaurant_id
        )

    def _save(self):
        self.state.save_cart(self.session_id, [line.model_dump() for line in self._lines])
