import logging
from typing import Optional, Tuple

from storefront.application.cart import CartStore
from storefront.application.views import (
    CategoryView,
    ProductView,
    RestaurantMenuView,
    RestaurantsView,
    ViewStatus,
)
from storefront.core.config import settings
from storefront.domain.errors import DataStoreError
from storefront.domain.models import Product, Restaurant, RestaurantFood
from storefront.interfaces.ICatalogRepository import ICatalogRepository

logger = logging.getLogger(__name__)

CATEGORY_NAMES = {
    "grocery": "Grocery",
    "vegetables": "Vegetables",
    "fruits": "Fruits",
    "cold-drinks": "Cold Drinks",
}
ALL_PRODUCTS = "all"

RESTAURANT_UNAVAILABLE = "This restaurant is not currently available."


def absolute_image_url(image: Optional[str]) -> Optional[str]:
    if not image or image.startswith("http"):
        return image
    path = image if image.startswith("/") else f"/{image}"
    return f"{settings.SITE_URL.rstrip('/')}{path}"


def _matches(term: str, *fields: Optional[str]) -> bool:
    return any(term in (f or "").lower() for f in fields)


class CatalogReader:
    """
    Read-only views over products and restaurants.

    One read per view (two for a product or a menu), nothing cached, no
    retries. A failed read turns into a notice and an empty view.
    """

    def __init__(self, catalog_repo: ICatalogRepository):
        self.catalog_repo = catalog_repo

    async def category_view(self, category_id: str) -> CategoryView:
        if category_id != ALL_PRODUCTS and category_id not in CATEGORY_NAMES:
            return CategoryView(status=ViewStatus.NOT_FOUND, category_id=category_id, notice="Category not found")

        title = CATEGORY_NAMES.get(category_id, "All Products")
        try:
            rows = await self.catalog_repo.list_products(None if category_id == ALL_PRODUCTS else category_id)
        except DataStoreError as e:
            logger.error(f"❌ Category {category_id} read failed: {e}")
            return CategoryView(status=ViewStatus.EMPTY, category_id=category_id, title=title, notice="Failed to load products")

        products = [Product(**r) for r in rows]
        return CategoryView(
            status=ViewStatus.POPULATED if products else ViewStatus.EMPTY,
            category_id=category_id,
            title=title,
            products=products,
        )

    async def product_view(self, product_id: str) -> ProductView:
        try:
            row = await self.catalog_repo.get_product(product_id)
        except DataStoreError as e:
            logger.error(f"❌ Product {product_id} read failed: {e}")
            return ProductView(status=ViewStatus.EMPTY, notice="Failed to load product")

        if not row:
            return ProductView(status=ViewStatus.NOT_FOUND, notice="Product not found")

        product = Product(**row)
        product.image = absolute_image_url(product.image)

        # Local names are a nice-to-have; never fail the page over them
        try:
            keywords = await self.catalog_repo.list_product_keywords(product_id)
        except DataStoreError as e:
            logger.debug(f"product_keywords read skipped for {product_id}: {e}")
            keywords = []

        return ProductView(
            status=ViewStatus.POPULATED,
            product=product,
            also_known_as=keywords,
            back_to_category=f"/category/{product.category or ALL_PRODUCTS}",
        )

    async def restaurants_view(self, search: str = "") -> RestaurantsView:
        try:
            rows = await self.catalog_repo.list_restaurants()
        except DataStoreError as e:
            logger.error(f"❌ Restaurants read failed: {e}")
            message = e.notice or "Failed to load restaurants. Please try again later."
            return RestaurantsView(status=ViewStatus.ERROR, notice=message, retry=True)

        restaurants = [r for r in (Restaurant(**row) for row in rows) if r.is_active]

        term = search.strip().lower()
        if term:
            restaurants = [r for r in restaurants if _matches(term, r.name, r.description, r.address)]

        return RestaurantsView(
            status=ViewStatus.POPULATED if restaurants else ViewStatus.EMPTY,
            restaurants=restaurants,
            count=len(restaurants),
        )

    async def restaurant_menu_view(self, restaurant_id: str, search: str = "", cart: Optional[CartStore] = None) -> RestaurantMenuView:
        try:
            row = await self.catalog_repo.get_restaurant(restaurant_id)
            restaurant = Restaurant(**row) if row else None

            if restaurant is None or not restaurant.is_active:
                return RestaurantMenuView(
                    status=ViewStatus.NOT_FOUND,
                    notice=RESTAURANT_UNAVAILABLE,
                    redirect_to="/restaurants",
                )

            food_rows = await self.catalog_repo.list_restaurant_foods(restaurant_id)
        except DataStoreError as e:
            logger.error(f"❌ Menu read failed for restaurant {restaurant_id}: {e}")
            return RestaurantMenuView(
                status=ViewStatus.EMPTY,
                notice=e.notice or "Failed to load restaurant menu. Please try again.",
                redirect_to="/restaurants",
            )

        foods = [RestaurantFood(**r) for r in food_rows]
        term = search.strip().lower()
        if term:
            foods = [f for f in foods if _matches(term, f.name, f.description)]

        return RestaurantMenuView(
            status=ViewStatus.POPULATED if foods else ViewStatus.EMPTY,
            restaurant=restaurant,
            foods=foods,
            items_in_cart=cart.restaurant_item_count(restaurant.id) if cart else 0,
        )

    async def get_restaurant_food(self, restaurant_id: str, food_id: str) -> Tuple[Optional[Restaurant], Optional[RestaurantFood]]:
        """Resolve a dish and its restaurant before it goes into the cart."""
        row = await self.catalog_repo.get_restaurant(restaurant_id)
        if not row:
            return None, None
        restaurant = Restaurant(**row)
        if not restaurant.is_active:
            return restaurant, None
        for food_row in await self.catalog_repo.list_restaurant_foods(restaurant_id):
            if str(food_row.get("id")) == food_id:
                return restaurant, RestaurantFood(**food_row)
        return restaurant, None

    async def get_product(self, product_id: str) -> Optional[Product]:
        row = await self.catalog_repo.get_product(product_id)
        return Product(**row) if row else None
