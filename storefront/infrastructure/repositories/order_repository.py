from typing import Any, Dict, List, Optional

from storefront.domain.errors import DataStoreError
from storefront.infrastructure.supabase_client import PostgrestClient
from storefront.interfaces.IOrderRepository import IOrderRepository


ORDER_WITH_ITEMS = "*,order_items(quantity,price,products(name,image))"
RESTAURANT_ORDER_ITEMS = "*,restaurant_foods(name,description)"

class SupabaseOrderRepository(IOrderRepository):

    def __init__(self, client: PostgrestClient):
        self.client = client

    async def create_order(self, order: Dict[str, Any], access_token: Optional[str] = None) -> Dict[str, Any]:
        created = await self.client.insert("orders", order, access_token=access_token)
        if not created:
            raise DataStoreError("Order insert returned no row.", table="orders")
        return created[0]

    async def create_order_items(self, items: List[Dict[str, Any]], access_token: Optional[str] = None) -> None:
        await self.client.insert("order_items", items, access_token=access_token)

    async def get_order_with_items(self, order_id: str, user_id: str, access_token: Optional[str] = None) -> Optional[Dict[str, Any]]:
        """
        One joined read: the order header plus each line's quantity, price
        and the product's name and image. Scoped to the owning user.
        """
        return await self.client.select_one(
            "orders",
            columns=ORDER_WITH_ITEMS,
            filters={"id": order_id, "user_id": user_id},
            access_token=access_token,
        )

    async def get_restaurant_order(self, order_id: str, user_id: str, access_token: Optional[str] = None) -> Optional[Dict[str, Any]]:
        order = await self.client.select_one(
            "restaurant_orders",
            filters={"id": order_id, "user_id": user_id},
            access_token=access_token,
        )
        if not order:
            return None

        items = await self.client.select(
            "restaurant_order_items",
            columns=RESTAURANT_ORDER_ITEMS,
            filters={"order_id": order_id},
            access_token=access_token,
        )
        restaurant = await self.client.select_one(
            "restaurants",
            columns="name,address",
            filters={"id": order["restaurant_id"]},
            access_token=access_token,
        )
        return {"order": order, "items": items, "restaurant": restaurant}
