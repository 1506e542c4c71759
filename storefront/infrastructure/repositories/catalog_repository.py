from typing import Any, Dict, List, Optional

from storefront.infrastructure.supabase_client import PostgrestClient
from storefront.interfaces.ICatalogRepository import ICatalogRepository


class SupabaseCatalogRepository(ICatalogRepository):

    def __init__(self, client: PostgrestClient):
        self.client = client

    async def list_products(self, category: Optional[str] = None) -> List[Dict[str, Any]]:
        filters = {"category": category} if category else None
        return await self.client.select("products", filters=filters)

    async def get_product(self, product_id: str) -> Optional[Dict[str, Any]]:
        return await self.client.select_one("products", filters={"id": product_id})

    async def list_product_keywords(self, product_id: str) -> List[str]:
        rows = await self.client.select("product_keywords", columns="keyword", filters={"product_id": product_id})
        return [r["keyword"] for r in rows if r.get("keyword")]

    async def list_restaurants(self) -> List[Dict[str, Any]]:
        return await self.client.select("restaurants", order="name")

    async def get_restaurant(self, restaurant_id: str) -> Optional[Dict[str, Any]]:
        return await self.client.select_one("restaurants", filters={"id": restaurant_id})

    async def list_restaurant_foods(self, restaurant_id: str) -> List[Dict[str, Any]]:
        return await self.client.select(
            "restaurant_foods",
            filters={"restaurant_id": restaurant_id, "is_available": True},
            order="name",
        )
