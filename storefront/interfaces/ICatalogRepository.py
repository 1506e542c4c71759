from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

class ICatalogRepository(ABC):
    @abstractmethod
    async def list_products(self, category: Optional[str] = None) -> List[Dict[str, Any]]:
        pass

    @abstractmethod
    async def get_product(self, product_id: str) -> Optional[Dict[str, Any]]:
        pass

    @abstractmethod
    async def list_product_keywords(self, product_id: str) -> List[str]:
        pass

    @abstractmethod
    async def list_restaurants(self) -> List[Dict[str, Any]]:
        pass

    @abstractmethod
    async def get_restaurant(self, restaurant_id: str) -> Optional[Dict[str, Any]]:
        pass

    @abstractmethod
    async def list_restaurant_foods(self, restaurant_id: str) -> List[Dict[str, Any]]:
        pass
