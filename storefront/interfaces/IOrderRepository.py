from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

class IOrderRepository(ABC):
    @abstractmethod
    async def create_order(self, order: Dict[str, Any], access_token: Optional[str] = None) -> Dict[str, Any]:
        pass

    @abstractmethod
    async def create_order_items(self, items: List[Dict[str, Any]], access_token: Optional[str] = None) -> None:
        pass

    @abstractmethod
    async def get_order_with_items(self, order_id: str, user_id: str, access_token: Optional[str] = None) -> Optional[Dict[str, Any]]:
        pass

    @abstractmethod
    async def get_restaurant_order(self, order_id: str, user_id: str, access_token: Optional[str] = None) -> Optional[Dict[str, Any]]:
        pass
