import logging
from datetime import datetime, timedelta
from typing import Any, Dict, Optional

import pytz

from storefront.application.views import ConfirmationLine, OrderConfirmationView, ViewStatus
from storefront.core.config import settings
from storefront.domain.errors import AuthenticationRequired, DataStoreError
from storefront.domain.models import Order, User
from storefront.interfaces.IOrderRepository import IOrderRepository

logger = logging.getLogger(__name__)

DEFAULT_DELIVERY_WINDOW = timedelta(minutes=45)


def _store_tz():
    return pytz.timezone(settings.STORE_TIMEZONE)


def _localize(moment: datetime) -> datetime:
    if moment.tzinfo is None:
        moment = pytz.utc.localize(moment)
    return moment.astimezone(_store_tz())


def estimated_delivery_text(order: Order, now: Optional[datetime] = None) -> str:
    """Backend estimate if one was set, otherwise 45 minutes after placing."""
    if order.estimated_delivery:
        return _localize(order.estimated_delivery).strftime("%d %b %Y, %I:%M %p")

    placed = order.created_at or now or datetime.now(pytz.utc)
    return _localize(placed + DEFAULT_DELIVERY_WINDOW).strftime("%I:%M %p")


def _not_found() -> OrderConfirmationView:
    # The page sends the shopper home when the order can't be shown
    return OrderConfirmationView(status=ViewStatus.NOT_FOUND, notice="Order not found", redirect_to="/")


class OrderConfirmationReader:
    def __init__(self, order_repo: IOrderRepository):
        self.order_repo = order_repo

    async def get_order(self, order_id: Optional[str], user: Optional[User]) -> OrderConfirmationView:
        if user is None:
            raise AuthenticationRequired()
        if not order_id:
            return OrderConfirmationView(status=ViewStatus.NOT_FOUND, redirect_to="/")

        try:
            row = await self.order_repo.get_order_with_items(order_id, user.id, access_token=user.access_token)
        except DataStoreError as e:
            logger.error(f"❌ Order {order_id} read failed: {e}")
            return _not_found()

        if not row:
            return _not_found()

        order = Order(**row)
        lines = []
        for item in row.get("order_items") or []:
            product = item.get("products") or {}
            lines.append(ConfirmationLine(
                name=product.get("name", "Item"),
                image=product.get("image"),
                quantity=item["quantity"],
                price=item["price"],
                line_total=round(item["price"] * item["quantity"], 2),
            ))

        return self._view(order, lines)

    async def get_restaurant_order(self, order_id: Optional[str], user: Optional[User]) -> OrderConfirmationView:
        if user is None:
            raise AuthenticationRequired()
        if not order_id:
            return OrderConfirmationView(status=ViewStatus.NOT_FOUND, redirect_to="/")

        try:
            data = await self.order_repo.get_restaurant_order(order_id, user.id, access_token=user.access_token)
        except DataStoreError as e:
            logger.error(f"❌ Restaurant order {order_id} read failed: {e}")
            return _not_found()

        if not data:
            return _not_found()

        order = Order(**data["order"])
        lines = []
        for item in data.get("items") or []:
            food = item.get("restaurant_foods") or {}
            lines.append(ConfirmationLine(
                name=food.get("name", "Item"),
                description=food.get("description"),
                quantity=item["quantity"],
                price=item["price"],
                line_total=round(item["price"] * item["quantity"], 2),
            ))

        restaurant: Dict[str, Any] = data.get("restaurant") or {}
        view = self._view(order, lines)
        view.restaurant_name = restaurant.get("name")
        view.restaurant_address = restaurant.get("address")
        return view

    @staticmethod
    def _view(order: Order, lines) -> OrderConfirmationView:
        return OrderConfirmationView(
            status=ViewStatus.POPULATED,
            order_id=order.id,
            short_id=order.id[:8],
            order_status=order.status,
            delivery_address=order.delivery_address,
            items=lines,
            total_amount=order.total_amount,
            placed_at=_localize(order.created_at) if order.created_at else None,
            estimated_delivery=estimated_delivery_text(order),
        )
