import logging
from typing import Optional

from pydantic import BaseModel

from storefront.application.cart import CartStore
from storefront.application.views import CartView
from storefront.domain.errors import (
    AuthenticationRequired,
    DataStoreError,
    EmptyCartError,
    FormValidationError,
    OrderPlacementFailed,
)
from storefront.domain.models import Address, OrderItem, PaymentMethod, User
from storefront.domain.pricing import format_price, order_total, surcharge
from storefront.interfaces.IOrderRepository import IOrderRepository

logger = logging.getLogger(__name__)

ORDER_STATUS_CONFIRMED = "confirmed"


class CheckoutResult(BaseModel):
    order_id: str
    total_amount: float
    redirect_to: str
    notice: str = "Your order has been successfully placed!"


def cart_summary(cart: CartStore, notice: Optional[str] = None) -> CartView:
    subtotal = cart.total()
    return CartView(
        items=cart.items(),
        item_count=cart.item_count(),
        subtotal=round(subtotal, 2),
        tax=surcharge(subtotal),
        total=order_total(subtotal),
        notice=notice,
    )


class CheckoutOrchestrator:
    """
    Turns a session's cart into a persisted order.

    Two dependent writes: the order header, then one row per cart line. They
    are not atomic. If the second write fails the header stays behind with no
    items and the cart is kept, so a retry creates a second order.
    """

    def __init__(self, order_repo: IOrderRepository):
        self.order_repo = order_repo

    async def place_order(
        self,
        cart: CartStore,
        user: Optional[User],
        address: Address,
        payment_method: PaymentMethod = PaymentMethod.CARD,
        delivery_notes: str = "",
    ) -> CheckoutResult:
        # 1. GATES (no network before these pass)
        if user is None:
            raise AuthenticationRequired("You need to be logged in to checkout.")
        if cart.is_empty():
            raise EmptyCartError()

        missing = address.missing_fields()
        if missing:
            raise FormValidationError(missing, "Please fill in all address fields.")

        # 2. ORDER HEADER
        # Snapshot before any await so the lines written match the total charged
        lines = cart.items()
        total = order_total(cart.total())

        order_row = {
            "user_id": user.id,
            "total_amount": total,
            "status": ORDER_STATUS_CONFIRMED,
            "delivery_address": address.format_delivery_address(),
            "payment_method": payment_method.value,
            "delivery_notes": f"{delivery_notes} | Alt Phone: {address.alternate_phone}",
        }

        try:
            created = await self.order_repo.create_order(order_row, access_token=user.access_token)
        except DataStoreError as e:
            logger.error(f"❌ Order insert failed for user {user.id}: {e}")
            raise OrderPlacementFailed() from e

        order_id = str(created["id"])

        # 3. ORDER ITEMS
        item_rows = [
            OrderItem(order_id=order_id, product_id=line.id, quantity=line.quantity, price=line.price).model_dump()
            for line in lines
        ]

        try:
            await self.order_repo.create_order_items(item_rows, access_token=user.access_token)
        except DataStoreError as e:
            logger.error(f"❌ Order {order_id} has no items: order_items insert failed ({e})")
            raise OrderPlacementFailed() from e

        # 4. DONE
        cart.clear()
        logger.info(f"✅ Order {order_id} placed: {len(item_rows)} lines, total {format_price(total)}")

        return CheckoutResult(
            order_id=order_id,
            total_amount=total,
            redirect_to=f"/order-success?orderId={order_id}",
        )
