ORDER_SURCHARGE_RATE = 0.10
CURRENCY_SYMBOL = "₹"


def surcharge(subtotal: float) -> float:
    """The 10% line shown as "Tax" on the cart and checkout summaries."""
    return round(subtotal * ORDER_SURCHARGE_RATE, 2)


def order_total(subtotal: float) -> float:
    # Both the displayed total and the persisted orders.total_amount come from here
    return round(subtotal * (1 + ORDER_SURCHARGE_RATE), 2)


def format_price(amount: float) -> str:
    return f"{CURRENCY_SYMBOL}{amount:,.2f}"
