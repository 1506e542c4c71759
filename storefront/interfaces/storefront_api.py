from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Request
from pydantic import BaseModel, Field

from storefront.application.cart import CartStore
from storefront.application.orchestrator import CheckoutResult, cart_summary
from storefront.application.views import (
    CartView,
    CategoryView,
    OrderConfirmationView,
    ProductView,
    RestaurantMenuView,
    RestaurantsView,
)
from storefront.domain.errors import AuthenticationRequired, EmptyCartError
from storefront.domain.models import Address, PaymentMethod, User
from storefront.interfaces.dependencies import get_cart, get_current_user

router = APIRouter()


class AddToCartIn(BaseModel):
    product_id: str


class AddRestaurantFoodIn(BaseModel):
    restaurant_id: str
    food_id: str


class QuantityIn(BaseModel):
    quantity: int = Field(..., ge=0)


class CheckoutIn(BaseModel):
    address: Address
    payment_method: PaymentMethod = PaymentMethod.CARD
    delivery_notes: str = ""


# ----- Catalog -----

@router.get("/categories/{category_id}", response_model=CategoryView)
async def category_page(category_id: str, request: Request):
    return await request.app.state.catalog.category_view(category_id)


@router.get("/products/{product_id}", response_model=ProductView)
async def product_page(product_id: str, request: Request):
    return await request.app.state.catalog.product_view(product_id)


@router.get("/restaurants", response_model=RestaurantsView)
async def restaurants_page(request: Request, search: str = ""):
    return await request.app.state.catalog.restaurants_view(search)


@router.get("/restaurants/{restaurant_id}/menu", response_model=RestaurantMenuView)
async def restaurant_menu_page(restaurant_id: str, request: Request, search: str = "", cart: CartStore = Depends(get_cart)):
    return await request.app.state.catalog.restaurant_menu_view(restaurant_id, search, cart=cart)


# ----- Cart -----

@router.get("/cart", response_model=CartView)
def view_cart(cart: CartStore = Depends(get_cart)):
    return cart_summary(cart)


@router.post("/cart/items", response_model=CartView)
async def add_to_cart(payload: AddToCartIn, request: Request, cart: CartStore = Depends(get_cart)):
    product = await request.app.state.catalog.get_product(payload.product_id)
    if product is None:
        raise HTTPException(status_code=404, detail="Product not found")

    cart.add(product)
    return cart_summary(cart, notice=f"{product.name} has been added to your cart.")


@router.post("/cart/restaurant-items", response_model=CartView)
async def add_restaurant_food(payload: AddRestaurantFoodIn, request: Request, cart: CartStore = Depends(get_cart)):
    restaurant, food = await request.app.state.catalog.get_restaurant_food(payload.restaurant_id, payload.food_id)
    if food is None:
        raise HTTPException(status_code=404, detail="This dish is not currently available.")

    cart.increment_restaurant_food(food, restaurant)
    return cart_summary(cart, notice=f"{food.name} added to your cart.")


@router.delete("/cart/restaurant-items/{food_id}", response_model=CartView)
def decrement_restaurant_food(food_id: str, cart: CartStore = Depends(get_cart)):
    removed = cart.decrement_restaurant_food(food_id)
    return cart_summary(cart, notice="Removed from cart." if removed else None)


@router.patch("/cart/items/{line_id}", response_model=CartView)
def change_quantity(line_id: str, payload: QuantityIn, cart: CartStore = Depends(get_cart)):
    cart.change_quantity(line_id, payload.quantity)
    notice = "Item has been removed from your cart." if payload.quantity == 0 else None
    return cart_summary(cart, notice=notice)


@router.delete("/cart/items/{line_id}", response_model=CartView)
def remove_from_cart(line_id: str, cart: CartStore = Depends(get_cart)):
    line = cart.get(line_id)
    cart.remove(line_id)
    name = line.name if line else "Item"
    return cart_summary(cart, notice=f"{name} has been removed from your cart.")


@router.delete("/cart", response_model=CartView)
def clear_cart(cart: CartStore = Depends(get_cart)):
    cart.clear()
    return cart_summary(cart, notice="All items have been removed from your cart.")


# ----- Checkout -----

@router.get("/checkout/summary", response_model=CartView)
def checkout_summary(cart: CartStore = Depends(get_cart), user: Optional[User] = Depends(get_current_user)):
    if user is None:
        raise AuthenticationRequired("You need to be logged in to checkout.")
    if cart.is_empty():
        raise EmptyCartError()
    return cart_summary(cart)


@router.post("/checkout", response_model=CheckoutResult, status_code=201)
async def place_order(
    payload: CheckoutIn,
    request: Request,
    cart: CartStore = Depends(get_cart),
    user: Optional[User] = Depends(get_current_user),
):
    return await request.app.state.orchestrator.place_order(
        cart,
        user,
        payload.address,
        payment_method=payload.payment_method,
        delivery_notes=payload.delivery_notes,
    )


# ----- Confirmation -----

@router.get("/orders/{order_id}", response_model=OrderConfirmationView)
async def order_success(order_id: str, request: Request, user: Optional[User] = Depends(get_current_user)):
    return await request.app.state.confirmation.get_order(order_id, user)


@router.get("/restaurant-orders/{order_id}", response_model=OrderConfirmationView)
async def restaurant_order_success(order_id: str, request: Request, user: Optional[User] = Depends(get_current_user)):
    return await request.app.state.confirmation.get_restaurant_order(order_id, user)
