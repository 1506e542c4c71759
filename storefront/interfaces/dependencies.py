from typing import Optional
from uuid import uuid4

from fastapi import Depends, Header, Request, Response

from storefront.application.cart import CartStore
from storefront.domain.models import User

SESSION_HEADER = "X-Session-Id"


def get_session_id(response: Response, x_session_id: Optional[str] = Header(None)) -> str:
    """Browser session the cart and chat belong to; minted when missing."""
    session_id = x_session_id or uuid4().hex
    response.headers[SESSION_HEADER] = session_id
    return session_id


async def get_current_user(request: Request, authorization: Optional[str] = Header(None)) -> Optional[User]:
    if not authorization or not authorization.lower().startswith("bearer "):
        return None
    token = authorization.split(" ", 1)[1].strip()
    if not token:
        return None
    return await request.app.state.auth_client.get_user(token)


def get_cart(request: Request, session_id: str = Depends(get_session_id)) -> CartStore:
    return CartStore(request.app.state.state_manager, session_id)
