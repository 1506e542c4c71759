import logging
from typing import Optional

import httpx

from storefront.domain.models import User
from storefront.infrastructure.supabase_client import client_kwargs

logger = logging.getLogger(__name__)


class SupabaseAuthClient:
    """Resolves a shopper's access token to a user via /auth/v1/user."""

    def __init__(self, base_url: str, api_key: str, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.api_key = api_key
        self.client = httpx.AsyncClient(
            base_url=f"{base_url.rstrip('/')}/auth/v1",
            **client_kwargs(transport),
        )

    async def get_user(self, access_token: str) -> Optional[User]:
        try:
            response = await self.client.get(
                "/user",
                headers={"apikey": self.api_key, "Authorization": f"Bearer {access_token}"},
            )
        except httpx.HTTPError as e:
            # Treated as signed out; the caller redirects to login
            logger.warning(f"⚠️ Auth lookup failed: {e}")
            return None

        if response.status_code != 200:
            return None

        data = response.json()
        return User(id=data["id"], email=data.get("email"), access_token=access_token)

    async def aclose(self):
        await self.client.aclose()
