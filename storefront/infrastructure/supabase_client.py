import logging
from typing import Any, Dict, List, Optional

import httpx

from storefront.core.config import settings
from storefront.domain.errors import DataStoreError

logger = logging.getLogger(__name__)


def client_kwargs(transport: Optional[httpx.AsyncBaseTransport]) -> Dict[str, Any]:
    kwargs: Dict[str, Any] = {}
    # No HTTP_TIMEOUT configured -> keep httpx's own default
    if settings.HTTP_TIMEOUT is not None:
        kwargs["timeout"] = settings.HTTP_TIMEOUT
    if transport is not None:
        kwargs["transport"] = transport
    return kwargs


def _encode_filter(value: Any) -> str:
    if isinstance(value, bool):
        return f"eq.{str(value).lower()}"
    return f"eq.{value}"


class PostgrestClient:
    """
    Thin async wrapper over the hosted store's table API (/rest/v1/<table>).
    Only the calls the storefront needs: filtered select and insert.
    """

    def __init__(self, base_url: str, api_key: str, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.api_key = api_key
        self.client = httpx.AsyncClient(
            base_url=f"{base_url.rstrip('/')}/rest/v1",
            **client_kwargs(transport),
        )

    def _headers(self, access_token: Optional[str] = None) -> Dict[str, str]:
        return {
            "apikey": self.api_key,
            # Row level security is evaluated against the shopper's token when we have one
            "Authorization": f"Bearer {access_token or self.api_key}",
        }

    async def select(
        self,
        table: str,
        columns: str = "*",
        filters: Optional[Dict[str, Any]] = None,
        order: Optional[str] = None,
        access_token: Optional[str] = None,
    ) -> List[Dict[str, Any]]:
        params = {"select": columns}
        for column, value in (filters or {}).items():
            params[column] = _encode_filter(value)
        if order:
            params["order"] = f"{order}.asc"

        rows = await self._request("GET", table, params=params, headers=self._headers(access_token))
        return rows if isinstance(rows, list) else []

    async def select_one(
        self,
        table: str,
        columns: str = "*",
        filters: Optional[Dict[str, Any]] = None,
        access_token: Optional[str] = None,
    ) -> Optional[Dict[str, Any]]:
        rows = await self.select(table, columns=columns, filters=filters, access_token=access_token)
        return rows[0] if rows else None

    async def insert(
        self,
        table: str,
        rows: Any,
        access_token: Optional[str] = None,
    ) -> List[Dict[str, Any]]:
        headers = self._headers(access_token)
        headers["Prefer"] = "return=representation"
        created = await self._request("POST", table, json=rows, headers=headers)
        return created if isinstance(created, list) else []

    async def _request(self, method: str, table: str, **kwargs) -> Any:
        try:
            response = await self.client.request(method, f"/{table}", **kwargs)
        except httpx.HTTPError as e:
            logger.error(f"❌ {method} {table} transport error: {e}")
            raise DataStoreError(f"Could not reach the store ({table}).", table=table) from e

        if response.status_code >= 400:
            message = self._error_message(response)
            logger.error(f"❌ {method} {table} -> {response.status_code}: {message}")
            raise DataStoreError(message, table=table, status=response.status_code)

        if not response.content:
            return None
        return response.json()

    @staticmethod
    def _error_message(response: httpx.Response) -> str:
        try:
            body = response.json()
        except ValueError:
            return response.text or f"HTTP {response.status_code}"
        if isinstance(body, dict):
            return body.get("message") or body.get("error") or f"HTTP {response.status_code}"
        return f"HTTP {response.status_code}"

    async def aclose(self):
        await self.client.aclose()
