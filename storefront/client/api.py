from typing import Any, Dict, Optional
import httpx
from storefront.client.constants import (ADD_FAILED, CLEAR_FAILED, FETCH_FAILED, REMOVE_FAILED, WISHLIST_PATH,
                                         logger)
from storefront.client.errors import NotAuthenticatedError, WishlistClientError
from storefront.common.utils import error_message


class WishlistApi:
    """HTTP calls behind the wishlist cache.

    Wraps an httpx.AsyncClient owned by the caller. Every failure, transport
    or HTTP, surfaces as WishlistClientError with a readable message.
    """

    def __init__(self, client: httpx.AsyncClient, access_token: Optional[str] = None, path: str = WISHLIST_PATH):
        self._client = client
        self._access_token = access_token
        self._path = path.rstrip("/")

    @property
    def is_authenticated(self) -> bool:
        return bool(self._access_token)

    def set_access_token(self, access_token: Optional[str]) -> None:
        self._access_token = access_token

    async def _request(self, method: str, url: str, fallback: str) -> Dict[str, Any]:
        if not self._access_token:
            raise NotAuthenticatedError()

        headers = {"Authorization": f"Bearer {self._access_token}"}
        try:
            resp = await self._client.request(method, url, headers=headers)
        except httpx.HTTPError as exc:
            logger.warning("wishlist.client.transport_error", extra={"method": method, "url": url, "error": str(exc)})
            raise WishlistClientError(fallback) from exc

        try:
            body = resp.json()
        except ValueError:
            body = None

        if resp.is_error:
            raise WishlistClientError(error_message(body, fallback), status_code=resp.status_code)
        if not isinstance(body, dict):
            raise WishlistClientError(fallback, status_code=resp.status_code)

        return body

    async def get_wishlist(self) -> Dict[str, Any]:
        return await self._request("GET", self._path, FETCH_FAILED)

    async def add(self, product_id: int) -> Dict[str, Any]:
        return await self._request("POST", f"{self._path}/{product_id}", ADD_FAILED)

    async def remove(self, product_id: int) -> Dict[str, Any]:
        return await self._request("DELETE", f"{self._path}/{product_id}", REMOVE_FAILED)

    async def clear(self) -> Dict[str, Any]:
        return await self._request("DELETE", self._path, CLEAR_FAILED)
