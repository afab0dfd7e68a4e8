"""
Async Shopify Admin REST client using aiohttp.

Authenticates with a private-app access token and covers the two calls the
product workflow needs: creating a product and attaching an image to it.
"""

from __future__ import annotations

import json
import re
from typing import Any

import aiohttp

from apps.shopify.config.settings import settings
from apps.shopify.utils.errors import ConfigurationError


class ShopifyAPIError(Exception):
    """Base exception for Shopify API errors."""

    def __init__(self, message: str, status_code: int | None = None, response_data: dict | None = None):
        super().__init__(message)
        self.status_code = status_code
        self.response_data = response_data


class ShopifyAuthError(ShopifyAPIError):
    """Access token rejected (401)."""

    pass


class ShopifyValidationError(ShopifyAPIError):
    """Payload rejected (422), usually duplicate variant options or missing fields."""

    pass


def normalize_store_domain(domain: str) -> str:
    return re.sub(r"^https?://", "", domain.strip()).rstrip("/")


class ShopifyClient:
    """
    Minimal async Shopify Admin API client.

    Credentials default to SHOPIFY_STORE_DOMAIN / SHOPIFY_ACCESS_TOKEN and are
    only checked by ensure_configured(), so a client can be built before the
    caller decides whether missing credentials are fatal.
    """

    def __init__(
        self,
        store_domain: str | None = None,
        access_token: str | None = None,
        api_version: str | None = None,
        base_url: str | None = None,
        request_timeout_seconds: float | None = None,
    ) -> None:
        self.store_domain = normalize_store_domain(store_domain if store_domain is not None else settings.SHOPIFY_STORE_DOMAIN)
        self.access_token = (access_token if access_token is not None else settings.SHOPIFY_ACCESS_TOKEN).strip()
        self.api_version = api_version or settings.SHOPIFY_API_VERSION
        self._base_url = base_url
        self._session: aiohttp.ClientSession | None = None
        self._timeout = aiohttp.ClientTimeout(total=request_timeout_seconds or settings.SHOPIFY_REQUEST_TIMEOUT_SECONDS)

    @property
    def base_url(self) -> str:
        if self._base_url:
            return self._base_url.rstrip("/")
        return f"https://{self.store_domain}/admin/api/{self.api_version}"

    def is_configured(self) -> bool:
        return bool(self.store_domain and self.access_token)

    def ensure_configured(self) -> None:
        if not self.is_configured():
            raise ConfigurationError(
                "Shopify credentials not configured. Please set SHOPIFY_STORE_DOMAIN and SHOPIFY_ACCESS_TOKEN environment variables. "
                f"Found SHOPIFY_STORE_DOMAIN: {'yes' if self.store_domain else 'no'}, "
                f"Found SHOPIFY_ACCESS_TOKEN: {'yes' if self.access_token else 'no'}"
            )

    async def __aenter__(self) -> ShopifyClient:
        await self.setup()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    async def setup(self) -> None:
        if self._session is None:
            self._session = aiohttp.ClientSession(
                timeout=self._timeout,
                headers={
                    "Accept": "application/json",
                    "User-Agent": "Storefront-Generator/1.0",
                },
            )

    async def close(self) -> None:
        if self._session:
            await self._session.close()
            self._session = None

    async def _request(
        self,
        method: str,
        endpoint: str,
        *,
        json_body: dict[str, Any] | None = None,
        expected_statuses: tuple[int, ...] = (200, 201),
    ) -> dict[str, Any]:
        if not self._session:
            await self.setup()

        # Session is guaranteed to exist after setup()
        assert self._session is not None

        url = f"{self.base_url}/{endpoint.lstrip('/')}"
        headers = {
            "Content-Type": "application/json",
            "X-Shopify-Access-Token": self.access_token,
        }

        try:
            async with self._session.request(method, url, json=json_body, headers=headers) as response:
                text = await response.text()
                try:
                    payload = json.loads(text) if text else {}
                except json.JSONDecodeError:
                    payload = {"message": text}

                if response.status in expected_statuses:
                    if isinstance(payload, dict):
                        return payload
                    return {"data": payload}
                elif response.status == 401:
                    raise ShopifyAuthError(f"Shopify authentication failed (401): {text}", response.status, payload)
                elif response.status == 422:
                    raise ShopifyValidationError(f"Shopify validation error (422): {text}", response.status, payload)
                else:
                    raise ShopifyAPIError(f"Shopify API error: {response.status} - {text}", response.status, payload)
        except aiohttp.ClientError as e:
            raise ShopifyAPIError(f"Network error: {e!s}") from e

    async def create_product(self, payload: dict[str, Any]) -> dict[str, Any]:
        return await self._request("POST", "/products.json", json_body=payload)

    async def upload_product_image(self, product_id: str, attachment: str, filename: str) -> dict[str, Any]:
        body = {"image": {"attachment": attachment, "filename": filename}}
        return await self._request("POST", f"/products/{product_id}/images.json", json_body=body)
