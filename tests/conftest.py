import base64
import json
import random

import pytest

from apps.shopify.config.settings import settings
from apps.shopify.utils.shopify import ShopifyAPIError, ShopifyClient, ShopifyValidationError
from common.gateway_client import GatewayResult, GeneratedFile


def photo_bytes(seed: int = 0, size: int = 4096) -> bytes:
    return random.Random(seed).randbytes(size)


def photo_data_uri(seed: int = 0) -> str:
    return f"data:image/png;base64,{base64.b64encode(photo_bytes(seed)).decode('ascii')}"


def product_json(title: str = "Walnut Lounge Chair", price: str = "249.00") -> str:
    return json.dumps(
        {
            "title": title,
            "description": "Solid walnut frame.\nHand-stitched leather seat.",
            "price": price,
            "variants": [{"title": "Walnut / Black", "price": price}, {"title": "Oak / Tan", "price": "229.00"}],
            "features": ["Solid walnut", "Leather seat", "Easy assembly"],
        }
    )


class FakeGenerator:
    """
    Stands in for the AI gateway call.

    outcomes is consumed one per call: "photo", "placeholder", "no_image",
    "bad_json" or "error". Once exhausted the last outcome repeats.
    """

    def __init__(self, *outcomes: str):
        self.outcomes = list(outcomes) or ["photo"]
        self.prompts: list[str] = []
        self.sample_images: list[str | None] = []

    async def __call__(self, prompt: str, sample_image: str | None = None) -> GatewayResult:
        self.prompts.append(prompt)
        self.sample_images.append(sample_image)
        call = len(self.prompts)
        outcome = self.outcomes[min(call, len(self.outcomes)) - 1]

        if outcome == "error":
            raise ConnectionError("gateway unreachable")
        if outcome == "placeholder":
            flat = base64.b64encode(bytes([200]) * 2000).decode("ascii")
            return GatewayResult(text=product_json(), files=[GeneratedFile(media_type="image/png", base64=flat)])
        if outcome == "no_image":
            return GatewayResult(text=product_json(), files=[])
        if outcome == "bad_json":
            return GatewayResult(text="Here is a great chair!", files=[GeneratedFile(media_type="image/jpeg", data=photo_bytes(call))])
        return GatewayResult(
            text=f"Sure! ```json\n{product_json(title=f'Product {call}')}\n```",
            files=[GeneratedFile(media_type="text/plain", base64="aGVsbG8="), GeneratedFile(media_type="image/png", data=photo_bytes(call))],
        )


class FakeShopifyClient(ShopifyClient):
    """ShopifyClient whose HTTP layer is replaced by canned Admin API responses."""

    def __init__(self, fail_create_calls=(), fail_upload_ids=(), missing_id_calls=(), unexpected_error_calls=(), **kwargs):
        kwargs.setdefault("store_domain", "https://test-store.myshopify.com/")
        kwargs.setdefault("access_token", "shpat_test")
        super().__init__(**kwargs)
        self.fail_create_calls = set(fail_create_calls)
        self.fail_upload_ids = set(fail_upload_ids)
        self.missing_id_calls = set(missing_id_calls)
        self.unexpected_error_calls = set(unexpected_error_calls)
        self.requests: list[tuple[str, str, dict | None]] = []
        self.create_calls = 0
        self.next_id = 1000

    async def _request(self, method, endpoint, *, json_body=None, expected_statuses=(200, 201)):
        self.requests.append((method, endpoint, json_body))

        if endpoint == "/products.json":
            self.create_calls += 1
            if self.create_calls in self.unexpected_error_calls:
                raise RuntimeError("connection pool exhausted")
            if self.create_calls in self.fail_create_calls:
                raise ShopifyValidationError("Shopify validation error (422)", 422, {"errors": {"title": ["taken"]}})
            if self.create_calls in self.missing_id_calls:
                return {"product": {"title": json_body["product"]["title"]}}
            self.next_id += 1
            return {"product": {"id": self.next_id, "title": json_body["product"]["title"]}}

        if endpoint.endswith("/images.json"):
            product_id = endpoint.split("/")[2]
            if product_id in self.fail_upload_ids:
                raise ShopifyAPIError("Shopify API error: 500", 500, {})
            return {"image": {"id": 1, "product_id": int(product_id)}}

        raise AssertionError(f"unexpected request {method} {endpoint}")

    @property
    def image_requests(self):
        return [r for r in self.requests if r[1].endswith("/images.json")]


@pytest.fixture(autouse=True)
def fast_retries(monkeypatch, tmp_path):
    monkeypatch.setattr(settings, "GENERATION_RETRY_MULTIPLIER", 0.0)
    monkeypatch.setattr(settings, "DATA_PATH", tmp_path)
