import html
from typing import Any

from apps.shopify.config.constants import DEFAULT_VARIANT_OPTION, DEFAULT_VARIANT_PRICE, VARIANT_OPTION_NAME
from apps.shopify.config.settings import settings
from apps.shopify.models.product import CreatedProduct, GeneratedProduct, ProductVariant
from apps.shopify.utils.errors import ProductCreationError
from apps.shopify.utils.shopify import ShopifyAPIError, ShopifyAuthError, ShopifyClient, ShopifyValidationError
from common.logger import logger


def description_to_html(description: str) -> str:
    escaped = html.escape(description)
    return "<p>" + escaped.replace("\n", "</p><p>") + "</p>"


def unique_option_values(variants: list[ProductVariant]) -> list[str]:
    """Variant option1 values, suffixed with their position when they collide."""
    seen: set[str] = set()
    values = []
    for index, variant in enumerate(variants):
        value = variant.title or f"Option {index + 1}"
        suffix = index + 1
        candidate = value
        while candidate in seen:
            candidate = f"{value} {suffix}"
            suffix += 1
        seen.add(candidate)
        values.append(candidate)
    return values


def build_variants(product: GeneratedProduct) -> list[dict[str, Any]]:
    if not product.variants:
        return [
            {
                "option1": DEFAULT_VARIANT_OPTION,
                "price": product.price or DEFAULT_VARIANT_PRICE,
                "position": 1,
                # null allows unlimited inventory
                "inventory_management": None,
            }
        ]

    return [
        {
            "option1": option_value,
            "price": variant.price,
            "position": position,
            "inventory_management": None,
        }
        for position, (variant, option_value) in enumerate(zip(product.variants, unique_option_values(product.variants)), 1)
    ]


def prepare_product_payload(product: GeneratedProduct) -> dict[str, Any]:
    """Shopify product payload; images are uploaded separately."""
    payload: dict[str, Any] = {
        "title": product.title,
        "body_html": description_to_html(product.description),
        "vendor": settings.SHOPIFY_VENDOR,
        "product_type": product.category,
        "variants": build_variants(product),
    }
    if product.variants:
        payload["options"] = [{"name": VARIANT_OPTION_NAME}]
    return {"product": payload}


async def create_product(client: ShopifyClient, product: GeneratedProduct) -> CreatedProduct:
    response = await client.create_product(prepare_product_payload(product))
    created = response.get("product") or {}
    product_id = created.get("id")
    if not product_id:
        raise ShopifyAPIError("Product created but no ID returned from Shopify", response_data=response)

    return CreatedProduct(id=str(product_id), title=created.get("title") or product.title, image=product.image)


async def seed_products_internal(client: ShopifyClient, products: list[GeneratedProduct]) -> list[CreatedProduct]:
    total = len(products)
    created: list[CreatedProduct] = []

    for idx, product in enumerate(products, 1):
        logger.info(f"[{idx}/{total}] Creating product: '{product.title}'")
        try:
            record = await create_product(client, product)
        except ShopifyAuthError as e:
            logger.error(f"[{idx}/{total}] ✗ Authentication failed for '{product.title}', check SHOPIFY_ACCESS_TOKEN has write_products scope: {e}")
            continue
        except ShopifyValidationError as e:
            logger.error(f"[{idx}/{total}] ✗ Validation failed for '{product.title}': {e}")
            continue
        except ShopifyAPIError as e:
            logger.error(f"[{idx}/{total}] ✗ Failed to create '{product.title}': {e}")
            continue
        except Exception as e:
            raise ProductCreationError(f"Unexpected error while creating '{product.title}': {e}", created=created, processed=idx - 1) from e

        created.append(record)
        logger.info(f"[{idx}/{total}] ✓ Created product {record.id}: '{record.title}'")

    return created


async def create_shopify_products(products: list[GeneratedProduct], client: ShopifyClient | None = None) -> list[CreatedProduct]:
    """
    Create one Shopify product per generated product, without images.

    Raises ConfigurationError before any request when credentials are missing.
    Products whose create call fails are skipped; the rest continue.
    """
    client = client or ShopifyClient()
    client.ensure_configured()

    logger.info(f"Creating {len(products)} Shopify products on {client.store_domain}")
    async with client:
        created = await seed_products_internal(client, products)

    total = len(products)
    failed = total - len(created)
    rate = (len(created) / total * 100) if total else 0
    logger.info(f"Product creation completed - Total: {total}, Successful: {len(created)}, Failed: {failed}, Success Rate: {rate:.1f}%")
    return created
