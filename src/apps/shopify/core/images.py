import time

from apps.shopify.models.product import CreatedProduct
from apps.shopify.utils.errors import ImageUploadError
from apps.shopify.utils.image_utils import image_extension, strip_data_uri_prefix
from apps.shopify.utils.shopify import ShopifyAPIError, ShopifyClient
from common.logger import logger


def build_image_filename(product_id: str, extension: str) -> str:
    return f"product-{product_id}-{int(time.time() * 1000)}.{extension}"


async def upload_product_image(client: ShopifyClient, product: CreatedProduct) -> bool:
    """Attach one product's image. Returns False when there was nothing to upload."""
    if not product.image:
        return False

    attachment = strip_data_uri_prefix(product.image)
    if not attachment:
        return False

    filename = build_image_filename(product.id, image_extension(product.image))
    await client.upload_product_image(product.id, attachment, filename)
    return True


async def upload_product_images(products: list[CreatedProduct], client: ShopifyClient | None = None) -> None:
    """
    Attach each created product's generated image.

    Every product is attempted even when earlier uploads fail. Failures are
    collected and raised together as ImageUploadError once all uploads ran,
    so the created products stay untouched.
    """
    client = client or ShopifyClient()
    client.ensure_configured()

    total = len(products)
    uploaded = 0
    failed_ids: list[str] = []

    async with client:
        for idx, product in enumerate(products, 1):
            try:
                if await upload_product_image(client, product):
                    uploaded += 1
                    logger.info(f"[{idx}/{total}] ✓ Uploaded image for product {product.id}")
                else:
                    logger.debug(f"[{idx}/{total}] No image data for product {product.id}, skipping")
            except ShopifyAPIError as e:
                failed_ids.append(product.id)
                logger.warning(f"[{idx}/{total}] ✗ Image upload failed for product {product.id}: {e}")
            except Exception as e:
                failed_ids.append(product.id)
                logger.warning(f"[{idx}/{total}] ✗ Unexpected error uploading image for product {product.id}: {e}")

    logger.info(f"Image upload completed - Total: {total}, Uploaded: {uploaded}, Failed: {len(failed_ids)}")

    if failed_ids:
        raise ImageUploadError(failed_ids, total)
