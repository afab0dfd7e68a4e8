import json
import logging
from collections.abc import Awaitable, Callable

import pydantic
from tenacity import (
    AsyncRetrying,
    before_sleep_log,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from apps.shopify.config.constants import (
    DEFAULT_FEATURES,
    DEFAULT_PRICE,
    DEFAULT_VARIANTS,
    GENERATION_MODALITIES,
    MAX_GENERATION_ATTEMPTS,
    RETRY_WAIT_MAX_SECONDS,
)
from apps.shopify.config.settings import settings
from apps.shopify.core.generate.prompts.generate_products_prompts import (
    REFERENCE_IMAGE_INSTRUCTION,
    REFERENCE_IMAGE_NOTE,
    RETRY_INSTRUCTION,
    USER_PROMPT,
)
from apps.shopify.models.product import GeneratedProduct, OrganizedBatch, ProductContent
from apps.shopify.utils.errors import GenerationError, PlaceholderImageDetected
from apps.shopify.utils.image_utils import build_placeholder_image, is_placeholder_image
from common.gateway_client import GatewayResult, extract_json_object, make_gateway_request, parse_gateway_response
from common.logger import logger


# (prompt, sample_image) -> gateway result
ProductGenerator = Callable[[str, str | None], Awaitable[GatewayResult]]


async def request_product_content(prompt: str, sample_image: str | None = None) -> GatewayResult:
    response = await make_gateway_request(
        prompt=prompt,
        api_key=settings.gateway_api_key,
        model=settings.IMAGE_MODEL,
        base_url=settings.AI_GATEWAY_URL,
        images=[sample_image] if sample_image else None,
        modalities=GENERATION_MODALITIES,
        timeout_seconds=settings.GENERATION_TIMEOUT_SECONDS,
    )
    return parse_gateway_response(response)


def build_product_prompt(category: str, attempt: int, sample_image: str | None = None) -> str:
    reference_instruction = REFERENCE_IMAGE_INSTRUCTION if sample_image else ""
    retry_instruction = RETRY_INSTRUCTION.format(attempt=attempt, max_attempts=MAX_GENERATION_ATTEMPTS) if attempt > 1 else ""

    prompt = USER_PROMPT.format(
        category=category,
        reference_instruction=reference_instruction,
        retry_instruction=retry_instruction,
    )
    if sample_image:
        prompt += REFERENCE_IMAGE_NOTE
    return prompt


def build_fallback_content(category: str, index: int, text: str = "") -> ProductContent:
    return ProductContent(
        title=f"Premium {category} {index + 1}",
        description=text.strip() or f"A high-quality {category} with excellent features and modern design.",
        price=DEFAULT_PRICE,
        variants=DEFAULT_VARIANTS,
        features=DEFAULT_FEATURES,
    )


def build_fallback_product(category: str, index: int) -> GeneratedProduct:
    content = build_fallback_content(category, index)
    return GeneratedProduct(**content.model_dump(), image=build_placeholder_image(category), category=category)


def parse_product_content(text: str, category: str, index: int) -> ProductContent:
    json_str = extract_json_object(text or "")
    if json_str is None:
        logger.warning(f"No JSON object in response for {category} product {index + 1}, using fallback content")
        return build_fallback_content(category, index, text or "")

    try:
        return ProductContent.model_validate(json.loads(json_str))
    except (json.JSONDecodeError, pydantic.ValidationError) as e:
        logger.warning(f"Failed to parse JSON for {category} product {index + 1}: {e}")
        return build_fallback_content(category, index, text or "")
    except Exception as e:
        # Model output is untrusted; any shape it takes must end in the fallback payload
        logger.warning(f"Unusable JSON for {category} product {index + 1} ({type(e).__name__}: {e})")
        return build_fallback_content(category, index, text or "")


def select_product_image(result: GatewayResult, category: str) -> str:
    for file in result.files:
        if file.media_type and file.media_type.startswith("image/"):
            data_uri = file.to_data_uri()
            if data_uri:
                return data_uri
    return build_placeholder_image(category)


async def generate_product_attempt(
    category: str,
    index: int,
    attempt: int,
    sample_image: str | None,
    generator: ProductGenerator,
) -> GeneratedProduct:
    prompt = build_product_prompt(category, attempt, sample_image)

    try:
        result = await generator(prompt, sample_image)
    except GenerationError:
        raise
    except Exception as e:
        raise GenerationError(f"Generation request failed for {category} product {index + 1}: {e}") from e

    content = parse_product_content(result.text, category, index)
    image = select_product_image(result, category)
    product = GeneratedProduct(**content.model_dump(), image=image, category=category)

    if is_placeholder_image(image):
        if attempt < MAX_GENERATION_ATTEMPTS:
            raise PlaceholderImageDetected(f"Placeholder image for {category} product {index + 1} on attempt {attempt}", product)
        logger.warning(f"Placeholder image still detected after {MAX_GENERATION_ATTEMPTS} attempts for {category} product {index + 1}, using it anyway")

    return product


async def generate_product(
    category: str,
    index: int,
    sample_image: str | None = None,
    generator: ProductGenerator | None = None,
) -> GeneratedProduct:
    """
    Generate one product, retrying placeholder images and failed requests.

    Never raises for generation failures: after the last failed attempt a
    synthetic product with a placeholder image is returned instead.
    """
    generator = generator or request_product_content

    try:
        async for attempt in AsyncRetrying(
            stop=stop_after_attempt(MAX_GENERATION_ATTEMPTS),
            wait=wait_exponential(multiplier=settings.GENERATION_RETRY_MULTIPLIER, max=RETRY_WAIT_MAX_SECONDS),
            retry=retry_if_exception_type((GenerationError, PlaceholderImageDetected)),
            before_sleep=before_sleep_log(logger, logging.WARNING),
            reraise=True,
        ):
            with attempt:
                return await generate_product_attempt(category, index, attempt.retry_state.attempt_number, sample_image, generator)
    except GenerationError as e:
        logger.error(f"Failed to generate product for {category} after {MAX_GENERATION_ATTEMPTS} attempts: {e}")

    return build_fallback_product(category, index)


async def generate_products(
    batch: OrganizedBatch,
    sample_image: str | None = None,
    generator: ProductGenerator | None = None,
) -> list[GeneratedProduct]:
    total = batch.total_count
    logger.info(f"🎯 Generating {total} products across {len(batch.categories)} categories")
    if sample_image:
        logger.info("Using provided sample image as style reference")

    products: list[GeneratedProduct] = []
    for request in batch.categories:
        for index in range(request.count):
            logger.info(f"[{len(products) + 1}/{total}] Generating {request.category} product {index + 1}/{request.count}")
            product = await generate_product(request.category, index, sample_image, generator)
            products.append(product)

    logger.succeed(f"Generated {len(products)}/{total} products")
    return products
