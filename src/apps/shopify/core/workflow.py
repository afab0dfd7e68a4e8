from collections.abc import Mapping, Sequence
from typing import Any

from apps.shopify.config.constants import WorkflowStage
from apps.shopify.core.checkpoint import WorkflowCheckpoint
from apps.shopify.core.generate.generate_products import ProductGenerator, generate_products
from apps.shopify.core.images import upload_product_images
from apps.shopify.core.organize_input import organize_input
from apps.shopify.core.products import create_shopify_products
from apps.shopify.models.product import CategoryRequest, CreatedProduct, GeneratedProduct, OrganizedBatch, WorkflowResult
from apps.shopify.utils.shopify import ShopifyClient
from common.logger import logger


def _stage_error(step: int, error: Exception) -> str:
    return f"Step {step} failed: {error}"


async def run_product_workflow(
    categories: Sequence[Mapping[str, Any] | CategoryRequest],
    sample_image: str | None = None,
    *,
    generator: ProductGenerator | None = None,
    client: ShopifyClient | None = None,
    checkpoint: WorkflowCheckpoint | None = None,
) -> WorkflowResult:
    """
    Run Normalize -> Generate -> Create -> Publish and summarize the outcome.

    Never raises: stage failures are reported in WorkflowResult.errors. Image
    upload failures are warnings and leave success True. With a checkpoint,
    stages already completed for that run are loaded instead of re-run.
    """
    errors: list[str] = []
    client = client or ShopifyClient()
    logger.info(f"🚀 Starting product generator workflow (sample image: {'yes' if sample_image else 'no'})")

    # Step 1: organize input
    if checkpoint and checkpoint.completed(WorkflowStage.NORMALIZE):
        batch: OrganizedBatch = checkpoint.batch
        logger.info(f"Step 1 restored from checkpoint {checkpoint.run_id}")
    else:
        try:
            batch = organize_input(categories)
        except Exception as e:
            errors.append(_stage_error(1, e))
            logger.error(errors[-1])
            return WorkflowResult(success=False, total_requested=0, created=[], errors=errors)
        if checkpoint:
            checkpoint.save_stage(WorkflowStage.NORMALIZE, batch=batch)
    logger.info(f"Step 1 complete. Total products to generate: {batch.total_count}")

    # Step 2: generate product content and images
    if checkpoint and checkpoint.completed(WorkflowStage.GENERATE):
        generated: list[GeneratedProduct] = checkpoint.generated
        logger.info(f"Step 2 restored {len(generated)} generated products from checkpoint")
    else:
        try:
            generated = await generate_products(batch, sample_image, generator)
        except Exception as e:
            errors.append(_stage_error(2, e))
            logger.error(errors[-1])
            return WorkflowResult(success=False, total_requested=batch.total_count, created=[], errors=errors)
        if checkpoint:
            checkpoint.save_stage(WorkflowStage.GENERATE, generated=generated)
    logger.info(f"Step 2 complete. Generated {len(generated)} products")

    # Step 3: create Shopify products without images
    if checkpoint and checkpoint.completed(WorkflowStage.CREATE):
        created: list[CreatedProduct] = checkpoint.created
        logger.info(f"Step 3 restored {len(created)} created products from checkpoint")
    else:
        # An interrupted create stage leaves its partial records behind; only the rest is sent again
        created = checkpoint.created if checkpoint else []
        processed = checkpoint.processed if checkpoint else 0
        if processed:
            logger.info(f"Step 3 resuming after {processed} products ({len(created)} already created)")
        try:
            created += await create_shopify_products(generated[processed:], client)
        except Exception as e:
            created += list(getattr(e, "created", []))
            processed += getattr(e, "processed", 0)
            errors.append(_stage_error(3, e))
            logger.error(errors[-1])
            if checkpoint:
                checkpoint.save_stage(WorkflowStage.GENERATE, created=created, processed=processed)
            return WorkflowResult(success=len(created) > 0, total_requested=batch.total_count, created=created, errors=errors)
        if checkpoint:
            checkpoint.save_stage(WorkflowStage.CREATE, created=created, processed=len(generated))
    logger.info(f"Step 3 complete. Created {len(created)} Shopify products")

    # Step 4: upload images; failures here never undo created products
    if checkpoint and checkpoint.completed(WorkflowStage.PUBLISH):
        errors.extend(checkpoint.errors)
        logger.info("Step 4 already completed for this run")
    else:
        try:
            await upload_product_images(created, client)
            logger.info("Step 4 complete. Images uploaded")
        except Exception as e:
            errors.append(_stage_error(4, e))
            logger.warning(errors[-1])
        if checkpoint:
            checkpoint.save_stage(WorkflowStage.PUBLISH, errors=errors)

    logger.succeed(f"Workflow complete. Requested: {batch.total_count}, Created: {len(created)}")
    return WorkflowResult(
        success=True,
        total_requested=batch.total_count,
        created=created,
        errors=errors or None,
    )
