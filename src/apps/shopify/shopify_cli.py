import asyncio
import json

import click

from apps.shopify.config.settings import settings
from apps.shopify.core.checkpoint import WorkflowCheckpoint
from apps.shopify.core.workflow import run_product_workflow
from apps.shopify.utils.errors import ValidationError
from common.img_to_b64 import img_to_data_uri
from common.logger import logger


def parse_category(ctx, param, values) -> list[dict]:
    categories = []
    for value in values:
        name, sep, count = value.rpartition("=")
        if not sep or not name.strip():
            raise click.BadParameter(f"expected NAME=COUNT, got '{value}'", ctx=ctx, param=param)
        try:
            categories.append({"category": name, "count": int(count)})
        except ValueError:
            raise click.BadParameter(f"count must be an integer in '{value}'", ctx=ctx, param=param) from None
    return categories


@click.group()
def shopify_cli():
    """Shopify Product Generator CLI - Generate AI products and publish them to Shopify"""
    logger.set_level(settings.LOG_LEVEL)


@shopify_cli.command()
@click.option("-c", "--category", "categories", multiple=True, callback=parse_category, help="Category and product count as NAME=COUNT (repeatable)")
@click.option("--sample-image", type=click.Path(exists=True, dir_okay=False), help="Reference product image used as a style guide")
@click.option("--resume", "run_id", help="Resume a previous run from its checkpoint")
def generate(categories: list[dict], sample_image: str | None, run_id: str | None):
    """Generate products with AI and create them in Shopify"""
    if run_id is not None and categories:
        raise click.UsageError("--category cannot be combined with --resume; the run continues with its stored categories")
    try:
        checkpoint = WorkflowCheckpoint(run_id)
    except ValidationError as e:
        raise click.BadParameter(str(e), param_hint="--resume") from None
    if run_id and not checkpoint.exists:
        raise click.BadParameter(f"no checkpoint found for run '{run_id}'", param_hint="--resume")
    if not categories and not checkpoint.exists:
        raise click.UsageError("At least one --category NAME=COUNT is required")

    image = img_to_data_uri(sample_image) if sample_image else None

    logger.info(f"🎲 Starting product generation run {checkpoint.run_id}")
    result = asyncio.run(run_product_workflow(categories, image, checkpoint=checkpoint))

    if result.success:
        logger.succeed(f"✅ Created {len(result.created)}/{result.total_requested} products (run {checkpoint.run_id})")
    else:
        logger.fail(f"❌ Workflow failed (run {checkpoint.run_id})")

    response = result.to_response()
    # Image payloads are large; the CLI summary only needs ids and titles
    response["createdProducts"] = [{"id": p["id"], "title": p["title"]} for p in response["createdProducts"]]
    click.echo(json.dumps(response, indent=2))

    if not result.success:
        raise SystemExit(1)


@shopify_cli.command()
@click.option("--host", default="127.0.0.1", help="Interface to bind")
@click.option("--port", default=8000, type=int, help="Port to listen on")
def serve(host: str, port: int):
    """Serve the workflow HTTP API"""
    import uvicorn

    logger.info(f"🚀 Serving workflow API on http://{host}:{port}")
    uvicorn.run("apps.shopify.api:app", host=host, port=port)


if __name__ == "__main__":
    shopify_cli()
