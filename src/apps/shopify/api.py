import time
from typing import Any

from fastapi import Body, FastAPI
from fastapi.responses import JSONResponse

from apps.shopify.config.constants import MAX_CATEGORIES
from apps.shopify.core.checkpoint import WorkflowCheckpoint
from apps.shopify.core.workflow import run_product_workflow
from apps.shopify.utils.errors import ValidationError
from common.logger import logger


app = FastAPI(title="Storefront Product Generator")


def _bad_request(message: str) -> JSONResponse:
    return JSONResponse(status_code=400, content={"error": message})


@app.get("/health")
def health():
    return {"status": "ok"}


@app.post("/api/workflow")
async def trigger_workflow(body: dict[str, Any] = Body(...)):
    categories = body.get("categories")
    sample_image = body.get("sampleImage") or None
    resume_id = body.get("workflowId")

    if resume_id is not None:
        if categories is not None:
            return _bad_request("categories cannot be combined with workflowId; the stored run is resumed as it was")
        try:
            checkpoint = WorkflowCheckpoint(str(resume_id))
        except ValidationError as e:
            return _bad_request(str(e))
        if not checkpoint.exists:
            return JSONResponse(status_code=404, content={"error": f"No workflow found with id '{resume_id}'"})
        categories = []
    else:
        if categories is None or not isinstance(categories, list):
            return _bad_request("Categories array is required")
        if not categories:
            return _bad_request("At least one category is required")
        if len(categories) > MAX_CATEGORIES:
            return _bad_request(f"Maximum {MAX_CATEGORIES} categories allowed")
        checkpoint = WorkflowCheckpoint()

    workflow_id = checkpoint.run_id
    if resume_id:
        logger.info(f"[Workflow API] Resuming workflow {workflow_id} from stage {checkpoint.stage.name}")
    else:
        logger.info(f"[Workflow API] Starting workflow {workflow_id} with {len(categories)} categories")
    started = time.monotonic()

    try:
        result = await run_product_workflow(categories, sample_image, checkpoint=checkpoint)
    except Exception as e:
        logger.error(f"[Workflow API] Workflow {workflow_id} failed: {e}")
        return JSONResponse(status_code=500, content={"error": str(e) or "Internal server error"})

    logger.info(
        f"[Workflow API] Workflow {workflow_id} completed in {time.monotonic() - started:.2f}s - "
        f"success: {result.success}, created: {len(result.created)}/{result.total_requested}"
    )
    if result.errors:
        logger.warning(f"[Workflow API] Errors: {result.errors}")
    else:
        # clean runs have nothing left to resume
        checkpoint.discard()

    return {
        "workflowId": workflow_id,
        "status": "completed" if result.success else "failed",
        "result": result.to_response(),
    }
