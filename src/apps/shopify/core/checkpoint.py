import re
import secrets
import time
from pathlib import Path
from typing import Any

from apps.shopify.config.constants import RUN_ID_PATTERN, RUNS_DIRNAME, WorkflowStage
from apps.shopify.config.settings import settings
from apps.shopify.models.product import CreatedProduct, GeneratedProduct, OrganizedBatch
from apps.shopify.utils.errors import ValidationError
from common.logger import logger
from common.save_to_json import load_from_json, save_to_json


def new_run_id() -> str:
    return f"workflow-{int(time.time() * 1000)}-{secrets.token_hex(4)}"


class WorkflowCheckpoint:
    """
    Stage outputs of one workflow run, persisted as JSON after every stage.

    A run started with an existing run_id picks up after the last completed
    stage instead of repeating generation or product creation.
    """

    def __init__(self, run_id: str | None = None, directory: str | Path | None = None):
        if run_id is not None and not re.fullmatch(RUN_ID_PATTERN, run_id):
            raise ValidationError(f"Invalid run id '{run_id}'")
        self.run_id = run_id or new_run_id()
        self.directory = Path(directory) if directory else settings.DATA_PATH / RUNS_DIRNAME
        self.path = self.directory / f"{self.run_id}.json"
        self.state: dict[str, Any] = load_from_json(self.path, default={}) or {}

        if self.state:
            logger.info(f"Loaded checkpoint {self.run_id} at stage {self.stage.name}")

    @property
    def exists(self) -> bool:
        return bool(self.state)

    @property
    def stage(self) -> WorkflowStage:
        return WorkflowStage(self.state.get("stage", WorkflowStage.NOT_STARTED))

    def completed(self, stage: WorkflowStage) -> bool:
        return self.stage >= stage

    @property
    def batch(self) -> OrganizedBatch:
        return OrganizedBatch.model_validate(self.state["batch"])

    @property
    def generated(self) -> list[GeneratedProduct]:
        return [GeneratedProduct.model_validate(item) for item in self.state.get("generated", [])]

    @property
    def created(self) -> list[CreatedProduct]:
        return [CreatedProduct.model_validate(item) for item in self.state.get("created", [])]

    @property
    def processed(self) -> int:
        """Generated products already handled by an interrupted create stage."""
        return int(self.state.get("processed", 0))

    @property
    def errors(self) -> list[str]:
        return list(self.state.get("errors", []))

    def save_stage(self, stage: WorkflowStage, **outputs: Any) -> bool:
        for key, value in outputs.items():
            if isinstance(value, list):
                value = [item.model_dump() if hasattr(item, "model_dump") else item for item in value]
            elif hasattr(value, "model_dump"):
                value = value.model_dump()
            self.state[key] = value

        self.state["run_id"] = self.run_id
        self.state["stage"] = int(stage)
        saved = save_to_json(self.state, self.path)
        if saved:
            logger.debug(f"Checkpoint {self.run_id} saved after {stage.name}")
        return saved

    def discard(self):
        """Remove the stored checkpoint once the run needs no resuming."""
        self.path.unlink(missing_ok=True)
        self.state = {}
        logger.debug(f"Checkpoint {self.run_id} removed")
