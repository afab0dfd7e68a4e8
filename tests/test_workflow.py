import asyncio

import pytest
from conftest import FakeGenerator, FakeShopifyClient

from apps.shopify.config.constants import WorkflowStage
from apps.shopify.core.checkpoint import WorkflowCheckpoint
from apps.shopify.core.organize_input import organize_input
from apps.shopify.core.workflow import run_product_workflow
from apps.shopify.utils.errors import ValidationError


CHAIRS = [{"category": "Chairs", "count": 2}]


def run(categories, **kwargs):
    kwargs.setdefault("generator", FakeGenerator("photo"))
    kwargs.setdefault("client", FakeShopifyClient())
    return asyncio.run(run_product_workflow(categories, **kwargs))


def test_all_stages_succeed():
    client = FakeShopifyClient()

    result = run(CHAIRS, client=client)

    assert result.success is True
    assert result.total_requested == 2
    assert len(result.created) == 2
    assert result.errors is None
    assert len(client.image_requests) == 2
    assert "errors" not in result.to_response()


def test_per_item_create_failure_is_not_reported_as_error():
    result = run(CHAIRS, client=FakeShopifyClient(fail_create_calls={2}))

    assert result.success is True
    assert result.total_requested == 2
    assert len(result.created) == 1
    assert result.errors is None


def test_empty_input_fails_before_any_stage():
    generator = FakeGenerator("photo")
    client = FakeShopifyClient()

    with pytest.raises(ValidationError):
        organize_input([])

    result = run([], generator=generator, client=client)

    assert result.success is False
    assert result.total_requested == 0
    assert result.created == []
    assert result.errors == ["Step 1 failed: Categories array is required and cannot be empty"]
    assert generator.prompts == []
    assert client.requests == []


def test_image_upload_failure_is_a_warning():
    client = FakeShopifyClient(fail_upload_ids={"1001"})

    result = run(CHAIRS, client=client)

    assert result.success is True
    assert [p.id for p in result.created] == ["1001", "1002"]
    assert len(result.errors) == 1
    assert result.errors[0].startswith("Step 4 failed:")
    assert "1001" in result.errors[0]


def test_missing_credentials_stop_at_create_stage():
    result = run(CHAIRS, client=FakeShopifyClient(store_domain="", access_token=""))

    assert result.success is False
    assert result.total_requested == 2
    assert result.created == []
    assert result.errors[0].startswith("Step 3 failed: Shopify credentials not configured")


def test_unexpected_create_error_keeps_partial_success():
    result = run([{"category": "Chairs", "count": 3}], client=FakeShopifyClient(unexpected_error_calls={2}))

    assert result.success is True
    assert len(result.created) == 1
    assert result.errors[0].startswith("Step 3 failed:")


def test_generation_failures_still_create_products():
    client = FakeShopifyClient()

    result = run(CHAIRS, generator=FakeGenerator("error"), client=client)

    assert result.success is True
    assert [p.title for p in result.created] == ["Premium Chairs 1", "Premium Chairs 2"]
    assert all(body["image"]["filename"].endswith(".png") for _, _, body in client.image_requests)


def test_response_uses_external_field_names():
    response = run(CHAIRS).to_response()

    assert set(response) == {"success", "totalRequested", "createdProducts"}
    assert set(response["createdProducts"][0]) == {"id", "title", "image"}


def test_checkpoint_records_every_stage(tmp_path):
    checkpoint = WorkflowCheckpoint("run-1", directory=tmp_path)

    run(CHAIRS, checkpoint=checkpoint)

    reloaded = WorkflowCheckpoint("run-1", directory=tmp_path)
    assert reloaded.stage == WorkflowStage.PUBLISH
    assert reloaded.batch.total_count == 2
    assert len(reloaded.generated) == 2
    assert [p.id for p in reloaded.created] == ["1001", "1002"]


def test_resume_skips_completed_stages(tmp_path):
    failing_client = FakeShopifyClient(store_domain="", access_token="")
    first = run(CHAIRS, client=failing_client, checkpoint=WorkflowCheckpoint("run-2", directory=tmp_path))
    assert first.success is False

    generator = FakeGenerator("photo")
    client = FakeShopifyClient()
    resumed = run([], generator=generator, client=client, checkpoint=WorkflowCheckpoint("run-2", directory=tmp_path))

    assert resumed.success is True
    assert resumed.total_requested == 2
    assert len(resumed.created) == 2
    assert generator.prompts == []
    assert client.create_calls == 2


def test_finished_run_returns_stored_result(tmp_path):
    run(CHAIRS, client=FakeShopifyClient(fail_upload_ids={"1002"}), checkpoint=WorkflowCheckpoint("run-3", directory=tmp_path))

    client = FakeShopifyClient()
    again = run([], client=client, checkpoint=WorkflowCheckpoint("run-3", directory=tmp_path))

    assert again.success is True
    assert len(again.created) == 2
    assert again.errors[0].startswith("Step 4 failed:")
    assert client.requests == []


def test_resume_after_partial_create_only_sends_remaining_products(tmp_path):
    first = run(CHAIRS, client=FakeShopifyClient(unexpected_error_calls={2}), checkpoint=WorkflowCheckpoint("run-4", directory=tmp_path))
    assert [p.title for p in first.created] == ["Product 1"]

    saved = WorkflowCheckpoint("run-4", directory=tmp_path)
    assert saved.stage == WorkflowStage.GENERATE
    assert saved.processed == 1
    assert [p.id for p in saved.created] == ["1001"]

    client = FakeShopifyClient()
    resumed = run([], client=client, checkpoint=WorkflowCheckpoint("run-4", directory=tmp_path))

    assert resumed.success is True
    assert resumed.errors is None
    assert client.create_calls == 1
    assert [p.title for p in resumed.created] == ["Product 1", "Product 2"]
    assert len(client.image_requests) == 2
