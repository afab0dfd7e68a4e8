import pytest

from apps.shopify.core.organize_input import organize_input
from apps.shopify.models.product import CategoryRequest
from apps.shopify.utils.errors import ValidationError


def test_organizes_and_trims_categories():
    batch = organize_input([{"category": "  Chairs ", "count": 2}, {"category": "Lamps", "count": 5}])

    assert [c.category for c in batch.categories] == ["Chairs", "Lamps"]
    assert batch.total_count == 7
    assert batch.total_count == sum(c.count for c in batch.categories)


def test_filters_invalid_entries_and_keeps_order():
    batch = organize_input(
        [
            {"category": "Rugs", "count": 3},
            {"category": "", "count": 2},
            {"category": "Tables", "count": 0},
            {"count": 4},
            {"category": "Sofas", "count": 101},
            {"category": "Beds", "count": True},
            {"category": "Desks", "count": 2.5},
            {"category": "Shelves", "count": 1},
        ]
    )

    assert [c.category for c in batch.categories] == ["Rugs", "Shelves"]
    assert batch.total_count == 4


def test_accepts_category_request_models():
    batch = organize_input([CategoryRequest(category="Mugs", count=100)])

    assert batch.total_count == 100


def test_boundaries_are_inclusive():
    batch = organize_input([{"category": f"Category {i}", "count": 1} for i in range(9)] + [{"category": "Big", "count": 100}])

    assert len(batch.categories) == 10
    assert batch.total_count == 109


@pytest.mark.parametrize(
    "categories",
    [
        [],
        [{"category": f"Category {i}", "count": 1} for i in range(11)],
        [{"category": "Chairs", "count": 0}],
        [{"category": "Chairs", "count": 101}],
        [{"category": "   ", "count": 2}],
        [{"category": None, "count": 2}],
        ["Chairs"],
    ],
    ids=["empty", "eleven", "count-zero", "count-101", "blank-name", "missing-name", "not-a-mapping"],
)
def test_rejects_invalid_input(categories):
    with pytest.raises(ValidationError):
        organize_input(categories)


def test_batch_is_read_only():
    batch = organize_input([{"category": "Chairs", "count": 2}])

    with pytest.raises(Exception):
        batch.total_count = 5
