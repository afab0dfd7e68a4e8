from collections.abc import Mapping, Sequence
from typing import Any

from apps.shopify.config.constants import MAX_CATEGORIES, MAX_PRODUCTS_PER_CATEGORY, MIN_PRODUCTS_PER_CATEGORY
from apps.shopify.models.product import CategoryRequest, OrganizedBatch
from apps.shopify.utils.errors import ValidationError
from common.logger import logger


def _read_entry(entry: Any) -> tuple[Any, Any]:
    if isinstance(entry, CategoryRequest):
        return entry.category, entry.count
    if isinstance(entry, Mapping):
        return entry.get("category"), entry.get("count")
    return None, None


def _is_valid_count(count: Any) -> bool:
    # bool is an int subclass; True must not count as 1
    if isinstance(count, bool) or not isinstance(count, int):
        return False
    return MIN_PRODUCTS_PER_CATEGORY <= count <= MAX_PRODUCTS_PER_CATEGORY


def organize_input(categories: Sequence[Mapping[str, Any] | CategoryRequest]) -> OrganizedBatch:
    """
    Validate and trim the requested categories.

    Entries without a category name or with a count outside 1-100 are dropped.
    Raises ValidationError when the input is empty, has more than 10 entries,
    or nothing valid remains after filtering.
    """
    if not isinstance(categories, Sequence) or isinstance(categories, str) or not categories:
        raise ValidationError("Categories array is required and cannot be empty")

    if len(categories) > MAX_CATEGORIES:
        raise ValidationError(f"Maximum {MAX_CATEGORIES} categories allowed")

    valid: list[CategoryRequest] = []
    for entry in categories:
        name, count = _read_entry(entry)

        if not isinstance(name, str) or not name.strip():
            logger.warning(f"Skipping category without a name: {entry!r}")
            continue

        if not _is_valid_count(count):
            logger.warning(f"Skipping category '{name.strip()}' with invalid count: {count!r}")
            continue

        valid.append(CategoryRequest(category=name.strip(), count=count))

    if not valid:
        raise ValidationError(
            f"No valid categories found. Each category needs a name and count between {MIN_PRODUCTS_PER_CATEGORY}-{MAX_PRODUCTS_PER_CATEGORY}"
        )

    total_count = sum(item.count for item in valid)
    logger.info(f"Organized {len(valid)} categories, {total_count} products requested")
    return OrganizedBatch(categories=tuple(valid), total_count=total_count)
