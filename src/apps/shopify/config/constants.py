"""Shopify product generator constants and enums."""

from enum import IntEnum


class WorkflowStage(IntEnum):
    NOT_STARTED = 0
    NORMALIZE = 1
    GENERATE = 2
    CREATE = 3
    PUBLISH = 4


# Input limits
MAX_CATEGORIES = 10
MIN_PRODUCTS_PER_CATEGORY = 1
MAX_PRODUCTS_PER_CATEGORY = 100

# Generation
MAX_GENERATION_ATTEMPTS = 3
RETRY_WAIT_MAX_SECONDS = 10
GENERATION_MODALITIES = ("text", "image")

# Placeholder detection
MIN_IMAGE_BYTES = 1024
UNIFORMITY_SAMPLE_SIZE = 100
UNIFORMITY_TOLERANCE = 10
UNIFORMITY_RATIO = 0.8
PLACEHOLDER_IMAGE_SIZE = 400
PLACEHOLDER_BACKGROUND = "#f0f0f0"
PLACEHOLDER_TEXT_COLOR = "#666"

# Fallback product content
DEFAULT_PRICE = "99.99"
DEFAULT_VARIANTS = [
    {"title": "Standard", "price": "99.99"},
    {"title": "Premium", "price": "149.99"},
]
DEFAULT_FEATURES = ["High quality", "Durable", "Modern design"]

# Shopify payloads
DEFAULT_VARIANT_OPTION = "Default"
DEFAULT_VARIANT_PRICE = "0.00"
VARIANT_OPTION_NAME = "Variant"
DEFAULT_IMAGE_EXTENSION = "png"
IMAGE_EXTENSIONS = {
    "jpeg": "jpg",
    "jpg": "jpg",
    "png": "png",
    "webp": "webp",
    # Shopify rejects SVG attachments
    "svg": "png",
}

# Checkpoints
RUNS_DIRNAME = "runs"
# run ids become file names, so only a safe character set is accepted
RUN_ID_PATTERN = r"[A-Za-z0-9][A-Za-z0-9_-]{0,127}"
