"""Data-URI helpers shared by product generation and image upload."""

import base64
import binascii
import html
import re

from apps.shopify.config.constants import (
    DEFAULT_IMAGE_EXTENSION,
    IMAGE_EXTENSIONS,
    MIN_IMAGE_BYTES,
    PLACEHOLDER_BACKGROUND,
    PLACEHOLDER_IMAGE_SIZE,
    PLACEHOLDER_TEXT_COLOR,
    UNIFORMITY_RATIO,
    UNIFORMITY_SAMPLE_SIZE,
    UNIFORMITY_TOLERANCE,
)
from common.logger import logger


SVG_DATA_URI_PREFIX = "data:image/svg+xml"
IMAGE_PREFIX_PATTERN = re.compile(r"^data:image/[^;]+;base64,")
IMAGE_MEDIA_TYPE_PATTERN = re.compile(r"data:image/([^;]+)")


def build_placeholder_image(label: str) -> str:
    """Flat grey square with the label centred, as an SVG data URI."""
    size = PLACEHOLDER_IMAGE_SIZE
    svg = (
        f'<svg width="{size}" height="{size}" xmlns="http://www.w3.org/2000/svg">'
        f'<rect width="{size}" height="{size}" fill="{PLACEHOLDER_BACKGROUND}"/>'
        f'<text x="50%" y="50%" font-family="Arial" font-size="20" fill="{PLACEHOLDER_TEXT_COLOR}" '
        f'text-anchor="middle" dominant-baseline="middle">{html.escape(label)}</text>'
        "</svg>"
    )
    return f"{SVG_DATA_URI_PREFIX};base64,{base64.b64encode(svg.encode('utf-8')).decode('ascii')}"


def is_uniform_sample(data: bytes) -> bool:
    sample = data[:UNIFORMITY_SAMPLE_SIZE]
    if not sample:
        return False
    mean = sum(sample) / len(sample)
    uniform = sum(1 for value in sample if abs(value - mean) < UNIFORMITY_TOLERANCE)
    return uniform / len(sample) >= UNIFORMITY_RATIO


def is_placeholder_bytes(data: bytes) -> bool:
    return len(data) < MIN_IMAGE_BYTES or is_uniform_sample(data)


def is_placeholder_image(image_data_uri: str) -> bool:
    """
    Classify an image data URI as a placeholder.

    SVG images are always placeholders (that is the synthesized fallback format).
    Otherwise the decoded payload is a placeholder when it is under 1KB or when
    its first 100 bytes are nearly uniform, which is what flat grey boxes decode to.
    Images that cannot be decoded are treated as real.
    """
    if SVG_DATA_URI_PREFIX in image_data_uri:
        return True

    marker = image_data_uri.find("base64,")
    if marker == -1:
        return False

    try:
        data = base64.b64decode(image_data_uri[marker + len("base64,") :], validate=False)
    except (binascii.Error, ValueError) as e:
        logger.warning(f"Could not analyze image for placeholder detection: {e}")
        return False

    return is_placeholder_bytes(data)


def strip_data_uri_prefix(image_data_uri: str) -> str:
    """Return only the base64 payload of an image data URI."""
    if image_data_uri.startswith("data:image/"):
        return IMAGE_PREFIX_PATTERN.sub("", image_data_uri, count=1)
    if "base64," in image_data_uri:
        return image_data_uri[image_data_uri.index("base64,") + len("base64,") :]
    return image_data_uri


def image_extension(image_data_uri: str) -> str:
    match = IMAGE_MEDIA_TYPE_PATTERN.match(image_data_uri)
    if not match:
        return DEFAULT_IMAGE_EXTENSION

    subtype = match.group(1).lower()
    for key, extension in IMAGE_EXTENSIONS.items():
        if key in subtype:
            return extension
    return DEFAULT_IMAGE_EXTENSION
