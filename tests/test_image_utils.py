import base64
import random

import pytest

from apps.shopify.utils.image_utils import (
    build_placeholder_image,
    image_extension,
    is_placeholder_bytes,
    is_placeholder_image,
    strip_data_uri_prefix,
)


def as_data_uri(data: bytes, media_type: str = "image/png") -> str:
    return f"data:{media_type};base64,{base64.b64encode(data).decode('ascii')}"


def test_solid_color_buffer_is_placeholder():
    assert is_placeholder_bytes(bytes([128]) * 2000)
    assert is_placeholder_image(as_data_uri(bytes([128]) * 2000))


def test_random_buffer_is_not_placeholder():
    data = random.Random(7).randbytes(2000)

    assert not is_placeholder_bytes(data)
    assert not is_placeholder_image(as_data_uri(data, "image/jpeg"))


def test_small_image_is_placeholder():
    assert is_placeholder_image(as_data_uri(random.Random(1).randbytes(1023)))


def test_svg_is_always_placeholder():
    svg = "data:image/svg+xml;base64," + base64.b64encode(random.Random(3).randbytes(5000)).decode("ascii")

    assert is_placeholder_image(svg)
    assert is_placeholder_image(build_placeholder_image("Chairs"))


def test_undecodable_image_is_treated_as_real():
    assert not is_placeholder_image("data:image/png;base64,abc")
    assert not is_placeholder_image("https://cdn.example.com/chair.png")


def test_placeholder_image_labels_and_escapes_category():
    uri = build_placeholder_image("Tables & <Desks>")
    svg = base64.b64decode(uri.split("base64,", 1)[1]).decode("utf-8")

    assert uri.startswith("data:image/svg+xml;base64,")
    assert "Tables &amp; &lt;Desks&gt;" in svg
    assert 'width="400"' in svg


def test_strip_data_uri_prefix():
    assert strip_data_uri_prefix("data:image/png;base64,QUJD") == "QUJD"
    assert strip_data_uri_prefix("data:image/svg+xml;base64,QUJD") == "QUJD"
    assert strip_data_uri_prefix("data:application/octet-stream;base64,QUJD") == "QUJD"
    assert strip_data_uri_prefix("QUJD") == "QUJD"


@pytest.mark.parametrize(
    ("uri", "extension"),
    [
        ("data:image/jpeg;base64,QUJD", "jpg"),
        ("data:image/jpg;base64,QUJD", "jpg"),
        ("data:image/png;base64,QUJD", "png"),
        ("data:image/webp;base64,QUJD", "webp"),
        ("data:image/svg+xml;base64,QUJD", "png"),
        ("data:image/gif;base64,QUJD", "png"),
        ("QUJD", "png"),
    ],
)
def test_image_extension(uri, extension):
    assert image_extension(uri) == extension
