"""
Shared fixtures for the test suite.
"""

from io import BytesIO

import pytest
from PIL import Image


def make_image_bytes(width, height, fmt="PNG", color=(0, 0, 0), mode="RGB"):
    """Encode a solid-color image of the given size."""
    if mode == "RGBA" and len(color) == 3:
        color = (*color, 255)
    img = Image.new(mode, (width, height), color)
    buffer = BytesIO()
    img.save(buffer, format=fmt)
    return buffer.getvalue()


def image_size(data):
    """Decode bytes and return (width, height)."""
    with Image.open(BytesIO(data)) as img:
        return img.size


@pytest.fixture
def small_png():
    return make_image_bytes(400, 300, "PNG")


@pytest.fixture
def small_jpeg():
    return make_image_bytes(320, 240, "JPEG", color=(30, 60, 90))


@pytest.fixture
def large_jpeg():
    return make_image_bytes(3200, 1800, "JPEG", color=(120, 80, 40))
