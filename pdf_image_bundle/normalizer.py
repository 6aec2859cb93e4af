"""
Image Normalizer - bounds source images to a maximum size.
"""

import logging
from typing import Optional

from .models import NormalizationConfig, NormalizedImage
from .utils.image_processing import (
    decode_image,
    encode_image,
    flatten_alpha,
    release_images,
    resize_to_fit,
)

logger = logging.getLogger(__name__)


def normalize_image(
    raw_bytes: bytes, config: Optional[NormalizationConfig] = None
) -> NormalizedImage:
    """
    Decode an image, downscale it to fit the configured bounds and re-encode it as JPEG.

    Images already within the bounds keep their dimensions; larger ones are
    scaled uniformly by min(max_width / width, max_height / height).

    Args:
        raw_bytes: Original JPEG or PNG bytes
        config: Bounds and encoder quality (defaults to 1600x1200 at 0.8)

    Returns:
        NormalizedImage with the new dimensions and JPEG bytes

    Raises:
        ImageDecodeError: If the input is not a readable image
        ImageEncodeError: If the resized image cannot be encoded
    """
    config = config or NormalizationConfig()

    with decode_image(raw_bytes) as img:
        original_size = img.size
        resized = flat = None
        try:
            resized = resize_to_fit(img, config.max_width, config.max_height)
            flat = flatten_alpha(resized)
            encoded = encode_image(flat, "JPEG", quality=config.jpeg_quality)
            width, height = flat.size
        finally:
            release_images(img, resized, flat)

    logger.debug(
        f"    Normalized {original_size[0]}x{original_size[1]} -> {width}x{height} ({len(encoded)} bytes)"
    )
    return NormalizedImage(width=width, height=height, encoded=encoded, format="JPEG")
