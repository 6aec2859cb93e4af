"""
Watermark Compositor - stamps the watermark text across an image.
"""

import logging
from math import floor
from typing import Optional

from .models import WatermarkConfig, WatermarkedImage
from .utils.image_processing import (
    decode_image,
    draw_text_overlay,
    encode_image,
    load_font,
    synthetic_bold_width,
)

logger = logging.getLogger(__name__)


def compute_watermark_font_size(width: int, text: str, scale_factor: float = 1.6) -> int:
    """
    Font size that makes the text span roughly the full image width.

    This is a character-count heuristic, not a measured fit: wide glyphs or
    long strings on narrow images may overflow.
    """
    if not text:
        raise ValueError("Watermark text must not be empty")
    return floor((width / len(text)) * scale_factor)


def apply_watermark(
    encoded: bytes, config: Optional[WatermarkConfig] = None
) -> WatermarkedImage:
    """
    Draw the watermark text, centered and semi-transparent, over the whole image.

    Args:
        encoded: Normalized image bytes
        config: Watermark appearance (defaults to bold light gray "Cleide Fotos" at 50% opacity)

    Returns:
        WatermarkedImage holding PNG bytes at the input's dimensions

    Raises:
        ImageDecodeError: If the input is not a readable image
        ImageEncodeError: If the composited image cannot be encoded
    """
    config = config or WatermarkConfig()

    with decode_image(encoded) as img:
        width, height = img.size
        font_size = compute_watermark_font_size(width, config.text, config.scale_factor)

        if font_size < 1:
            logger.warning(
                f"    Watermark font size {font_size} too small for {width}px wide image, skipping text"
            )
            png_bytes = encode_image(img, "PNG")
        else:
            font = load_font(font_size, bold=config.bold, font_path=config.font_path)
            stroke_width = synthetic_bold_width(font) if config.bold else 0
            with draw_text_overlay(
                img,
                config.text,
                font,
                config.fill_rgba,
                (width / 2, height / 2),
                stroke_width=stroke_width,
            ) as stamped:
                png_bytes = encode_image(stamped, "PNG")

    logger.debug(f"    Watermarked {width}x{height} image at font size {font_size}")
    return WatermarkedImage(
        width=width, height=height, encoded=png_bytes, format="PNG", font_size=font_size
    )
