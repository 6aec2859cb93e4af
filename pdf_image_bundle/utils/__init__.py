"""
Utility modules for raster and PDF handling.
"""

from .image_processing import (
    compute_target_size,
    decode_image,
    draw_text_overlay,
    encode_image,
    flatten_alpha,
    load_font,
    release_images,
    resize_to_fit,
    synthetic_bold_width,
)
from .pdf_utils import (
    get_pdf_page_count,
    measure_text_width,
    save_pdf_bytes,
    select_font,
    serialize_document,
)

__all__ = [
    "compute_target_size",
    "decode_image",
    "draw_text_overlay",
    "encode_image",
    "flatten_alpha",
    "load_font",
    "release_images",
    "resize_to_fit",
    "synthetic_bold_width",
    "get_pdf_page_count",
    "measure_text_width",
    "select_font",
    "save_pdf_bytes",
    "serialize_document",
]
