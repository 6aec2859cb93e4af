"""
PDFImageBundle - Combine images into a PDF with titles and watermarks

A Python package for turning a selection of JPEG/PNG images into a single PDF
document with one page per image, each page titled with the image's file name
and the image stamped with a semi-transparent watermark.
"""

from .assembler import build_page
from .compositor import apply_watermark, compute_watermark_font_size
from .exceptions import (
    BundleError,
    ImageDecodeError,
    ImageEncodeError,
    DocumentSerializeError,
    TitleRenderError,
    BundleCancelledError,
    UnsupportedImageError,
    BundleRunError,
)
from .models import (
    BundleConfig,
    NormalizationConfig,
    WatermarkConfig,
    PageConfig,
    SelectedImageEntry,
    NormalizedImage,
    strip_extension,
    WatermarkedImage,
    PageLayout,
    BundleResult,
)
from .normalizer import normalize_image
from .pipeline import PDFImageBundler
from .progress import ProgressSink, ProgressTracker
from .selection import ImageSelection
from .session import BundleSession

__version__ = "1.0.0"
__all__ = [
    "PDFImageBundler",
    "BundleSession",
    "ImageSelection",
    "ProgressSink",
    "ProgressTracker",
    "normalize_image",
    "apply_watermark",
    "compute_watermark_font_size",
    "build_page",
    "strip_extension",
    "BundleConfig",
    "NormalizationConfig",
    "WatermarkConfig",
    "PageConfig",
    "SelectedImageEntry",
    "NormalizedImage",
    "WatermarkedImage",
    "PageLayout",
    "BundleResult",
    "BundleError",
    "ImageDecodeError",
    "ImageEncodeError",
    "DocumentSerializeError",
    "TitleRenderError",
    "BundleCancelledError",
    "UnsupportedImageError",
    "BundleRunError",
]
