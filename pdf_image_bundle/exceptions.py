"""
Exceptions raised while selecting and bundling images.
"""

from typing import Optional


class BundleError(Exception):
    """Base exception for all bundling operations."""

    kind = "processing"


class ImageDecodeError(BundleError):
    """Raised when bytes cannot be decoded as a supported raster image."""

    kind = "decode"


class ImageEncodeError(BundleError):
    """Raised when a processed image cannot be re-encoded."""

    kind = "encode"


class DocumentSerializeError(BundleError):
    """Raised when the assembled PDF cannot be written to bytes."""

    kind = "serialize"


class TitleRenderError(BundleError):
    """Raised when no available font can draw a page title."""

    kind = "render"


class BundleCancelledError(BundleError):
    """Raised when a run is cancelled between entries."""

    kind = "cancelled"


class UnsupportedImageError(BundleError, ValueError):
    """Raised when a file outside the accepted image types is selected."""

    kind = "unsupported"


class BundleRunError(BundleError):
    """A run aborted; carries the failure kind and the offending entry."""

    def __init__(
        self,
        message: str,
        kind: str = "processing",
        label: Optional[str] = None,
        index: Optional[int] = None,
    ):
        super().__init__(message)
        self.kind = kind
        self.label = label
        self.index = index
