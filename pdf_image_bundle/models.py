"""
Data models for bundling images into an annotated PDF.
"""

from typing import Tuple, Optional, List
from pydantic import BaseModel, Field, field_validator


def strip_extension(filename: str) -> str:
    """Remove the final extension: 'archive.tar.gz' -> 'archive.tar', 'noext' -> 'noext'."""
    last_dot = filename.rfind(".")
    if last_dot == -1:
        return filename
    return filename[:last_dot]


class NormalizationConfig(BaseModel):
    """Configuration for downscaling source images."""

    max_width: int = Field(default=1600, description="Maximum width in pixels")
    max_height: int = Field(default=1200, description="Maximum height in pixels")
    quality: float = Field(
        default=0.8, description="Lossy encoder quality on a 0-1 scale"
    )

    @field_validator("max_width", "max_height")
    @classmethod
    def validate_positive(cls, v):
        if v <= 0:
            raise ValueError("Maximum dimensions must be positive")
        return v

    @field_validator("quality")
    @classmethod
    def validate_quality(cls, v):
        if v < 0.0 or v > 1.0:
            raise ValueError("quality must be between 0.0 and 1.0")
        return v

    @property
    def jpeg_quality(self) -> int:
        """Quality expressed on Pillow's 0-100 JPEG scale."""
        return int(round(self.quality * 100))


class WatermarkConfig(BaseModel):
    """Configuration for the watermark stamped onto every image."""

    text: str = Field(default="Cleide Fotos", description="Watermark text")
    scale_factor: float = Field(
        default=1.6, description="Multiplier applied to width / len(text) for the font size"
    )
    color: Tuple[int, int, int] = Field(
        default=(200, 200, 200), description="RGB fill color (0-255)"
    )
    opacity: float = Field(default=0.5, description="Fill opacity (0-1)")
    bold: bool = Field(default=True, description="Render the text in a bold face")
    font_path: Optional[str] = Field(
        default=None, description="Explicit TrueType font file to use"
    )

    @field_validator("text")
    @classmethod
    def validate_text(cls, v):
        if not v:
            raise ValueError("Watermark text must not be empty")
        return v

    @field_validator("opacity")
    @classmethod
    def validate_opacity(cls, v):
        if v < 0.0 or v > 1.0:
            raise ValueError("opacity must be between 0.0 and 1.0")
        return v

    @property
    def fill_rgba(self) -> Tuple[int, int, int, int]:
        """Fill color including the alpha channel."""
        return (*self.color, int(round(255 * self.opacity)))


class PageConfig(BaseModel):
    """Fixed page layout around each image, in PDF points."""

    extra_width: int = Field(default=100, description="Page width beyond the image")
    extra_height: int = Field(default=150, description="Page height beyond the image")
    image_x: int = Field(default=50, description="Image offset from the left edge")
    image_y: int = Field(default=100, description="Image offset from the bottom edge")
    title_font_size: int = Field(default=28, description="Title font size")
    title_y: int = Field(default=50, description="Title baseline from the bottom edge")
    title_font: str = Field(default="helv", description="Preferred PyMuPDF font for the title")
    title_fallback_fonts: Tuple[str, ...] = Field(
        default=("cjk",),
        description="PyMuPDF fonts tried in order when the preferred font lacks a glyph",
    )
    title_color: Tuple[float, float, float] = Field(
        default=(0.0, 0.0, 0.0), description="RGB title color (0-1)"
    )


class BundleConfig(BaseModel):
    """Top-level configuration for a bundling run."""

    normalization: NormalizationConfig = Field(default_factory=NormalizationConfig)
    watermark: WatermarkConfig = Field(default_factory=WatermarkConfig)
    page: PageConfig = Field(default_factory=PageConfig)
    output_filename: str = Field(default="images.pdf", description="Exported file name")
    mime_type: str = Field(default="application/pdf", description="Exported MIME type")


class SelectedImageEntry(BaseModel):
    """One user-selected image waiting to be bundled."""

    raw_bytes: bytes = Field(..., description="Original file contents")
    original_name: str = Field(..., description="Original file name")
    index: int = Field(..., description="Position in the selection")

    model_config = {"frozen": True}

    @property
    def label(self) -> str:
        """File name without its final extension."""
        return strip_extension(self.original_name)

    @property
    def size_mb(self) -> float:
        """Size of the original file in megabytes."""
        return len(self.raw_bytes) / 1024 / 1024


class NormalizedImage(BaseModel):
    """Image downscaled to fit the configured bounds."""

    width: int
    height: int
    encoded: bytes
    format: str = "JPEG"


class WatermarkedImage(BaseModel):
    """Normalized image with the watermark composited on top."""

    width: int
    height: int
    encoded: bytes
    format: str = "PNG"
    font_size: int = 0


class PageLayout(BaseModel):
    """Geometry of one assembled page, using a bottom-left origin."""

    page_number: int
    width: float
    height: float
    image_x: float
    image_y: float
    image_width: float
    image_height: float
    title_text: str
    title_x: float
    title_y: float
    title_font_size: float
    title_font_name: str = ""

    model_config = {"frozen": True}

    @property
    def title_width(self) -> float:
        """Measured width of the title, recovered from its centered position."""
        return self.width - 2 * self.title_x


class BundleResult(BaseModel):
    """Result of a completed bundling run."""

    pdf_bytes: bytes
    page_count: int
    pages: List[PageLayout]
    processing_time: float
    filename: str = "images.pdf"
    mime_type: str = "application/pdf"

    @property
    def labels(self) -> List[str]:
        """Page titles in document order."""
        return [page.title_text for page in self.pages]
