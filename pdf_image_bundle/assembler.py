"""
Page Assembler - lays out one watermarked image and its title on a new PDF page.
"""

import logging
from typing import Optional
from pymupdf import Document, Font, Point, Rect, TextWriter

from .models import PageConfig, PageLayout, WatermarkedImage, strip_extension
from .utils.pdf_utils import measure_text_width, select_font

logger = logging.getLogger(__name__)

__all__ = ["build_page", "compute_page_layout", "strip_extension"]


def compute_page_layout(
    image_width: int,
    image_height: int,
    label: str,
    page_number: int,
    config: Optional[PageConfig] = None,
    font: Optional[Font] = None,
) -> PageLayout:
    """
    Compute page geometry for an image and its title.

    Coordinates use a bottom-left origin. The page adds fixed margins around
    the image, which sits at its native size; the title is centered using its
    width measured in the font it will be drawn with.

    Raises:
        TitleRenderError: If no configured font can draw the label
    """
    config = config or PageConfig()
    if font is None:
        font = select_font(label, (config.title_font, *config.title_fallback_fonts))

    page_width = image_width + config.extra_width
    page_height = image_height + config.extra_height
    title_width = measure_text_width(label, font, config.title_font_size)

    return PageLayout(
        page_number=page_number,
        width=page_width,
        height=page_height,
        image_x=config.image_x,
        image_y=config.image_y,
        image_width=image_width,
        image_height=image_height,
        title_text=label,
        title_x=(page_width - title_width) / 2,
        title_y=config.title_y,
        title_font_size=config.title_font_size,
        title_font_name=font.name,
    )


def build_page(
    doc: Document,
    image: WatermarkedImage,
    label: str,
    config: Optional[PageConfig] = None,
) -> PageLayout:
    """
    Append one page holding the image and its centered title to the document.

    Args:
        doc: Document being assembled; exactly one page is appended
        image: Watermarked image to place
        label: Title drawn under the image
        config: Page margins and title styling

    Returns:
        PageLayout describing the new page

    Raises:
        TitleRenderError: If no configured font can draw the label; no page is added
    """
    config = config or PageConfig()
    font = select_font(label, (config.title_font, *config.title_fallback_fonts))
    layout = compute_page_layout(
        image.width, image.height, label, doc.page_count + 1, config, font
    )

    page = doc.new_page(width=layout.width, height=layout.height)

    # PyMuPDF measures y from the top edge
    top = layout.height - layout.image_y - layout.image_height
    image_rect = Rect(
        layout.image_x,
        top,
        layout.image_x + layout.image_width,
        top + layout.image_height,
    )
    page.insert_image(image_rect, stream=image.encoded)

    writer = TextWriter(page.rect)
    writer.append(
        Point(layout.title_x, layout.height - layout.title_y),
        label,
        font=font,
        fontsize=layout.title_font_size,
    )
    writer.write_text(page, color=config.title_color)

    logger.debug(
        f"    Page {layout.page_number}: {layout.width:.0f}x{layout.height:.0f}, "
        f"title '{label}' in {layout.title_font_name}, {layout.title_width:.1f}pt wide at x={layout.title_x:.1f}"
    )
    return layout
