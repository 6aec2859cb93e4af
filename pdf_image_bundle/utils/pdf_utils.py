"""
PDF document utilities.
"""

import logging
from os import makedirs
from os.path import exists, join
from pathlib import Path
from typing import Sequence, Union
from pymupdf import Document, Font

from ..exceptions import DocumentSerializeError, TitleRenderError

logger = logging.getLogger(__name__)


def get_pdf_page_count(doc: Document) -> int:
    """
    Get the number of pages in a PDF document.

    Args:
        doc: PDF document object

    Returns:
        Number of pages in the document
    """
    return doc.page_count


def font_covers(font: Font, text: str) -> bool:
    """Check that the font has a glyph for every non-whitespace character."""
    return all(ch.isspace() or font.has_glyph(ord(ch)) for ch in text)


def select_font(text: str, fontnames: Sequence[str]) -> Font:
    """
    Pick the first font that can draw every character of the text.

    Args:
        text: Text that will be drawn
        fontnames: PyMuPDF built-in font names, in order of preference

    Returns:
        The first covering font

    Raises:
        TitleRenderError: If no candidate covers the text
    """
    fonts = []
    for fontname in fontnames:
        font = Font(fontname)
        if font_covers(font, text):
            return font
        logger.debug(f"Font {fontname} lacks glyphs for '{text}'")
        fonts.append(font)

    # characters no candidate can draw
    missing = sorted(
        {ch for ch in text if not ch.isspace() and not any(f.has_glyph(ord(ch)) for f in fonts)}
    )
    if missing:
        detail = "missing " + ", ".join(f"U+{ord(ch):04X}" for ch in missing)
    else:
        detail = "no single font covers every character"
    raise TitleRenderError(f"No font among {list(fontnames)} can draw '{text}' ({detail})")


def measure_text_width(text: str, font: Font, fontsize: float) -> float:
    """
    Measure the rendered width of text in the given font.

    Args:
        text: Text to measure
        font: Font the text will be drawn with
        fontsize: Font size in points

    Returns:
        Width of the text in points
    """
    return font.text_length(text, fontsize=fontsize)


def serialize_document(doc: Document) -> bytes:
    """
    Serialize a PDF document to bytes.

    Raises:
        DocumentSerializeError: If PyMuPDF cannot write the document
    """
    try:
        return doc.tobytes(garbage=3, deflate=True)
    except Exception as e:
        raise DocumentSerializeError(f"Could not serialize PDF with {doc.page_count} pages: {e}") from e


def save_pdf_bytes(
    pdf_bytes: bytes, output_dir: Union[str, Path], filename: str = "images.pdf"
) -> Path:
    """
    Write PDF bytes to output_dir/filename, creating the directory if needed.

    Returns:
        Path of the written file
    """
    output_dir = str(output_dir)
    if not exists(output_dir):
        logger.info(f"Creating output directory: {output_dir}")
        makedirs(output_dir, exist_ok=True)

    filepath = join(output_dir, filename)
    with open(filepath, "wb") as f:
        f.write(pdf_bytes)
    logger.info(f"Saved {filename} to {output_dir} ({len(pdf_bytes)} bytes)")
    return Path(filepath)
