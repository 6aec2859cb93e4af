"""
Raster image utilities: decode, resize, draw text and encode.
"""

import logging
from io import BytesIO
from pathlib import Path
from typing import Optional, Tuple
from PIL import Image, ImageDraw, ImageFont, ImageOps, UnidentifiedImageError

from ..exceptions import ImageDecodeError, ImageEncodeError

logger = logging.getLogger(__name__)

ACCEPTED_FORMATS = ("JPEG", "PNG")

# Bold faces first, matching the Arial Bold used by browsers
BOLD_FONT_CANDIDATES = (
    "arialbd.ttf",
    "Arial Bold.ttf",
    "DejaVuSans-Bold.ttf",
    "LiberationSans-Bold.ttf",
    "/usr/share/fonts/truetype/dejavu/DejaVuSans-Bold.ttf",
    "/usr/share/fonts/truetype/liberation/LiberationSans-Bold.ttf",
    "/Library/Fonts/Arial Bold.ttf",
    "C:/Windows/Fonts/arialbd.ttf",
)
REGULAR_FONT_CANDIDATES = (
    "arial.ttf",
    "DejaVuSans.ttf",
    "LiberationSans-Regular.ttf",
    "/usr/share/fonts/truetype/dejavu/DejaVuSans.ttf",
    "/usr/share/fonts/truetype/liberation/LiberationSans-Regular.ttf",
    "C:/Windows/Fonts/arial.ttf",
)


def decode_image(data: bytes) -> Image.Image:
    """
    Decode JPEG or PNG bytes into a fully loaded image.

    EXIF orientation is applied so the pixels match what a viewer displays.

    Args:
        data: Encoded image bytes

    Returns:
        Decoded image, detached from the input buffer

    Raises:
        ImageDecodeError: If the bytes are not a readable JPEG or PNG image
    """
    try:
        with Image.open(BytesIO(data), formats=ACCEPTED_FORMATS) as img:
            img.load()
            return ImageOps.exif_transpose(img)
    except (UnidentifiedImageError, Image.DecompressionBombError, OSError, SyntaxError, ValueError) as e:
        raise ImageDecodeError(f"Could not decode image ({len(data)} bytes): {e}") from e


def compute_target_size(
    width: int, height: int, max_width: int, max_height: int
) -> Tuple[int, int]:
    """
    Compute dimensions that fit within the bounds while preserving aspect ratio.

    Images already inside the bounds keep their size. Scaled dimensions are
    truncated to whole pixels and never drop below one pixel.
    """
    if width <= max_width and height <= max_height:
        return width, height

    ratio = min(max_width / width, max_height / height)
    return max(1, int(width * ratio)), max(1, int(height * ratio))


def resize_to_fit(img: Image.Image, max_width: int, max_height: int) -> Image.Image:
    """Return the image scaled down to fit within max_width x max_height."""
    target = compute_target_size(img.width, img.height, max_width, max_height)
    if target == img.size:
        return img
    logger.debug(f"Resizing {img.width}x{img.height} -> {target[0]}x{target[1]}")
    return img.resize(target, Image.Resampling.LANCZOS)


def flatten_alpha(
    img: Image.Image, background: Tuple[int, int, int] = (255, 255, 255)
) -> Image.Image:
    """
    Convert an image to RGB, compositing any transparency onto a solid background.
    """
    if img.mode in ("RGBA", "LA", "P"):
        rgba = img.convert("RGBA") if img.mode != "RGBA" else img
        try:
            flat = Image.new("RGB", rgba.size, background)
            with rgba.getchannel("A") as alpha:
                flat.paste(rgba, mask=alpha)
        finally:
            release_images(img, rgba)
        return flat
    if img.mode != "RGB":
        return img.convert("RGB")
    return img


def release_images(source: Image.Image, *derived: Image.Image) -> None:
    """Close derived images, leaving the source and any alias of it open."""
    closed = set()
    for image in derived:
        if image is None or image is source or id(image) in closed:
            continue
        image.close()
        closed.add(id(image))


def encode_image(img: Image.Image, fmt: str, quality: Optional[int] = None) -> bytes:
    """
    Encode an image to bytes.

    Args:
        img: Image to encode
        fmt: Pillow format name, e.g. "JPEG" or "PNG"
        quality: JPEG quality (0-100); ignored by lossless formats

    Returns:
        Encoded image bytes

    Raises:
        ImageEncodeError: If the encoder fails
    """
    params = {}
    if quality is not None and fmt.upper() in ("JPEG", "JPG"):
        params["quality"] = quality

    buffer = BytesIO()
    try:
        img.save(buffer, format=fmt, **params)
    except (OSError, ValueError, KeyError) as e:
        raise ImageEncodeError(f"Could not encode {img.width}x{img.height} image as {fmt}: {e}") from e
    return buffer.getvalue()


def load_font(
    size: int, bold: bool = True, font_path: Optional[str] = None
) -> ImageFont.FreeTypeFont:
    """
    Load a TrueType font at the given pixel size.

    An explicit font_path wins; otherwise common system fonts are tried and
    Pillow's built-in scalable font is the last resort.
    """
    candidates = BOLD_FONT_CANDIDATES if bold else REGULAR_FONT_CANDIDATES
    if font_path:
        if not Path(font_path).exists():
            logger.warning(f"Font file not found: {font_path}, searching system fonts")
        else:
            candidates = (font_path,) + candidates

    for candidate in candidates:
        try:
            return ImageFont.truetype(candidate, size=size)
        except OSError:
            continue

    if bold:
        logger.warning(
            f"No bold system font found, using Pillow default font at size {size} with a synthetic bold stroke"
        )
    else:
        logger.debug(f"No system font found, using Pillow default font at size {size}")
    return ImageFont.load_default(size=size)


def is_bold_face(font: ImageFont.FreeTypeFont) -> bool:
    """Check whether the font's style name marks it as a bold face."""
    _, style = font.getname()
    return bool(style) and "bold" in style.lower()


def synthetic_bold_width(font: ImageFont.FreeTypeFont) -> int:
    """
    Stroke width that thickens a regular face to a bold weight.

    Bold faces need no stroke; otherwise the stroke grows with the font size.
    """
    if is_bold_face(font):
        return 0
    return max(1, int(font.size) // 20)


def draw_text_overlay(
    img: Image.Image,
    text: str,
    font: ImageFont.FreeTypeFont,
    fill: Tuple[int, int, int, int],
    position: Tuple[float, float],
    stroke_width: int = 0,
) -> Image.Image:
    """
    Alpha-composite text onto an image, centered on position.

    The text is drawn on a transparent layer so its alpha blends with the
    underlying pixels. A stroke in the fill color thickens the glyphs.
    Returns a new RGBA image.
    """
    base = img.convert("RGBA") if img.mode != "RGBA" else img.copy()
    with base, Image.new("RGBA", base.size, (0, 0, 0, 0)) as layer:
        draw = ImageDraw.Draw(layer)
        draw.text(
            position,
            text,
            font=font,
            fill=fill,
            anchor="mm",
            stroke_width=stroke_width,
            stroke_fill=fill,
        )
        return Image.alpha_composite(base, layer)
