"""Image decode/encode helpers and the working-copy resize."""

from __future__ import annotations

import base64
import binascii
import io
import logging

from PIL import Image, ImageOps, UnidentifiedImageError

from aical.config import settings
from aical.engine.errors import ImageDecodeError

logger = logging.getLogger(__name__)

ImageSource = bytes | bytearray | str | Image.Image

# Portrait story crop (width / height).
STORY_RATIO = 9 / 16


def decode_image(source: ImageSource) -> Image.Image:
    """Decode bytes, a ``data:`` URL or bare base64 into an RGB/RGBA image.

    EXIF orientation is applied so width/height match what a browser shows.
    """
    if isinstance(source, Image.Image):
        return _normalize_mode(source)

    if isinstance(source, str):
        if source.startswith("data:"):
            _, _, payload = source.partition(",")
        else:
            payload = source
        if not payload:
            raise ImageDecodeError("Image data is empty")
        try:
            data = base64.b64decode(payload, validate=True)
        except (binascii.Error, ValueError) as e:
            raise ImageDecodeError(f"Invalid base64 image data: {e}") from e
    else:
        data = bytes(source)

    try:
        image = Image.open(io.BytesIO(data))
        image.load()
    except (UnidentifiedImageError, Image.DecompressionBombError, OSError) as e:
        raise ImageDecodeError(f"Could not decode image: {e}") from e

    return _normalize_mode(ImageOps.exif_transpose(image))


def _normalize_mode(image: Image.Image) -> Image.Image:
    if image.mode in ("RGB", "RGBA"):
        return image
    if "A" in image.getbands() or image.mode == "P" and "transparency" in image.info:
        return image.convert("RGBA")
    return image.convert("RGB")


def encode_image(image: Image.Image, fmt: str = "JPEG", quality: int = 92) -> bytes:
    buf = io.BytesIO()
    if fmt.upper() == "JPEG":
        image = image.convert("RGB")
        image.save(buf, format="JPEG", quality=quality)
    else:
        image.save(buf, format=fmt.upper())
    return buf.getvalue()


def to_data_url(data: bytes, mime_type: str) -> str:
    return f"data:{mime_type};base64,{base64.b64encode(data).decode('ascii')}"


def encode_data_url(image: Image.Image, fmt: str = "JPEG", quality: int = 92) -> str:
    mime = "image/jpeg" if fmt.upper() in ("JPEG", "JPG") else f"image/{fmt.lower()}"
    return to_data_url(encode_image(image, "JPEG" if mime == "image/jpeg" else fmt, quality), mime)


def crop_to_story(image: Image.Image) -> Image.Image:
    """Centre crop to 9:16: too wide trims the sides, too tall trims top and bottom."""
    width, height = image.size
    if width / height > STORY_RATIO:
        crop_w = height * STORY_RATIO
        left = (width - crop_w) / 2
        box = (round(left), 0, round(left + crop_w), height)
    else:
        crop_h = width / STORY_RATIO
        top = (height - crop_h) / 2
        box = (0, round(top), width, round(top + crop_h))
    return image.crop(box)


def fit_within(width: int, height: int, max_dimension: int) -> tuple[int, int]:
    """Proportional downscale so the longer side is at most ``max_dimension``."""
    if width <= max_dimension and height <= max_dimension:
        return width, height
    if width > height:
        return max_dimension, max(1, round(height * max_dimension / width))
    return max(1, round(width * max_dimension / height)), max_dimension


def resize_image(
    source: ImageSource,
    max_dimension: int | None = None,
    crop_to_9x16: bool = False,
    quality: int | None = None,
) -> tuple[str, str]:
    """Working copy for analysis: optional story crop, downscale, JPEG 0.85.

    Returns ``(base64_payload, mime_type)``.
    """
    max_dimension = max_dimension or settings.working_max_dimension
    quality = quality or settings.working_jpeg_quality

    image = decode_image(source)
    if crop_to_9x16:
        image = crop_to_story(image)

    size = fit_within(image.width, image.height, max_dimension)
    if size != image.size:
        image = image.resize(size, Image.Resampling.LANCZOS)

    logger.debug("Working copy %dx%d (crop=%s)", image.width, image.height, crop_to_9x16)
    data = encode_image(image, "JPEG", quality)
    return base64.b64encode(data).decode("ascii"), "image/jpeg"
