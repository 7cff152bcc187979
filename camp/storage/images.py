import io
import logging

from PIL import Image, ImageOps, UnidentifiedImageError

logger = logging.getLogger(__name__)

START_QUALITY = 92
MIN_QUALITY = 45
QUALITY_STEP = 8
MIN_WIDTH = 400


def _encode(image, width, quality):
    height = max(1, round(image.height * width / image.width))
    resized = image if width == image.width else image.resize((width, height), Image.LANCZOS)
    buffer = io.BytesIO()
    resized.save(buffer, format="JPEG", quality=quality, optimize=True)
    return buffer.getvalue()


def compress_photo(content: bytes, target_kb: int = 300, max_width: int = 1280):
    """
    Re-encode a photo as JPEG that fits roughly within ``target_kb``.

    The image is first scaled down to ``max_width``; quality is then lowered
    step by step, and if that is not enough the width is reduced by 10% at a
    time down to 400px.

    Returns:
        bytes: The JPEG bytes, or None when the upload is not a readable image
    """
    try:
        image = Image.open(io.BytesIO(content))
        image = ImageOps.exif_transpose(image).convert("RGB")
    except (UnidentifiedImageError, OSError) as e:
        logger.warning(f"Could not read photo for compression: {str(e)}")
        return None

    target_bytes = target_kb * 1024
    width = max(1, min(image.width, max_width))
    quality = START_QUALITY
    blob = _encode(image, width, quality)

    while len(blob) > target_bytes and quality - QUALITY_STEP >= MIN_QUALITY:
        quality -= QUALITY_STEP
        blob = _encode(image, width, quality)

    while len(blob) > target_bytes and width > MIN_WIDTH:
        width = max(MIN_WIDTH, round(width * 0.9))
        quality = max(50, quality - 5)
        blob = _encode(image, width, quality)

    logger.debug(f"Compressed photo to {len(blob)} bytes at {width}px, quality {quality}")
    return blob
