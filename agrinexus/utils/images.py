import io
import logging

from PIL import Image, UnidentifiedImageError

logger = logging.getLogger(__name__)

MAX_IMAGE_SIDE = 1600


def to_jpeg(image_bytes: bytes, max_side: int = MAX_IMAGE_SIDE) -> bytes:
    """
    Normalize an uploaded photo to JPEG bytes for the diagnosis model.
    Raises ValueError if the bytes are not a readable image.
    """
    try:
        image = Image.open(io.BytesIO(image_bytes))
        image.load()
    except (UnidentifiedImageError, Image.DecompressionBombError, OSError) as e:
        raise ValueError(f"Unreadable image: {e}") from e

    if image.format == "JPEG" and max(image.size) <= max_side:
        return image_bytes

    if image.mode != "RGB":
        image = image.convert("RGB")
    image.thumbnail((max_side, max_side))

    out = io.BytesIO()
    image.save(out, format="JPEG", quality=90)
    logger.info(f"Image normalized to JPEG {image.size[0]}x{image.size[1]}")
    return out.getvalue()
