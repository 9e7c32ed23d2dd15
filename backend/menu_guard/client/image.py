"""Client-side menu photo preparation."""

import base64
import io
import logging

from PIL import Image, UnidentifiedImageError

from menu_guard.domain.analysis.value_objects.menu_source import ImagePayload

logger = logging.getLogger(__name__)

MAX_SIDE_PX = 800
JPEG_QUALITY = 80

IMAGE_PROCESSING_ERROR = (
    "The selected image could not be processed. It may be corrupted or in an "
    "unsupported format. Please try a different image."
)


class ImageProcessingError(Exception):
    """Image could not be decoded or re-encoded."""

    def __init__(self, message: str = IMAGE_PROCESSING_ERROR):
        super().__init__(message)


def prepare_image(
    content: bytes, max_side: int = MAX_SIDE_PX, quality: int = JPEG_QUALITY
) -> ImagePayload:
    """
    Downscale and re-encode a menu photo for upload.

    The longest side is capped at `max_side` (aspect preserved, never
    upscaled) and the result is JPEG at `quality`.

    Raises:
        ImageProcessingError: Undecodable or unsupported input
    """
    try:
        with Image.open(io.BytesIO(content)) as img:
            img.load()
            if img.mode != "RGB":
                img = img.convert("RGB")
            img.thumbnail((max_side, max_side), Image.Resampling.LANCZOS)

            buffer = io.BytesIO()
            img.save(buffer, format="JPEG", quality=quality, optimize=True)
    except (UnidentifiedImageError, OSError, ValueError) as e:
        logger.warning("Image processing failed", extra={"error": str(e)})
        raise ImageProcessingError() from e

    return ImagePayload(
        data=base64.b64encode(buffer.getvalue()).decode("ascii"),
        mime_type="image/jpeg",
    )
