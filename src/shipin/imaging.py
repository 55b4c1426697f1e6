"""Image encoding helpers for inline prompt images."""

from __future__ import annotations

import base64
import io
import logging

from PIL import Image, UnidentifiedImageError

from .exceptions import ImageTooLargeError, InvalidParametersError

logger = logging.getLogger(__name__)

MAX_BASE64_BYTES = 3 * 1024 * 1024
DATA_URI_PREFIX = "data:image/jpeg;base64,"


def to_jpeg_bytes(image: Image.Image | bytes) -> bytes:
    """Re-encode an in-memory image (Pillow image or encoded bytes) as JPEG."""

    if isinstance(image, bytes):
        try:
            image = Image.open(io.BytesIO(image))
            image.load()
        except (UnidentifiedImageError, OSError) as exc:
            raise InvalidParametersError(f"Image conversion failed: {exc}") from exc
    if image.mode not in ("RGB", "L"):
        image = image.convert("RGB")
    buffer = io.BytesIO()
    image.save(buffer, "JPEG", quality=95)
    return buffer.getvalue()


def encode_base64(image: Image.Image | bytes, *, limit: int = MAX_BASE64_BYTES) -> str:
    """Return the base64 JPEG payload, rejecting anything above ``limit`` bytes."""

    encoded = base64.b64encode(to_jpeg_bytes(image)).decode("ascii")
    if len(encoded) > limit:
        logger.error(
            "imaging.encode.too_large",
            extra={"encoded_bytes": len(encoded), "limit": limit},
        )
        raise ImageTooLargeError()
    return encoded


def to_data_uri(image: Image.Image | bytes, *, limit: int = MAX_BASE64_BYTES) -> str:
    return DATA_URI_PREFIX + encode_base64(image, limit=limit)
