from __future__ import annotations

import base64
import io

import pytest
from PIL import Image

from shipin import imaging
from shipin.exceptions import ImageTooLargeError, InvalidParametersError

pytestmark = pytest.mark.unit


def test_pillow_image_is_encoded_as_jpeg_data_uri() -> None:
    uri = imaging.to_data_uri(Image.new("RGB", (4, 4), color=(0, 128, 255)))

    assert uri.startswith(imaging.DATA_URI_PREFIX)
    payload = base64.b64decode(uri[len(imaging.DATA_URI_PREFIX):])
    assert Image.open(io.BytesIO(payload)).format == "JPEG"


def test_encoded_png_bytes_with_alpha_are_converted() -> None:
    buffer = io.BytesIO()
    Image.new("RGBA", (4, 4)).save(buffer, "PNG")

    jpeg = imaging.to_jpeg_bytes(buffer.getvalue())

    assert jpeg[:2] == b"\xff\xd8"


def test_payload_over_limit_is_rejected() -> None:
    with pytest.raises(ImageTooLargeError):
        imaging.encode_base64(Image.new("RGB", (16, 16)), limit=10)


def test_default_limit_is_three_mebibytes() -> None:
    assert imaging.MAX_BASE64_BYTES == 3 * 1024 * 1024


def test_undecodable_bytes_are_rejected() -> None:
    with pytest.raises(InvalidParametersError):
        imaging.to_jpeg_bytes(b"definitely not an image")
