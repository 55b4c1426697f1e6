from __future__ import annotations

import pytest

from shipin.logging import mask_secret

pytestmark = pytest.mark.unit


@pytest.mark.parametrize(
    ("secret", "expected"),
    [
        (None, "<unset>"),
        ("", "<unset>"),
        ("short", "*****"),
        ("key_0123456789abcdef", "key_…cdef"),
    ],
)
def test_mask_secret(secret: str | None, expected: str) -> None:
    assert mask_secret(secret) == expected
