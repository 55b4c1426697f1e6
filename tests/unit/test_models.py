from __future__ import annotations

import pytest

from shipin.exceptions import (
    BadRequestError,
    InvalidParametersError,
    InvalidResponseError,
    InvalidSeedError,
    MethodNotAllowedError,
    NotFoundError,
    RateLimitExceededError,
    ServiceUnavailableError,
    UnauthorizedError,
    error_for_status,
)
from shipin.models import GenerationRequest, ImageReference, TaskState

pytestmark = pytest.mark.unit


@pytest.mark.parametrize("seed", [-1, 1_000_000_000, 2**31])
def test_seed_outside_range_fails_validation(seed: int) -> None:
    request = GenerationRequest(prompt="p", seed=seed)

    with pytest.raises(InvalidSeedError, match="between 0 and 999999999"):
        request.validate()


@pytest.mark.parametrize("seed", [None, 0, 42, 999_999_999])
def test_seed_inside_range_is_accepted(seed: int | None) -> None:
    GenerationRequest(prompt="p", seed=seed).validate()


def test_image_reference_requires_exactly_one_source() -> None:
    with pytest.raises(InvalidParametersError):
        ImageReference()
    with pytest.raises(InvalidParametersError):
        ImageReference(url="https://x", data=b"y")

    assert ImageReference.from_bytes(b"jpg").is_inline
    assert not ImageReference.from_url("https://x").is_inline


def test_terminal_states() -> None:
    assert {s for s in TaskState if s.is_terminal} == {TaskState.SUCCEEDED, TaskState.FAILED}


@pytest.mark.parametrize(
    ("status_code", "error_cls"),
    [
        (400, BadRequestError),
        (401, UnauthorizedError),
        (404, NotFoundError),
        (405, MethodNotAllowedError),
        (429, RateLimitExceededError),
        (502, ServiceUnavailableError),
        (503, ServiceUnavailableError),
        (504, ServiceUnavailableError),
        (418, InvalidResponseError),
        (500, InvalidResponseError),
    ],
)
def test_error_for_status_table(status_code: int, error_cls: type) -> None:
    error = error_for_status(status_code)

    assert type(error) is error_cls
    assert error.status_code == status_code
    assert error.message


@pytest.mark.parametrize("status_code", [200, 201, 204])
def test_error_for_status_success(status_code: int) -> None:
    assert error_for_status(status_code) is None
