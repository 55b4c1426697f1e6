"""Base interface for video provider adapters.

Adapters translate a :class:`GenerationRequest` into a provider-specific
wire request and map provider status payloads into :class:`TaskStatus`.
They never retry; re-polling belongs to the lifecycle controller.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import ClassVar, TypeVar

from pydantic import BaseModel, ValidationError

from ..exceptions import DecodingError, error_for_status
from ..models import GenerationRequest, OutcomeKind, TaskStatus
from ..transport import HttpTransport, TransportRequest, TransportResponse

ModelT = TypeVar("ModelT", bound=BaseModel)


class ProviderAdapter(ABC):
    """Capability interface shared by every provider variant."""

    provider_id: ClassVar[str]
    outcome_kind: ClassVar[OutcomeKind]

    @abstractmethod
    async def submit(self, request: GenerationRequest) -> str:
        """Create a remote task and return its identifier."""

    @abstractmethod
    async def fetch_status(self, task_id: str) -> TaskStatus:
        """Fetch a fresh status snapshot for ``task_id``."""

    @abstractmethod
    async def cancel_remote(self, task_id: str) -> None:
        """Ask the provider to cancel or delete ``task_id``."""


async def send_checked(
    transport: HttpTransport,
    request: TransportRequest,
    *,
    operation: str,
    log: logging.Logger,
) -> TransportResponse:
    """Send ``request`` and raise the mapped protocol error for non-2xx statuses."""

    response = await transport.send(request)
    log.info(
        "%s.response",
        operation,
        extra={"operation": operation, "status_code": response.status_code},
    )
    error = error_for_status(response.status_code)
    if error is not None:
        log.error(
            "%s.failed status=%s",
            operation,
            response.status_code,
            extra={"operation": operation, "status_code": response.status_code},
        )
        raise error
    return response


def decode_body(model: type[ModelT], content: bytes, *, operation: str, log: logging.Logger) -> ModelT:
    """Validate a JSON body against ``model``; shape mismatches become DecodingError."""

    try:
        return model.model_validate_json(content)
    except ValidationError as exc:
        log.error(
            "%s.decode_failed",
            operation,
            extra={"operation": operation, "error_count": exc.error_count()},
        )
        raise DecodingError() from exc


def bearer_headers(api_key: str, **extra: str) -> dict[str, str]:
    headers = {
        "Authorization": f"Bearer {api_key}",
        "Accept": "application/json",
    }
    headers.update(extra)
    return headers
