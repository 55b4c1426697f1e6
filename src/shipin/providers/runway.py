"""Runway image-to-video provider adapter.

The create call front-loads every generation parameter (duration, ratio,
seed, watermark) and returns only a task id; status is fetched from
``GET /tasks/{id}``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime
from enum import StrEnum
from typing import ClassVar

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from ..exceptions import InvalidParametersError, InvalidResponseError
from ..imaging import to_data_uri
from ..logging import mask_secret
from ..models import AspectRatio, GenerationRequest, OutcomeKind, TaskState, TaskStatus
from ..transport import HttpTransport, TransportRequest
from .base import ProviderAdapter, bearer_headers, decode_body, send_checked

logger = logging.getLogger(__name__)

SUPPORTED_RATIOS = frozenset({AspectRatio.WIDESCREEN, AspectRatio.PORTRAIT})


class _RunwayWire(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class RunwayImageToVideoRequest(_RunwayWire):
    prompt_image: str
    model: str
    prompt_text: str
    watermark: bool
    duration: int
    ratio: str
    seed: int | None = None


class RunwayTaskCreated(_RunwayWire):
    id: str


class RunwayTaskStatus(StrEnum):
    PENDING = "PENDING"
    THROTTLED = "THROTTLED"
    RUNNING = "RUNNING"
    SUCCEEDED = "SUCCEEDED"
    FAILED = "FAILED"
    CANCELLED = "CANCELLED"


class RunwayTaskResponse(_RunwayWire):
    id: str
    status: RunwayTaskStatus
    created_at: datetime | None = None
    progress: float | None = None
    output: list[str] | None = None
    failure: str | None = None
    failure_code: str | None = None


_STATE_MAP = {
    RunwayTaskStatus.PENDING: TaskState.PENDING,
    RunwayTaskStatus.THROTTLED: TaskState.THROTTLED,
    RunwayTaskStatus.RUNNING: TaskState.RUNNING,
    RunwayTaskStatus.SUCCEEDED: TaskState.SUCCEEDED,
    RunwayTaskStatus.FAILED: TaskState.FAILED,
    RunwayTaskStatus.CANCELLED: TaskState.FAILED,
}


def to_task_status(task: RunwayTaskResponse) -> TaskStatus:
    state = _STATE_MAP[task.status]
    failure = task.failure
    failure_code = task.failure_code
    if task.status is RunwayTaskStatus.CANCELLED:
        failure = failure or "Task was cancelled by the provider"
        failure_code = failure_code or "CANCELLED"
    return TaskStatus(
        task_id=task.id,
        state=state,
        created_at=task.created_at,
        progress=task.progress,
        outputs=tuple(task.output or ()),
        failure=failure,
        failure_code=failure_code,
    )


@dataclass(slots=True)
class RunwayAdapter(ProviderAdapter):
    """Call the Runway REST API (``image_to_video`` + ``tasks``)."""

    provider_id: ClassVar[str] = "runway"
    outcome_kind: ClassVar[OutcomeKind] = OutcomeKind.VIDEO_URL

    transport: HttpTransport
    api_key: str
    base_url: str = "https://api.dev.runwayml.com/v1"
    api_version: str = "2024-09-13"
    model: str = "gen3a_turbo"
    create_timeout_seconds: float | None = None
    log: logging.Logger = field(default_factory=lambda: logger)

    def __post_init__(self) -> None:
        if not self.api_key:
            raise InvalidParametersError("Runway API key is required")
        self.base_url = self.base_url.rstrip("/")
        self.log.info(
            "runway.adapter.init",
            extra={"api_key": mask_secret(self.api_key), "api_version": self.api_version},
        )

    def _headers(self) -> dict[str, str]:
        return bearer_headers(
            self.api_key,
            **{"X-Runway-Version": self.api_version},
        )

    def build_payload(self, request: GenerationRequest) -> dict[str, object]:
        """Validate locally and build the camelCase wire body."""

        request.validate()
        if request.image is None:
            raise InvalidParametersError("Runway requires a prompt image")
        if request.aspect_ratio not in SUPPORTED_RATIOS:
            raise InvalidParametersError(
                f"Runway does not support aspect ratio {request.aspect_ratio.value}"
            )
        if request.image.is_inline:
            prompt_image = to_data_uri(request.image.data)
        else:
            prompt_image = request.image.url
        body = RunwayImageToVideoRequest(
            prompt_image=prompt_image,
            model=self.model,
            prompt_text=request.prompt,
            watermark=request.watermark,
            duration=int(request.duration),
            ratio=request.aspect_ratio.value,
            seed=request.seed,
        )
        return body.model_dump(by_alias=True, exclude_none=True)

    async def submit(self, request: GenerationRequest) -> str:
        payload = self.build_payload(request)
        self.log.info(
            "runway.task.create",
            extra={
                "duration": int(request.duration),
                "ratio": request.aspect_ratio.value,
                "watermark": request.watermark,
                "prompt_len": len(request.prompt),
            },
        )
        response = await send_checked(
            self.transport,
            TransportRequest(
                method="POST",
                url=f"{self.base_url}/image_to_video",
                headers={**self._headers(), "Content-Type": "application/json"},
                json=payload,
                timeout=self.create_timeout_seconds,
            ),
            operation="runway.task.create",
            log=self.log,
        )
        created = decode_body(
            RunwayTaskCreated, response.content, operation="runway.task.create", log=self.log
        )
        self.log.info("runway.task.created", extra={"task_id": created.id})
        return created.id

    async def get_task(self, task_id: str) -> RunwayTaskResponse:
        """Return the raw task details for ``task_id``."""

        response = await send_checked(
            self.transport,
            TransportRequest(
                method="GET",
                url=f"{self.base_url}/tasks/{task_id}",
                headers=self._headers(),
            ),
            operation="runway.task.get",
            log=self.log,
        )
        return decode_body(
            RunwayTaskResponse, response.content, operation="runway.task.get", log=self.log
        )

    async def fetch_status(self, task_id: str) -> TaskStatus:
        return to_task_status(await self.get_task(task_id))

    async def cancel_remote(self, task_id: str) -> None:
        """Cancel a running task or delete a finished one (expects 204)."""

        response = await send_checked(
            self.transport,
            TransportRequest(
                method="DELETE",
                url=f"{self.base_url}/tasks/{task_id}",
                headers=self._headers(),
            ),
            operation="runway.task.delete",
            log=self.log,
        )
        if response.status_code != 204:
            raise InvalidResponseError(
                f"Unexpected status code {response.status_code} when cancelling task.",
                status_code=response.status_code,
            )
        self.log.info("runway.task.deleted", extra={"task_id": task_id})
