"""Luma dream-machine provider adapter.

Generation creation returns the full generation record (state, assets,
echoed request); the same record shape is returned by status fetches.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import ClassVar

from pydantic import BaseModel, TypeAdapter, ValidationError

from ..exceptions import DecodingError, InvalidParametersError
from ..logging import mask_secret
from ..models import GenerationRequest, OutcomeKind, TaskState, TaskStatus
from ..transport import HttpTransport, TransportRequest
from .base import ProviderAdapter, bearer_headers, decode_body, send_checked

logger = logging.getLogger(__name__)

_CAMERA_MOTIONS = TypeAdapter(list[str])


class LumaKeyframe(BaseModel):
    type: str
    url: str | None = None
    id: str | None = None


class LumaGenerationRequest(BaseModel):
    prompt: str
    aspect_ratio: str = "16:9"
    loop: bool = False
    keyframes: dict[str, LumaKeyframe] | None = None
    callback_url: str | None = None


class LumaAssets(BaseModel):
    video: str | None = None


class LumaGeneration(BaseModel):
    id: str
    state: str
    failure_reason: str | None = None
    created_at: datetime | None = None
    assets: LumaAssets | None = None
    version: str | None = None
    request: LumaGenerationRequest | None = None


class LumaGenerationList(BaseModel):
    generations: list[LumaGeneration]
    has_more: bool = False
    count: int | None = None


_STATE_MAP = {
    "queued": TaskState.PENDING,
    "dreaming": TaskState.RUNNING,
    "completed": TaskState.SUCCEEDED,
    "failed": TaskState.FAILED,
}


def to_task_status(generation: LumaGeneration) -> TaskStatus:
    state = _STATE_MAP.get(generation.state)
    if state is None:
        raise DecodingError(f"Unknown generation state '{generation.state}'.")
    video = generation.assets.video if generation.assets else None
    return TaskStatus(
        task_id=generation.id,
        state=state,
        created_at=generation.created_at,
        outputs=(video,) if video else (),
        failure=generation.failure_reason,
    )


@dataclass(slots=True)
class LumaAdapter(ProviderAdapter):
    """Call the Luma dream-machine generations API."""

    provider_id: ClassVar[str] = "luma"
    outcome_kind: ClassVar[OutcomeKind] = OutcomeKind.GENERATION_RECORD

    transport: HttpTransport
    api_key: str
    base_url: str = "https://api.lumalabs.ai"
    create_timeout_seconds: float = 10.0
    callback_url: str | None = None
    log: logging.Logger = field(default_factory=lambda: logger)

    def __post_init__(self) -> None:
        if not self.api_key:
            raise InvalidParametersError("Luma API key is required")
        self.base_url = self.base_url.rstrip("/")
        self.log.info("luma.adapter.init", extra={"api_key": mask_secret(self.api_key)})

    @property
    def _generations_url(self) -> str:
        return f"{self.base_url}/dream-machine/v1/generations"

    def build_payload(self, request: GenerationRequest) -> dict[str, object]:
        """Validate locally and build the snake_case wire body."""

        request.validate()
        keyframes: dict[str, LumaKeyframe] | None = None
        if request.image is not None:
            if request.image.is_inline:
                raise InvalidParametersError("Luma keyframes require a remote image URL")
            keyframes = {"frame0": LumaKeyframe(type="image", url=request.image.url)}
        body = LumaGenerationRequest(
            prompt=request.prompt,
            aspect_ratio=request.aspect_ratio.value,
            loop=request.loop,
            keyframes=keyframes,
            callback_url=self.callback_url,
        )
        return body.model_dump(exclude_none=True)

    async def create_generation(self, request: GenerationRequest) -> LumaGeneration:
        """Create a generation and return the full record."""

        payload = self.build_payload(request)
        self.log.info(
            "luma.generation.create",
            extra={
                "aspect_ratio": request.aspect_ratio.value,
                "loop": request.loop,
                "has_keyframes": "keyframes" in payload,
            },
        )
        response = await send_checked(
            self.transport,
            TransportRequest(
                method="POST",
                url=self._generations_url,
                headers=bearer_headers(self.api_key, **{"Content-Type": "application/json"}),
                json=payload,
                timeout=self.create_timeout_seconds,
            ),
            operation="luma.generation.create",
            log=self.log,
        )
        generation = decode_body(
            LumaGeneration, response.content, operation="luma.generation.create", log=self.log
        )
        self.log.info(
            "luma.generation.created",
            extra={"task_id": generation.id, "state": generation.state},
        )
        return generation

    async def submit(self, request: GenerationRequest) -> str:
        return (await self.create_generation(request)).id

    async def get_generation(self, generation_id: str) -> LumaGeneration:
        response = await send_checked(
            self.transport,
            TransportRequest(
                method="GET",
                url=f"{self._generations_url}/{generation_id}",
                headers=bearer_headers(self.api_key),
            ),
            operation="luma.generation.get",
            log=self.log,
        )
        return decode_body(
            LumaGeneration, response.content, operation="luma.generation.get", log=self.log
        )

    async def fetch_status(self, task_id: str) -> TaskStatus:
        return to_task_status(await self.get_generation(task_id))

    async def list_generations(self, *, limit: int = 10, offset: int = 0) -> LumaGenerationList:
        response = await send_checked(
            self.transport,
            TransportRequest(
                method="GET",
                url=self._generations_url,
                headers=bearer_headers(self.api_key),
                params={"limit": limit, "offset": offset},
            ),
            operation="luma.generation.list",
            log=self.log,
        )
        return decode_body(
            LumaGenerationList, response.content, operation="luma.generation.list", log=self.log
        )

    async def delete_generation(self, generation_id: str) -> None:
        await send_checked(
            self.transport,
            TransportRequest(
                method="DELETE",
                url=f"{self._generations_url}/{generation_id}",
                headers=bearer_headers(self.api_key),
            ),
            operation="luma.generation.delete",
            log=self.log,
        )
        self.log.info("luma.generation.deleted", extra={"task_id": generation_id})

    async def cancel_remote(self, task_id: str) -> None:
        await self.delete_generation(task_id)

    async def list_camera_motions(self) -> list[str]:
        response = await send_checked(
            self.transport,
            TransportRequest(
                method="GET",
                url=f"{self._generations_url}/camera_motion/list",
                headers=bearer_headers(self.api_key),
            ),
            operation="luma.camera_motion.list",
            log=self.log,
        )
        try:
            return _CAMERA_MOTIONS.validate_json(response.content)
        except ValidationError as exc:
            raise DecodingError() from exc
