"""Value types for generation requests, task statuses and outcomes."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import IntEnum, StrEnum
from typing import TypeAlias

from .exceptions import InvalidParametersError, InvalidSeedError

SEED_MIN = 0
SEED_MAX = 999_999_999


class VideoDuration(IntEnum):
    """Clip length in seconds."""

    SHORT = 5
    LONG = 10


class AspectRatio(StrEnum):
    WIDESCREEN = "16:9"
    PORTRAIT = "9:16"
    SQUARE = "1:1"


@dataclass(frozen=True, slots=True)
class ImageReference:
    """Either a remote URL or inline image bytes, never both."""

    url: str | None = None
    data: bytes | None = None

    def __post_init__(self) -> None:
        if (self.url is None) == (self.data is None):
            raise InvalidParametersError("Image reference needs exactly one of url or data")

    @classmethod
    def from_url(cls, url: str) -> "ImageReference":
        return cls(url=url)

    @classmethod
    def from_bytes(cls, data: bytes) -> "ImageReference":
        return cls(data=data)

    @property
    def is_inline(self) -> bool:
        return self.data is not None


@dataclass(frozen=True, slots=True)
class GenerationRequest:
    """Provider-neutral description of one generation job."""

    prompt: str
    image: ImageReference | None = None
    duration: VideoDuration = VideoDuration.SHORT
    aspect_ratio: AspectRatio = AspectRatio.WIDESCREEN
    watermark: bool = False
    seed: int | None = None
    loop: bool = False

    def validate(self) -> None:
        """Fail fast on local constraints (seed range)."""

        if self.seed is not None and not SEED_MIN <= self.seed <= SEED_MAX:
            raise InvalidSeedError()


class TaskState(StrEnum):
    PENDING = "pending"
    THROTTLED = "throttled"
    RUNNING = "running"
    SUCCEEDED = "succeeded"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self in (TaskState.SUCCEEDED, TaskState.FAILED)


@dataclass(frozen=True, slots=True)
class TaskStatus:
    """Normalized snapshot of a remote task, fetched fresh on every poll.

    ``progress`` is only meaningful for RUNNING, ``outputs`` for SUCCEEDED,
    ``failure``/``failure_code`` for FAILED.
    """

    task_id: str
    state: TaskState
    created_at: datetime | None = None
    progress: float | None = None
    outputs: tuple[str, ...] = ()
    failure: str | None = None
    failure_code: str | None = None

    @property
    def is_terminal(self) -> bool:
        return self.state.is_terminal

    @classmethod
    def pending(cls, task_id: str, **kwargs) -> "TaskStatus":
        return cls(task_id=task_id, state=TaskState.PENDING, **kwargs)

    @classmethod
    def throttled(cls, task_id: str, **kwargs) -> "TaskStatus":
        return cls(task_id=task_id, state=TaskState.THROTTLED, **kwargs)

    @classmethod
    def running(cls, task_id: str, progress: float | None = None, **kwargs) -> "TaskStatus":
        return cls(task_id=task_id, state=TaskState.RUNNING, progress=progress, **kwargs)

    @classmethod
    def succeeded(cls, task_id: str, outputs: list[str] | tuple[str, ...], **kwargs) -> "TaskStatus":
        return cls(task_id=task_id, state=TaskState.SUCCEEDED, outputs=tuple(outputs), **kwargs)

    @classmethod
    def failed(
        cls, task_id: str, reason: str | None = None, code: str | None = None, **kwargs
    ) -> "TaskStatus":
        return cls(
            task_id=task_id,
            state=TaskState.FAILED,
            failure=reason,
            failure_code=code,
            **kwargs,
        )


class OutcomeKind(StrEnum):
    """Which outcome variant an adapter resolves to."""

    VIDEO_URL = "video_url"
    GENERATION_RECORD = "generation_record"


@dataclass(frozen=True, slots=True)
class VideoUrl:
    """Bare asset URL (image-to-video providers)."""

    task_id: str
    url: str

    @property
    def asset_url(self) -> str:
        return self.url


@dataclass(frozen=True, slots=True)
class GenerationRecord:
    """Generation record carrying the asset URL plus provider metadata."""

    task_id: str
    video_url: str
    created_at: datetime | None = None
    outputs: tuple[str, ...] = field(default_factory=tuple)

    @property
    def asset_url(self) -> str:
        return self.video_url


Outcome: TypeAlias = VideoUrl | GenerationRecord


class LifecycleState(StrEnum):
    """Local state of a tracked poll."""

    INITIAL = "initial"
    POLLING = "polling"
    SUCCEEDED = "succeeded"
    FAILED = "failed"
    CANCELLED = "cancelled"
