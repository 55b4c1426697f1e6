"""Client library for asynchronous video generation providers."""

from .client import ShipinClient
from .exceptions import (
    DecodingError,
    JobFailure,
    ProtocolError,
    RequestValidationError,
    ShipinError,
    TaskCancelledError,
    TransportError,
)
from .lifecycle import TaskLifecycleController, WaitPolicy
from .models import (
    AspectRatio,
    GenerationRecord,
    GenerationRequest,
    ImageReference,
    LifecycleState,
    Outcome,
    TaskState,
    TaskStatus,
    VideoDuration,
    VideoUrl,
)
from .registry import TaskHandleRegistry

__all__ = [
    "AspectRatio",
    "DecodingError",
    "GenerationRecord",
    "GenerationRequest",
    "ImageReference",
    "JobFailure",
    "LifecycleState",
    "Outcome",
    "ProtocolError",
    "RequestValidationError",
    "ShipinClient",
    "ShipinError",
    "TaskCancelledError",
    "TaskHandleRegistry",
    "TaskLifecycleController",
    "TaskState",
    "TaskStatus",
    "TransportError",
    "VideoDuration",
    "VideoUrl",
    "WaitPolicy",
]
