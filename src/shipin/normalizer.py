"""Terminal status classification and human-readable status rendering."""

from __future__ import annotations

from .exceptions import JobFailure
from .models import (
    GenerationRecord,
    Outcome,
    OutcomeKind,
    TaskState,
    TaskStatus,
    VideoUrl,
)

MISSING_OUTPUT_REASON = "missing output"
MISSING_OUTPUT_CODE = "missing_output"


def classify(status: TaskStatus, *, kind: OutcomeKind = OutcomeKind.VIDEO_URL) -> Outcome:
    """Convert a terminal status into an outcome or raise :class:`JobFailure`.

    Only the first output is used. A success without outputs is a failure,
    not a retry condition. Non-terminal statuses are rejected with
    ``ValueError``.
    """

    if not status.is_terminal:
        raise ValueError(f"cannot classify non-terminal status '{status.state}'")

    if status.state is TaskState.FAILED:
        raise JobFailure(
            status.failure or "Unknown error",
            code=status.failure_code,
            task_id=status.task_id,
        )

    if not status.outputs:
        raise JobFailure(MISSING_OUTPUT_REASON, code=MISSING_OUTPUT_CODE, task_id=status.task_id)

    first = status.outputs[0]
    if kind is OutcomeKind.GENERATION_RECORD:
        return GenerationRecord(
            task_id=status.task_id,
            video_url=first,
            created_at=status.created_at,
            outputs=status.outputs,
        )
    return VideoUrl(task_id=status.task_id, url=first)


def _created_at(status: TaskStatus) -> str:
    return status.created_at.isoformat() if status.created_at else "unknown"


def describe(status: TaskStatus) -> str:
    """Render a one-line summary of any status (presentation only)."""

    created = _created_at(status)
    task_id = status.task_id
    if status.state is TaskState.PENDING:
        return f"Task {task_id} is pending. Created at: {created}"
    if status.state is TaskState.THROTTLED:
        return f"Task {task_id} is throttled. Created at: {created}"
    if status.state is TaskState.RUNNING:
        progress = f"{status.progress * 100:.0f}%" if status.progress is not None else "Unknown"
        return f"Task {task_id} is running. Progress: {progress}. Created at: {created}"
    if status.state is TaskState.SUCCEEDED:
        outputs = ", ".join(status.outputs) if status.outputs else "No outputs available"
        return f"Task {task_id} has succeeded. Outputs: {outputs}. Created at: {created}"
    failure = status.failure or "Unknown error"
    code = status.failure_code or "No failure code"
    return (
        f"Task {task_id} has failed. Reason: {failure}. "
        f"Failure code: {code}. Created at: {created}"
    )


__all__ = ["classify", "describe", "MISSING_OUTPUT_REASON", "MISSING_OUTPUT_CODE"]
