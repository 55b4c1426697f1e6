"""In-memory registry of tracked polls keyed by task identifier."""

from __future__ import annotations

import asyncio
import logging
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from typing import AsyncIterator

from .models import LifecycleState

logger = logging.getLogger(__name__)


@dataclass(slots=True, eq=False)
class TrackedPoll:
    """Cancellable handle for one in-flight polling operation."""

    task_id: str
    state: LifecycleState = LifecycleState.INITIAL
    superseded: TrackedPoll | None = field(default=None, repr=False)
    _cancel_event: asyncio.Event = field(default_factory=asyncio.Event, repr=False)
    _finished_event: asyncio.Event = field(default_factory=asyncio.Event, repr=False)

    def request_cancel(self) -> None:
        self._cancel_event.set()

    @property
    def cancel_requested(self) -> bool:
        return self._cancel_event.is_set()

    async def wait_cancelled(self) -> None:
        await self._cancel_event.wait()

    def mark_finished(self) -> None:
        self._finished_event.set()

    async def wait_finished(self) -> None:
        await self._finished_event.wait()


class TaskHandleRegistry:
    """Holds at most one live :class:`TrackedPoll` per task identifier.

    Registration, cancellation and removal run under a single
    ``asyncio.Lock`` so concurrent polls never observe a half-updated entry.
    """

    def __init__(self) -> None:
        self._handles: dict[str, TrackedPoll] = {}
        self._lock = asyncio.Lock()

    async def track(self, task_id: str) -> TrackedPoll:
        """Register a new handle, superseding (cancelling) any prior one."""
        async with self._lock:
            prior = self._handles.get(task_id)
            if prior is not None:
                prior.request_cancel()
                logger.info("registry.poll.superseded", extra={"task_id": task_id})
            handle = TrackedPoll(task_id=task_id, superseded=prior)
            self._handles[task_id] = handle
            return handle

    async def cancel(self, task_id: str) -> bool:
        """Request cancellation; unknown identifiers are a no-op."""
        async with self._lock:
            handle = self._handles.get(task_id)
            if handle is None:
                return False
            handle.request_cancel()
            logger.info("registry.poll.cancel_requested", extra={"task_id": task_id})
            return True

    async def untrack(self, handle: TrackedPoll) -> None:
        """Remove ``handle`` unless it was already superseded."""
        async with self._lock:
            if self._handles.get(handle.task_id) is handle:
                del self._handles[handle.task_id]

    @asynccontextmanager
    async def tracking(self, task_id: str) -> AsyncIterator[TrackedPoll]:
        """Track ``task_id`` for the duration of the block.

        A superseded poll may still have a fetch in flight; the block is
        entered only once that poll has exited.
        """
        handle = await self.track(task_id)
        try:
            prior, handle.superseded = handle.superseded, None
            if prior is not None:
                await prior.wait_finished()
            yield handle
        finally:
            handle.mark_finished()
            await self.untrack(handle)

    def get(self, task_id: str) -> TrackedPoll | None:
        return self._handles.get(task_id)

    def __contains__(self, task_id: object) -> bool:
        return task_id in self._handles

    def __len__(self) -> int:
        return len(self._handles)
