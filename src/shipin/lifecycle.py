"""Task lifecycle controller: submit, poll until terminal, cancel.

Each tracked poll fetches status strictly sequentially and waits between
fetches according to :class:`WaitPolicy`. Cancellation is cooperative: it
is observed before each fetch and interrupts the inter-poll wait, but an
in-flight fetch is never aborted.
"""

from __future__ import annotations

import asyncio
import time
from collections import OrderedDict
from dataclasses import dataclass
from typing import Awaitable, Callable

import structlog

from . import normalizer
from .exceptions import PollTimeoutError, TaskCancelledError
from .models import GenerationRequest, LifecycleState, Outcome, TaskState, TaskStatus
from .providers.base import ProviderAdapter
from .registry import TaskHandleRegistry, TrackedPoll

logger = structlog.get_logger(__name__)

Sleep = Callable[[float], Awaitable[None]]
StatusCallback = Callable[[TaskStatus], None]

# Number of finished task ids whose final lifecycle state is remembered.
FINISHED_STATE_LIMIT = 256


@dataclass(frozen=True, slots=True)
class WaitPolicy:
    """Delay before the next poll, keyed by the last non-terminal state."""

    standard_seconds: float = 5.0
    throttled_seconds: float = 10.0

    def delay_for(self, state: TaskState) -> float:
        if state is TaskState.THROTTLED:
            return self.throttled_seconds
        if state in (TaskState.PENDING, TaskState.RUNNING):
            return self.standard_seconds
        raise ValueError(f"no wait policy for terminal state '{state}'")


class TaskLifecycleController:
    def __init__(
        self,
        adapter: ProviderAdapter,
        *,
        registry: TaskHandleRegistry | None = None,
        wait_policy: WaitPolicy | None = None,
        sleep: Sleep = asyncio.sleep,
        deadline_seconds: float | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.adapter = adapter
        self.registry = registry or TaskHandleRegistry()
        self.wait_policy = wait_policy or WaitPolicy()
        self.deadline_seconds = deadline_seconds
        self._sleep = sleep
        self._clock = clock
        self._finished: OrderedDict[str, LifecycleState] = OrderedDict()

    async def create_task(self, request: GenerationRequest) -> str:
        task_id = await self.adapter.submit(request)
        logger.info(
            "lifecycle.task.created",
            provider=self.adapter.provider_id,
            task_id=task_id,
        )
        return task_id

    async def poll_until_terminal(
        self,
        task_id: str,
        *,
        on_status: StatusCallback | None = None,
    ) -> Outcome:
        """Poll ``task_id`` until it succeeds, fails or is cancelled.

        Registers a tracked poll for the duration of the call and removes it
        on every exit path. Transport and decoding errors propagate
        immediately without retry.
        """
        async with self.registry.tracking(task_id) as handle:
            try:
                outcome = await self._run(handle, on_status)
            except TaskCancelledError:
                self._finish(handle, LifecycleState.CANCELLED)
                logger.info("lifecycle.poll.cancelled", task_id=task_id)
                raise
            except Exception as exc:
                self._finish(handle, LifecycleState.FAILED)
                logger.warning(
                    "lifecycle.poll.failed",
                    task_id=task_id,
                    error=type(exc).__name__,
                    detail=str(exc),
                )
                raise
            self._finish(handle, LifecycleState.SUCCEEDED)
            logger.info("lifecycle.poll.succeeded", task_id=task_id, asset_url=outcome.asset_url)
            return outcome

    def _finish(self, handle: TrackedPoll, state: LifecycleState) -> None:
        handle.state = state
        self._finished[handle.task_id] = state
        self._finished.move_to_end(handle.task_id)
        while len(self._finished) > FINISHED_STATE_LIMIT:
            self._finished.popitem(last=False)

    async def _run(self, handle: TrackedPoll, on_status: StatusCallback | None) -> Outcome:
        started = self._clock()
        polls = 0
        while True:
            if handle.cancel_requested:
                raise TaskCancelledError(handle.task_id)

            handle.state = LifecycleState.POLLING
            status = await self.adapter.fetch_status(handle.task_id)
            polls += 1
            logger.debug(
                "lifecycle.poll.status",
                task_id=handle.task_id,
                state=str(status.state),
                progress=status.progress,
                polls=polls,
            )
            if on_status is not None:
                on_status(status)

            if status.is_terminal:
                return normalizer.classify(status, kind=self.adapter.outcome_kind)

            delay = self.wait_policy.delay_for(status.state)
            if self.deadline_seconds is not None:
                elapsed = self._clock() - started
                if elapsed + delay > self.deadline_seconds:
                    raise PollTimeoutError(handle.task_id, deadline_seconds=self.deadline_seconds)
            await self._wait(handle, delay)

    async def _wait(self, handle: TrackedPoll, delay: float) -> None:
        """Sleep ``delay`` seconds, returning early once cancellation is requested."""
        if handle.cancel_requested:
            return
        sleeper = asyncio.ensure_future(self._sleep(delay))
        watcher = asyncio.ensure_future(handle.wait_cancelled())
        try:
            await asyncio.wait({sleeper, watcher}, return_when=asyncio.FIRST_COMPLETED)
        finally:
            pending = [task for task in (sleeper, watcher) if not task.done()]
            for task in pending:
                task.cancel()
            if pending:
                await asyncio.gather(*pending, return_exceptions=True)
        if sleeper.done() and not sleeper.cancelled():
            sleeper.result()

    async def cancel(self, task_id: str, *, remote: bool = False) -> None:
        """Request cancellation of a tracked poll; unknown ids are a no-op.

        With ``remote=True`` the provider is also asked to cancel the task.
        """
        tracked = await self.registry.cancel(task_id)
        logger.info("lifecycle.cancel", task_id=task_id, tracked=tracked, remote=remote)
        if remote:
            await self.adapter.cancel_remote(task_id)

    async def generate(
        self,
        request: GenerationRequest,
        *,
        on_status: StatusCallback | None = None,
    ) -> Outcome:
        task_id = await self.create_task(request)
        return await self.poll_until_terminal(task_id, on_status=on_status)

    def state_of(self, task_id: str) -> LifecycleState | None:
        """Live state of a tracked poll, else the final state of the last finished one."""
        handle = self.registry.get(task_id)
        if handle is not None:
            return handle.state
        return self._finished.get(task_id)

    @staticmethod
    def describe_status(status: TaskStatus) -> str:
        return normalizer.describe(status)
