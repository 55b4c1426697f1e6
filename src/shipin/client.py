"""High level facade bundling one adapter with its lifecycle controller."""

from __future__ import annotations

import asyncio

from .config import ShipinSettings, get_settings
from .lifecycle import Sleep, StatusCallback, TaskLifecycleController, WaitPolicy
from .models import GenerationRequest, LifecycleState, Outcome, TaskStatus
from .providers.base import ProviderAdapter
from .providers.factory import create_adapter
from .transport import HttpTransport


class ShipinClient:
    """Generate videos through the provider selected at construction.

    The outcome variant (:class:`VideoUrl` or :class:`GenerationRecord`) is
    fixed by the configured adapter's ``outcome_kind``.
    """

    def __init__(
        self,
        adapter: ProviderAdapter,
        *,
        wait_policy: WaitPolicy | None = None,
        deadline_seconds: float | None = None,
        sleep: Sleep = asyncio.sleep,
        transport: HttpTransport | None = None,
    ) -> None:
        self.adapter = adapter
        self.controller = TaskLifecycleController(
            adapter,
            wait_policy=wait_policy,
            deadline_seconds=deadline_seconds,
            sleep=sleep,
        )
        self._transport = transport or getattr(adapter, "transport", None)

    @classmethod
    def for_provider(
        cls,
        name: str,
        *,
        settings: ShipinSettings | None = None,
        transport: HttpTransport | None = None,
        sleep: Sleep = asyncio.sleep,
    ) -> "ShipinClient":
        settings = settings or get_settings()
        transport = transport or HttpTransport(timeout_seconds=settings.request_timeout_seconds)
        adapter = create_adapter(name, settings=settings, transport=transport)
        return cls(
            adapter,
            wait_policy=WaitPolicy(
                standard_seconds=settings.poll_interval_seconds,
                throttled_seconds=settings.throttled_interval_seconds,
            ),
            deadline_seconds=settings.poll_deadline_seconds,
            sleep=sleep,
            transport=transport,
        )

    async def create_task(self, request: GenerationRequest) -> str:
        return await self.controller.create_task(request)

    async def poll_until_terminal(
        self, task_id: str, *, on_status: StatusCallback | None = None
    ) -> Outcome:
        return await self.controller.poll_until_terminal(task_id, on_status=on_status)

    async def generate(
        self, request: GenerationRequest, *, on_status: StatusCallback | None = None
    ) -> Outcome:
        return await self.controller.generate(request, on_status=on_status)

    async def cancel(self, task_id: str, *, remote: bool = False) -> None:
        await self.controller.cancel(task_id, remote=remote)

    def state_of(self, task_id: str) -> LifecycleState | None:
        return self.controller.state_of(task_id)

    def describe_status(self, status: TaskStatus) -> str:
        return self.controller.describe_status(status)

    async def aclose(self) -> None:
        if self._transport is not None:
            await self._transport.aclose()

    async def __aenter__(self) -> "ShipinClient":
        return self

    async def __aexit__(self, exc_type, exc_value, traceback) -> None:
        await self.aclose()
