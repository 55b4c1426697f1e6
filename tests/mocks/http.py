"""httpx mock handler shared by adapter tests."""

from __future__ import annotations

import httpx


class RecordingHandler:
    """Records requests and replays queued responses (or raises queued errors)."""

    def __init__(self, responses: list[httpx.Response | Exception] | None = None) -> None:
        self.responses = list(responses or [])
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if not self.responses:
            raise RuntimeError("No responses queued")
        item = self.responses.pop(0)
        if isinstance(item, Exception):
            raise item
        return item
