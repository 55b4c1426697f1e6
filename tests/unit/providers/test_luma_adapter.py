from __future__ import annotations

import json
from typing import Any

import httpx
import pytest

from shipin.exceptions import DecodingError, InvalidParametersError, InvalidSeedError, NotFoundError
from shipin.models import AspectRatio, GenerationRequest, ImageReference, TaskState
from shipin.providers.luma import LumaAdapter
from shipin.transport import HttpTransport
from tests.mocks.http import RecordingHandler

pytestmark = pytest.mark.unit

API_KEY = "luma-secret-key-abcdef"
BASE_URL = "https://luma.test"


def make_adapter(handler: RecordingHandler) -> LumaAdapter:
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return LumaAdapter(
        transport=HttpTransport(client=client),
        api_key=API_KEY,
        base_url=BASE_URL,
        callback_url="https://hooks.test/luma",
    )


def generation(state: str, **overrides: Any) -> dict[str, Any]:
    body: dict[str, Any] = {
        "id": "gen-1",
        "state": state,
        "failure_reason": None,
        "created_at": "2024-10-13T12:00:00.000Z",
        "assets": {"video": None},
        "version": "v1.6",
        "request": {
            "prompt": "a cat surfing",
            "aspect_ratio": "16:9",
            "loop": False,
            "keyframes": {"frame0": {"type": "image", "url": "https://img.test/cat.jpg"}},
        },
    }
    body.update(overrides)
    return body


@pytest.mark.asyncio
async def test_create_generation_sends_snake_case_body_with_short_timeout() -> None:
    handler = RecordingHandler([httpx.Response(201, json=generation("queued"))])
    adapter = make_adapter(handler)

    record = await adapter.create_generation(
        GenerationRequest(
            prompt="a cat surfing",
            image=ImageReference.from_url("https://img.test/cat.jpg"),
            aspect_ratio=AspectRatio.SQUARE,
            loop=True,
        )
    )

    assert record.id == "gen-1"
    assert record.version == "v1.6"
    (request,) = handler.requests
    assert str(request.url) == f"{BASE_URL}/dream-machine/v1/generations"
    assert request.headers["Authorization"] == f"Bearer {API_KEY}"
    assert "X-Runway-Version" not in request.headers
    assert request.extensions["timeout"]["read"] == 10.0
    assert json.loads(request.content) == {
        "prompt": "a cat surfing",
        "aspect_ratio": "1:1",
        "loop": True,
        "keyframes": {"frame0": {"type": "image", "url": "https://img.test/cat.jpg"}},
        "callback_url": "https://hooks.test/luma",
    }


@pytest.mark.asyncio
async def test_submit_text_only_returns_id() -> None:
    handler = RecordingHandler([httpx.Response(201, json=generation("queued"))])
    adapter = make_adapter(handler)

    task_id = await adapter.submit(GenerationRequest(prompt="a cat surfing"))

    assert task_id == "gen-1"
    assert "keyframes" not in json.loads(handler.requests[0].content)


@pytest.mark.asyncio
async def test_submit_rejects_inline_image_and_bad_seed_locally() -> None:
    handler = RecordingHandler()
    adapter = make_adapter(handler)

    with pytest.raises(InvalidParametersError):
        await adapter.submit(
            GenerationRequest(prompt="p", image=ImageReference.from_bytes(b"raw"))
        )
    with pytest.raises(InvalidSeedError):
        await adapter.submit(GenerationRequest(prompt="p", seed=-5))

    assert handler.requests == []


@pytest.mark.asyncio
@pytest.mark.parametrize(
    ("state", "expected"),
    [
        ("queued", TaskState.PENDING),
        ("dreaming", TaskState.RUNNING),
        ("failed", TaskState.FAILED),
    ],
)
async def test_fetch_status_maps_states(state: str, expected: TaskState) -> None:
    handler = RecordingHandler([httpx.Response(200, json=generation(state, failure_reason="oops"))])
    adapter = make_adapter(handler)

    status = await adapter.fetch_status("gen-1")

    assert status.state is expected
    assert status.outputs == ()
    assert str(handler.requests[0].url) == f"{BASE_URL}/dream-machine/v1/generations/gen-1"


@pytest.mark.asyncio
async def test_fetch_status_completed_exposes_video_asset() -> None:
    handler = RecordingHandler(
        [httpx.Response(200, json=generation("completed", assets={"video": "https://cdn.test/v.mp4"}))]
    )
    adapter = make_adapter(handler)

    status = await adapter.fetch_status("gen-1")

    assert status.state is TaskState.SUCCEEDED
    assert status.outputs == ("https://cdn.test/v.mp4",)
    assert status.created_at is not None


@pytest.mark.asyncio
async def test_fetch_status_unknown_state_is_decoding_error() -> None:
    handler = RecordingHandler([httpx.Response(200, json=generation("melting"))])
    adapter = make_adapter(handler)

    with pytest.raises(DecodingError):
        await adapter.fetch_status("gen-1")


@pytest.mark.asyncio
async def test_fetch_status_missing_fields_is_decoding_error() -> None:
    handler = RecordingHandler([httpx.Response(200, json={"state": "queued"})])
    adapter = make_adapter(handler)

    with pytest.raises(DecodingError):
        await adapter.fetch_status("gen-1")


@pytest.mark.asyncio
async def test_list_generations_passes_paging() -> None:
    handler = RecordingHandler(
        [
            httpx.Response(
                200,
                json={"generations": [generation("queued")], "has_more": True, "count": 1},
            )
        ]
    )
    adapter = make_adapter(handler)

    page = await adapter.list_generations(limit=5, offset=10)

    assert [g.id for g in page.generations] == ["gen-1"]
    assert page.has_more is True
    params = handler.requests[0].url.params
    assert (params["limit"], params["offset"]) == ("5", "10")


@pytest.mark.asyncio
async def test_delete_generation_and_remote_cancel() -> None:
    handler = RecordingHandler([httpx.Response(204), httpx.Response(404)])
    adapter = make_adapter(handler)

    await adapter.cancel_remote("gen-1")
    assert handler.requests[0].method == "DELETE"

    with pytest.raises(NotFoundError):
        await adapter.delete_generation("gen-2")


@pytest.mark.asyncio
async def test_list_camera_motions() -> None:
    handler = RecordingHandler(
        [httpx.Response(200, json=["Static", "Orbit Left"]), httpx.Response(200, json={"x": 1})]
    )
    adapter = make_adapter(handler)

    assert await adapter.list_camera_motions() == ["Static", "Orbit Left"]
    assert str(handler.requests[0].url).endswith("/generations/camera_motion/list")

    with pytest.raises(DecodingError):
        await adapter.list_camera_motions()
