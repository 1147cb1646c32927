from __future__ import annotations

import json
from types import SimpleNamespace
from typing import Any, Callable, Dict, List, Optional

import httpx
import pytest

from sfx_worker.app.settings import Settings
from sfx_worker.services.inference import ParameterInferenceService
from sfx_worker.services.soundraw import SoundrawService

FINISHED_RESULT: Dict[str, Any] = {
    "share_link": "https://soundraw.io/share/abc123",
    "m4a_url": "https://cdn.soundraw.io/abc123.m4a",
    "mp3_url": "https://cdn.soundraw.io/abc123.mp3",
    "wav_url": "https://cdn.soundraw.io/abc123.wav",
    "length": 5,
    "bpm": "128",
    "timestamps": [
        {"start": 0, "end": 2.5, "energy": "low"},
        {"start": 2.5, "end": 5, "energy": "high"},
    ],
}

INFERRED_CONTENT = json.dumps(
    {
        "moods": ["Happy", "Epic"],
        "genres": ["Electronica"],
        "themes": ["Gaming"],
        "tempo": "normal",
        "energy_profile": "steady",
        "reasoning": "Short bright UI feedback",
    }
)


class FakeChatClient:
    """Stands in for AsyncOpenAI: records calls and returns canned content."""

    def __init__(self, content: Optional[str] = INFERRED_CONTENT, error: Optional[Exception] = None) -> None:
        self.content = content
        self.error = error
        self.calls: List[Dict[str, Any]] = []
        self.closed = False
        self.chat = SimpleNamespace(completions=SimpleNamespace(create=self._create))

    async def _create(self, **kwargs: Any) -> Any:
        self.calls.append(kwargs)
        if self.error is not None:
            raise self.error
        message = SimpleNamespace(content=self.content)
        return SimpleNamespace(choices=[SimpleNamespace(message=message)])

    async def close(self) -> None:
        self.closed = True


class SoundrawStub:
    """httpx.MockTransport handler that mimics the Soundraw v3 endpoints."""

    def __init__(
        self,
        statuses: Optional[List[str]] = None,
        result: Optional[Dict[str, Any]] = None,
        request_id: str = "req-1",
    ) -> None:
        self.statuses = list(statuses or ["done"])
        self.result = FINISHED_RESULT if result is None else result
        self.request_id = request_id
        self.requests: List[httpx.Request] = []
        self.overrides: Dict[str, httpx.Response] = {}

    @property
    def poll_count(self) -> int:
        return sum(1 for request in self.requests if "/results/" in request.url.path)

    def bodies(self, suffix: str) -> List[Dict[str, Any]]:
        return [
            json.loads(request.content)
            for request in self.requests
            if request.url.path.endswith(suffix)
        ]

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path
        for suffix, response in self.overrides.items():
            if path.endswith(suffix):
                return response
        if path.endswith("/musics/compose") or path.endswith("/musics/similar"):
            return httpx.Response(200, json={"request_id": self.request_id})
        if path.endswith("/accounts"):
            return httpx.Response(200, json={"message": "120 of 500 downloads used"})
        if "/results/" in path:
            index = min(self.poll_count - 1, len(self.statuses) - 1)
            status = self.statuses[index]
            payload: Dict[str, Any] = {"request_id": self.request_id, "status": status}
            if status == "done" and self.result:
                payload["result"] = self.result
            return httpx.Response(200, json=payload)
        return httpx.Response(404, text="not found")


@pytest.fixture
def settings() -> Settings:
    return Settings(
        deepseek_api_key="ds-test",
        soundraw_api_key="sr-test",
        _env_file=None,
    )


@pytest.fixture
def soundraw_factory(settings: Settings) -> Callable[..., SoundrawService]:
    def _build(stub: SoundrawStub, **kwargs: Any) -> SoundrawService:
        client = httpx.AsyncClient(transport=httpx.MockTransport(stub))
        kwargs.setdefault("poll_interval_seconds", 0.0)
        return SoundrawService(settings, client=client, **kwargs)

    return _build


@pytest.fixture
def inference_factory(settings: Settings) -> Callable[[FakeChatClient], ParameterInferenceService]:
    def _build(client: FakeChatClient) -> ParameterInferenceService:
        return ParameterInferenceService(settings, client=client)  # type: ignore[arg-type]

    return _build
