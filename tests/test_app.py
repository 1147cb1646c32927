from __future__ import annotations

import json

import httpx
from fastapi.testclient import TestClient

from conftest import FakeChatClient, SoundrawStub
from sfx_worker.app.main import create_app
from sfx_worker.services.orchestrator import SfxOrchestrator


def build_client(settings, soundraw_factory, inference_factory, stub=None, chat=None) -> TestClient:
    orchestrator = SfxOrchestrator(
        inference=inference_factory(chat or FakeChatClient()),
        soundraw=soundraw_factory(stub or SoundrawStub()),
    )
    return TestClient(create_app(settings=settings, orchestrator=orchestrator))


def test_create_app(settings, soundraw_factory, inference_factory) -> None:
    client = build_client(settings, soundraw_factory, inference_factory)
    assert client.app.title == "SFX Worker"


def test_health_endpoint(settings, soundraw_factory, inference_factory) -> None:
    with build_client(settings, soundraw_factory, inference_factory) as client:
        response = client.get("/health")
        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "ok"
        assert body["inference_model"] == "deepseek-chat"
        assert "generate_sfx" in body["tools"]


def test_tool_definitions_describe_generate_sfx(settings, soundraw_factory, inference_factory) -> None:
    with build_client(settings, soundraw_factory, inference_factory) as client:
        tools = {tool["name"]: tool for tool in client.get("/tools").json()}
    schema = tools["generate_sfx"]["input_schema"]
    assert schema["required"] == ["description"]
    assert set(schema["properties"]) == {
        "description",
        "category",
        "duration_seconds",
        "intensity",
        "engine",
        "file_format",
    }
    assert set(tools) == {
        "generate_sfx",
        "create_sfx_variation",
        "generate_sfx_batch",
        "get_account_usage",
    }


def test_generate_sfx_tool_returns_json_text(settings, soundraw_factory, inference_factory) -> None:
    with build_client(settings, soundraw_factory, inference_factory) as client:
        response = client.post(
            "/tools/generate_sfx",
            json={"description": "ui button click", "engine": "godot"},
        )
    assert response.status_code == 200
    body = response.json()
    assert body["is_error"] is False
    result = json.loads(body["content"][0]["text"])
    assert result["file_format"] == "m4a"
    assert "play_ui_button_click" in result["integration_code"]
    assert len(result["soundraw_params"]["themes"]) == 1


def test_pipeline_failure_is_error_flagged(settings, soundraw_factory, inference_factory) -> None:
    stub = SoundrawStub()
    stub.overrides["/musics/compose"] = httpx.Response(402, text="quota exceeded")
    with build_client(settings, soundraw_factory, inference_factory, stub=stub) as client:
        response = client.post("/tools/generate_sfx", json={"description": "click"})
    body = response.json()
    assert response.status_code == 200
    assert body["is_error"] is True
    assert body["content"][0]["text"] == "Error: Soundraw API error: 402 - quota exceeded"
    assert "Traceback" not in body["content"][0]["text"]


def test_invalid_arguments_are_error_flagged(settings, soundraw_factory, inference_factory) -> None:
    stub = SoundrawStub()
    with build_client(settings, soundraw_factory, inference_factory, stub=stub) as client:
        response = client.post(
            "/tools/generate_sfx",
            json={"description": "click", "duration_seconds": 90},
        )
    body = response.json()
    assert body["is_error"] is True
    assert body["content"][0]["text"].startswith("Error: Invalid arguments: duration_seconds")
    assert stub.requests == []


def test_unknown_tool_is_error_flagged(settings, soundraw_factory, inference_factory) -> None:
    with build_client(settings, soundraw_factory, inference_factory) as client:
        response = client.post("/tools/make_music", json={})
    body = response.json()
    assert body["is_error"] is True
    assert body["content"][0]["text"] == "Error: Unknown tool: make_music"


def test_account_usage_tool(settings, soundraw_factory, inference_factory) -> None:
    with build_client(settings, soundraw_factory, inference_factory) as client:
        response = client.post("/tools/get_account_usage")
    body = response.json()
    assert body["is_error"] is False
    assert json.loads(body["content"][0]["text"]) == {"message": "120 of 500 downloads used"}


def test_whole_second_durations_stay_integers(settings, soundraw_factory, inference_factory) -> None:
    with build_client(settings, soundraw_factory, inference_factory) as client:
        response = client.post("/tools/generate_sfx", json={"description": "coin pickup"})
    result = json.loads(response.json()["content"][0]["text"])
    assert result["duration_seconds"] == 5
    assert isinstance(result["duration_seconds"], int)
    assert '"duration_seconds": 5,' in response.json()["content"][0]["text"]


def test_description_has_no_length_limits(settings, soundraw_factory, inference_factory) -> None:
    stub = SoundrawStub()
    with build_client(settings, soundraw_factory, inference_factory, stub=stub) as client:
        empty = client.post("/tools/generate_sfx", json={"description": ""}).json()
        long = client.post("/tools/generate_sfx", json={"description": "rumble " * 300}).json()
    assert empty["is_error"] is False
    assert long["is_error"] is False
    assert len(stub.bodies("/musics/compose")) == 2
