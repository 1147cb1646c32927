from __future__ import annotations

from typing import Any, Dict, Optional, cast

from fastapi import APIRouter, Body, Request

from ..services.orchestrator import SfxOrchestrator
from .models import ToolDefinition, ToolResponse
from .tools import ToolDispatcher

router = APIRouter()


def get_dispatcher(request: Request) -> ToolDispatcher:
    return cast(ToolDispatcher, request.app.state.dispatcher)


@router.get("/health")
async def health(request: Request) -> dict[str, object]:
    composer = cast(SfxOrchestrator, request.app.state.composer)
    return {
        "status": "ok",
        "inference_model": composer.inference_model,
        "tools": [definition.name for definition in ToolDispatcher.definitions()],
    }


@router.get("/tools", response_model=list[ToolDefinition])
async def list_tools() -> list[ToolDefinition]:
    return ToolDispatcher.definitions()


@router.post("/tools/{name}", response_model=ToolResponse)
async def call_tool(
    name: str,
    request: Request,
    arguments: Optional[Dict[str, Any]] = Body(default=None),
) -> ToolResponse:
    dispatcher = get_dispatcher(request)
    return await dispatcher.call(name, arguments)
