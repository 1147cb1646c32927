"""Tool registry and dispatcher exposed to calling agents."""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, Mapping, Optional, Type

from loguru import logger
from pydantic import BaseModel, ValidationError

from ..services.exceptions import GenerationFailure
from ..services.orchestrator import SfxOrchestrator
from .models import (
    SfxBatchRequest,
    SfxRequest,
    SfxVariationRequest,
    ToolContent,
    ToolDefinition,
    ToolResponse,
)


class _NoArguments(BaseModel):
    pass


@dataclass(frozen=True)
class ToolSpec:
    name: str
    description: str
    input_model: Type[BaseModel]
    handler: Callable[[SfxOrchestrator, Any], Awaitable[Any]]

    def definition(self) -> ToolDefinition:
        schema = self.input_model.model_json_schema()
        schema.pop("title", None)
        return ToolDefinition(name=self.name, description=self.description, input_schema=schema)


async def _generate(orchestrator: SfxOrchestrator, request: SfxRequest) -> Any:
    return await orchestrator.generate(request)


async def _variation(orchestrator: SfxOrchestrator, request: SfxVariationRequest) -> Any:
    return await orchestrator.create_variation(request)


async def _batch(orchestrator: SfxOrchestrator, request: SfxBatchRequest) -> Any:
    return await orchestrator.generate_batch(request)


async def _usage(orchestrator: SfxOrchestrator, _: _NoArguments) -> Any:
    return await orchestrator.account_usage()


TOOLS: Dict[str, ToolSpec] = {
    spec.name: spec
    for spec in (
        ToolSpec(
            name="generate_sfx",
            description=(
                "Generate game sound effects based on description. Uses DeepSeek for "
                "parameter mapping and Soundraw for audio generation. Returns audio URL, "
                "share link, and optional game engine integration code."
            ),
            input_model=SfxRequest,
            handler=_generate,
        ),
        ToolSpec(
            name="create_sfx_variation",
            description="Create a variation (similar, softer, intense, reverse) of an existing SFX.",
            input_model=SfxVariationRequest,
            handler=_variation,
        ),
        ToolSpec(
            name="generate_sfx_batch",
            description="Generate up to 10 sound effects sharing the same options, one after another.",
            input_model=SfxBatchRequest,
            handler=_batch,
        ),
        ToolSpec(
            name="get_account_usage",
            description="Report Soundraw account usage for the configured API key.",
            input_model=_NoArguments,
            handler=_usage,
        ),
    )
}


def _error_message(exc: Exception) -> str:
    if isinstance(exc, ValidationError):
        problems = "; ".join(
            f"{'.'.join(str(part) for part in error['loc']) or 'arguments'}: {error['msg']}"
            for error in exc.errors()
        )
        return f"Invalid arguments: {problems}"
    return str(exc) or type(exc).__name__


def _encode(result: Any) -> str:
    if isinstance(result, BaseModel):
        return result.model_dump_json(indent=2)
    return json.dumps(result, indent=2)


class ToolDispatcher:
    """Validates tool arguments, runs the orchestrator, and flags failures."""

    def __init__(self, orchestrator: SfxOrchestrator) -> None:
        self._orchestrator = orchestrator

    @staticmethod
    def definitions() -> list[ToolDefinition]:
        return [spec.definition() for spec in TOOLS.values()]

    async def call(self, name: str, arguments: Optional[Mapping[str, Any]]) -> ToolResponse:
        try:
            spec = TOOLS.get(name)
            if spec is None:
                raise LookupError(f"Unknown tool: {name}")
            payload = spec.input_model.model_validate(dict(arguments or {}))
            result = await spec.handler(self._orchestrator, payload)
        except (GenerationFailure, ValidationError, LookupError) as exc:
            logger.error("Tool execution failed", tool=name, error=_error_message(exc))
            return ToolResponse(
                content=[ToolContent(text=f"Error: {_error_message(exc)}")],
                is_error=True,
            )
        except Exception as exc:  # noqa: BLE001
            logger.exception("Unexpected error during tool {}", name)
            return ToolResponse(
                content=[ToolContent(text=f"Error: {_error_message(exc)}")],
                is_error=True,
            )
        return ToolResponse(content=[ToolContent(text=_encode(result))])
