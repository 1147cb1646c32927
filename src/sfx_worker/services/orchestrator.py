"""High-level SFX orchestrator coordinating inference, composition, and rendering."""

from __future__ import annotations

import re
from typing import Any, Dict, Optional

from loguru import logger

from ..app.models import (
    SfxBatchRequest,
    SfxBatchResult,
    SfxRequest,
    SfxResult,
    SfxVariationRequest,
    SfxVariationResult,
    SoundrawParams,
)
from ..app.settings import Settings
from .exceptions import GenerationFailure
from .inference import ParameterInferenceService
from .integration import render_integration_code
from .soundraw import SoundrawService, extract_result
from .types import ComposeParams

ASSET_NAME_MAX_LENGTH = 30

_NON_ASSET_CHAR = re.compile(r"[^a-z0-9]")


def derive_asset_name(description: str) -> str:
    return _NON_ASSET_CHAR.sub("_", description.lower())[:ASSET_NAME_MAX_LENGTH]


class SfxOrchestrator:
    """Runs one description through inference, Soundraw, and snippet rendering."""

    def __init__(
        self,
        inference: ParameterInferenceService,
        soundraw: SoundrawService,
    ) -> None:
        self._inference = inference
        self._soundraw = soundraw

    @property
    def inference_model(self) -> str:
        return self._inference.model

    async def generate(self, request: SfxRequest) -> SfxResult:
        logger.info(
            "Generating SFX",
            description=request.description,
            category=request.category.value if request.category else None,
        )
        try:
            params = await self._inference.infer(
                request.description,
                request.category,
                request.intensity,
            )
            job, file_format = await self._soundraw.compose(
                ComposeParams(
                    moods=params.moods,
                    genres=params.genres,
                    themes=params.themes,
                    length=request.duration_seconds,
                    energy=params.energy_profile,
                    tempo=params.tempo,
                    formats=[request.file_format] if request.file_format else None,
                )
            )
            extracted = extract_result(job, file_format)
        except GenerationFailure as exc:
            logger.error(
                "SFX generation failed: {}",
                exc,
                description=request.description,
                error_type=type(exc).__name__,
            )
            raise

        asset_name = derive_asset_name(request.description)
        integration_code = render_integration_code(
            request.engine, extracted.audio_url, asset_name
        )

        return SfxResult(
            share_link=extracted.share_link,
            audio_url=extracted.audio_url,
            request_id=extracted.request_id,
            duration_seconds=extracted.duration_seconds,
            bpm=extracted.bpm,
            file_format=file_format,
            integration_code=integration_code,
            deepseek_reasoning=params.reasoning,
            soundraw_params=SoundrawParams(
                moods=params.moods,
                genres=params.genres,
                themes=params.themes,
                tempo=params.tempo,
                energy_profile=params.energy_profile,
            ),
        )

    async def create_variation(self, request: SfxVariationRequest) -> SfxVariationResult:
        try:
            job, file_format = await self._soundraw.create_variation(
                request.share_link,
                request.variation_type,
                request.duration_seconds,
            )
            extracted = extract_result(job, file_format)
        except GenerationFailure as exc:
            logger.error(
                "SFX variation failed: {}",
                exc,
                share_link=request.share_link,
                error_type=type(exc).__name__,
            )
            raise

        return SfxVariationResult(
            share_link=extracted.share_link,
            audio_url=extracted.audio_url,
            request_id=extracted.request_id,
            duration_seconds=extracted.duration_seconds,
            bpm=extracted.bpm,
            file_format=file_format,
            variation_type=request.variation_type,
            source_share_link=request.share_link,
        )

    async def generate_batch(self, request: SfxBatchRequest) -> SfxBatchResult:
        items = request.item_requests()
        results = []
        for position, item in enumerate(items, start=1):
            logger.info("Batch item {}/{}", position, len(items), description=item.description)
            results.append(await self.generate(item))
        return SfxBatchResult(results=results)

    async def account_usage(self) -> Dict[str, Any]:
        return await self._soundraw.account_usage()

    async def aclose(self) -> None:
        await self._soundraw.aclose()
        await self._inference.aclose()


def build_orchestrator(
    settings: Settings,
    *,
    inference: Optional[ParameterInferenceService] = None,
    soundraw: Optional[SoundrawService] = None,
) -> SfxOrchestrator:
    """Wire the production services; missing credentials fail here."""
    return SfxOrchestrator(
        inference=inference or ParameterInferenceService(settings),
        soundraw=soundraw or SoundrawService(settings),
    )
