"""Parameter inference: free-text SFX description to Soundraw vocabulary."""

from __future__ import annotations

import json
import re
from typing import Any, Optional

from loguru import logger
from openai import AsyncOpenAI, OpenAIError

from ..app.models import (
    EnergyProfile,
    Genre,
    InferredParameters,
    Intensity,
    Mood,
    SfxCategory,
    Theme,
)
from ..app.settings import Settings
from .exceptions import InferenceError
from .vocabulary import CATEGORY_GUIDELINES, TEMPO_HINTS, sanitize_parameters

TEMPERATURE = 0.7
MAX_TOKENS = 400

_FENCE_OPEN = re.compile(r"```(?:json)?\n?")
_FENCE_CLOSE = re.compile(r"```$")


def _build_system_prompt() -> str:
    themes = "\n".join(f"- {theme.value}" for theme in Theme)
    tempo = ", ".join(f"{tempo.value} ({hint})" for tempo, hint in TEMPO_HINTS.items())
    energy = ", ".join(profile.value for profile in EnergyProfile)
    guidelines = "\n".join(f"- {line}" for line in CATEGORY_GUIDELINES.values())
    return f"""You are a game sound effects specialist. Your job is to translate SFX descriptions into Soundraw API parameters.

Available Soundraw parameters:

MOODS (pick 1-2):
{", ".join(mood.value for mood in Mood)}

GENRES (pick 1-2):
{", ".join(genre.value for genre in Genre)}

THEMES (pick 1):
{themes}

TEMPO: {tempo}

ENERGY_PROFILE: {energy}

For SFX, use shorter, more focused parameters. Output ONLY valid JSON:
{{
  "moods": ["mood1"],
  "genres": ["genre1"],
  "themes": ["theme1"],
  "tempo": "low" | "normal" | "high",
  "energy_profile": "building" | "steady" | "climax" | "ambient" | "muted",
  "reasoning": "Brief explanation"
}}

SFX mapping guidelines:
{guidelines}"""


SYSTEM_PROMPT = _build_system_prompt()


def build_user_prompt(
    description: str,
    category: Optional[SfxCategory] = None,
    intensity: Optional[Intensity] = None,
) -> str:
    category_line = f"Category: {category.value}" if category is not None else ""
    intensity_line = f"Intensity: {intensity.value}" if intensity is not None else ""
    return (
        "Generate Soundraw parameters for this sound effect:\n\n"
        f"Description: {description}\n"
        f"{category_line}\n"
        f"{intensity_line}\n\n"
        "Output only valid JSON, no markdown."
    )


def strip_code_fence(content: str) -> str:
    text = content.strip()
    if text.startswith("```"):
        text = _FENCE_OPEN.sub("", text)
        text = _FENCE_CLOSE.sub("", text).strip()
    return text


def parse_completion(content: str) -> dict[str, Any]:
    """Decode the model's JSON object, tolerating a fenced code block."""
    try:
        payload = json.loads(strip_code_fence(content))
    except json.JSONDecodeError as exc:
        raise InferenceError(f"Failed to parse SFX parameters: {content}") from exc
    if not isinstance(payload, dict):
        raise InferenceError(f"Failed to parse SFX parameters: {content}")
    return payload


class ParameterInferenceService:
    """Maps SFX descriptions onto Soundraw parameters with a chat model."""

    def __init__(
        self,
        settings: Settings,
        *,
        client: Optional[AsyncOpenAI] = None,
    ) -> None:
        self._model = settings.deepseek_model
        if client is None:
            client = AsyncOpenAI(
                api_key=settings.require_deepseek_api_key(),
                base_url=settings.deepseek_base_url,
                timeout=settings.request_timeout_seconds,
            )
        self._client = client

    @property
    def model(self) -> str:
        return self._model

    async def infer(
        self,
        description: str,
        category: Optional[SfxCategory] = None,
        intensity: Optional[Intensity] = None,
    ) -> InferredParameters:
        logger.info(
            "Analyzing SFX description",
            description=description,
            category=category.value if category else None,
            intensity=intensity.value if intensity else None,
        )
        try:
            response = await self._client.chat.completions.create(
                model=self._model,
                messages=[
                    {"role": "system", "content": SYSTEM_PROMPT},
                    {
                        "role": "user",
                        "content": build_user_prompt(description, category, intensity),
                    },
                ],
                temperature=TEMPERATURE,
                max_tokens=MAX_TOKENS,
            )
        except OpenAIError as exc:
            logger.error("DeepSeek request failed", error=str(exc))
            raise InferenceError(f"DeepSeek request failed: {exc}") from exc

        content = response.choices[0].message.content if response.choices else None
        if not content:
            raise InferenceError("No response from DeepSeek")

        try:
            raw = parse_completion(content)
        except InferenceError:
            logger.error("Failed to parse DeepSeek response", content=content)
            raise

        params = sanitize_parameters(raw)
        logger.info(
            "SFX analysis complete",
            moods=[mood.value for mood in params.moods],
            tempo=params.tempo.value,
        )
        return params

    async def aclose(self) -> None:
        await self._client.close()
