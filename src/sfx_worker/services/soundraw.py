"""Soundraw v3 client: job submission, bounded polling, result extraction."""

from __future__ import annotations

import asyncio
import re
from typing import Any, Callable, Dict, Optional, Tuple, Type

import httpx
from loguru import logger
from pydantic import ValidationError

from ..app.models import CompositionJob, CompositionResult, FileFormat, JobStatus, VariationType
from ..app.settings import Settings
from .exceptions import (
    AccountRequestError,
    ComposeRequestError,
    GenerationFailedError,
    GenerationTimeoutError,
    MissingResultError,
    PollError,
    SoundrawRequestError,
    VariationRequestError,
)
from .types import ComposeParams, ExtractedAudio, json_number

POLL_INTERVAL_SECONDS = 2.0
MAX_POLL_ATTEMPTS = 75

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")

# m4a walks the chain; mp3 and wav never fall back.
_URL_PRIORITY: Dict[FileFormat, Tuple[Callable[[CompositionResult], Optional[str]], ...]] = {
    FileFormat.M4A: (
        lambda result: result.m4a_url,
        lambda result: result.mp3_url,
        lambda result: result.wav_url,
    ),
    FileFormat.MP3: (lambda result: result.mp3_url,),
    FileFormat.WAV: (lambda result: result.wav_url,),
}


def select_audio_url(result: CompositionResult, file_format: FileFormat) -> str:
    for getter in _URL_PRIORITY[file_format]:
        url = getter(result)
        if url:
            return url
    return ""


def parse_bpm(value: Optional[str]) -> Optional[int]:
    if value is None:
        return None
    match = _LEADING_INT.match(value)
    if match is None:
        return None
    return int(match.group(1))


def extract_result(job: CompositionJob, file_format: FileFormat) -> ExtractedAudio:
    """Pick the typed fields callers need out of a finished job payload."""
    result = job.result
    if result is None:
        raise MissingResultError("No result in Soundraw response")
    return ExtractedAudio(
        share_link=result.share_link,
        audio_url=select_audio_url(result, file_format),
        request_id=job.request_id,
        duration_seconds=result.length,
        bpm=parse_bpm(result.bpm),
        energy_timeline=list(result.timestamps),
    )


class SoundrawService:
    """Submits composition jobs to Soundraw and waits for them to finish."""

    def __init__(
        self,
        settings: Settings,
        *,
        client: Optional[httpx.AsyncClient] = None,
        poll_interval_seconds: float = POLL_INTERVAL_SECONDS,
        max_poll_attempts: int = MAX_POLL_ATTEMPTS,
    ) -> None:
        api_key = settings.require_soundraw_api_key()
        self._base_url = settings.soundraw_base_url.rstrip("/")
        self._headers = {
            "Authorization": f"Bearer {api_key}",
            "Content-Type": "application/json",
        }
        if client is None:
            client = httpx.AsyncClient(
                timeout=httpx.Timeout(settings.request_timeout_seconds),
            )
        self._client = client
        self._poll_interval = poll_interval_seconds
        self._max_attempts = max_poll_attempts

    async def compose(self, params: ComposeParams) -> Tuple[CompositionJob, FileFormat]:
        logger.info(
            "Composing SFX via Soundraw",
            length=params.length,
            moods=[mood.value for mood in params.moods],
            genres=[genre.value for genre in params.genres],
        )
        request_id = await self._submit(
            "/musics/compose", params.as_payload(), ComposeRequestError
        )
        logger.info("SFX compose request submitted", request_id=request_id)
        job = await self._await_result(request_id)
        file_format = params.formats[0] if params.formats else FileFormat.M4A
        return job, file_format

    async def create_variation(
        self,
        share_link: str,
        variation_type: VariationType,
        length: Optional[float] = None,
    ) -> Tuple[CompositionJob, FileFormat]:
        logger.info(
            "Creating SFX variation via Soundraw",
            share_link=share_link,
            variation_type=variation_type.value,
        )
        payload: Dict[str, Any] = {
            "share_link": share_link,
            "variation_type": variation_type.value,
        }
        if length:
            payload["length"] = json_number(length)
        request_id = await self._submit("/musics/similar", payload, VariationRequestError)
        job = await self._await_result(request_id)
        return job, FileFormat.M4A

    async def account_usage(self) -> Dict[str, Any]:
        response = await self._send("GET", "/accounts", AccountRequestError)
        return self._json_object(response, AccountRequestError)

    async def aclose(self) -> None:
        await self._client.aclose()

    async def _submit(
        self,
        path: str,
        payload: Dict[str, Any],
        error_type: Type[SoundrawRequestError],
    ) -> str:
        response = await self._send("POST", path, error_type, json=payload)
        body = self._json_object(response, error_type)
        request_id = body.get("request_id")
        if not isinstance(request_id, str) or not request_id:
            raise error_type(
                "Soundraw API response missing request_id",
                status_code=response.status_code,
                body=response.text,
            )
        return request_id

    async def _await_result(self, request_id: str) -> CompositionJob:
        """Poll until the job is done, failed, or attempts run out.

        Only a not-yet-terminal status is retried; HTTP errors end the loop.
        """
        logger.info("Polling for SFX result", request_id=request_id)
        for attempt in range(1, self._max_attempts + 1):
            response = await self._send("GET", f"/results/{request_id}", PollError)
            payload = self._json_object(response, PollError)
            status = payload.get("status")

            if status == JobStatus.DONE.value and payload.get("result"):
                try:
                    job = CompositionJob.model_validate(
                        {**payload, "request_id": payload.get("request_id") or request_id}
                    )
                except ValidationError as exc:
                    raise PollError(
                        f"Malformed Soundraw result payload for {request_id}",
                        status_code=response.status_code,
                        body=response.text,
                    ) from exc
                logger.info("SFX generation complete", request_id=request_id, attempts=attempt)
                return job
            if status == JobStatus.FAILED.value:
                logger.error("SFX generation failed", request_id=request_id)
                raise GenerationFailedError(request_id)

            # Unknown statuses are treated like pending.
            logger.debug(
                "SFX not ready",
                request_id=request_id,
                status=status,
                attempt=attempt,
            )
            if attempt < self._max_attempts:
                await asyncio.sleep(self._poll_interval)

        raise GenerationTimeoutError(request_id, self._max_attempts)

    async def _send(
        self,
        method: str,
        path: str,
        error_type: Type[SoundrawRequestError],
        **kwargs: Any,
    ) -> httpx.Response:
        try:
            response = await self._client.request(
                method, f"{self._base_url}{path}", headers=self._headers, **kwargs
            )
        except httpx.HTTPError as exc:
            logger.error("Soundraw request failed", path=path, error=str(exc))
            raise error_type(f"Soundraw request failed: {exc}") from exc

        if not response.is_success:
            logger.error(
                "Soundraw API error",
                path=path,
                status=response.status_code,
                error=response.text,
            )
            raise error_type(
                f"Soundraw API error: {response.status_code} - {response.text}",
                status_code=response.status_code,
                body=response.text,
            )
        return response

    @staticmethod
    def _json_object(
        response: httpx.Response,
        error_type: Type[SoundrawRequestError],
    ) -> Dict[str, Any]:
        try:
            body = response.json()
        except ValueError as exc:
            raise error_type(
                "Soundraw API returned invalid JSON",
                status_code=response.status_code,
                body=response.text,
            ) from exc
        if not isinstance(body, dict):
            raise error_type(
                "Soundraw API returned an unexpected payload",
                status_code=response.status_code,
                body=response.text,
            )
        return body
