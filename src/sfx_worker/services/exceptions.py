"""Shared service-layer exceptions."""

from __future__ import annotations

from typing import Optional


class GenerationFailure(Exception):
    """Expected failure while producing a sound effect."""


class ConfigurationError(GenerationFailure):
    """A required setting (usually a credential) is missing."""


class InferenceError(GenerationFailure):
    """The language model call failed or returned unusable content."""


class SoundrawRequestError(GenerationFailure):
    """Soundraw answered with a non-success status or could not be reached."""

    def __init__(
        self,
        message: str,
        *,
        status_code: Optional[int] = None,
        body: str = "",
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.body = body


class ComposeRequestError(SoundrawRequestError):
    pass


class VariationRequestError(SoundrawRequestError):
    pass


class PollError(SoundrawRequestError):
    pass


class AccountRequestError(SoundrawRequestError):
    pass


class GenerationFailedError(GenerationFailure):
    """The remote job reached the failed state."""

    def __init__(self, request_id: str) -> None:
        super().__init__(f"Soundraw generation failed for request: {request_id}")
        self.request_id = request_id


class GenerationTimeoutError(GenerationFailure, TimeoutError):
    """Polling ran out of attempts before the job finished."""

    def __init__(self, request_id: str, attempts: int) -> None:
        super().__init__(
            f"Timeout waiting for Soundraw result: {request_id} "
            f"(gave up after {attempts} attempts)"
        )
        self.request_id = request_id
        self.attempts = attempts


class MissingResultError(GenerationFailure):
    """A finished job payload carried no result body."""
