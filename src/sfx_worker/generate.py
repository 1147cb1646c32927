"""
CLI entry point to run a one-off sound effect generation through the orchestrator.

Example:
    python -m sfx_worker.generate --description "ui button click" --engine godot
"""

from __future__ import annotations

import argparse
import asyncio
import sys
from typing import Optional

from pydantic import ValidationError

from .app.logging_setup import configure_logging
from .app.models import FileFormat, GameEngine, Intensity, SfxCategory, SfxRequest
from .app.settings import Settings
from .services.exceptions import GenerationFailure
from .services.orchestrator import SfxOrchestrator, build_orchestrator


def _parse_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Generate a game sound effect via Soundraw.")
    parser.add_argument("--description", required=True, help="Description of the sound effect.")
    parser.add_argument(
        "--category",
        choices=[category.value for category in SfxCategory],
        default=None,
        help="SFX category for better parameter mapping.",
    )
    parser.add_argument(
        "--duration",
        type=float,
        default=None,
        help="Duration in seconds (1-30, default 5).",
    )
    parser.add_argument(
        "--intensity",
        choices=[intensity.value for intensity in Intensity],
        default=None,
    )
    parser.add_argument(
        "--engine",
        choices=[engine.value for engine in GameEngine],
        default=None,
        help="Emit integration code for this engine.",
    )
    parser.add_argument(
        "--format",
        dest="file_format",
        choices=[fmt.value for fmt in FileFormat],
        default=None,
        help="Audio file format (default m4a).",
    )
    return parser.parse_args(argv)


def _build_request(args: argparse.Namespace) -> SfxRequest:
    fields: dict[str, object] = {"description": args.description}
    for name in ("category", "intensity", "engine", "file_format"):
        value = getattr(args, name)
        if value is not None:
            fields[name] = value
    if args.duration is not None:
        fields["duration_seconds"] = args.duration
    return SfxRequest.model_validate(fields)


async def _run(
    request: SfxRequest,
    *,
    settings: Optional[Settings] = None,
    orchestrator: Optional[SfxOrchestrator] = None,
) -> int:
    settings = settings or Settings()
    configure_logging(settings.log_level)
    try:
        composer = orchestrator or build_orchestrator(settings)
    except GenerationFailure as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    try:
        result = await composer.generate(request)
    except GenerationFailure as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    finally:
        await composer.aclose()

    print(result.model_dump_json(indent=2))
    return 0


def main(argv: Optional[list[str]] = None) -> None:
    args = _parse_args(argv)
    try:
        request = _build_request(args)
    except ValidationError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        sys.exit(2)
    sys.exit(asyncio.run(_run(request)))


if __name__ == "__main__":
    main()
