"""Shared service data structures."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence, Union

from ..app.models import (
    EnergyProfile,
    EnergySegment,
    FileFormat,
    Genre,
    Mood,
    Tempo,
    Theme,
)


@dataclass(frozen=True)
class ComposeParams:
    moods: Sequence[Mood]
    genres: Sequence[Genre]
    themes: Sequence[Theme]
    length: float
    energy: Optional[EnergyProfile] = None
    tempo: Optional[Tempo] = None
    formats: Optional[Sequence[FileFormat]] = None

    def as_payload(self) -> Dict[str, Any]:
        formats = list(self.formats) if self.formats else [FileFormat.M4A]
        return {
            "moods": [mood.value for mood in self.moods],
            "genres": [genre.value for genre in self.genres],
            "themes": [theme.value for theme in self.themes],
            "length": json_number(self.length),
            "energy": (self.energy or EnergyProfile.STEADY).value,
            "tempo": (self.tempo or Tempo.NORMAL).value,
            "file_format": [fmt.value for fmt in formats],
        }


@dataclass(frozen=True)
class ExtractedAudio:
    share_link: str
    audio_url: str
    request_id: str
    duration_seconds: Union[int, float]
    bpm: Optional[int]
    energy_timeline: List[EnergySegment] = field(default_factory=list)


def json_number(value: float) -> Union[int, float]:
    """Send whole-second lengths as integers, as Soundraw clients do."""
    number = float(value)
    if number.is_integer():
        return int(number)
    return number
