"""Fixed Soundraw vocabularies and the sanitiser that enforces them."""

from __future__ import annotations

from typing import Any, Iterable, List, Mapping, Type, TypeVar

from ..app.models import (
    EnergyProfile,
    Genre,
    InferredParameters,
    Mood,
    SfxCategory,
    Tempo,
    Theme,
)

MAX_MOODS = 2
MAX_GENRES = 2
MAX_THEMES = 1

DEFAULT_MOOD = Mood.EPIC
DEFAULT_GENRE = Genre.ELECTRONICA
DEFAULT_THEME = Theme.GAMING
DEFAULT_TEMPO = Tempo.NORMAL
DEFAULT_ENERGY = EnergyProfile.STEADY

TEMPO_HINTS = {
    Tempo.LOW: "<100 bpm",
    Tempo.NORMAL: "100-125 bpm",
    Tempo.HIGH: ">125 bpm",
}

CATEGORY_GUIDELINES: dict[SfxCategory, str] = {
    SfxCategory.COMBAT: "Combat (sword, punch, magic): Epic, Dark moods + Orchestra, Electronica + high tempo + climax",
    SfxCategory.UI: "UI (click, hover, success): Happy, Epic moods + Electronica + normal/high tempo + steady",
    SfxCategory.NATURE: "Nature (wind, rain, birds): Peaceful moods + Ambient + low tempo + ambient",
    SfxCategory.MECHANICAL: "Mechanical (engine, gears, clicks): Tense, Dark moods + Electronica + normal tempo + steady",
    SfxCategory.MAGICAL: "Magical (sparkle, whoosh, blast): Epic, Happy moods + Orchestra, Electronica + high tempo + climax",
    SfxCategory.FOOTSTEPS: "Footsteps (grass, stone, wood): Neutral + Ambient + low tempo + steady",
    SfxCategory.IMPACTS: "Impacts (crash, bang, explosion): Dark, Epic moods + Orchestra, Rock + high tempo + climax",
    SfxCategory.VEHICLES: "Vehicles (engine, horn, brake): Tense moods + Electronica + high tempo + steady",
    SfxCategory.WEATHER: "Weather (rain, thunder, wind): Dark, Peaceful moods + Ambient + low tempo + ambient",
}

E = TypeVar("E", Mood, Genre, Theme)
S = TypeVar("S", Tempo, EnergyProfile)


def _as_list(value: Any) -> List[Any]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if isinstance(value, Iterable):
        return list(value)
    return []


def filter_vocabulary(values: Any, enum_type: Type[E], limit: int, default: E) -> List[E]:
    """Keep known members in order, drop duplicates, cap at ``limit``.

    An empty outcome is replaced by ``[default]``.
    """
    known = {member.value: member for member in enum_type}
    kept: List[E] = []
    for raw in _as_list(values):
        member = known.get(raw) if isinstance(raw, str) else None
        if member is None or member in kept:
            continue
        kept.append(member)
        if len(kept) == limit:
            break
    return kept or [default]


def _coerce_choice(value: Any, enum_type: Type[S], default: S) -> S:
    if isinstance(value, str):
        try:
            return enum_type(value.strip().lower())
        except ValueError:
            pass
    return default


def sanitize_parameters(raw: Mapping[str, Any]) -> InferredParameters:
    """Project raw model output onto the fixed vocabularies."""
    reasoning = raw.get("reasoning")
    return InferredParameters(
        moods=filter_vocabulary(raw.get("moods"), Mood, MAX_MOODS, DEFAULT_MOOD),
        genres=filter_vocabulary(raw.get("genres"), Genre, MAX_GENRES, DEFAULT_GENRE),
        themes=filter_vocabulary(raw.get("themes"), Theme, MAX_THEMES, DEFAULT_THEME),
        tempo=_coerce_choice(raw.get("tempo"), Tempo, DEFAULT_TEMPO),
        energy_profile=_coerce_choice(raw.get("energy_profile"), EnergyProfile, DEFAULT_ENERGY),
        reasoning=reasoning if isinstance(reasoning, str) else "",
    )
