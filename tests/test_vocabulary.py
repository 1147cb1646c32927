from __future__ import annotations

import pytest

from sfx_worker.app.models import EnergyProfile, Genre, Mood, Tempo, Theme
from sfx_worker.services.vocabulary import (
    CATEGORY_GUIDELINES,
    filter_vocabulary,
    sanitize_parameters,
)


@pytest.mark.parametrize(
    "moods, expected",
    [
        (["Dark", "Epic"], [Mood.DARK, Mood.EPIC]),
        (["Dark", "Heroic", "Tense", "Scary"], [Mood.DARK, Mood.TENSE]),
        (["Heroic"], [Mood.EPIC]),
        ([], [Mood.EPIC]),
        (None, [Mood.EPIC]),
        ("Funny & Weird", [Mood.FUNNY_WEIRD]),
        (["Dark", "Dark"], [Mood.DARK]),
        (["dark", 7], [Mood.EPIC]),
    ],
)
def test_moods_are_filtered_capped_and_defaulted(moods, expected) -> None:
    assert filter_vocabulary(moods, Mood, 2, Mood.EPIC) == expected


def test_sanitize_keeps_every_value_in_vocabulary() -> None:
    params = sanitize_parameters(
        {
            "moods": ["Calm", "Peaceful"],
            "genres": ["Lo-fi"],
            "themes": ["Nature", "Gaming"],
            "tempo": "low",
            "energy_profile": "ambient",
            "reasoning": "gentle rain",
        }
    )
    assert params.moods == [Mood.PEACEFUL]
    assert params.genres == [Genre.ELECTRONICA]
    assert params.themes == [Theme.NATURE]
    assert params.tempo == Tempo.LOW
    assert params.energy_profile == EnergyProfile.AMBIENT
    assert params.reasoning == "gentle rain"


def test_sanitize_handles_missing_keys() -> None:
    params = sanitize_parameters({})
    assert params.moods == [Mood.EPIC]
    assert params.genres == [Genre.ELECTRONICA]
    assert params.themes == [Theme.GAMING]
    assert params.tempo == Tempo.NORMAL
    assert params.energy_profile == EnergyProfile.STEADY
    assert params.reasoning == ""


def test_every_category_but_ambient_has_guidance() -> None:
    assert len(CATEGORY_GUIDELINES) == 9
