"""Game-engine integration snippets for generated sound effects."""

from __future__ import annotations

import re
from typing import Callable, Dict, Optional

from ..app.models import GameEngine

_NON_LETTER = re.compile(r"[^a-zA-Z]")
_NON_GODOT_IDENT = re.compile(r"[^a-z0-9]")


def unity_identifier(asset_name: str) -> str:
    return _NON_LETTER.sub("", asset_name)


def godot_identifier(asset_name: str) -> str:
    return _NON_GODOT_IDENT.sub("_", asset_name.lower())


def render_unreal(audio_url: str, asset_name: str) -> str:
    return f"""// Unreal Engine 5 - SFX Integration
// Download audio from: {audio_url}
// Rename file to: {asset_name}.m4a

// 1. Import audio to Content Browser
// 2. Right-click -> Create Cue -> Sound Cue
// 3. Add to your Blueprint:

// C++ Implementation:
#include "Sound/SoundCue.h"
#include "Kismet/GameplayStatics.h"

void AMyCharacter::PlaySfx()
{{
    static USoundCue* SfxCue = LoadObject<USoundCue>(nullptr, TEXT("/Game/Audio/SFX/{asset_name}"));
    if (SfxCue)
    {{
        UGameplayStatics::PlaySoundAtLocation(this, SfxCue, GetActorLocation());
    }}
}}

// For 3D spatial audio:
void AMyCharacter::PlaySfxAtLocation(FVector Location)
{{
    static USoundCue* SfxCue = LoadObject<USoundCue>(nullptr, TEXT("/Game/Audio/SFX/{asset_name}"));
    if (SfxCue)
    {{
        UGameplayStatics::PlaySoundAtLocation(
            this,
            SfxCue,
            Location,
            1.0f,  // Volume
            1.0f,  // Pitch
            0.0f,  // StartTime
            nullptr, // Attenuation
            nullptr  // Concurrency
        );
    }}
}}"""


def render_unity(audio_url: str, asset_name: str) -> str:
    ident = unity_identifier(asset_name)
    return f"""// Unity - SFX Integration
// Download audio from: {audio_url}
// Save as: {asset_name}.m4a

using UnityEngine;

public class SFXManager : MonoBehaviour
{{
    [Header("SFX Clips")]
    [SerializeField] private AudioClip {ident}Clip;

    // Play one-shot (doesn't interrupt)
    public void Play{ident}()
    {{
        if ({ident}Clip != null)
        {{
            AudioSource.PlayClipAtPoint(
                {ident}Clip,
                Camera.main.transform.position
            );
        }}
    }}

    // Play with custom volume
    public void Play{ident}(float volume)
    {{
        if ({ident}Clip != null)
        {{
            AudioSource.PlayClipAtPoint(
                {ident}Clip,
                Camera.main.transform.position,
                volume
            );
        }}
    }}

    // Random pitch variation (for variety)
    public void Play{ident}RandomPitch()
    {{
        if ({ident}Clip != null)
        {{
            AudioSource source = gameObject.AddComponent<AudioSource>();
            source.clip = {ident}Clip;
            source.pitch = Random.Range(0.9f, 1.1f);
            source.Play();
            Destroy(source, source.clip.length);
        }}
    }}
}}"""


def render_godot(audio_url: str, asset_name: str) -> str:
    ident = godot_identifier(asset_name)
    return f"""# Godot 4 - SFX Integration
# Download audio from: {audio_url}
# Save as: {asset_name}.m4a

extends Node

@export var sfx_bus: StringName = "SFX"

func _ready():
    # Preload SFX if needed
    pass

func play_{ident}():
    var player = AudioStreamPlayer.new()
    player.bus = sfx_bus
    # player.stream = load("res://audio/{asset_name}.m4a")
    add_child(player)
    player.play()
    player.finished.connect(player.queue_free)

func play_3d_{ident}(position: Vector3):
    var player = AudioStreamPlayer3D.new()
    player.bus = sfx_bus
    player.position = position
    # player.stream = load("res://audio/{asset_name}.m4a")
    add_child(player)
    player.play()
    player.finished.connect(player.queue_free)

# With volume control
func play_with_volume_{ident}(volume_db: float = 0.0):
    var player = AudioStreamPlayer.new()
    player.bus = sfx_bus
    player.volume_db = volume_db
    # player.stream = load("res://audio/{asset_name}.m4a")
    add_child(player)
    player.play()
    player.finished.connect(player.queue_free)"""


RENDERERS: Dict[GameEngine, Callable[[str, str], str]] = {
    GameEngine.UNREAL: render_unreal,
    GameEngine.UNITY: render_unity,
    GameEngine.GODOT: render_godot,
}


def render_integration_code(
    engine: Optional[GameEngine],
    audio_url: str,
    asset_name: str,
) -> Optional[str]:
    if engine is None:
        return None
    return RENDERERS[engine](audio_url, asset_name)
