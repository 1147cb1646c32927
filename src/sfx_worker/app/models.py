from __future__ import annotations

from enum import Enum
from typing import Any, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator


class SfxCategory(str, Enum):
    COMBAT = "combat"
    UI = "ui"
    AMBIENT = "ambient"
    NATURE = "nature"
    MECHANICAL = "mechanical"
    MAGICAL = "magical"
    FOOTSTEPS = "footsteps"
    IMPACTS = "impacts"
    VEHICLES = "vehicles"
    WEATHER = "weather"


class Intensity(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class GameEngine(str, Enum):
    UNREAL = "unreal"
    UNITY = "unity"
    GODOT = "godot"


class FileFormat(str, Enum):
    M4A = "m4a"
    MP3 = "mp3"
    WAV = "wav"


class Mood(str, Enum):
    DARK = "Dark"
    EPIC = "Epic"
    HAPPY = "Happy"
    SCARY = "Scary"
    FUNNY_WEIRD = "Funny & Weird"
    PEACEFUL = "Peaceful"
    SUSPENSE = "Suspense"
    TENSE = "Tense"


class Genre(str, Enum):
    ORCHESTRA = "Orchestra"
    ELECTRONICA = "Electronica"
    AMBIENT = "Ambient"
    ROCK = "Rock"
    ACOUSTIC = "Acoustic"


class Theme(str, Enum):
    GAMING = "Gaming"
    CINEMATIC = "Cinematic"
    NATURE = "Nature"
    TECHNOLOGY = "Technology"
    SPORTS_ACTION = "Sports & Action"


class Tempo(str, Enum):
    LOW = "low"
    NORMAL = "normal"
    HIGH = "high"


class EnergyProfile(str, Enum):
    BUILDING = "building"
    STEADY = "steady"
    CLIMAX = "climax"
    AMBIENT = "ambient"
    MUTED = "muted"


class JobStatus(str, Enum):
    PENDING = "pending"
    PROCESSING = "processing"
    DONE = "done"
    FAILED = "failed"


class VariationType(str, Enum):
    SIMILAR = "similar"
    SOFTER = "softer"
    INTENSE = "intense"
    REVERSE = "reverse"


DEFAULT_DURATION_SECONDS = 5


class SfxRequest(BaseModel):
    model_config = ConfigDict(frozen=True)

    description: str = Field(
        ...,
        description='Description of the sound effect (e.g., "sword swing whoosh", "ui button click")',
    )
    category: Optional[SfxCategory] = Field(
        default=None, description="SFX category for better parameter mapping"
    )
    duration_seconds: float = Field(
        default=DEFAULT_DURATION_SECONDS,
        ge=1,
        le=30,
        description="Duration in seconds (1-30, default: 5)",
    )
    intensity: Optional[Intensity] = Field(default=None, description="Intensity level")
    engine: Optional[GameEngine] = Field(
        default=None, description="Game engine for integration code snippets"
    )
    file_format: Optional[FileFormat] = Field(
        default=None, description="Audio file format (default: m4a)"
    )


class SfxVariationRequest(BaseModel):
    model_config = ConfigDict(frozen=True)

    share_link: str = Field(..., min_length=1, description="Original SFX share_link")
    variation_type: VariationType = Field(..., description="Type of variation")
    duration_seconds: Optional[float] = Field(
        default=None, ge=1, le=30, description="Duration in seconds"
    )


class SfxBatchRequest(BaseModel):
    model_config = ConfigDict(frozen=True)

    descriptions: list[str] = Field(
        ...,
        min_length=1,
        max_length=10,
        description="Array of SFX descriptions to generate",
    )
    category: Optional[SfxCategory] = Field(
        default=None, description="Common category for all SFX"
    )
    duration_seconds: float = Field(
        default=DEFAULT_DURATION_SECONDS,
        ge=1,
        le=30,
        description="Duration for each SFX",
    )
    intensity: Optional[Intensity] = Field(default=None, description="Intensity for all SFX")
    engine: Optional[GameEngine] = Field(
        default=None, description="Game engine for integration code"
    )
    file_format: Optional[FileFormat] = Field(default=None, description="Audio file format")

    def item_requests(self) -> list[SfxRequest]:
        return [
            SfxRequest(
                description=description,
                category=self.category,
                duration_seconds=self.duration_seconds,
                intensity=self.intensity,
                engine=self.engine,
                file_format=self.file_format,
            )
            for description in self.descriptions
        ]


class InferredParameters(BaseModel):
    model_config = ConfigDict(frozen=True)

    moods: list[Mood] = Field(..., min_length=1, max_length=2)
    genres: list[Genre] = Field(..., min_length=1, max_length=2)
    themes: list[Theme] = Field(..., min_length=1, max_length=1)
    tempo: Tempo = Tempo.NORMAL
    energy_profile: EnergyProfile = EnergyProfile.STEADY
    reasoning: str = ""


class EnergySegment(BaseModel):
    start: float
    end: float
    energy: str


class CompositionResult(BaseModel):
    share_link: str = ""
    m4a_url: Optional[str] = None
    mp3_url: Optional[str] = None
    wav_url: Optional[str] = None
    length: Union[int, float] = 0
    bpm: Optional[str] = None
    timestamps: list[EnergySegment] = Field(default_factory=list)

    @field_validator("share_link", "length", "timestamps", mode="before")
    @classmethod
    def _null_as_default(cls, value: Any, info: ValidationInfo) -> Any:
        if value is None:
            return {"share_link": "", "length": 0, "timestamps": []}[info.field_name]
        return value

    @field_validator("bpm", mode="before")
    @classmethod
    def _bpm_as_text(cls, value: Any) -> Any:
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(value)
        return value


class CompositionJob(BaseModel):
    request_id: str
    status: JobStatus
    result: Optional[CompositionResult] = None


class SoundrawParams(BaseModel):
    moods: list[Mood]
    genres: list[Genre]
    themes: list[Theme]
    tempo: Tempo
    energy_profile: EnergyProfile


class SfxResult(BaseModel):
    share_link: str
    audio_url: str
    request_id: str
    duration_seconds: Union[int, float]
    bpm: Optional[int]
    file_format: FileFormat
    integration_code: Optional[str] = None
    deepseek_reasoning: str
    soundraw_params: SoundrawParams


class SfxVariationResult(BaseModel):
    share_link: str
    audio_url: str
    request_id: str
    duration_seconds: Union[int, float]
    bpm: Optional[int]
    file_format: FileFormat
    variation_type: VariationType
    source_share_link: str


class SfxBatchResult(BaseModel):
    results: list[SfxResult]


class ToolContent(BaseModel):
    type: str = "text"
    text: str


class ToolResponse(BaseModel):
    content: list[ToolContent]
    is_error: bool = False


class ToolDefinition(BaseModel):
    name: str
    description: str
    input_schema: dict[str, Any]
