"""Silence detection data models."""

from enum import Enum

from pydantic import BaseModel, Field

from snipcut.models.interval import TimeInterval


class SilenceSource(str, Enum):
    """Which detector produced a silence segment."""

    FFMPEG = "ffmpeg"
    WHISPER = "whisper"
    MERGED = "merged"


class SilenceType(str, Enum):
    """Where a silence sits inside its clip."""

    BOUNDARY = "boundary"
    MID = "mid"


class SilenceSegment(TimeInterval):
    """A detected silent region of one clip.

    ``confidence`` is a tuned heuristic, not a measured probability.
    """

    id: str = Field(..., description="Segment identifier, unique within its clip")
    clip_index: int = Field(default=0, ge=0, description="Clip this silence belongs to")
    source: SilenceSource = Field(..., description="Detection source")
    confidence: float = Field(
        default=1.0, ge=0.0, le=1.0, description="Confidence that the silence is removable"
    )
    type: SilenceType = Field(default=SilenceType.MID, description="Boundary or mid-clip silence")

    @property
    def is_boundary(self) -> bool:
        return self.type == SilenceType.BOUNDARY


EOF_SENTINEL = -1.0


class RawSilence(BaseModel):
    """A raw silencedetect triple, before scoring.

    ``end == -1`` and ``duration == -1`` mean the silence runs to the end of
    the file and must be resolved against the measured clip duration.
    """

    start: float
    end: float
    duration: float

    @property
    def extends_to_eof(self) -> bool:
        return self.end == EOF_SENTINEL or self.duration == EOF_SENTINEL


class Aggressiveness(str, Enum):
    """How much silence to propose for removal."""

    TIGHT = "tight"
    NATURAL = "natural"
    CONSERVATIVE = "conservative"


class AggressivenessPreset(BaseModel):
    """Thresholds used to filter silence candidates and drive the detector."""

    min_duration: float = Field(..., gt=0.0, description="Shortest silence kept (s)")
    min_confidence: float = Field(..., ge=0.0, le=1.0, description="Lowest confidence kept")
    noise_db: float = Field(..., description="silencedetect noise floor (dB)")


AGGRESSIVENESS_PRESETS: dict[Aggressiveness, AggressivenessPreset] = {
    # Remove every silence over 0.3s
    Aggressiveness.TIGHT: AggressivenessPreset(
        min_duration=0.3, min_confidence=0.5, noise_db=-25.0
    ),
    Aggressiveness.NATURAL: AggressivenessPreset(
        min_duration=0.5, min_confidence=0.6, noise_db=-30.0
    ),
    # Only obvious silences over 0.8s
    Aggressiveness.CONSERVATIVE: AggressivenessPreset(
        min_duration=0.8, min_confidence=0.7, noise_db=-35.0
    ),
}


def get_preset(aggressiveness: Aggressiveness | str) -> AggressivenessPreset:
    """Look up a preset by enum member or name."""
    return AGGRESSIVENESS_PRESETS[Aggressiveness(aggressiveness)]


class FusionOptions(BaseModel):
    """Tuning knobs for merging ffmpeg segments with word gaps."""

    overlap_threshold: float = Field(
        default=0.1, ge=0.0, description="Minimum overlap (s) for two detections to agree"
    )
    agreement_boost: float = Field(
        default=0.2, ge=0.0, description="Confidence added when both detectors agree"
    )
    ffmpeg_only_penalty: float = Field(
        default=0.2, ge=0.0, description="Confidence removed from uncorroborated mid silences"
    )
    dedup_gap: float = Field(
        default=0.1, ge=0.0, description="Segments closer than this (s) are merged"
    )


class SilenceStats(BaseModel):
    """Summary of a clip's silence segments."""

    total_silence: float = 0.0
    boundary_total: float = 0.0
    mid_total: float = 0.0
    count: int = 0
    avg_confidence: float = 0.0
