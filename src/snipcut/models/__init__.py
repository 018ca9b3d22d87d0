"""Data models for snipcut."""

from snipcut.models.edl import (
    DeletionRef,
    DeletionSet,
    EditDecisionList,
    LeadingPauseDeletion,
    PauseDeletion,
    SilenceDeletion,
    TrailingPauseDeletion,
    WordDeletion,
    parse_deletion_id,
)
from snipcut.models.interval import TimeInterval
from snipcut.models.media import MediaInfo
from snipcut.models.pipeline import PipelineConfig, StageResult, StageStatus
from snipcut.models.project import ClipSource, EditProject
from snipcut.models.silence import (
    AGGRESSIVENESS_PRESETS,
    Aggressiveness,
    AggressivenessPreset,
    FusionOptions,
    RawSilence,
    SilenceSegment,
    SilenceSource,
    SilenceStats,
    SilenceType,
    get_preset,
)
from snipcut.models.timeline import (
    AssembledTimeline,
    Caption,
    CaptionWord,
    ClipRender,
    TimelineClip,
)
from snipcut.models.transcript import Word, words_for_clip

__all__ = [
    # Interval
    "TimeInterval",
    # Media
    "MediaInfo",
    # Transcript
    "Word",
    "words_for_clip",
    # Silence
    "SilenceSource",
    "SilenceType",
    "SilenceSegment",
    "RawSilence",
    "Aggressiveness",
    "AggressivenessPreset",
    "AGGRESSIVENESS_PRESETS",
    "get_preset",
    "FusionOptions",
    "SilenceStats",
    # Deletions / EDL
    "WordDeletion",
    "PauseDeletion",
    "SilenceDeletion",
    "LeadingPauseDeletion",
    "TrailingPauseDeletion",
    "DeletionRef",
    "DeletionSet",
    "parse_deletion_id",
    "EditDecisionList",
    # Timeline
    "CaptionWord",
    "Caption",
    "ClipRender",
    "TimelineClip",
    "AssembledTimeline",
    # Project
    "ClipSource",
    "EditProject",
    # Pipeline
    "StageStatus",
    "StageResult",
    "PipelineConfig",
]
