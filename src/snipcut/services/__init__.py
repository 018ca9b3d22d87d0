"""Services module for snipcut."""

from snipcut.services.analysis import ClipAnalyzer
from snipcut.services.edl import build_edl, build_edls, partition_deletions, resolve_deletions
from snipcut.services.media import MediaService
from snipcut.services.silence_detector import SilenceDetector, parse_silencedetect_output
from snipcut.services.silence_fusion import (
    calculate_silence_stats,
    detect_word_gaps,
    filter_by_aggressiveness,
    fuse_silences,
    process_silence_for_clip,
    score_ffmpeg_silences,
)
from snipcut.services.timeline import (
    TimelineAccumulator,
    append_clip,
    assemble_timeline,
    chunk_captions,
    remap_words,
    render_clip,
)
from snipcut.services.transcription import TranscriptionService, WhisperProvider

__all__ = [
    # Media / detection
    "MediaService",
    "SilenceDetector",
    "parse_silencedetect_output",
    "TranscriptionService",
    "WhisperProvider",
    "ClipAnalyzer",
    # Silence fusion
    "score_ffmpeg_silences",
    "detect_word_gaps",
    "fuse_silences",
    "filter_by_aggressiveness",
    "process_silence_for_clip",
    "calculate_silence_stats",
    # EDL
    "resolve_deletions",
    "build_edl",
    "build_edls",
    "partition_deletions",
    # Timeline
    "remap_words",
    "chunk_captions",
    "render_clip",
    "TimelineAccumulator",
    "append_clip",
    "assemble_timeline",
]
