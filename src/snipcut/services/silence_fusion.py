"""Silence fusion engine.

Combines amplitude silences from ffmpeg ``silencedetect`` with gaps between
transcribed words into one confidence-ranked list per clip.

Pipeline for a single clip:
1. Score raw detector triples (``score_ffmpeg_silences``)
2. Derive word-gap silences from the transcript (``detect_word_gaps``)
3. Fuse both lists and deduplicate (``fuse_silences``)
4. Drop candidates below the aggressiveness preset (``filter_by_aggressiveness``)
"""

import logging

from snipcut.models.silence import (
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
from snipcut.models.transcript import Word, words_for_clip

logger = logging.getLogger(__name__)

# Confidence heuristic for ffmpeg silences. Longer and boundary-touching
# silences score higher; these are tuned values, not probabilities.
BASE_CONFIDENCE = 0.5
DURATION_SATURATION = 2.0  # seconds; longer silences get the full duration weight
DURATION_WEIGHT = 0.3
BOUNDARY_BONUS = 0.2

# Word gaps are taken from the transcript and trusted on their own.
WHISPER_GAP_CONFIDENCE = 0.7

# A silence within this distance of either clip edge is a boundary silence.
BOUNDARY_TOLERANCE = 0.1


def _clamp(value: float, low: float = 0.0, high: float = 1.0) -> float:
    return min(max(value, low), high)


def score_ffmpeg_silences(
    raw: list[RawSilence],
    clip_index: int,
    clip_duration: float,
) -> list[SilenceSegment]:
    """Convert raw silencedetect triples into scored segments.

    End-of-file sentinels are resolved against ``clip_duration``. Triples
    that would end up with no positive duration are dropped.

    Args:
        raw: Parsed detector output in file order
        clip_index: Clip the silences belong to
        clip_duration: Measured clip duration in seconds

    Returns:
        ffmpeg-sourced segments with ids ``ffmpeg-{clip}-{i}``
    """
    segments: list[SilenceSegment] = []

    for i, triple in enumerate(raw):
        start = max(triple.start, 0.0)
        end = clip_duration if triple.extends_to_eof else triple.end
        if clip_duration > 0:
            end = min(end, clip_duration)

        if end <= start:
            logger.warning(
                "Dropping silence %d of clip %d with non-positive duration (%.3f-%.3f)",
                i, clip_index, start, end,
            )
            continue

        duration = end - start
        is_boundary = start < BOUNDARY_TOLERANCE or end > clip_duration - BOUNDARY_TOLERANCE

        confidence = BASE_CONFIDENCE
        confidence += min(duration / DURATION_SATURATION, 1.0) * DURATION_WEIGHT
        if is_boundary:
            confidence += BOUNDARY_BONUS

        segments.append(
            SilenceSegment(
                id=f"ffmpeg-{clip_index}-{i}",
                start=start,
                end=end,
                clip_index=clip_index,
                source=SilenceSource.FFMPEG,
                confidence=_clamp(confidence),
                type=SilenceType.BOUNDARY if is_boundary else SilenceType.MID,
            )
        )

    return segments


def detect_word_gaps(
    words: list[Word],
    clip_index: int,
    min_gap: float = 0.3,
) -> list[SilenceSegment]:
    """Find silences between consecutive words of one clip.

    Args:
        words: Words of any clip; only ``clip_index`` words are used
        clip_index: Clip to scan
        min_gap: Shortest gap (s) emitted as a candidate

    Returns:
        whisper-sourced mid silences with ids ``whisper-{clip}-{i}``
    """
    clip_words = words_for_clip(words, clip_index)
    gaps: list[SilenceSegment] = []

    for i, (current, nxt) in enumerate(zip(clip_words, clip_words[1:])):
        gap = nxt.start - current.end
        if gap >= min_gap and gap > 0:
            gaps.append(
                SilenceSegment(
                    id=f"whisper-{clip_index}-{i}",
                    start=current.end,
                    end=nxt.start,
                    clip_index=clip_index,
                    source=SilenceSource.WHISPER,
                    confidence=WHISPER_GAP_CONFIDENCE,
                    type=SilenceType.MID,
                )
            )

    return gaps


def fuse_silences(
    ffmpeg_segments: list[SilenceSegment],
    whisper_gaps: list[SilenceSegment],
    clip_index: int,
    options: FusionOptions | None = None,
) -> list[SilenceSegment]:
    """Merge ffmpeg silences with word gaps.

    - ffmpeg segments corroborated by word gaps become one ``merged``
      segment spanning all of them, with boosted confidence
    - uncorroborated mid ffmpeg segments are penalized; boundary ones are not
    - word gaps never matched are kept as-is
    - the result is sorted and near-adjacent segments are deduplicated

    Returns:
        Sorted, deduplicated segments with ids ``dedup-{clip}-{n}``
    """
    options = options or FusionOptions()
    fused: list[SilenceSegment] = []
    used_gaps: set[str] = set()

    for seg in ffmpeg_segments:
        overlapping = [
            gap for gap in whisper_gaps
            if seg.overlap(gap) >= options.overlap_threshold
        ]

        if overlapping:
            used_gaps.update(gap.id for gap in overlapping)
            fused.append(
                SilenceSegment(
                    id=f"merged-{clip_index}-{len(fused)}",
                    start=min([seg.start] + [g.start for g in overlapping]),
                    end=max([seg.end] + [g.end for g in overlapping]),
                    clip_index=clip_index,
                    source=SilenceSource.MERGED,
                    confidence=_clamp(seg.confidence + options.agreement_boost),
                    type=seg.type,
                )
            )
        else:
            confidence = seg.confidence
            if not seg.is_boundary:
                confidence = _clamp(confidence - options.ffmpeg_only_penalty)
            fused.append(
                seg.model_copy(
                    update={
                        "id": f"ffmpeg-adj-{clip_index}-{len(fused)}",
                        "confidence": confidence,
                    }
                )
            )

    for gap in whisper_gaps:
        if gap.id not in used_gaps:
            fused.append(
                gap.model_copy(update={"id": f"whisper-only-{clip_index}-{len(fused)}"})
            )

    fused.sort(key=lambda s: s.start)
    return _deduplicate(fused, clip_index, options.dedup_gap)


def _deduplicate(
    segments: list[SilenceSegment],
    clip_index: int,
    gap: float,
) -> list[SilenceSegment]:
    """Collapse segments whose gap is at most ``gap`` seconds.

    Same merge rule as ``intervals.merge_intervals`` with a coarser
    tolerance, but carries confidence, source and type along.
    """
    if not segments:
        return []

    ordered = sorted(segments, key=lambda s: s.start)
    result: list[SilenceSegment] = []

    current = ordered[0]
    start, end = current.start, current.end
    confidence, source, seg_type = current.confidence, current.source, current.type

    def emit() -> None:
        result.append(
            SilenceSegment(
                id=f"dedup-{clip_index}-{len(result)}",
                start=start,
                end=end,
                clip_index=clip_index,
                source=source,
                confidence=_clamp(confidence),
                type=seg_type,
            )
        )

    for nxt in ordered[1:]:
        if nxt.start <= end + gap:
            end = max(end, nxt.end)
            confidence = max(confidence, nxt.confidence)
            if source != nxt.source:
                source = SilenceSource.MERGED
            if nxt.is_boundary:
                seg_type = SilenceType.BOUNDARY
        else:
            emit()
            start, end = nxt.start, nxt.end
            confidence, source, seg_type = nxt.confidence, nxt.source, nxt.type

    emit()
    return result


def filter_by_aggressiveness(
    segments: list[SilenceSegment],
    preset: AggressivenessPreset | Aggressiveness | str,
) -> list[SilenceSegment]:
    """Drop segments shorter or less confident than the preset allows."""
    if not isinstance(preset, AggressivenessPreset):
        preset = get_preset(preset)

    return [
        seg for seg in segments
        if seg.duration >= preset.min_duration and seg.confidence >= preset.min_confidence
    ]


def process_silence_for_clip(
    ffmpeg_segments: list[SilenceSegment],
    words: list[Word],
    clip_index: int,
    aggressiveness: Aggressiveness | str = Aggressiveness.NATURAL,
    options: FusionOptions | None = None,
) -> list[SilenceSegment]:
    """Full fusion for one clip: word gaps, fuse, then filter."""
    preset = get_preset(aggressiveness)

    whisper_gaps = detect_word_gaps(words, clip_index, preset.min_duration)
    fused = fuse_silences(ffmpeg_segments, whisper_gaps, clip_index, options)
    filtered = filter_by_aggressiveness(fused, preset)

    logger.debug(
        "Clip %d: %d ffmpeg + %d word gaps -> %d fused -> %d kept (%s)",
        clip_index, len(ffmpeg_segments), len(whisper_gaps),
        len(fused), len(filtered), Aggressiveness(aggressiveness).value,
    )
    return filtered


def calculate_silence_stats(segments: list[SilenceSegment]) -> SilenceStats:
    """Summarize durations and confidence of a clip's silences."""
    if not segments:
        return SilenceStats()

    return SilenceStats(
        total_silence=sum(s.duration for s in segments),
        boundary_total=sum(s.duration for s in segments if s.type == SilenceType.BOUNDARY),
        mid_total=sum(s.duration for s in segments if s.type == SilenceType.MID),
        count=len(segments),
        avg_confidence=sum(s.confidence for s in segments) / len(segments),
    )
