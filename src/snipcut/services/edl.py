"""Deletion aggregation and edit decision list building.

Turns the editor's deletions for a clip (explicit words, pauses between
words, detected silences, leading/trailing pauses) into one sorted,
non-overlapping set of deleted ranges and its complement.

This is the validation boundary for the interval algebra: malformed input
raises ``InvalidDeletionError`` here, stale references are logged and
skipped.
"""

import logging
from collections.abc import Iterable

from pydantic import ValidationError

from snipcut.errors import InvalidDeletionError
from snipcut.intervals import MERGE_EPSILON, clip_intervals, invert_intervals, merge_intervals
from snipcut.models.edl import (
    DeletionRef,
    DeletionSet,
    EditDecisionList,
    PauseDeletion,
    WordDeletion,
)
from snipcut.models.interval import TimeInterval
from snipcut.models.project import ClipSource
from snipcut.models.transcript import Word

logger = logging.getLogger(__name__)

DEFAULT_PAUSE_THRESHOLD = 0.3


def _validated_words(clip: ClipSource) -> list[tuple[Word, TimeInterval]]:
    """Return the clip's words in start order paired with their intervals."""
    pairs: list[tuple[Word, TimeInterval]] = []
    for word in clip.sorted_words():
        try:
            pairs.append((word, word.interval()))
        except ValidationError as e:
            raise InvalidDeletionError(
                f"Word '{word.id}' of clip {clip.index} has an invalid range "
                f"({word.start}-{word.end})"
            ) from e
    return pairs


def _check_clip(clip: ClipSource, deletions: DeletionSet) -> None:
    if clip.duration < 0:
        raise InvalidDeletionError(f"Clip {clip.index} has negative duration {clip.duration}")
    if deletions.clip_index != clip.index:
        raise InvalidDeletionError(
            f"Deletions for clip {deletions.clip_index} applied to clip {clip.index}"
        )
    for ref in deletions.refs:
        ref_clip = getattr(ref, "clip_index", None)
        if ref_clip is not None and ref_clip != clip.index:
            raise InvalidDeletionError(
                f"Deletion '{ref.to_id()}' references clip {ref_clip}, not clip {clip.index}"
            )


def resolve_deletions(
    clip: ClipSource,
    deletions: DeletionSet,
    pause_threshold: float = DEFAULT_PAUSE_THRESHOLD,
) -> list[TimeInterval]:
    """Resolve every deletion of one clip to a range in original clip time.

    Args:
        clip: Clip with its words and detected silences
        deletions: Deletions for this clip
        pause_threshold: Minimum gap (s) for a pause between words to exist

    Returns:
        Unmerged ranges, one per resolved deletion

    Raises:
        InvalidDeletionError: If the clip, its words, or a clip index is invalid
    """
    _check_clip(clip, deletions)
    words = _validated_words(clip)
    position = {word.id: i for i, (word, _) in enumerate(words)}

    ranges: list[TimeInterval] = []

    # 1. Explicit words
    for word_id in sorted(deletions.word_ids):
        i = position.get(word_id)
        if i is None:
            logger.warning("Skipping deletion of unknown word '%s' in clip %d", word_id, clip.index)
            continue
        ranges.append(words[i][1])

    # 2. Pauses between consecutive words
    for word_id in sorted(deletions.pause_after_word_ids):
        i = position.get(word_id)
        if i is None or i + 1 >= len(words):
            logger.warning(
                "Skipping pause after '%s' in clip %d: no following word", word_id, clip.index
            )
            continue
        prev, nxt = words[i][0], words[i + 1][0]
        if nxt.start - prev.end < pause_threshold or nxt.start <= prev.end:
            logger.warning(
                "Skipping pause after '%s' in clip %d: gap %.3fs below %.3fs",
                word_id, clip.index, nxt.start - prev.end, pause_threshold,
            )
            continue
        ranges.append(TimeInterval(start=prev.end, end=nxt.start))

    # 3. Detected silences
    for ref in deletions.silence_refs:
        segment = clip.get_silence(ref.segment_id)
        if segment is None:
            logger.warning(
                "Skipping unknown silence '%s' in clip %d", ref.segment_id, clip.index
            )
            continue
        ranges.append(TimeInterval(start=segment.start, end=segment.end))

    # 4. Leading and trailing pauses
    if deletions.leading_pause:
        if words and words[0][0].start >= pause_threshold:
            ranges.append(TimeInterval(start=0.0, end=words[0][0].start))
        else:
            logger.warning("Skipping leading pause of clip %d: no qualifying gap", clip.index)

    if deletions.trailing_pause:
        if words and clip.duration - words[-1][0].end >= pause_threshold:
            ranges.append(TimeInterval(start=words[-1][0].end, end=clip.duration))
        else:
            logger.warning("Skipping trailing pause of clip %d: no qualifying gap", clip.index)

    return ranges


def build_edl(
    clip: ClipSource,
    deletions: DeletionSet | None = None,
    pause_threshold: float = DEFAULT_PAUSE_THRESHOLD,
    epsilon: float = MERGE_EPSILON,
) -> EditDecisionList:
    """Build the edit decision list for one clip.

    An EDL with no keep segments is a valid result meaning the clip is
    dropped from the output.

    Raises:
        InvalidDeletionError: See ``resolve_deletions``
    """
    deletions = deletions or DeletionSet(clip_index=clip.index)
    ranges = resolve_deletions(clip, deletions, pause_threshold)

    merged = clip_intervals(merge_intervals(ranges, epsilon), clip.duration)
    keep = invert_intervals(merged, clip.duration, epsilon)

    edl = EditDecisionList(
        clip_index=clip.index,
        clip_duration=clip.duration,
        merged_deleted=merged,
        keep_segments=keep,
    )

    if edl.is_empty:
        logger.info("Clip %d has nothing left after cuts and will be omitted", clip.index)
    else:
        logger.debug(
            "Clip %d: %d deleted ranges (%.3fs), %d keep segments (%.3fs)",
            clip.index, len(merged), edl.removed_duration, len(keep), edl.output_duration,
        )

    return edl


def partition_deletions(
    refs: Iterable[DeletionRef],
    clips: list[ClipSource],
) -> dict[int, DeletionSet]:
    """Group project-wide deletions by the clip they apply to.

    Word and pause references are routed by the owning word's clip. Unknown
    word ids are stale and skipped with a warning.

    Returns:
        A DeletionSet for every clip, keyed by clip index

    Raises:
        InvalidDeletionError: If a reference names a clip that does not exist
    """
    word_clip = {w.id: clip.index for clip in clips for w in clip.words}
    grouped: dict[int, list[DeletionRef]] = {clip.index: [] for clip in clips}

    for ref in refs:
        if isinstance(ref, WordDeletion):
            clip_index = word_clip.get(ref.word_id)
        elif isinstance(ref, PauseDeletion):
            clip_index = word_clip.get(ref.after_word_id)
        else:
            clip_index = ref.clip_index
            if clip_index not in grouped:
                raise InvalidDeletionError(
                    f"Deletion '{ref.to_id()}' references unknown clip {clip_index}"
                )

        if clip_index is None:
            logger.warning("Skipping deletion '%s': word not found in any clip", ref.to_id())
            continue
        grouped[clip_index].append(ref)

    return {
        index: DeletionSet(clip_index=index, refs=clip_refs)
        for index, clip_refs in grouped.items()
    }


def build_edls(
    clips: list[ClipSource],
    deletions_by_clip: dict[int, DeletionSet] | None = None,
    pause_threshold: float = DEFAULT_PAUSE_THRESHOLD,
    epsilon: float = MERGE_EPSILON,
) -> dict[int, EditDecisionList]:
    """Build EDLs for every clip, keyed by clip index.

    Raises:
        InvalidDeletionError: If deletions target a clip index that does not exist
    """
    deletions_by_clip = deletions_by_clip or {}
    known = {clip.index for clip in clips}
    unknown = sorted(set(deletions_by_clip) - known)
    if unknown:
        raise InvalidDeletionError(f"Deletions reference unknown clips: {unknown}")

    return {
        clip.index: build_edl(
            clip, deletions_by_clip.get(clip.index), pause_threshold, epsilon
        )
        for clip in clips
    }


