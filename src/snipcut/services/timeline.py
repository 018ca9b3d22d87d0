"""Timestamp remapping and multi-clip timeline assembly.

Each clip is rendered independently into its own post-cut time base
(``render_clip``), then the surviving clips are folded left to right into
one output timeline (``append_clip``), shifting every caption by the running
offset.
"""

import logging
import math
from collections.abc import Iterable

from pydantic import BaseModel, ConfigDict

from snipcut.errors import InvalidDeletionError
from snipcut.intervals import MERGE_EPSILON, remap_time
from snipcut.models.edl import DeletionSet, EditDecisionList
from snipcut.models.project import ClipSource
from snipcut.models.timeline import (
    AssembledTimeline,
    Caption,
    CaptionWord,
    ClipRender,
    TimelineClip,
)
from snipcut.models.transcript import Word
from snipcut.services.edl import DEFAULT_PAUSE_THRESHOLD, build_edl

logger = logging.getLogger(__name__)

WORDS_PER_CAPTION = 8
DEFAULT_FPS = 30


def remap_words(
    words: Iterable[Word],
    edl: EditDecisionList,
    deleted_word_ids: Iterable[str] = (),
    epsilon: float = MERGE_EPSILON,
) -> list[Word]:
    """Drop deleted words and move the rest into post-cut time.

    Words that were not deleted explicitly but sit inside a deleted range
    are clamped to the cut point. ``epsilon`` must match the one the EDL was
    built with.
    """
    deleted = set(deleted_word_ids)
    remapped: list[Word] = []

    for word in sorted(words, key=lambda w: w.start):
        if word.id in deleted:
            continue
        remapped.append(
            word.model_copy(
                update={
                    "start": remap_time(word.start, edl.merged_deleted, epsilon),
                    "end": remap_time(word.end, edl.merged_deleted, epsilon),
                }
            )
        )

    return remapped


def chunk_captions(words: list[Word], chunk_size: int = WORDS_PER_CAPTION) -> list[Caption]:
    """Group words into fixed-size captions with millisecond timing."""
    if chunk_size < 1:
        raise ValueError("chunk_size must be at least 1")

    captions: list[Caption] = []
    for i in range(0, len(words), chunk_size):
        chunk = words[i:i + chunk_size]
        captions.append(
            Caption(
                text=" ".join(w.text for w in chunk),
                start_ms=chunk[0].start * 1000.0,
                end_ms=chunk[-1].end * 1000.0,
                words=[
                    CaptionWord(word=w.text, start_ms=w.start * 1000.0, end_ms=w.end * 1000.0)
                    for w in chunk
                ],
            )
        )
    return captions


def render_clip(
    clip: ClipSource,
    deletions: DeletionSet | None = None,
    pause_threshold: float = DEFAULT_PAUSE_THRESHOLD,
    epsilon: float = MERGE_EPSILON,
    chunk_size: int = WORDS_PER_CAPTION,
) -> ClipRender | None:
    """Apply the cut to one clip.

    Returns:
        The clip in its local post-cut time base, or None when nothing of the
        clip survives
    """
    deletions = deletions or DeletionSet(clip_index=clip.index)
    edl = build_edl(clip, deletions, pause_threshold, epsilon)
    if edl.is_empty:
        return None

    words = remap_words(clip.sorted_words(), edl, deletions.word_ids, epsilon)
    return ClipRender(
        clip_index=clip.index,
        edl=edl,
        words=words,
        captions=chunk_captions(words, chunk_size),
    )


class TimelineAccumulator(BaseModel):
    """Immutable state of the timeline fold."""

    model_config = ConfigDict(frozen=True)

    offset_ms: float = 0.0
    clips: tuple[TimelineClip, ...] = ()
    captions: tuple[Caption, ...] = ()
    omitted_clips: tuple[int, ...] = ()


def append_clip(acc: TimelineAccumulator, render: ClipRender) -> TimelineAccumulator:
    """Place a rendered clip after everything already on the timeline."""
    duration_ms = render.duration * 1000.0
    placed = TimelineClip(
        clip_index=render.clip_index,
        start_ms=acc.offset_ms,
        end_ms=acc.offset_ms + duration_ms,
        keep_segments=render.edl.keep_segments,
    )
    return TimelineAccumulator(
        offset_ms=acc.offset_ms + duration_ms,
        clips=acc.clips + (placed,),
        captions=acc.captions + tuple(c.shifted(acc.offset_ms) for c in render.captions),
        omitted_clips=acc.omitted_clips,
    )


def omit_clip(acc: TimelineAccumulator, clip_index: int) -> TimelineAccumulator:
    """Record a clip that contributes nothing to the timeline."""
    return acc.model_copy(update={"omitted_clips": acc.omitted_clips + (clip_index,)})


def frames_for(duration_ms: float, fps: int) -> int:
    """Frames needed to cover ``duration_ms`` at ``fps``."""
    # Round first so 12.0s at 30fps is 360 frames, not 361.
    return math.ceil(round(duration_ms / 1000.0 * fps, 6))


def assemble_timeline(
    clips: list[ClipSource],
    deletions_by_clip: dict[int, DeletionSet] | None = None,
    fps: int = DEFAULT_FPS,
    pause_threshold: float = DEFAULT_PAUSE_THRESHOLD,
    epsilon: float = MERGE_EPSILON,
    chunk_size: int = WORDS_PER_CAPTION,
) -> AssembledTimeline:
    """Render every clip and stitch the survivors into one timeline.

    Clips are placed in clip-index order. Clips left empty by the cut are
    listed in ``omitted_clips`` and take no time on the timeline.
    """
    if fps <= 0:
        raise ValueError("fps must be positive")
    deletions_by_clip = deletions_by_clip or {}
    unknown = sorted(set(deletions_by_clip) - {clip.index for clip in clips})
    if unknown:
        raise InvalidDeletionError(f"Deletions reference unknown clips: {unknown}")

    acc = TimelineAccumulator()
    for clip in sorted(clips, key=lambda c: c.index):
        render = render_clip(
            clip,
            deletions_by_clip.get(clip.index),
            pause_threshold=pause_threshold,
            epsilon=epsilon,
            chunk_size=chunk_size,
        )
        if render is None:
            acc = omit_clip(acc, clip.index)
        else:
            acc = append_clip(acc, render)

    timeline = AssembledTimeline(
        clips=list(acc.clips),
        captions=list(acc.captions),
        omitted_clips=list(acc.omitted_clips),
        total_duration_ms=acc.offset_ms,
        fps=fps,
        duration_in_frames=frames_for(acc.offset_ms, fps),
    )

    logger.info(
        "Assembled %d clips (%d omitted): %.0fms, %d frames at %dfps",
        len(timeline.clips), len(timeline.omitted_clips),
        timeline.total_duration_ms, timeline.duration_in_frames, fps,
    )
    return timeline
