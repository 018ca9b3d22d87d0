"""Deletion references and edit decision list models.

A deletion can point at one of several kinds of thing: an explicit word, the
pause after a word, a detected silence segment, or the leading/trailing pause
of a clip. Each kind is its own frozen model and ``DeletionRef`` is the
discriminated union over them. The legacy string ids used by the editor
(``pause-after-{wordId}``, ``silence-{clipIndex}-{segmentId}``, ...) are only
parsed and produced at the edge via ``parse_deletion_id`` / ``to_id``. The
AutoCut gap form ``pause-clip-{clipIndex}-{wordId}-{nextWordId}`` parses to a
``PauseDeletion`` and is written back as ``pause-after-{wordId}``.
"""

import re
from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field

from snipcut.errors import InvalidDeletionError
from snipcut.models.interval import TimeInterval


class WordDeletion(BaseModel):
    """An explicit word removed by the editor."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["word"] = "word"
    word_id: str

    def to_id(self) -> str:
        return self.word_id


class PauseDeletion(BaseModel):
    """The gap between a word and the next word of the same clip."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["pause"] = "pause"
    after_word_id: str

    def to_id(self) -> str:
        return f"pause-after-{self.after_word_id}"


class SilenceDeletion(BaseModel):
    """A previously detected silence segment."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["silence"] = "silence"
    clip_index: int = Field(..., ge=0)
    segment_id: str

    def to_id(self) -> str:
        return f"silence-{self.clip_index}-{self.segment_id}"


class LeadingPauseDeletion(BaseModel):
    """The pause between the start of a clip and its first word."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["leading_pause"] = "leading_pause"
    clip_index: int = Field(..., ge=0)

    def to_id(self) -> str:
        return f"pause-before-clip-{self.clip_index}"


class TrailingPauseDeletion(BaseModel):
    """The pause between a clip's last word and the end of the clip."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["trailing_pause"] = "trailing_pause"
    clip_index: int = Field(..., ge=0)

    def to_id(self) -> str:
        return f"pause-after-clip-{self.clip_index}-last-word"


DeletionRef = Annotated[
    Union[
        WordDeletion,
        PauseDeletion,
        SilenceDeletion,
        LeadingPauseDeletion,
        TrailingPauseDeletion,
    ],
    Field(discriminator="kind"),
]

# Order matters: the clip-level pause ids also start with "pause-after-".
_TRAILING_PAUSE_RE = re.compile(r"^pause-after-clip-(\d+)-last-word$")
_LEADING_PAUSE_RE = re.compile(r"^pause-before-clip-(\d+)(?:-first-word)?$")
_PAUSE_RE = re.compile(r"^pause-after-(.+)$")
# AutoCut word gaps: pause-clip-{clip}-{wordId}-{nextWordId}. Word ids contain
# hyphens, so the second id is anchored on the word-{clip}-{i} shape.
_WORD_GAP_RE = re.compile(r"^pause-clip-(\d+)-(.+)-(word-\d+-\d+)$")
_SILENCE_RE = re.compile(r"^silence-(\d+)-(.+)$")


def parse_deletion_id(raw_id: str) -> DeletionRef:
    """Parse an editor-supplied id string into a typed deletion reference.

    Raises:
        InvalidDeletionError: If the id is empty.
    """
    raw_id = raw_id.strip()
    if not raw_id:
        raise InvalidDeletionError("Deletion id must not be empty")

    match = _TRAILING_PAUSE_RE.match(raw_id)
    if match:
        return TrailingPauseDeletion(clip_index=int(match.group(1)))

    match = _LEADING_PAUSE_RE.match(raw_id)
    if match:
        return LeadingPauseDeletion(clip_index=int(match.group(1)))

    match = _PAUSE_RE.match(raw_id)
    if match:
        return PauseDeletion(after_word_id=match.group(1))

    match = _WORD_GAP_RE.match(raw_id)
    if match:
        return PauseDeletion(after_word_id=match.group(2))

    match = _SILENCE_RE.match(raw_id)
    if match:
        return SilenceDeletion(clip_index=int(match.group(1)), segment_id=match.group(2))

    return WordDeletion(word_id=raw_id)


class DeletionSet(BaseModel):
    """All deletions that apply to one clip, built at render time."""

    clip_index: int = Field(..., ge=0)
    refs: list[DeletionRef] = Field(default_factory=list)

    @property
    def word_ids(self) -> set[str]:
        return {r.word_id for r in self.refs if isinstance(r, WordDeletion)}

    @property
    def pause_after_word_ids(self) -> set[str]:
        return {r.after_word_id for r in self.refs if isinstance(r, PauseDeletion)}

    @property
    def silence_refs(self) -> list[SilenceDeletion]:
        return [r for r in self.refs if isinstance(r, SilenceDeletion)]

    @property
    def silence_segment_ids(self) -> set[str]:
        return {r.segment_id for r in self.silence_refs}

    @property
    def leading_pause(self) -> bool:
        return any(isinstance(r, LeadingPauseDeletion) for r in self.refs)

    @property
    def trailing_pause(self) -> bool:
        return any(isinstance(r, TrailingPauseDeletion) for r in self.refs)

    @property
    def is_empty(self) -> bool:
        return not self.refs


class EditDecisionList(BaseModel):
    """Deleted ranges of one clip and their complement.

    ``keep_segments`` and ``merged_deleted`` together partition
    ``[0, clip_duration]``.
    """

    clip_index: int = Field(..., ge=0)
    clip_duration: float = Field(..., ge=0.0, description="Original clip duration (s)")
    merged_deleted: list[TimeInterval] = Field(default_factory=list)
    keep_segments: list[TimeInterval] = Field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        """True when nothing of the clip survives the cut."""
        return not self.keep_segments

    @property
    def output_duration(self) -> float:
        """Post-cut duration in seconds."""
        return sum(seg.duration for seg in self.keep_segments)

    @property
    def removed_duration(self) -> float:
        """Total deleted time in seconds."""
        return sum(seg.duration for seg in self.merged_deleted)
