"""Edit project model - the persisted state of a multi-clip edit."""

import json
from datetime import datetime
from pathlib import Path

from pydantic import BaseModel, Field

from snipcut.models.edl import (
    DeletionRef,
    LeadingPauseDeletion,
    PauseDeletion,
    SilenceDeletion,
)
from snipcut.models.silence import Aggressiveness, SilenceSegment
from snipcut.models.transcript import Word, words_for_clip


class ClipSource(BaseModel):
    """One source clip with its analysis results."""

    index: int = Field(..., ge=0, description="Position of the clip in the edit")
    path: Path | None = Field(default=None, description="Source media file")
    duration: float = Field(..., ge=0.0, description="Measured duration in seconds")
    fps: float | None = Field(default=None, description="Source frame rate")
    words: list[Word] = Field(default_factory=list)
    silence_segments: list[SilenceSegment] = Field(
        default_factory=list, description="Ranked silence candidates"
    )
    silence_available: bool = Field(
        default=True, description="False when amplitude detection was skipped or failed"
    )

    def sorted_words(self) -> list[Word]:
        """Words of this clip ordered by start time."""
        return words_for_clip(self.words, self.index)

    def get_silence(self, segment_id: str) -> SilenceSegment | None:
        for seg in self.silence_segments:
            if seg.id == segment_id:
                return seg
        return None


class EditProject(BaseModel):
    """Main container for an edit.

    Holds:
    - Clips in output order, each with words and silence candidates
    - The deletions chosen in the editor
    - The aggressiveness preset used for silence suggestions
    """

    name: str = Field(default="Untitled Project", description="Project name")
    created_at: datetime = Field(default_factory=datetime.now)
    updated_at: datetime = Field(default_factory=datetime.now)

    aggressiveness: Aggressiveness = Field(default=Aggressiveness.NATURAL)
    fps: int = Field(default=30, gt=0, description="Output frame rate")

    clips: list[ClipSource] = Field(default_factory=list)
    deletions: list[DeletionRef] = Field(default_factory=list)

    # --- Helper methods ---

    def add_clip(self, clip: ClipSource) -> None:
        """Add a clip, keeping clips ordered by index."""
        self.clips.append(clip)
        self.clips.sort(key=lambda c: c.index)
        self.updated_at = datetime.now()

    def get_clip(self, index: int) -> ClipSource | None:
        for clip in self.clips:
            if clip.index == index:
                return clip
        return None

    @property
    def words(self) -> list[Word]:
        """All words across clips, in clip order."""
        return [w for clip in self.clips for w in clip.sorted_words()]

    def add_deletions(self, refs: list[DeletionRef]) -> int:
        """Add deletions that are not already present.

        Returns:
            Number of deletions added
        """
        existing = set(self.deletions)
        added = 0
        for ref in refs:
            if ref not in existing:
                self.deletions.append(ref)
                existing.add(ref)
                added += 1
        if added:
            self.updated_at = datetime.now()
        return added

    def auto_cut_silences(self) -> int:
        """Mark every surfaced silence segment of every clip for deletion."""
        refs: list[DeletionRef] = [
            SilenceDeletion(clip_index=clip.index, segment_id=seg.id)
            for clip in self.clips
            for seg in clip.silence_segments
        ]
        return self.add_deletions(refs)

    def auto_remove_pauses(self, pause_threshold: float = 0.3) -> int:
        """Mark every inter-word pause and leading pause at or above the threshold."""
        refs: list[DeletionRef] = []
        for clip in self.clips:
            words = clip.sorted_words()
            if not words:
                continue
            if words[0].start >= pause_threshold:
                refs.append(LeadingPauseDeletion(clip_index=clip.index))
            for prev, nxt in zip(words, words[1:]):
                if nxt.start - prev.end >= pause_threshold:
                    refs.append(PauseDeletion(after_word_id=prev.id))
        return self.add_deletions(refs)

    @property
    def source_duration(self) -> float:
        """Total duration of all clips before cutting (s)."""
        return sum(clip.duration for clip in self.clips)

    # --- Serialization ---

    def save(self, path: Path) -> Path:
        """Save project to JSON file.

        Args:
            path: Output file path

        Returns:
            Path to saved file
        """
        path = Path(path)
        if not path.suffix:
            path = path.with_suffix(".snip.json")

        with open(path, "w", encoding="utf-8") as f:
            json.dump(self.model_dump(mode="json"), f, ensure_ascii=False, indent=2, default=str)

        return path

    @classmethod
    def load(cls, path: Path) -> "EditProject":
        """Load project from JSON file."""
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
        return cls.model_validate(data)
