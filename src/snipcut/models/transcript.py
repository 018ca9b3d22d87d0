"""Transcript data models."""

from pydantic import BaseModel, Field

from snipcut.models.interval import TimeInterval


class Word(BaseModel):
    """A single transcribed word with timing in its clip's time base.

    Produced once by the transcription provider. Ordering of ``start`` and
    ``end`` is not validated here; ``interval()`` is where malformed words
    are rejected.
    """

    id: str = Field(..., description="Word identifier, unique across the project")
    text: str = Field(..., description="Word text")
    start: float = Field(..., description="Start time in seconds")
    end: float = Field(..., description="End time in seconds")
    clip_index: int = Field(default=0, ge=0, description="Originating clip")

    def interval(self) -> TimeInterval:
        """Return the word's span as a validated TimeInterval."""
        return TimeInterval(start=self.start, end=self.end)


def words_for_clip(words: list[Word], clip_index: int) -> list[Word]:
    """Return the words of one clip ordered by start time."""
    return sorted(
        (w for w in words if w.clip_index == clip_index),
        key=lambda w: w.start,
    )
