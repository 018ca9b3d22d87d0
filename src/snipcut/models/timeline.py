"""Output timeline models handed to the compositor and trimmer."""

from pydantic import BaseModel, Field

from snipcut.models.edl import EditDecisionList
from snipcut.models.interval import TimeInterval
from snipcut.models.transcript import Word


class CaptionWord(BaseModel):
    """A highlighted word inside a caption, in milliseconds."""

    word: str
    start_ms: float
    end_ms: float


class Caption(BaseModel):
    """A chunk of consecutive words shown together."""

    text: str
    start_ms: float
    end_ms: float
    words: list[CaptionWord] = Field(default_factory=list)

    def shifted(self, offset_ms: float) -> "Caption":
        """Return a copy moved later by ``offset_ms``."""
        return Caption(
            text=self.text,
            start_ms=self.start_ms + offset_ms,
            end_ms=self.end_ms + offset_ms,
            words=[
                CaptionWord(
                    word=w.word,
                    start_ms=w.start_ms + offset_ms,
                    end_ms=w.end_ms + offset_ms,
                )
                for w in self.words
            ],
        )


class ClipRender(BaseModel):
    """A surviving clip after the cut, in its own remapped time base."""

    clip_index: int = Field(..., ge=0)
    edl: EditDecisionList
    words: list[Word] = Field(default_factory=list, description="Remapped surviving words")
    captions: list[Caption] = Field(default_factory=list)

    @property
    def duration(self) -> float:
        """Post-cut duration in seconds."""
        return self.edl.output_duration


class TimelineClip(BaseModel):
    """Placement of one surviving clip on the output timeline."""

    clip_index: int = Field(..., ge=0)
    start_ms: float = Field(..., ge=0.0)
    end_ms: float = Field(..., ge=0.0)
    keep_segments: list[TimeInterval] = Field(
        default_factory=list, description="Original-time ranges the trimmer keeps"
    )

    @property
    def duration_ms(self) -> float:
        return self.end_ms - self.start_ms


class AssembledTimeline(BaseModel):
    """All surviving clips stitched into a single output timeline."""

    clips: list[TimelineClip] = Field(default_factory=list)
    captions: list[Caption] = Field(default_factory=list)
    omitted_clips: list[int] = Field(
        default_factory=list, description="Clips fully removed by the cut"
    )
    total_duration_ms: float = 0.0
    fps: int = 30
    duration_in_frames: int = 0
