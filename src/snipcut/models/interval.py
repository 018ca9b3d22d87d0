"""Time interval model."""

from pydantic import BaseModel, Field, model_validator


class TimeInterval(BaseModel):
    """A span of clip time in seconds.

    Zero-length intervals are legal; callers filter them where they matter.
    """

    start: float = Field(..., ge=0.0, description="Start time in seconds")
    end: float = Field(..., ge=0.0, description="End time in seconds")

    @model_validator(mode="after")
    def validate_range(self) -> "TimeInterval":
        """Ensure end is not before start."""
        if self.end < self.start:
            raise ValueError("end must not be before start")
        return self

    @property
    def duration(self) -> float:
        """Return duration in seconds."""
        return self.end - self.start

    @property
    def duration_ms(self) -> float:
        """Return duration in milliseconds."""
        return self.duration * 1000.0

    def overlap(self, other: "TimeInterval") -> float:
        """Return the length of time shared with another interval (0 if disjoint)."""
        return max(0.0, min(self.end, other.end) - max(self.start, other.start))

    def contains(self, t: float) -> bool:
        """Check if a timestamp falls within this interval."""
        return self.start <= t < self.end
