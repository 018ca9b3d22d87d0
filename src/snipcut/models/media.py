"""Media probe results."""

from pydantic import BaseModel, Field


class MediaInfo(BaseModel):
    """What ffprobe reports about a source clip."""

    duration: float = Field(..., ge=0.0, description="Container duration in seconds")
    fps: float | None = Field(None, description="Video frame rate, None for audio-only files")
    sample_rate: int | None = Field(None, description="Audio sample rate in Hz")
    width: int | None = Field(None, description="Video width in pixels")
    height: int | None = Field(None, description="Video height in pixels")

    @property
    def duration_ms(self) -> float:
        return self.duration * 1000.0

    @property
    def has_video(self) -> bool:
        return self.width is not None and self.height is not None
