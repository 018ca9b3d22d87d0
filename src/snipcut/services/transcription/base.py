"""Base interface for transcription providers."""

from pathlib import Path
from typing import Any, Protocol

from pydantic import BaseModel, Field

from snipcut.models.transcript import Word


class TranscriptionResult(BaseModel):
    """Word-level transcription of one clip."""

    text: str = Field(default="", description="Full transcription text")
    words: list[Word] = Field(default_factory=list, description="Words in start order")
    language: str = Field(default="", description="Detected language")


class ITranscriptionProvider(Protocol):
    """Protocol for transcription providers.

    Providers must return word-level timestamps in seconds, in the clip's
    own time base.
    """

    async def transcribe(
        self,
        audio_path: Path,
        clip_index: int = 0,
        language: str | None = None,
        options: dict[str, Any] | None = None,
    ) -> TranscriptionResult:
        """Transcribe audio to words with timestamps.

        Args:
            audio_path: Path to audio file
            clip_index: Clip the words belong to
            language: Optional language code (auto-detect if None)
            options: Optional provider-specific options

        Returns:
            TranscriptionResult with words and metadata
        """
        ...

    @property
    def name(self) -> str:
        """Provider name identifier."""
        ...
