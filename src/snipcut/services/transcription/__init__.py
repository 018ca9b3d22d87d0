"""Word-level transcription."""

from snipcut.services.transcription.base import ITranscriptionProvider, TranscriptionResult
from snipcut.services.transcription.providers.whisper import WhisperProvider
from snipcut.services.transcription.service import TranscriptionService

__all__ = [
    "ITranscriptionProvider",
    "TranscriptionResult",
    "TranscriptionService",
    "WhisperProvider",
]
