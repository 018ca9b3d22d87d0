"""Transcription service with provider management."""

import logging
from pathlib import Path
from typing import Any

from snipcut.errors import TranscriptionError
from snipcut.services.transcription.base import ITranscriptionProvider, TranscriptionResult
from snipcut.services.transcription.providers.whisper import WHISPER_MODEL_SIZES, WhisperProvider

logger = logging.getLogger(__name__)


class TranscriptionService:
    """Transcription with pluggable providers.

    A Whisper provider is registered for every model size, named
    ``whisper-{size}``. Other providers can be added with ``register``.
    """

    def __init__(self, default_provider: str = "whisper-base") -> None:
        self._providers: dict[str, ITranscriptionProvider] = {}
        self._default_provider = default_provider

        for model_size in WHISPER_MODEL_SIZES:
            self.register(WhisperProvider(model_name=model_size))

    def register(self, provider: ITranscriptionProvider) -> None:
        self._providers[provider.name] = provider

    def list_providers(self) -> list[str]:
        return list(self._providers.keys())

    async def transcribe(
        self,
        audio_path: Path,
        clip_index: int = 0,
        provider_name: str | None = None,
        language: str | None = None,
        options: dict[str, Any] | None = None,
    ) -> TranscriptionResult:
        """Transcribe audio using the named or default provider.

        Raises:
            TranscriptionError: If the provider is unknown or transcription fails
        """
        name = provider_name or self._default_provider
        provider = self._providers.get(name)

        if provider is None:
            available = ", ".join(self._providers.keys())
            raise TranscriptionError(
                f"Unknown transcription provider '{name}'. Available: {available}"
            )

        logger.info("Transcribing clip %d with provider '%s'", clip_index, name)
        return await provider.transcribe(
            audio_path, clip_index=clip_index, language=language, options=options
        )
