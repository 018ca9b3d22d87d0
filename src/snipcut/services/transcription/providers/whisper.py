"""Whisper-based transcription provider."""

import asyncio
import logging
from pathlib import Path
from typing import Any

from snipcut.errors import TranscriptionError
from snipcut.models.transcript import Word
from snipcut.services.transcription.base import TranscriptionResult

logger = logging.getLogger(__name__)

WHISPER_MODEL_SIZES = ["tiny", "base", "small", "medium", "large"]


class WhisperProvider:
    """Transcription provider using OpenAI Whisper.

    The model is loaded on the first transcription request.
    """

    def __init__(self, model_name: str = "base") -> None:
        self.model_name = model_name
        self._model: Any = None

    def _load_model(self) -> None:
        """Load the Whisper model lazily."""
        if self._model is not None:
            return

        try:
            import whisper

            logger.info("Loading Whisper model: %s", self.model_name)
            self._model = whisper.load_model(self.model_name)
        except ImportError as e:
            raise TranscriptionError(
                "whisper package not installed. "
                "Install with: pip install 'snipcut[whisper]'"
            ) from e
        except Exception as e:
            raise TranscriptionError(
                f"Failed to load Whisper model '{self.model_name}': {e}"
            ) from e

    async def transcribe(
        self,
        audio_path: Path,
        clip_index: int = 0,
        language: str | None = None,
        options: dict[str, Any] | None = None,
    ) -> TranscriptionResult:
        """Transcribe audio with word timestamps.

        Raises:
            TranscriptionError: If the file is missing or Whisper fails
        """
        audio_path = Path(audio_path)
        if not audio_path.exists():
            raise TranscriptionError(f"Audio file not found: {audio_path}")

        self._load_model()

        whisper_opts: dict[str, Any] = {"word_timestamps": True}
        if language is not None:
            whisper_opts["language"] = language
        if options:
            whisper_opts.update(options)

        try:
            logger.info(
                "Transcribing '%s' with Whisper (%s), language=%s",
                audio_path.name, self.model_name, language or "auto",
            )
            result = await asyncio.to_thread(
                self._model.transcribe, str(audio_path), **whisper_opts
            )
        except Exception as e:
            raise TranscriptionError(
                f"Whisper transcription failed for '{audio_path.name}': {e}"
            ) from e

        return self._convert_result(result, clip_index)

    @property
    def name(self) -> str:
        return f"whisper-{self.model_name}"

    @staticmethod
    def _convert_result(whisper_result: dict[str, Any], clip_index: int = 0) -> TranscriptionResult:
        """Flatten Whisper segments into words.

        Whisper output with ``word_timestamps=True``:
            {
                "text": "...",
                "segments": [
                    {"start": 0.0, "end": 2.5, "words": [
                        {"word": " Hello", "start": 0.0, "end": 0.4}, ...
                    ]},
                ],
                "language": "en"
            }

        Word ids are ``word-{clip}-{i}`` so they stay unique across clips.
        """
        words: list[Word] = []

        for seg in whisper_result.get("segments", []):
            for raw in seg.get("words", []):
                text = str(raw.get("word", "")).strip()
                if not text:
                    continue
                start = max(float(raw["start"]), 0.0)
                end = max(float(raw["end"]), start)
                words.append(
                    Word(
                        id=f"word-{clip_index}-{len(words)}",
                        text=text,
                        start=start,
                        end=end,
                        clip_index=clip_index,
                    )
                )

        return TranscriptionResult(
            text=str(whisper_result.get("text", "")).strip(),
            words=words,
            language=whisper_result.get("language", "") or "",
        )
