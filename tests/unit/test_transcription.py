"""Unit tests for the transcription service and Whisper provider."""

from pathlib import Path
from unittest.mock import AsyncMock, MagicMock

import pytest

from snipcut.errors import TranscriptionError
from snipcut.services.transcription import TranscriptionResult, TranscriptionService, WhisperProvider

WHISPER_OUTPUT = {
    "text": " Hello there. Um, welcome.",
    "language": "en",
    "segments": [
        {
            "start": 0.0,
            "end": 1.2,
            "words": [
                {"word": " Hello", "start": 0.0, "end": 0.4},
                {"word": " there.", "start": 0.45, "end": 1.2},
            ],
        },
        {
            "start": 2.0,
            "end": 3.1,
            "words": [
                {"word": " Um,", "start": 2.0, "end": 2.3},
                {"word": " ", "start": 2.3, "end": 2.3},
                {"word": " welcome.", "start": 2.6, "end": 3.1},
            ],
        },
    ],
}


class TestWhisperConvert:
    def test_words_flattened(self) -> None:
        result = WhisperProvider._convert_result(WHISPER_OUTPUT, clip_index=1)
        assert [w.text for w in result.words] == ["Hello", "there.", "Um,", "welcome."]
        assert [w.id for w in result.words] == ["word-1-0", "word-1-1", "word-1-2", "word-1-3"]
        assert all(w.clip_index == 1 for w in result.words)
        assert result.text == "Hello there. Um, welcome."
        assert result.language == "en"

    def test_negative_start_clamped(self) -> None:
        output = {"segments": [{"words": [{"word": "hi", "start": -0.02, "end": 0.3}]}]}
        result = WhisperProvider._convert_result(output)
        assert result.words[0].start == 0.0
        assert result.words[0].end == 0.3

    def test_empty(self) -> None:
        result = WhisperProvider._convert_result({})
        assert result.words == []
        assert result.text == ""

    def test_name(self) -> None:
        assert WhisperProvider(model_name="small").name == "whisper-small"

    @pytest.mark.asyncio
    async def test_missing_audio(self, tmp_path: Path) -> None:
        with pytest.raises(TranscriptionError, match="not found"):
            await WhisperProvider().transcribe(tmp_path / "missing.wav")

    @pytest.mark.asyncio
    async def test_transcribe_with_loaded_model(self, tmp_path: Path) -> None:
        audio = tmp_path / "audio.wav"
        audio.write_bytes(b"RIFF")
        provider = WhisperProvider()
        provider._model = MagicMock()
        provider._model.transcribe.return_value = WHISPER_OUTPUT

        result = await provider.transcribe(audio, clip_index=0, language="en")

        assert len(result.words) == 4
        kwargs = provider._model.transcribe.call_args.kwargs
        assert kwargs["word_timestamps"] is True
        assert kwargs["language"] == "en"

    @pytest.mark.asyncio
    async def test_model_failure_wrapped(self, tmp_path: Path) -> None:
        audio = tmp_path / "audio.wav"
        audio.write_bytes(b"RIFF")
        provider = WhisperProvider()
        provider._model = MagicMock()
        provider._model.transcribe.side_effect = RuntimeError("CUDA out of memory")

        with pytest.raises(TranscriptionError, match="CUDA out of memory"):
            await provider.transcribe(audio)


class TestTranscriptionService:
    def test_whisper_sizes_registered(self) -> None:
        providers = TranscriptionService().list_providers()
        assert "whisper-base" in providers
        assert "whisper-large" in providers

    @pytest.mark.asyncio
    async def test_unknown_provider(self) -> None:
        with pytest.raises(TranscriptionError, match="Unknown transcription provider"):
            await TranscriptionService().transcribe(Path("a.wav"), provider_name="nope")

    @pytest.mark.asyncio
    async def test_routes_to_default_provider(self) -> None:
        provider = MagicMock()
        provider.name = "fake"
        provider.transcribe = AsyncMock(return_value=TranscriptionResult(text="ok"))

        service = TranscriptionService(default_provider="fake")
        service.register(provider)
        result = await service.transcribe(Path("a.wav"), clip_index=3, language="ko")

        assert result.text == "ok"
        provider.transcribe.assert_awaited_once_with(
            Path("a.wav"), clip_index=3, language="ko", options=None
        )
