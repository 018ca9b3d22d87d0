"""Per-clip analysis: probe, transcribe and detect silences.

Transcription and amplitude silence detection for a clip are independent and
run concurrently; both results are joined before fusion. Each clip gets its
own scratch directory so clips can be analysed in parallel.
"""

import asyncio
import logging
import tempfile
from pathlib import Path

from snipcut.config import settings
from snipcut.errors import FFmpegError, SilenceDetectionError
from snipcut.models.project import ClipSource
from snipcut.models.silence import Aggressiveness, FusionOptions, RawSilence
from snipcut.services.media import MediaService
from snipcut.services.silence_detector import SilenceDetector
from snipcut.services.silence_fusion import process_silence_for_clip, score_ffmpeg_silences
from snipcut.services.transcription import TranscriptionResult, TranscriptionService

logger = logging.getLogger(__name__)

# Extra time the awaiting side allows after ffmpeg's own timeout, so the
# subprocess is killed before the scratch directory goes away.
DETECTOR_GRACE_S = 1.0


class ClipAnalyzer:
    """Turns source media files into analysed ``ClipSource``s."""

    def __init__(
        self,
        media_service: MediaService | None = None,
        transcription_service: TranscriptionService | None = None,
        silence_detector: SilenceDetector | None = None,
        fusion_options: FusionOptions | None = None,
        detector_timeout_s: float | None = None,
        max_concurrent_clips: int | None = None,
        silence_detection_enabled: bool | None = None,
        language: str | None = None,
        provider_name: str | None = None,
        temp_dir: Path | None = None,
    ) -> None:
        self.media = media_service or MediaService()
        self.transcription = transcription_service or TranscriptionService(
            default_provider=f"whisper-{settings.whisper_model}"
        )
        self.detector = silence_detector or SilenceDetector()
        self.fusion_options = fusion_options or FusionOptions(dedup_gap=settings.silence_dedup_gap)
        self.detector_timeout_s = (
            detector_timeout_s if detector_timeout_s is not None else settings.detector_timeout_s
        )
        self.max_concurrent_clips = max_concurrent_clips or settings.max_concurrent_clips
        self.silence_detection_enabled = (
            silence_detection_enabled
            if silence_detection_enabled is not None
            else settings.silence_detection_enabled
        )
        self.language = language if language is not None else settings.transcription_language
        self.provider_name = provider_name
        self.temp_dir = temp_dir if temp_dir is not None else settings.temp_dir

    async def _transcribe(self, audio_path: Path, clip_index: int) -> TranscriptionResult:
        return await self.transcription.transcribe(
            audio_path,
            clip_index=clip_index,
            provider_name=self.provider_name,
            language=self.language,
        )

    async def _detect_silences(
        self,
        audio_path: Path,
        clip_index: int,
        aggressiveness: Aggressiveness,
    ) -> tuple[list[RawSilence], bool]:
        """Run the amplitude detector.

        ffmpeg is bounded by ``detector_timeout_s``; the await gets
        ``DETECTOR_GRACE_S`` on top in case the detector ignores its timeout.

        Returns:
            (raw silences, whether detection succeeded). Failure and timeout
            yield an empty list instead of an error.
        """
        if not self.silence_detection_enabled:
            logger.info("Silence detection disabled; clip %d uses word gaps only", clip_index)
            return [], False

        try:
            raw = await asyncio.wait_for(
                self.detector.detect(
                    audio_path, aggressiveness, timeout=self.detector_timeout_s
                ),
                timeout=self.detector_timeout_s + DETECTOR_GRACE_S,
            )
        except asyncio.TimeoutError:
            logger.warning(
                "Silence detection for clip %d timed out after %.2fs; continuing without it",
                clip_index, self.detector_timeout_s,
            )
            return [], False
        except (SilenceDetectionError, FFmpegError) as e:
            logger.warning(
                "Silence detection for clip %d failed; continuing without it: %s",
                clip_index, e,
            )
            return [], False

        return raw, True

    async def analyze(
        self,
        media_path: Path,
        clip_index: int,
        aggressiveness: Aggressiveness | str = Aggressiveness.NATURAL,
    ) -> ClipSource:
        """Analyse one clip.

        Raises:
            TranscriptionError: If transcription fails
            FFmpegError: If the media cannot be probed or decoded
        """
        media_path = Path(media_path)
        aggressiveness = Aggressiveness(aggressiveness)

        with tempfile.TemporaryDirectory(
            prefix=f"snipcut-clip{clip_index}-", dir=self.temp_dir
        ) as scratch:
            info = await self.media.get_media_info(media_path)
            audio_path = await self.media.extract_audio(media_path, Path(scratch) / "audio.wav")

            transcript, detection = await asyncio.gather(
                self._transcribe(audio_path, clip_index),
                self._detect_silences(audio_path, clip_index, aggressiveness),
                return_exceptions=True,
            )

        if isinstance(transcript, BaseException):
            logger.error("Transcription of clip %d failed: %s", clip_index, transcript)
            raise transcript
        if isinstance(detection, BaseException):
            raise detection

        raw_silences, silence_available = detection
        ffmpeg_segments = score_ffmpeg_silences(raw_silences, clip_index, info.duration)
        segments = process_silence_for_clip(
            ffmpeg_segments,
            transcript.words,
            clip_index,
            aggressiveness,
            self.fusion_options,
        )

        logger.info(
            "Clip %d (%s): %.2fs, %d words, %d silence candidates",
            clip_index, media_path.name, info.duration, len(transcript.words), len(segments),
        )

        return ClipSource(
            index=clip_index,
            path=media_path,
            duration=info.duration,
            fps=info.fps,
            words=transcript.words,
            silence_segments=segments,
            silence_available=silence_available,
        )

    async def analyze_many(
        self,
        media_paths: list[Path],
        aggressiveness: Aggressiveness | str = Aggressiveness.NATURAL,
    ) -> list[ClipSource]:
        """Analyse clips concurrently; clip indices follow the input order.

        All clips run to completion. If any clip failed, the first failure
        is raised afterwards.
        """
        semaphore = asyncio.Semaphore(self.max_concurrent_clips)

        async def bounded(index: int, path: Path) -> ClipSource:
            async with semaphore:
                return await self.analyze(path, index, aggressiveness)

        results = await asyncio.gather(
            *(bounded(i, Path(p)) for i, p in enumerate(media_paths)),
            return_exceptions=True,
        )

        failures = [(i, r) for i, r in enumerate(results) if isinstance(r, BaseException)]
        for index, error in failures:
            logger.error("Clip %d could not be analysed: %s", index, error)
        if failures:
            raise failures[0][1]

        return list(results)
