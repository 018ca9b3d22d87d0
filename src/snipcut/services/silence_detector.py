"""Amplitude silence detection via the FFmpeg silencedetect filter."""

import asyncio
import logging
import re
import subprocess
from pathlib import Path

from snipcut.errors import SilenceDetectionError
from snipcut.models.silence import (
    EOF_SENTINEL,
    Aggressiveness,
    AggressivenessPreset,
    RawSilence,
    get_preset,
)

logger = logging.getLogger(__name__)

# silencedetect output patterns
_SILENCE_START_RE = re.compile(r"silence_start:\s*(-?[\d.]+)")
_SILENCE_END_RE = re.compile(
    r"silence_end:\s*(-?[\d.]+)\s*\|\s*silence_duration:\s*(-?[\d.]+)"
)


def parse_silencedetect_output(output: str) -> list[RawSilence]:
    """Parse silencedetect log output into raw triples.

    Expected format:
        [silencedetect @ 0x...] silence_start: 1.234
        [silencedetect @ 0x...] silence_end: 2.567 | silence_duration: 1.333

    Starts and ends are paired in order. A trailing start without an end
    means the silence runs to end of file and is returned with ``end`` and
    ``duration`` set to the -1 sentinel.

    Raises:
        SilenceDetectionError: If a logged timestamp is not a number
    """
    try:
        starts = [float(m.group(1)) for m in _SILENCE_START_RE.finditer(output)]
        ends = [
            (float(m.group(1)), float(m.group(2)))
            for m in _SILENCE_END_RE.finditer(output)
        ]
    except ValueError as e:
        raise SilenceDetectionError(f"Unparseable silencedetect output: {e}") from e

    silences = [
        RawSilence(start=start, end=end, duration=duration)
        for start, (end, duration) in zip(starts, ends)
    ]

    if len(starts) > len(ends):
        silences.append(
            RawSilence(start=starts[-1], end=EOF_SENTINEL, duration=EOF_SENTINEL)
        )

    return silences


class SilenceDetector:
    """Runs ffmpeg silencedetect over an audio file."""

    def __init__(self, ffmpeg_path: str = "ffmpeg") -> None:
        self.ffmpeg_path = ffmpeg_path

    def build_command(self, audio_path: Path, preset: AggressivenessPreset) -> list[str]:
        return [
            self.ffmpeg_path,
            "-hide_banner",
            "-i", str(audio_path),
            "-af", f"silencedetect=n={preset.noise_db:g}dB:d={preset.min_duration:g}",
            "-f", "null",
            "-",
        ]

    async def detect(
        self,
        audio_path: Path,
        aggressiveness: Aggressiveness | str = Aggressiveness.NATURAL,
        timeout: float | None = None,
    ) -> list[RawSilence]:
        """Detect silences in an audio file.

        Args:
            audio_path: Path to the audio file
            aggressiveness: Preset supplying the noise floor and minimum duration
            timeout: Seconds before ffmpeg is killed, None for no limit

        Returns:
            Raw silence triples in file order

        Raises:
            SilenceDetectionError: If ffmpeg fails without producing silence output
                or times out, or when its output cannot be parsed
        """
        audio_path = Path(audio_path)
        preset = get_preset(aggressiveness)
        cmd = self.build_command(audio_path, preset)

        logger.info(
            "Detecting silence in %s (n=%sdB, d=%ss)",
            audio_path.name, preset.noise_db, preset.min_duration,
        )

        try:
            result = await asyncio.to_thread(
                subprocess.run, cmd, capture_output=True, text=True, timeout=timeout
            )
        except subprocess.TimeoutExpired as e:
            raise SilenceDetectionError(f"ffmpeg silencedetect timed out after {timeout}s") from e
        except OSError as e:
            raise SilenceDetectionError(f"Could not run ffmpeg: {e}") from e

        # silencedetect logs to stderr
        output = (result.stderr or "") + (result.stdout or "")

        if result.returncode != 0:
            if "silence_start" in output or "silence_end" in output:
                logger.warning(
                    "ffmpeg exited with %d but produced silence output; using it",
                    result.returncode,
                )
            else:
                raise SilenceDetectionError(
                    f"ffmpeg silencedetect failed ({result.returncode}): {result.stderr}"
                )

        silences = parse_silencedetect_output(output)
        logger.info("Found %d silence segments in %s", len(silences), audio_path.name)
        return silences
