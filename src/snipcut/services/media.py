"""Media service implementation using FFmpeg."""

import asyncio
import json
import logging
import subprocess
from pathlib import Path

from snipcut.errors import FFmpegError
from snipcut.models.media import MediaInfo

logger = logging.getLogger(__name__)


def _parse_frame_rate(value: str | None) -> float | None:
    """Parse an ffprobe rate such as "30/1" or "30000/1001"."""
    if not value:
        return None
    if "/" in value:
        num, den = value.split("/", 1)
        try:
            num_f, den_f = float(num), float(den)
        except ValueError:
            return None
        return num_f / den_f if den_f and num_f else None
    try:
        return float(value) or None
    except ValueError:
        return None


class MediaService:
    """FFmpeg-based probing and audio extraction."""

    def __init__(self, ffmpeg_path: str = "ffmpeg", ffprobe_path: str = "ffprobe") -> None:
        self.ffmpeg_path = ffmpeg_path
        self.ffprobe_path = ffprobe_path

    async def _run(self, cmd: list[str]) -> subprocess.CompletedProcess:
        try:
            return await asyncio.to_thread(
                subprocess.run, cmd, capture_output=True, text=True
            )
        except OSError as e:
            raise FFmpegError(f"Could not run {cmd[0]}: {e}") from e

    async def get_media_info(self, path: Path) -> MediaInfo:
        """Extract media information using ffprobe.

        Args:
            path: Path to the media file

        Returns:
            MediaInfo with duration in seconds and frame rate

        Raises:
            FFmpegError: If ffprobe fails or reports no usable duration
        """
        cmd = [
            self.ffprobe_path,
            "-v", "quiet",
            "-print_format", "json",
            "-show_format",
            "-show_streams",
            str(path),
        ]

        result = await self._run(cmd)
        if result.returncode != 0:
            raise FFmpegError(f"ffprobe failed: {result.stderr}")

        try:
            data = json.loads(result.stdout)
            duration = float(data.get("format", {}).get("duration", 0))
        except (json.JSONDecodeError, TypeError, ValueError) as e:
            raise FFmpegError(f"Could not parse ffprobe output for {path}: {e}") from e

        if duration < 0:
            raise FFmpegError(f"ffprobe reported negative duration for {path}")

        fps = None
        sample_rate = None
        width = None
        height = None

        for stream in data.get("streams", []):
            if stream.get("codec_type") == "video" and fps is None:
                width = stream.get("width")
                height = stream.get("height")
                fps = _parse_frame_rate(stream.get("r_frame_rate"))
            elif stream.get("codec_type") == "audio" and sample_rate is None:
                sample_rate = int(stream.get("sample_rate", 0)) or None

        logger.debug("Probed %s: %.3fs, fps=%s", Path(path).name, duration, fps)

        return MediaInfo(
            duration=duration,
            fps=fps,
            sample_rate=sample_rate,
            width=width,
            height=height,
        )

    async def extract_audio(
        self,
        input_path: Path,
        output_path: Path,
        sample_rate: int = 16000,
    ) -> Path:
        """Extract mono PCM audio for transcription and silence detection.

        Args:
            input_path: Path to input media
            output_path: Path for the output WAV file
            sample_rate: Target sample rate

        Returns:
            Path to the extracted audio file
        """
        output_path = Path(output_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)

        cmd = [
            self.ffmpeg_path,
            "-y",
            "-i", str(input_path),
            "-vn",
            "-acodec", "pcm_s16le",
            "-ar", str(sample_rate),
            "-ac", "1",
            str(output_path),
        ]

        result = await self._run(cmd)
        if result.returncode != 0:
            raise FFmpegError(f"ffmpeg audio extraction failed: {result.stderr}")

        return output_path
