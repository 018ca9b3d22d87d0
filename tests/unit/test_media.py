"""Unit tests for MediaService."""

import json
import subprocess
from pathlib import Path
from unittest.mock import patch

import pytest

from snipcut.errors import FFmpegError
from snipcut.services.media import MediaService, _parse_frame_rate

PROBE_OUTPUT = {
    "format": {"duration": "12.480000"},
    "streams": [
        {"codec_type": "video", "width": 1080, "height": 1920, "r_frame_rate": "30000/1001"},
        {"codec_type": "audio", "sample_rate": "48000"},
    ],
}


def _completed(returncode: int = 0, stdout: str = "", stderr: str = "") -> subprocess.CompletedProcess:
    return subprocess.CompletedProcess(args=["ffprobe"], returncode=returncode, stdout=stdout, stderr=stderr)


class TestParseFrameRate:
    @pytest.mark.parametrize(
        "value,expected",
        [
            ("30/1", 30.0),
            ("25", 25.0),
            ("0/0", None),
            ("", None),
            (None, None),
            ("abc", None),
        ],
    )
    def test_values(self, value, expected) -> None:
        assert _parse_frame_rate(value) == expected

    def test_ntsc(self) -> None:
        assert _parse_frame_rate("30000/1001") == pytest.approx(29.97, abs=0.01)


class TestGetMediaInfo:
    @pytest.mark.asyncio
    async def test_video(self) -> None:
        with patch(
            "snipcut.services.media.subprocess.run",
            return_value=_completed(stdout=json.dumps(PROBE_OUTPUT)),
        ):
            info = await MediaService().get_media_info(Path("/media/a.mp4"))

        assert info.duration == pytest.approx(12.48)
        assert info.duration_ms == pytest.approx(12480.0)
        assert info.fps == pytest.approx(29.97, abs=0.01)
        assert info.sample_rate == 48000
        assert info.has_video

    @pytest.mark.asyncio
    async def test_audio_only(self) -> None:
        probe = {"format": {"duration": "3.0"}, "streams": [{"codec_type": "audio", "sample_rate": "16000"}]}
        with patch(
            "snipcut.services.media.subprocess.run",
            return_value=_completed(stdout=json.dumps(probe)),
        ):
            info = await MediaService().get_media_info(Path("/media/a.wav"))

        assert info.fps is None
        assert not info.has_video

    @pytest.mark.asyncio
    async def test_probe_failure(self) -> None:
        with patch(
            "snipcut.services.media.subprocess.run",
            return_value=_completed(returncode=1, stderr="Invalid data found"),
        ):
            with pytest.raises(FFmpegError, match="Invalid data"):
                await MediaService().get_media_info(Path("/media/bad.mp4"))

    @pytest.mark.asyncio
    async def test_unparseable_output(self) -> None:
        with patch(
            "snipcut.services.media.subprocess.run",
            return_value=_completed(stdout="not json"),
        ):
            with pytest.raises(FFmpegError):
                await MediaService().get_media_info(Path("/media/a.mp4"))

    @pytest.mark.asyncio
    async def test_missing_binary(self) -> None:
        with patch(
            "snipcut.services.media.subprocess.run",
            side_effect=FileNotFoundError("ffprobe"),
        ):
            with pytest.raises(FFmpegError, match="Could not run ffprobe"):
                await MediaService().get_media_info(Path("/media/a.mp4"))


class TestExtractAudio:
    @pytest.mark.asyncio
    async def test_command(self, tmp_path: Path) -> None:
        output = tmp_path / "scratch" / "audio.wav"
        with patch(
            "snipcut.services.media.subprocess.run", return_value=_completed()
        ) as mock_run:
            result = await MediaService(ffmpeg_path="ff").extract_audio(Path("in.mp4"), output)

        assert result == output
        assert output.parent.is_dir()
        cmd = mock_run.call_args[0][0]
        assert cmd[0] == "ff"
        assert cmd[cmd.index("-ar") + 1] == "16000"
        assert cmd[cmd.index("-ac") + 1] == "1"
        assert cmd[-1] == str(output)

    @pytest.mark.asyncio
    async def test_failure(self, tmp_path: Path) -> None:
        with patch(
            "snipcut.services.media.subprocess.run",
            return_value=_completed(returncode=1, stderr="no audio stream"),
        ):
            with pytest.raises(FFmpegError, match="no audio stream"):
                await MediaService().extract_audio(Path("in.mp4"), tmp_path / "a.wav")
