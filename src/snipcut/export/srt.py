"""SubRip caption export."""

import logging
from pathlib import Path

from snipcut.export.base import TimelineExporter
from snipcut.models.timeline import AssembledTimeline

logger = logging.getLogger(__name__)


def ms_to_srt_time(ms: float) -> str:
    """Convert milliseconds to SRT time format (HH:MM:SS,mmm)."""
    total = max(int(round(ms)), 0)
    hours = total // 3_600_000
    total %= 3_600_000
    minutes = total // 60_000
    total %= 60_000
    seconds = total // 1_000
    milliseconds = total % 1_000
    return f"{hours:02d}:{minutes:02d}:{seconds:02d},{milliseconds:03d}"


class SRTExporter(TimelineExporter):
    """Writes the global caption track as an SRT file."""

    @property
    def format_name(self) -> str:
        return "SubRip"

    @property
    def file_extension(self) -> str:
        return ".srt"

    def render(self, timeline: AssembledTimeline) -> str:
        lines: list[str] = []
        for i, caption in enumerate(timeline.captions, start=1):
            lines.append(str(i))
            lines.append(f"{ms_to_srt_time(caption.start_ms)} --> {ms_to_srt_time(caption.end_ms)}")
            lines.append(caption.text)
            lines.append("")
        return "\n".join(lines)

    async def export(self, timeline: AssembledTimeline, output_path: Path) -> Path:
        output_path = self.resolve_output_path(output_path)
        output_path.write_text(self.render(timeline), encoding="utf-8")
        logger.info("Exported %d captions to '%s'", len(timeline.captions), output_path)
        return output_path
