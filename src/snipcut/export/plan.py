"""Render plan export.

The render plan is the hand-off to the media trimmer and the compositor:
for every surviving clip, which ranges of the source to keep and where the
result lands on the output timeline, plus the global caption track.

Example:
    {
      "fps": 30,
      "duration_in_frames": 237,
      "total_duration_ms": 7900.0,
      "clips": [
        {"clip_index": 0, "source": "a.mp4", "start_ms": 0.0, "end_ms": 7900.0,
         "keep_segments": [{"start": 0.0, "end": 2.0}, {"start": 4.05, "end": 10.0}]}
      ],
      "omitted_clips": [1],
      "captions": [...]
    }
"""

import json
import logging
from pathlib import Path
from typing import Any

from snipcut.export.base import TimelineExporter
from snipcut.models.timeline import AssembledTimeline

logger = logging.getLogger(__name__)


class RenderPlanExporter(TimelineExporter):
    """Writes keep segments and captions as JSON."""

    def __init__(self, sources: dict[int, Path] | None = None) -> None:
        self.sources = sources or {}

    @property
    def format_name(self) -> str:
        return "Render plan"

    @property
    def file_extension(self) -> str:
        return ".json"

    def build(self, timeline: AssembledTimeline) -> dict[str, Any]:
        clips = []
        for clip in timeline.clips:
            source = self.sources.get(clip.clip_index)
            clips.append(
                {
                    "clip_index": clip.clip_index,
                    "source": str(source) if source is not None else None,
                    "start_ms": clip.start_ms,
                    "end_ms": clip.end_ms,
                    "keep_segments": [
                        {"start": seg.start, "end": seg.end} for seg in clip.keep_segments
                    ],
                }
            )

        return {
            "fps": timeline.fps,
            "duration_in_frames": timeline.duration_in_frames,
            "total_duration_ms": timeline.total_duration_ms,
            "clips": clips,
            "omitted_clips": list(timeline.omitted_clips),
            "captions": [c.model_dump(mode="json") for c in timeline.captions],
        }

    async def export(self, timeline: AssembledTimeline, output_path: Path) -> Path:
        output_path = self.resolve_output_path(output_path)
        with open(output_path, "w", encoding="utf-8") as f:
            json.dump(self.build(timeline), f, ensure_ascii=False, indent=2)
        logger.info(
            "Exported render plan with %d clips to '%s'", len(timeline.clips), output_path
        )
        return output_path
