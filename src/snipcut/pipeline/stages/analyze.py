"""Clip analysis stage: transcription plus fused silence detection."""

import logging
from typing import Any

from snipcut.models.pipeline import StageResult
from snipcut.models.project import ClipSource
from snipcut.models.silence import Aggressiveness
from snipcut.pipeline.base import PipelineStage, ProgressCallback
from snipcut.pipeline.context import PipelineContext
from snipcut.services.analysis import ClipAnalyzer
from snipcut.services.silence_fusion import calculate_silence_stats

logger = logging.getLogger(__name__)


class AnalyzeStage(PipelineStage):
    """Analyse every source clip and store the results on the project.

    This stage:
    1. Transcribes each clip and runs silence detection alongside it
    2. Fuses both into ranked silence candidates
    3. Replaces the project's clips with the analysed ones
    """

    def __init__(self, analyzer: ClipAnalyzer | None = None) -> None:
        self._analyzer = analyzer
        self._previous_clips: list[ClipSource] | None = None

    @property
    def analyzer(self) -> ClipAnalyzer:
        if self._analyzer is None:
            self._analyzer = ClipAnalyzer()
        return self._analyzer

    @property
    def name(self) -> str:
        return "analyze"

    @property
    def display_name(self) -> str:
        return "Clip analysis"

    @property
    def description(self) -> str:
        return "Transcribes clips and detects removable silences"

    async def validate(self, context: PipelineContext) -> bool:
        return len(context.media_paths) > 0

    async def execute(
        self,
        context: PipelineContext,
        options: dict[str, Any],
        progress_callback: ProgressCallback | None = None,
    ) -> StageResult:
        """Analyse the context's media files.

        Options:
            aggressiveness (str): Silence preset, defaults to the project's
        """
        aggressiveness = Aggressiveness(
            options.get("aggressiveness", context.project.aggressiveness)
        )
        self._report_progress(progress_callback, 0.0, f"Analysing {len(context.media_paths)} clips")

        clips = await self.analyzer.analyze_many(context.media_paths, aggressiveness)

        self._previous_clips = list(context.project.clips)
        context.project.clips = []
        for clip in clips:
            context.project.add_clip(clip)
        context.project.aggressiveness = aggressiveness

        self._report_progress(progress_callback, 1.0, "Analysis complete")

        stats = {str(c.index): calculate_silence_stats(c.silence_segments).model_dump() for c in clips}
        unavailable = [c.index for c in clips if not c.silence_available]
        if unavailable:
            logger.warning("Silence detection unavailable for clips %s", unavailable)

        return StageResult.success(
            message=(
                f"{len(clips)} clips, {sum(len(c.words) for c in clips)} words, "
                f"{sum(len(c.silence_segments) for c in clips)} silence candidates"
            ),
            data={
                "clip_count": len(clips),
                "silence_stats": stats,
                "silence_unavailable": unavailable,
            },
        )

    async def rollback(self, context: PipelineContext) -> None:
        if self._previous_clips is not None:
            context.project.clips = self._previous_clips
            self._previous_clips = None
