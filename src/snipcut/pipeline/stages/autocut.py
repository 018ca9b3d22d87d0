"""Automatic deletion stage."""

from typing import Any

from snipcut.config import settings
from snipcut.models.edl import DeletionRef
from snipcut.models.pipeline import StageResult
from snipcut.pipeline.base import PipelineStage, ProgressCallback
from snipcut.pipeline.context import PipelineContext


class AutoCutStage(PipelineStage):
    """Mark detected silences and/or word pauses for deletion."""

    def __init__(self) -> None:
        self._previous_deletions: list[DeletionRef] | None = None

    @property
    def name(self) -> str:
        return "autocut"

    @property
    def display_name(self) -> str:
        return "Auto cut"

    async def validate(self, context: PipelineContext) -> bool:
        return len(context.project.clips) > 0

    async def execute(
        self,
        context: PipelineContext,
        options: dict[str, Any],
        progress_callback: ProgressCallback | None = None,
    ) -> StageResult:
        """Options:
            silences (bool): Delete every surfaced silence candidate
            pauses (bool): Delete every qualifying pause and leading pause
            pause_threshold (float): Minimum pause length in seconds
        """
        cut_silences = bool(options.get("silences", False))
        cut_pauses = bool(options.get("pauses", False))
        if not (cut_silences or cut_pauses):
            return StageResult.skipped("Nothing to cut")

        self._previous_deletions = list(context.project.deletions)

        silences_added = 0
        pauses_added = 0
        if cut_silences:
            silences_added = context.project.auto_cut_silences()
            self._report_progress(progress_callback, 0.5, f"{silences_added} silences marked")
        if cut_pauses:
            threshold = float(options.get("pause_threshold", settings.pause_threshold))
            pauses_added = context.project.auto_remove_pauses(threshold)
            self._report_progress(progress_callback, 1.0, f"{pauses_added} pauses marked")

        return StageResult.success(
            message=f"Marked {silences_added} silences and {pauses_added} pauses",
            data={"silences_added": silences_added, "pauses_added": pauses_added},
        )

    async def rollback(self, context: PipelineContext) -> None:
        if self._previous_deletions is not None:
            context.project.deletions = self._previous_deletions
            self._previous_deletions = None
