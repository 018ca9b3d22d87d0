"""Timeline assembly stage."""

from typing import Any

from snipcut.config import settings
from snipcut.errors import InvalidDeletionError
from snipcut.models.pipeline import StageResult
from snipcut.models.timeline import AssembledTimeline
from snipcut.pipeline.base import PipelineStage, ProgressCallback
from snipcut.pipeline.context import PipelineContext
from snipcut.services.edl import partition_deletions
from snipcut.services.timeline import assemble_timeline


class AssembleStage(PipelineStage):
    """Apply the project's deletions and build the output timeline."""

    @property
    def name(self) -> str:
        return "assemble"

    @property
    def display_name(self) -> str:
        return "Timeline assembly"

    @property
    def description(self) -> str:
        return "Builds keep segments per clip and the global caption timeline"

    async def validate(self, context: PipelineContext) -> bool:
        return len(context.project.clips) > 0

    async def execute(
        self,
        context: PipelineContext,
        options: dict[str, Any],
        progress_callback: ProgressCallback | None = None,
    ) -> StageResult:
        """Options:
            fps (int): Output frame rate, defaults to the project's
            pause_threshold (float), epsilon (float), chunk_size (int)
        """
        project = context.project
        fps = int(options.get("fps", project.fps))

        try:
            deletions = partition_deletions(project.deletions, project.clips)
            timeline = assemble_timeline(
                project.clips,
                deletions,
                fps=fps,
                pause_threshold=float(options.get("pause_threshold", settings.pause_threshold)),
                epsilon=float(options.get("epsilon", settings.merge_epsilon)),
                chunk_size=int(options.get("chunk_size", settings.caption_chunk_size)),
            )
        except InvalidDeletionError as e:
            return StageResult.failure(f"Deletion request rejected: {e}")

        self._report_progress(progress_callback, 1.0, "Timeline assembled")

        return StageResult.success(
            message=(
                f"{len(timeline.clips)} clips, {len(timeline.omitted_clips)} omitted, "
                f"{timeline.duration_in_frames} frames"
            ),
            data={"timeline": timeline.model_dump(mode="json")},
        )

    @staticmethod
    def timeline_from(context: PipelineContext) -> AssembledTimeline | None:
        """Read the assembled timeline back from stage data."""
        data = context.get_stage_data("assemble")
        if not data or "timeline" not in data:
            return None
        return AssembledTimeline.model_validate(data["timeline"])
