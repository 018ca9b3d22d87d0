"""Pipeline executor for running stages in sequence."""

import logging
from collections.abc import Callable

from snipcut.errors import PipelineError
from snipcut.models.pipeline import PipelineConfig, StageResult, StageStatus
from snipcut.pipeline.base import PipelineStage
from snipcut.pipeline.context import PipelineContext

logger = logging.getLogger(__name__)

ExecutionCallback = Callable[[str, StageStatus, float], None]


class PipelineExecutor:
    """Runs registered stages in the order a config lists them."""

    def __init__(self) -> None:
        self._stages: dict[str, PipelineStage] = {}

    def register_stage(self, stage: PipelineStage) -> None:
        self._stages[stage.name] = stage
        logger.debug(f"Registered pipeline stage: {stage.name}")

    def get_stage(self, name: str) -> PipelineStage | None:
        return self._stages.get(name)

    def list_stages(self) -> list[tuple[str, str]]:
        """Registered stages as (name, display_name) tuples."""
        return [(s.name, s.display_name) for s in self._stages.values()]

    async def execute(
        self,
        context: PipelineContext,
        config: PipelineConfig,
        progress_callback: ExecutionCallback | None = None,
    ) -> dict[str, StageResult]:
        """Execute the configured stages.

        A failing stage stops the run and rolls back every completed stage in
        reverse order. Stages whose validation fails are skipped.

        Args:
            context: Shared pipeline context
            config: Stages to run and their options
            progress_callback: Optional callback (stage_name, status, overall_progress)

        Returns:
            Results keyed by stage name, in run order
        """
        results: dict[str, StageResult] = {}
        completed: list[str] = []
        total = len(config.stages)

        for i, stage_name in enumerate(config.stages):
            stage = self._stages.get(stage_name)

            if stage is None:
                logger.error(f"Unknown stage: {stage_name}")
                results[stage_name] = StageResult.failure(f"Unknown stage: {stage_name}")
                await self._rollback(context, completed)
                break

            self._report_progress(progress_callback, stage_name, StageStatus.RUNNING, i / total)

            if not await stage.validate(context):
                logger.warning(f"Skipping stage {stage_name}: validation failed")
                results[stage_name] = StageResult.skipped("Validation failed")
                continue

            def stage_progress(progress: float, message: str, _i: int = i, _name: str = stage_name) -> None:
                self._report_progress(
                    progress_callback, _name, StageStatus.RUNNING, (_i + progress) / total
                )

            try:
                result = await stage.execute(context, config.get_stage_options(stage_name), stage_progress)
            except Exception as e:
                logger.exception(f"Stage execution error: {stage_name}")
                results[stage_name] = StageResult.failure(str(e))
                await self._rollback(context, completed)
                break

            results[stage_name] = result

            if result.status == StageStatus.COMPLETED:
                completed.append(stage_name)
                if result.data:
                    context.set_stage_data(stage_name, result.data)
                logger.info(f"Stage completed: {stage.display_name} - {result.message or 'ok'}")
            elif result.status == StageStatus.FAILED:
                logger.error(f"Stage failed: {stage_name} - {result.message}")
                await self._rollback(context, completed)
                break

            self._report_progress(progress_callback, stage_name, result.status, (i + 1) / total)

        return results

    @staticmethod
    def raise_for_failure(results: dict[str, StageResult]) -> None:
        """Raise PipelineError if any stage failed."""
        for stage_name, result in results.items():
            if result.status == StageStatus.FAILED:
                raise PipelineError(f"Stage '{stage_name}' failed: {result.message}")

    async def _rollback(self, context: PipelineContext, stages: list[str]) -> None:
        for stage_name in reversed(stages):
            stage = self._stages.get(stage_name)
            if stage:
                try:
                    await stage.rollback(context)
                    logger.info(f"Rolled back stage: {stage_name}")
                except Exception:
                    logger.exception(f"Rollback failed for stage: {stage_name}")

    def _report_progress(
        self,
        callback: ExecutionCallback | None,
        stage_name: str,
        status: StageStatus,
        progress: float,
    ) -> None:
        if callback:
            callback(stage_name, status, progress)
