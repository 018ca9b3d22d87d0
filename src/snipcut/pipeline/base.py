"""Base class for pipeline stages."""

from abc import ABC, abstractmethod
from collections.abc import Callable
from typing import Any

from snipcut.models.pipeline import StageResult
from snipcut.pipeline.context import PipelineContext

ProgressCallback = Callable[[float, str], None]


class PipelineStage(ABC):
    """One step of turning source clips into a render plan.

    Stages read from and write to the shared ``PipelineContext``.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Unique identifier for this stage."""
        ...

    @property
    @abstractmethod
    def display_name(self) -> str:
        """Human-readable name for logs and progress output."""
        ...

    @property
    def description(self) -> str:
        return ""

    @abstractmethod
    async def execute(
        self,
        context: PipelineContext,
        options: dict[str, Any],
        progress_callback: ProgressCallback | None = None,
    ) -> StageResult:
        """Run this stage.

        Args:
            context: Shared pipeline context holding the project
            options: Stage-specific options
            progress_callback: Optional callback for progress updates (0-1, message)

        Returns:
            StageResult with status and any data for later stages
        """
        ...

    async def rollback(self, context: PipelineContext) -> None:
        """Undo this stage's changes to the context after a later failure."""
        pass

    async def validate(self, context: PipelineContext) -> bool:
        """Return False to skip the stage for the current context."""
        return True

    def _report_progress(
        self,
        callback: ProgressCallback | None,
        progress: float,
        message: str,
    ) -> None:
        if callback:
            callback(min(max(progress, 0.0), 1.0), message)
