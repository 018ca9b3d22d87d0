"""Models describing a pipeline run."""

from enum import Enum
from typing import Any

from pydantic import BaseModel, Field


class StageStatus(str, Enum):
    """Lifecycle of a single stage within a run."""

    PENDING = "pending"
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"
    SKIPPED = "skipped"


class StageResult(BaseModel):
    """Outcome of running one stage."""

    status: StageStatus = Field(..., description="Execution status")
    message: str | None = Field(None, description="Human readable summary or error")
    data: dict[str, Any] | None = Field(None, description="Values published to later stages")

    @property
    def ok(self) -> bool:
        return self.status == StageStatus.COMPLETED

    @classmethod
    def success(cls, message: str | None = None, data: dict[str, Any] | None = None) -> "StageResult":
        return cls(status=StageStatus.COMPLETED, message=message, data=data)

    @classmethod
    def failure(cls, message: str, data: dict[str, Any] | None = None) -> "StageResult":
        return cls(status=StageStatus.FAILED, message=message, data=data)

    @classmethod
    def skipped(cls, message: str | None = None) -> "StageResult":
        return cls(status=StageStatus.SKIPPED, message=message, data=None)


class PipelineConfig(BaseModel):
    """Which stages to run, in order, and the options handed to each."""

    stages: list[str] = Field(default_factory=list, description="Stage names in run order")
    stage_options: dict[str, dict[str, Any]] = Field(
        default_factory=dict, description="Per-stage option mappings"
    )

    def get_stage_options(self, stage_name: str) -> dict[str, Any]:
        return self.stage_options.get(stage_name, {})
