"""Pipeline execution context."""

from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field

from snipcut.models.project import EditProject


class PipelineContext(BaseModel):
    """Shared state passed between stages.

    The project accumulates analysed clips and deletions; stages publish
    their outputs in ``stage_data``.
    """

    media_paths: list[Path] = Field(default_factory=list, description="Source clips in order")
    project: EditProject = Field(default_factory=EditProject)

    working_dir: Path = Field(..., description="Working directory for scratch files")
    output_dir: Path = Field(..., description="Output directory")

    stage_data: dict[str, dict[str, Any]] = Field(
        default_factory=dict, description="Data from completed stages"
    )

    def set_stage_data(self, stage_name: str, data: dict[str, Any]) -> None:
        self.stage_data[stage_name] = data

    def get_stage_data(self, stage_name: str) -> dict[str, Any] | None:
        return self.stage_data.get(stage_name)

    def has_stage_completed(self, stage_name: str) -> bool:
        return stage_name in self.stage_data
