"""Base class for timeline exporters."""

from abc import ABC, abstractmethod
from pathlib import Path

from snipcut.models.timeline import AssembledTimeline


class TimelineExporter(ABC):
    """Writes an assembled timeline in a format a downstream tool reads."""

    @property
    @abstractmethod
    def format_name(self) -> str:
        """Human-readable format name (e.g., 'SubRip')."""
        ...

    @property
    @abstractmethod
    def file_extension(self) -> str:
        """File extension including dot (e.g., '.srt')."""
        ...

    @abstractmethod
    async def export(self, timeline: AssembledTimeline, output_path: Path) -> Path:
        """Export the timeline.

        Args:
            timeline: Assembled output timeline
            output_path: Path for the output file; the extension is added if missing

        Returns:
            Path to the exported file
        """
        ...

    def resolve_output_path(self, output_path: Path) -> Path:
        output_path = Path(output_path)
        if not output_path.suffix:
            output_path = output_path.with_suffix(self.file_extension)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        return output_path
