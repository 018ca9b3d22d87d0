"""Export module for snipcut."""

from snipcut.export.base import TimelineExporter
from snipcut.export.plan import RenderPlanExporter
from snipcut.export.srt import SRTExporter, ms_to_srt_time

__all__ = [
    "TimelineExporter",
    "RenderPlanExporter",
    "SRTExporter",
    "ms_to_srt_time",
]
