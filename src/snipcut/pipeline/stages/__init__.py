"""Pipeline stages.

Available stages:
- AnalyzeStage: transcription and fused silence detection per clip
- AutoCutStage: mark silences and pauses for deletion
- AssembleStage: build keep segments and the output caption timeline
"""

from snipcut.pipeline.stages.analyze import AnalyzeStage
from snipcut.pipeline.stages.assemble import AssembleStage
from snipcut.pipeline.stages.autocut import AutoCutStage

__all__ = [
    "AnalyzeStage",
    "AutoCutStage",
    "AssembleStage",
]
