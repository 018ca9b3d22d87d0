"""Pipeline module for snipcut."""

from snipcut.pipeline.base import PipelineStage
from snipcut.pipeline.context import PipelineContext
from snipcut.pipeline.executor import PipelineExecutor

__all__ = ["PipelineStage", "PipelineContext", "PipelineExecutor"]
