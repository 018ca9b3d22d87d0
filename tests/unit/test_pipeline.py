"""Unit tests for the pipeline executor and stages."""

from pathlib import Path
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest

from snipcut.errors import PipelineError, TranscriptionError
from snipcut.models.edl import SilenceDeletion, WordDeletion
from snipcut.models.pipeline import PipelineConfig, StageResult, StageStatus
from snipcut.models.project import ClipSource, EditProject
from snipcut.models.silence import SilenceSegment, SilenceSource
from snipcut.models.transcript import Word
from snipcut.pipeline.base import PipelineStage, ProgressCallback
from snipcut.pipeline.context import PipelineContext
from snipcut.pipeline.executor import PipelineExecutor
from snipcut.pipeline.stages import AnalyzeStage, AssembleStage, AutoCutStage


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

class _RecordingStage(PipelineStage):
    """Stage returning a fixed result; records whether it was rolled back."""

    def __init__(self, name: str, result: StageResult | None = None, error: Exception | None = None):
        self._name = name
        self._result = result or StageResult.success(data={"ran": True})
        self._error = error
        self.rolled_back = False

    @property
    def name(self) -> str:
        return self._name

    @property
    def display_name(self) -> str:
        return self._name.title()

    async def execute(
        self,
        context: PipelineContext,
        options: dict[str, Any],
        progress_callback: ProgressCallback | None = None,
    ) -> StageResult:
        self._report_progress(progress_callback, 0.5, "halfway")
        if self._error:
            raise self._error
        return self._result

    async def rollback(self, context: PipelineContext) -> None:
        self.rolled_back = True


def _make_clip(index: int = 0) -> ClipSource:
    words = [
        Word(id=f"word-{index}-0", text="hello", start=0.5, end=1.0, clip_index=index),
        Word(id=f"word-{index}-1", text="um", start=1.1, end=1.4, clip_index=index),
        Word(id=f"word-{index}-2", text="world", start=2.4, end=3.0, clip_index=index),
    ]
    silence = SilenceSegment(
        id=f"dedup-{index}-0", start=1.4, end=2.4, clip_index=index, source=SilenceSource.MERGED
    )
    return ClipSource(
        index=index,
        path=Path(f"/media/clip{index}.mp4"),
        duration=4.0,
        words=words,
        silence_segments=[silence],
    )


def _make_context(tmp_path: Path, clips: list[ClipSource] | None = None) -> PipelineContext:
    project = EditProject(name="test")
    for clip in clips or []:
        project.add_clip(clip)
    return PipelineContext(project=project, working_dir=tmp_path, output_dir=tmp_path)


# ---------------------------------------------------------------------------
# Executor
# ---------------------------------------------------------------------------

class TestPipelineExecutor:
    @pytest.mark.asyncio
    async def test_runs_in_config_order(self, tmp_path: Path) -> None:
        executor = PipelineExecutor()
        executor.register_stage(_RecordingStage("b"))
        executor.register_stage(_RecordingStage("a"))
        context = _make_context(tmp_path)

        results = await executor.execute(context, PipelineConfig(stages=["a", "b"]))

        assert list(results) == ["a", "b"]
        assert all(r.ok for r in results.values())
        assert context.has_stage_completed("a")
        assert context.get_stage_data("b") == {"ran": True}

    @pytest.mark.asyncio
    async def test_failure_rolls_back_completed(self, tmp_path: Path) -> None:
        first = _RecordingStage("first")
        second = _RecordingStage("second", result=StageResult.failure("bad input"))
        third = _RecordingStage("third")
        executor = PipelineExecutor()
        for stage in (first, second, third):
            executor.register_stage(stage)

        results = await executor.execute(
            _make_context(tmp_path), PipelineConfig(stages=["first", "second", "third"])
        )

        assert results["second"].status == StageStatus.FAILED
        assert "third" not in results
        assert first.rolled_back
        assert not third.rolled_back

    @pytest.mark.asyncio
    async def test_exception_becomes_failure(self, tmp_path: Path) -> None:
        first = _RecordingStage("first")
        executor = PipelineExecutor()
        executor.register_stage(first)
        executor.register_stage(_RecordingStage("boom", error=RuntimeError("exploded")))

        results = await executor.execute(
            _make_context(tmp_path), PipelineConfig(stages=["first", "boom"])
        )

        assert results["boom"].status == StageStatus.FAILED
        assert results["boom"].message == "exploded"
        assert first.rolled_back

    @pytest.mark.asyncio
    async def test_unknown_stage(self, tmp_path: Path) -> None:
        results = await PipelineExecutor().execute(
            _make_context(tmp_path), PipelineConfig(stages=["missing"])
        )
        assert results["missing"].status == StageStatus.FAILED

    @pytest.mark.asyncio
    async def test_progress_reported(self, tmp_path: Path) -> None:
        executor = PipelineExecutor()
        executor.register_stage(_RecordingStage("a"))
        calls: list[tuple[str, StageStatus, float]] = []

        await executor.execute(
            _make_context(tmp_path),
            PipelineConfig(stages=["a"]),
            lambda name, status, progress: calls.append((name, status, progress)),
        )

        assert calls[0] == ("a", StageStatus.RUNNING, 0.0)
        assert ("a", StageStatus.RUNNING, 0.5) in calls
        assert calls[-1] == ("a", StageStatus.COMPLETED, 1.0)

    def test_raise_for_failure(self) -> None:
        PipelineExecutor.raise_for_failure({"a": StageResult.success()})
        with pytest.raises(PipelineError, match="Stage 'b' failed: nope"):
            PipelineExecutor.raise_for_failure(
                {"a": StageResult.success(), "b": StageResult.failure("nope")}
            )

    def test_list_stages(self) -> None:
        executor = PipelineExecutor()
        executor.register_stage(AutoCutStage())
        executor.register_stage(AssembleStage())
        assert executor.list_stages() == [("autocut", "Auto cut"), ("assemble", "Timeline assembly")]


# ---------------------------------------------------------------------------
# Stages
# ---------------------------------------------------------------------------

class TestAnalyzeStage:
    @pytest.mark.asyncio
    async def test_skipped_without_media(self, tmp_path: Path) -> None:
        executor = PipelineExecutor()
        executor.register_stage(AnalyzeStage(MagicMock()))
        results = await executor.execute(_make_context(tmp_path), PipelineConfig(stages=["analyze"]))
        assert results["analyze"].status == StageStatus.SKIPPED

    @pytest.mark.asyncio
    async def test_replaces_project_clips(self, tmp_path: Path) -> None:
        analyzer = MagicMock()
        analyzer.analyze_many = AsyncMock(return_value=[_make_clip(1), _make_clip(0)])
        context = _make_context(tmp_path)
        context.media_paths = [Path("/media/clip0.mp4"), Path("/media/clip1.mp4")]

        result = await AnalyzeStage(analyzer).execute(context, {"aggressiveness": "tight"})

        assert result.ok
        assert [c.index for c in context.project.clips] == [0, 1]
        assert context.project.aggressiveness.value == "tight"
        assert result.data["clip_count"] == 2
        assert result.data["silence_stats"]["0"]["count"] == 1
        assert result.data["silence_unavailable"] == []
        analyzer.analyze_many.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_failure_leaves_project_untouched(self, tmp_path: Path) -> None:
        analyzer = MagicMock()
        analyzer.analyze_many = AsyncMock(side_effect=TranscriptionError("no model"))
        context = _make_context(tmp_path, [_make_clip(0)])
        context.media_paths = [Path("/media/clip0.mp4")]
        executor = PipelineExecutor()
        executor.register_stage(AnalyzeStage(analyzer))

        results = await executor.execute(context, PipelineConfig(stages=["analyze"]))

        assert results["analyze"].status == StageStatus.FAILED
        assert "no model" in results["analyze"].message
        assert [c.index for c in context.project.clips] == [0]

    @pytest.mark.asyncio
    async def test_rollback_restores_clips(self, tmp_path: Path) -> None:
        analyzer = MagicMock()
        analyzer.analyze_many = AsyncMock(return_value=[_make_clip(0), _make_clip(1)])
        context = _make_context(tmp_path, [_make_clip(5)])
        context.media_paths = [Path("a.mp4"), Path("b.mp4")]
        stage = AnalyzeStage(analyzer)

        await stage.execute(context, {})
        await stage.rollback(context)

        assert [c.index for c in context.project.clips] == [5]


class TestAutoCutStage:
    @pytest.mark.asyncio
    async def test_nothing_requested(self, tmp_path: Path) -> None:
        result = await AutoCutStage().execute(_make_context(tmp_path, [_make_clip()]), {})
        assert result.status == StageStatus.SKIPPED

    @pytest.mark.asyncio
    async def test_silences(self, tmp_path: Path) -> None:
        context = _make_context(tmp_path, [_make_clip()])
        result = await AutoCutStage().execute(context, {"silences": True})
        assert result.data == {"silences_added": 1, "pauses_added": 0}
        assert context.project.deletions == [SilenceDeletion(clip_index=0, segment_id="dedup-0-0")]

    @pytest.mark.asyncio
    async def test_pauses_and_rollback(self, tmp_path: Path) -> None:
        context = _make_context(tmp_path, [_make_clip()])
        context.project.deletions = [WordDeletion(word_id="word-0-1")]
        stage = AutoCutStage()

        result = await stage.execute(context, {"pauses": True, "pause_threshold": 0.3})
        # leading pause (0.5s) and the 1.0s gap after "um"
        assert result.data["pauses_added"] == 2

        await stage.rollback(context)
        assert context.project.deletions == [WordDeletion(word_id="word-0-1")]


class TestAssembleStage:
    @pytest.mark.asyncio
    async def test_timeline_published(self, tmp_path: Path) -> None:
        context = _make_context(tmp_path, [_make_clip(0), _make_clip(1)])
        context.project.deletions = [
            WordDeletion(word_id="word-0-1"),
            SilenceDeletion(clip_index=0, segment_id="dedup-0-0"),
        ]
        executor = PipelineExecutor()
        executor.register_stage(AssembleStage())

        results = await executor.execute(
            context, PipelineConfig(stages=["assemble"], stage_options={"assemble": {"fps": 25}})
        )

        assert results["assemble"].ok
        timeline = AssembleStage.timeline_from(context)
        assert timeline is not None
        assert timeline.fps == 25
        assert [c.clip_index for c in timeline.clips] == [0, 1]
        # clip 0 loses 1.1-2.4
        assert timeline.clips[0].end_ms == pytest.approx(2700.0)
        assert timeline.total_duration_ms == pytest.approx(6700.0)

    @pytest.mark.asyncio
    async def test_invalid_deletion_fails(self, tmp_path: Path) -> None:
        context = _make_context(tmp_path, [_make_clip(0)])
        context.project.deletions = [SilenceDeletion(clip_index=9, segment_id="x")]

        result = await AssembleStage().execute(context, {})

        assert result.status == StageStatus.FAILED
        assert "unknown clip 9" in result.message

    def test_no_timeline_before_run(self, tmp_path: Path) -> None:
        assert AssembleStage.timeline_from(_make_context(tmp_path)) is None
