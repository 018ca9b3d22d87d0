"""snipcut command-line interface with subcommands.

Usage:
    snipcut analyze <media>... [-a natural] [-o project.snip.json] [--no-silence]
    snipcut plan <project.snip.json> [--deletions ids.json] [--auto-cut] [--remove-pauses]
                 [--fps 30] [-o plan.json] [--srt captions.srt]
"""

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path

from snipcut.config import settings
from snipcut.errors import InvalidDeletionError, PipelineError, SnipcutError
from snipcut.export.plan import RenderPlanExporter
from snipcut.export.srt import SRTExporter
from snipcut.models.edl import DeletionRef, parse_deletion_id
from snipcut.models.pipeline import PipelineConfig, StageStatus
from snipcut.models.project import EditProject
from snipcut.models.silence import Aggressiveness
from snipcut.pipeline.context import PipelineContext
from snipcut.pipeline.executor import PipelineExecutor
from snipcut.pipeline.stages import AnalyzeStage, AssembleStage, AutoCutStage
from snipcut.services.analysis import ClipAnalyzer

logger = logging.getLogger(__name__)


def _load_deletion_ids(path: Path) -> list[DeletionRef]:
    """Read a JSON list of editor deletion ids and parse each one.

    Raises:
        InvalidDeletionError: If the file is not a list of strings or an id is empty
    """
    with open(path, encoding="utf-8") as f:
        raw = json.load(f)

    if not isinstance(raw, list) or not all(isinstance(item, str) for item in raw):
        raise InvalidDeletionError(f"{path} must contain a JSON list of id strings")

    return [parse_deletion_id(item) for item in raw]


def _print_stage_progress(stage_name: str, status: StageStatus, progress: float) -> None:
    print(f"\r  [{stage_name}] {progress * 100:.0f}% {status.value}", end="", flush=True)


# --- analyze subcommand ---

async def cmd_analyze(args: argparse.Namespace) -> None:
    """Analyse source clips and write a project file."""
    media_paths = [Path(p).resolve() for p in args.inputs]
    missing = [p for p in media_paths if not p.exists()]
    if missing:
        print(f"Error: file not found: {missing[0]}", file=sys.stderr)
        sys.exit(1)

    settings.ensure_directories()
    output_path = Path(args.output) if args.output else Path.cwd() / "project.snip.json"

    project = EditProject(
        name=args.name or media_paths[0].stem,
        aggressiveness=Aggressiveness(args.aggressiveness),
        fps=settings.default_fps,
    )
    context = PipelineContext(
        media_paths=media_paths,
        project=project,
        working_dir=settings.temp_dir or output_path.parent,
        output_dir=output_path.parent,
    )

    analyzer = ClipAnalyzer(silence_detection_enabled=False if args.no_silence else None)
    executor = PipelineExecutor()
    executor.register_stage(AnalyzeStage(analyzer))

    print(f"Analysing {len(media_paths)} clip(s), aggressiveness={args.aggressiveness}")
    results = await executor.execute(
        context, PipelineConfig(stages=["analyze"]), _print_stage_progress
    )
    print()

    try:
        executor.raise_for_failure(results)
    except PipelineError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    saved = context.project.save(output_path)
    for clip in context.project.clips:
        note = "" if clip.silence_available else " (word gaps only)"
        print(
            f"  clip {clip.index}: {clip.duration:.2f}s, {len(clip.words)} words, "
            f"{len(clip.silence_segments)} silences{note}"
        )
    print(f"\nDone: {saved}")


# --- plan subcommand ---

async def cmd_plan(args: argparse.Namespace) -> None:
    """Apply deletions to a project and write the render plan."""
    project_path = Path(args.project).resolve()
    if not project_path.exists():
        print(f"Error: project not found: {project_path}", file=sys.stderr)
        sys.exit(1)

    project = EditProject.load(project_path)
    if args.fps:
        project.fps = args.fps

    if args.deletions:
        try:
            refs = _load_deletion_ids(Path(args.deletions))
        except (InvalidDeletionError, json.JSONDecodeError, OSError) as e:
            print(f"Error: deletion request rejected: {e}", file=sys.stderr)
            sys.exit(1)
        added = project.add_deletions(refs)
        print(f"Loaded {added} deletions from {args.deletions}")

    output_path = Path(args.output) if args.output else project_path.with_name(
        f"{project_path.name.split('.')[0]}.plan.json"
    )
    context = PipelineContext(
        project=project,
        working_dir=project_path.parent,
        output_dir=output_path.parent,
    )

    executor = PipelineExecutor()
    executor.register_stage(AutoCutStage())
    executor.register_stage(AssembleStage())

    config = PipelineConfig(
        stages=["autocut", "assemble"],
        stage_options={
            "autocut": {
                "silences": args.auto_cut,
                "pauses": args.remove_pauses,
                "pause_threshold": args.pause_threshold,
            },
            "assemble": {"fps": project.fps, "pause_threshold": args.pause_threshold},
        },
    )
    results = await executor.execute(context, config)

    try:
        executor.raise_for_failure(results)
    except PipelineError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    timeline = AssembleStage.timeline_from(context)
    if timeline is None:
        print("Error: project has no clips to assemble", file=sys.stderr)
        sys.exit(1)

    sources = {c.index: c.path for c in project.clips if c.path is not None}
    plan_path = await RenderPlanExporter(sources).export(timeline, output_path)
    print(
        f"Timeline: {len(timeline.clips)} clip(s), {timeline.total_duration_ms / 1000:.2f}s, "
        f"{timeline.duration_in_frames} frames at {timeline.fps}fps"
    )
    for index in timeline.omitted_clips:
        print(f"  clip {index} has no content left and was omitted")

    if args.srt:
        srt_path = await SRTExporter().export(timeline, Path(args.srt))
        print(f"Captions: {srt_path}")

    print(f"\nDone: {plan_path}")


# --- Main CLI ---

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="snipcut",
        description="snipcut - cut lists for short-form video",
    )
    parser.add_argument("--log-level", default=settings.log_level, help="Logging level")
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # --- analyze ---
    p_analyze = subparsers.add_parser("analyze", help="Transcribe clips and detect silences")
    p_analyze.add_argument("inputs", nargs="+", help="Source media files in timeline order")
    p_analyze.add_argument(
        "-a", "--aggressiveness",
        choices=[a.value for a in Aggressiveness],
        default=settings.default_aggressiveness,
        help=f"Silence preset (default: {settings.default_aggressiveness})",
    )
    p_analyze.add_argument("-o", "--output", type=str, help="Output project path")
    p_analyze.add_argument("-n", "--name", type=str, help="Project name")
    p_analyze.add_argument(
        "--no-silence", action="store_true", help="Skip amplitude silence detection"
    )

    # --- plan ---
    p_plan = subparsers.add_parser("plan", help="Build keep segments and captions")
    p_plan.add_argument("project", type=str, help="Project file from 'analyze'")
    p_plan.add_argument("--deletions", type=str, help="JSON list of deletion ids")
    p_plan.add_argument("--auto-cut", action="store_true", help="Delete every detected silence")
    p_plan.add_argument(
        "--remove-pauses", action="store_true", help="Delete every pause between words"
    )
    p_plan.add_argument(
        "--pause-threshold", type=float, default=settings.pause_threshold,
        help=f"Minimum pause length in seconds (default: {settings.pause_threshold})",
    )
    p_plan.add_argument("--fps", type=int, help="Output frame rate (default: project fps)")
    p_plan.add_argument("-o", "--output", type=str, help="Output render plan path")
    p_plan.add_argument("--srt", type=str, help="Also write captions as SRT")

    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        sys.exit(1)

    logging.basicConfig(
        level=getattr(logging, str(args.log_level).upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        if args.command == "analyze":
            asyncio.run(cmd_analyze(args))
        elif args.command == "plan":
            asyncio.run(cmd_plan(args))
    except SnipcutError as e:
        logger.debug("Command failed", exc_info=True)
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
