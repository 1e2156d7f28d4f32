"""Extraction orchestration.

The pipeline is strictly linear and stops at the first failure:

    validate -> probe (optional) -> output path -> collision avoidance
             -> resolve ffmpeg -> build arguments -> run -> autoplay
"""

import logging
from pathlib import Path
from typing import Optional

from audio_extractor.command import build_ffmpeg_args
from audio_extractor.errors import ExtractionError, Unexpected
from audio_extractor.ffmpeg import (
    open_in_default_app,
    probe_duration,
    resolve_ffmpeg,
    run_ffmpeg,
)
from audio_extractor.models import (
    ExtractionRequest,
    ExtractionResult,
    ResolvedPlan,
    ValidatedRequest,
    is_set,
)
from audio_extractor.naming import build_output_name, non_clobber_path
from audio_extractor.reporting import LoggingReporter, Reporter
from audio_extractor.validate import DurationProbe, validate_request

logger = logging.getLogger(__name__)


def plan_extraction(
    validated: ValidatedRequest, reporter: Optional[Reporter] = None
) -> ResolvedPlan:
    """Work out the output path, ffmpeg binary and arguments for a run."""
    reporter = reporter or Reporter()
    request = validated.request

    if is_set(request.output):
        output_path = Path(request.output.strip())
    else:
        output_path = build_output_name(
            request.input_file,
            request.no_tts,
            request.start,
            request.end,
            request.duration,
        )

    if not request.force:
        free_path = non_clobber_path(output_path)
        if free_path != output_path:
            reporter.info(f"Output exists -> {free_path}")
            output_path = free_path

    ffmpeg_path = resolve_ffmpeg(request.ffmpeg_path)
    args = build_ffmpeg_args(validated, output_path)
    return ResolvedPlan(
        ffmpeg_path=ffmpeg_path,
        output_path=output_path,
        args=args,
        speech_mode=request.speech_mode,
    )


def run_extraction(
    request: ExtractionRequest,
    reporter: Optional[Reporter] = None,
    probe: Optional[DurationProbe] = probe_duration,
) -> ExtractionResult:
    """Validate, plan and run a single extraction.

    Never raises for user-facing problems: every failure is reported through
    *reporter* and returned as an unsuccessful :class:`ExtractionResult`.
    Pass ``probe=None`` to skip the media-length check entirely.
    """
    reporter = reporter or LoggingReporter()

    try:
        validated = validate_request(request, probe=probe)
        plan = plan_extraction(validated, reporter)

        logger.debug("Mode: %s", "speech" if plan.speech_mode else "pass-through")
        run_ffmpeg(plan.ffmpeg_path, plan.args, request.verbose, reporter)
        reporter.info(f"Done -> {plan.output_path}")

        if request.autoplay:
            _autoplay(plan, reporter)

        return ExtractionResult.ok(plan.output_path)
    except ExtractionError as exc:
        reporter.error(str(exc))
        return ExtractionResult.fail(exc, exc.exit_code)
    except OSError as exc:
        error = Unexpected(str(exc))
        reporter.error(str(error))
        return ExtractionResult.fail(error, error.exit_code)


def _autoplay(plan: ResolvedPlan, reporter: Reporter) -> None:
    try:
        open_in_default_app(plan.output_path)
    except OSError as exc:
        reporter.warning(f"Warning: Could not open file in default app: {exc}")
