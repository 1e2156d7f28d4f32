"""Request validation.

Checks run in a fixed order and the first failure wins, so the same bad
request always produces the same error message:

1. input file exists
2. channel count is 1 or 2
3. no sample-rate/channel overrides in speech mode
4. end and duration are not both given
5. end/duration require a start
6. time expressions parse
7. duration is positive
8. end is after start
9. (best effort) the range fits inside the media
"""

import logging
import os
from typing import Callable, Optional

from audio_extractor.errors import (
    ConflictingRange,
    EndBeforeStart,
    InputNotFound,
    InvalidChannelCount,
    MissingInput,
    MissingStart,
    NonPositiveDuration,
    RangeExceedsMedia,
    SpeechModeOverride,
)
from audio_extractor.models import ExtractionRequest, ValidatedRequest, is_set
from audio_extractor.timecode import parse_time

logger = logging.getLogger(__name__)

# Tolerance for float rounding when comparing against the probed duration.
DURATION_EPSILON = 1e-4

DurationProbe = Callable[[str, Optional[str]], Optional[float]]


def validate_request(
    request: ExtractionRequest, probe: Optional[DurationProbe] = None
) -> ValidatedRequest:
    """Validate *request* and return it with its time expressions parsed.

    *probe* is called with the input path and the requested ffmpeg path
    once every other check has passed; when it returns ``None`` the
    media-length check is skipped.
    """
    if not is_set(request.input_file):
        raise MissingInput("Input file is required.")

    if not os.path.isfile(request.input_file):
        raise InputNotFound(f"Input file not found: {request.input_file}")

    if request.channels is not None and request.channels not in (1, 2):
        raise InvalidChannelCount("Channels must be 1 or 2.")

    if request.speech_mode and (
        request.sample_rate is not None or request.channels is not None
    ):
        raise SpeechModeOverride(
            "--sample-rate and --channels are only allowed with --no-tts."
        )

    if is_set(request.end) and is_set(request.duration):
        raise ConflictingRange("Use either --end OR --duration (not both).")

    if (is_set(request.end) or is_set(request.duration)) and not is_set(request.start):
        raise MissingStart("Start time required when using --end/--duration.")

    start_sec = parse_time(request.start)
    end_sec = parse_time(request.end)
    duration_sec = parse_time(request.duration)

    if duration_sec is not None and duration_sec <= 0:
        raise NonPositiveDuration("Duration must be > 0")

    if start_sec is not None and end_sec is not None and end_sec <= start_sec:
        raise EndBeforeStart(
            f"End time ({request.end}) must be AFTER Start time ({request.start})."
        )

    if probe is not None:
        total = probe(request.input_file, request.ffmpeg_path)
        if total is None:
            logger.debug("Media duration unknown, skipping range check.")
        else:
            _check_range(total, start_sec, end_sec, duration_sec)

    return ValidatedRequest(
        request=request,
        start_seconds=start_sec,
        end_seconds=end_sec,
        duration_seconds=duration_sec,
    )


def _check_range(
    total: float,
    start_sec: Optional[float],
    end_sec: Optional[float],
    duration_sec: Optional[float],
) -> None:
    if start_sec is not None and start_sec - total > DURATION_EPSILON:
        raise RangeExceedsMedia("Start time exceeds input duration.")

    if end_sec is not None and end_sec - total > DURATION_EPSILON:
        raise RangeExceedsMedia("End time exceeds input duration.")

    if (
        start_sec is not None
        and duration_sec is not None
        and (start_sec + duration_sec) - total > DURATION_EPSILON
    ):
        raise RangeExceedsMedia("Start time + duration exceeds input duration.")
