"""Exceptions raised while validating and running an extraction.

Every error carries the process exit code the CLI should return for it.
"""


class ExtractionError(Exception):
    """Base exception for audio extraction errors."""

    exit_code = 2


class MissingInput(ExtractionError):
    """Raised when no input file was given at all."""

    exit_code = 1


class InputNotFound(ExtractionError):
    """Raised when the input path does not reference an existing file."""


class InvalidChannelCount(ExtractionError):
    """Raised when the channel override is not 1 or 2."""


class SpeechModeOverride(ExtractionError):
    """Raised when sample rate/channel overrides are used in speech mode."""


class ConflictingRange(ExtractionError):
    """Raised when both an end time and a duration are given."""


class MissingStart(ExtractionError):
    """Raised when an end time or duration is given without a start time."""


class TimeFormatError(ExtractionError, ValueError):
    """Raised when a time expression cannot be parsed."""


class NonPositiveDuration(ExtractionError):
    """Raised when the requested duration is zero or negative."""


class EndBeforeStart(ExtractionError):
    """Raised when the end time is not after the start time."""


class RangeExceedsMedia(ExtractionError):
    """Raised when the requested range runs past the end of the media."""


class ToolNotFound(ExtractionError):
    """Raised when the ffmpeg binary cannot be located."""


class ToolExecutionFailed(ExtractionError):
    """Raised when ffmpeg exits with a non-zero status."""

    exit_code = 10

    def __init__(self, returncode: int) -> None:
        super().__init__(f"ffmpeg failed ({returncode})")
        self.returncode = returncode


class Unexpected(ExtractionError):
    """Raised for anything else, e.g. filesystem permission failures."""
