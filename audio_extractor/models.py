"""Data passed between the validation, planning and execution stages."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

DEFAULT_TTS_SAMPLE_RATE = 24_000
DEFAULT_TTS_HIGHPASS_HZ = 80
DEFAULT_TTS_LOWPASS_HZ = 11_000
DEFAULT_TARGET_LUFS = -16

# Fixed loudnorm parameters used in speech mode.
LOUDNORM_TRUE_PEAK = -1.5
LOUDNORM_RANGE = 11


@dataclass(frozen=True)
class SpeechTuning:
    """Filter settings for the speech-optimised (TTS reference) mode."""

    sample_rate: int = DEFAULT_TTS_SAMPLE_RATE
    highpass_hz: int = DEFAULT_TTS_HIGHPASS_HZ
    lowpass_hz: int = DEFAULT_TTS_LOWPASS_HZ
    target_lufs: int = DEFAULT_TARGET_LUFS


@dataclass(frozen=True)
class ExtractionRequest:
    """Everything the caller asked for, exactly as it was typed.

    Time expressions are kept as raw text; they are parsed during
    validation and reused verbatim for ffmpeg and the output filename.
    """

    input_file: str
    output: Optional[str] = None
    start: Optional[str] = None
    end: Optional[str] = None
    duration: Optional[str] = None
    sample_rate: Optional[int] = None
    channels: Optional[int] = None
    ffmpeg_path: Optional[str] = None
    no_tts: bool = False
    tuning: SpeechTuning = field(default_factory=SpeechTuning)
    force: bool = False
    autoplay: bool = False
    verbose: bool = False

    @property
    def speech_mode(self) -> bool:
        return not self.no_tts


@dataclass(frozen=True)
class ValidatedRequest:
    """A request whose invariants hold, with its time expressions parsed."""

    request: ExtractionRequest
    start_seconds: Optional[float] = None
    end_seconds: Optional[float] = None
    duration_seconds: Optional[float] = None


@dataclass(frozen=True)
class ResolvedPlan:
    ffmpeg_path: str
    output_path: Path
    args: List[str]
    speech_mode: bool


@dataclass
class ExtractionResult:
    """Outcome of a single extraction run."""

    success: bool
    exit_code: int
    output_path: Optional[Path] = None
    error: Optional[str] = None
    error_kind: Optional[str] = None

    @classmethod
    def ok(cls, output_path: Path) -> "ExtractionResult":
        return cls(success=True, exit_code=0, output_path=output_path)

    @classmethod
    def fail(cls, error: Exception, exit_code: int = 2) -> "ExtractionResult":
        return cls(
            success=False,
            exit_code=exit_code,
            error=str(error),
            error_kind=type(error).__name__,
        )


def is_set(value: Optional[str]) -> bool:
    """True when *value* is present and not blank."""
    return value is not None and bool(value.strip())
