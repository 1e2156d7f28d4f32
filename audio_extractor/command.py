"""ffmpeg argument assembly for the pass-through and speech modes."""

from pathlib import Path
from typing import List, Union

from audio_extractor.models import (
    LOUDNORM_RANGE,
    LOUDNORM_TRUE_PEAK,
    SpeechTuning,
    ValidatedRequest,
    is_set,
)


def build_speech_filter(tuning: SpeechTuning) -> str:
    """Return the ``-af`` filter graph used in speech mode."""
    return (
        f"highpass=f={tuning.highpass_hz},"
        f"lowpass=f={tuning.lowpass_hz},"
        f"aresample={tuning.sample_rate},"
        f"loudnorm=I={tuning.target_lufs}:TP={LOUDNORM_TRUE_PEAK}:LRA={LOUDNORM_RANGE}"
    )


def build_ffmpeg_args(
    validated: ValidatedRequest, output_path: Union[str, Path]
) -> List[str]:
    """Build the argument vector (without the binary) for *validated*."""
    request = validated.request

    args = ["-hide_banner", "-loglevel", "warning"]
    if is_set(request.start):
        args += ["-ss", request.start.strip()]

    args += ["-i", str(request.input_file)]

    # An end time is turned into an explicit duration so that it is not
    # interpreted relative to the seek offset.
    if is_set(request.duration):
        args += ["-t", request.duration.strip()]
    elif (
        is_set(request.end)
        and validated.start_seconds is not None
        and validated.end_seconds is not None
    ):
        args += ["-t", f"{validated.end_seconds - validated.start_seconds:.3f}"]

    args += [
        "-vn",             # no video stream
        "-c:a", "pcm_s16le",
    ]

    if request.no_tts:
        if request.sample_rate is not None:
            args += ["-ar", str(request.sample_rate)]
        if request.channels is not None:
            args += ["-ac", str(request.channels)]
    else:
        args += [
            "-af", build_speech_filter(request.tuning),
            "-ac", "1",        # mono
            "-ar", str(request.tuning.sample_rate),
        ]

    args += ["-y" if request.force else "-n", str(output_path)]
    return args
