#!/usr/bin/env python3
"""Extract an audio segment from a media file with ffmpeg.

Default output is a speech/TTS-friendly WAV:
  - mono, 24 kHz, 16-bit PCM
  - high-pass / low-pass speech band filtering
  - loudness normalised to -16 LUFS

``--no-tts`` keeps the source format instead (optionally overriding the
sample rate and channel count).

Usage example
-------------
  python extract_audio.py Lockdown.mp4 --start 00:01:00 --duration 00:00:20

Run ``python extract_audio.py --help`` for the full argument list.
"""

import argparse
import logging
import os
import sys
from typing import List, Optional

from tqdm import tqdm  # type: ignore

from audio_extractor.models import (
    DEFAULT_TARGET_LUFS,
    DEFAULT_TTS_HIGHPASS_HZ,
    DEFAULT_TTS_LOWPASS_HZ,
    DEFAULT_TTS_SAMPLE_RATE,
    ExtractionRequest,
    SpeechTuning,
)
from audio_extractor.reporting import LoggingReporter
from audio_extractor.service import run_extraction
from audio_extractor.settings import UserSettings

logger = logging.getLogger(__name__)

# Windows-style help requests accepted in addition to -h/--help.
_EXTRA_HELP_TOKENS = ("/?", "-?")

_EXAMPLES = """\
examples:
  audio-extractor Lockdown.mp4
  audio-extractor Lockdown.mp4 --start 00:01:00 --duration 00:00:20
  audio-extractor Lockdown.mp4 --start 00:01:00 --end 00:01:20
"""


# ---------------------------------------------------------------------------
# CLI
# ---------------------------------------------------------------------------


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="audio-extractor",
        description="Extract audio using ffmpeg (default: speech-friendly mono WAV)",
        epilog=_EXAMPLES,
        formatter_class=argparse.RawDescriptionHelpFormatter,
        allow_abbrev=False,
    )

    parser.add_argument("input", nargs="?", default=None, help="Input video or audio file")

    # Range
    parser.add_argument(
        "--start", "-Start",
        default=None,
        help="Start time: HH:MM:SS | MM:SS | SS",
    )
    parser.add_argument(
        "--end", "-End",
        default=None,
        help="End time (requires --start)",
    )
    parser.add_argument(
        "--duration", "-Duration",
        default=None,
        help="Duration (requires --start)",
    )

    # Output
    parser.add_argument(
        "--output", "-o", "-Output",
        default=None,
        help="Output filename (derived from the input name if omitted)",
    )
    parser.add_argument(
        "--no-tts", "-NoTTS",
        action="store_true",
        dest="no_tts",
        help="Preserve the original audio format",
    )
    parser.add_argument(
        "--force", "-Force",
        action="store_true",
        help="Overwrite the output file instead of picking a new name",
    )
    parser.add_argument(
        "--autoplay", "-Autoplay",
        action="store_true",
        help="Open the result in the default application when done",
    )
    parser.add_argument(
        "--verbose", "-Verbose",
        action="store_true",
        help="Print the full ffmpeg command line",
    )

    # ffmpeg
    parser.add_argument(
        "--ffmpeg-path", "-FfmpegPath",
        default=None,
        dest="ffmpeg_path",
        help="Path to the ffmpeg binary (default: saved setting, then PATH)",
    )
    parser.add_argument(
        "--remember-ffmpeg-path",
        action="store_true",
        dest="remember_ffmpeg_path",
        help="Save --ffmpeg-path as the default for later runs",
    )

    # Pass-through overrides
    parser.add_argument(
        "--sample-rate", "-SampleRate",
        type=int,
        default=None,
        dest="sample_rate",
        help="Output sample rate (only in --no-tts mode)",
    )
    parser.add_argument(
        "--channels", "-Channels",
        type=int,
        default=None,
        help="Output channels, 1 or 2 (only in --no-tts mode)",
    )

    # Speech tuning
    parser.add_argument(
        "--tts-sample-rate",
        type=int,
        default=DEFAULT_TTS_SAMPLE_RATE,
        dest="tts_sample_rate",
        help=f"Speech mode sample rate (default: {DEFAULT_TTS_SAMPLE_RATE})",
    )
    parser.add_argument(
        "--tts-highpass-hz",
        type=int,
        default=DEFAULT_TTS_HIGHPASS_HZ,
        dest="tts_highpass_hz",
        help=f"Speech mode high-pass cutoff (default: {DEFAULT_TTS_HIGHPASS_HZ})",
    )
    parser.add_argument(
        "--tts-lowpass-hz",
        type=int,
        default=DEFAULT_TTS_LOWPASS_HZ,
        dest="tts_lowpass_hz",
        help=f"Speech mode low-pass cutoff (default: {DEFAULT_TTS_LOWPASS_HZ})",
    )
    parser.add_argument(
        "--target-lufs",
        type=int,
        default=DEFAULT_TARGET_LUFS,
        dest="target_lufs",
        help=f"Speech mode loudness target (default: {DEFAULT_TARGET_LUFS})",
    )

    return parser


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse *argv*; sets ``help`` on the namespace for /? and -? requests."""
    argv = list(sys.argv[1:] if argv is None else argv)
    if any(token in _EXTRA_HELP_TOKENS for token in argv):
        return argparse.Namespace(help=True)
    args = _build_parser().parse_args(argv)
    args.help = False
    return args


def build_request(args: argparse.Namespace, settings: Optional[UserSettings] = None) -> ExtractionRequest:
    """Turn parsed CLI arguments into an :class:`ExtractionRequest`."""
    ffmpeg_path = args.ffmpeg_path
    if ffmpeg_path is None and settings is not None:
        ffmpeg_path = settings.ffmpeg_path
        if ffmpeg_path is not None and not os.path.isfile(ffmpeg_path):
            logger.warning("Saved ffmpeg path no longer exists, using PATH: %s", ffmpeg_path)
            ffmpeg_path = None

    return ExtractionRequest(
        input_file=args.input,
        output=args.output,
        start=args.start,
        end=args.end,
        duration=args.duration,
        sample_rate=args.sample_rate,
        channels=args.channels,
        ffmpeg_path=ffmpeg_path,
        no_tts=args.no_tts,
        tuning=SpeechTuning(
            sample_rate=args.tts_sample_rate,
            highpass_hz=args.tts_highpass_hz,
            lowpass_hz=args.tts_lowpass_hz,
            target_lufs=args.target_lufs,
        ),
        force=args.force,
        autoplay=args.autoplay,
        verbose=args.verbose,
    )


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    if args.help:
        _build_parser().print_help()
        return 0

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(message)s",
        datefmt="%H:%M:%S",
    )

    if not args.input or not args.input.strip():
        _build_parser().print_help()
        return 1

    settings = UserSettings()
    if args.remember_ffmpeg_path:
        if args.ffmpeg_path and os.path.isfile(args.ffmpeg_path):
            settings.ffmpeg_path = os.path.abspath(args.ffmpeg_path)
            logger.info("Saved ffmpeg path: %s", settings.ffmpeg_path)
        elif args.ffmpeg_path:
            logger.warning("Not saving ffmpeg path, no such file: %s", args.ffmpeg_path)
        else:
            logger.warning("--remember-ffmpeg-path needs --ffmpeg-path; nothing saved.")

    request = build_request(args, settings)
    with tqdm(total=1, desc="Extracting audio", unit="file") as pbar:
        result = run_extraction(request, reporter=LoggingReporter(logger))
        if result.success:
            pbar.update(1)

    if result.success:
        print(result.output_path)
    return result.exit_code


if __name__ == "__main__":
    sys.exit(main())
