"""ffmpeg/ffprobe discovery and execution helpers.

ffmpeg is taken from an explicit path when one is given, otherwise from
PATH (both Windows and Linux are supported).  ffprobe is optional and only
used for the best-effort media-length check.
"""

import logging
import os
import shutil
import subprocess
import sys
from pathlib import Path
from typing import List, Optional, Sequence, Union

from audio_extractor.errors import ToolExecutionFailed, ToolNotFound
from audio_extractor.reporting import Reporter

logger = logging.getLogger(__name__)

_FFPROBE_NAMES = ("ffprobe", "ffprobe.exe")


# ---------------------------------------------------------------------------
# Discovery
# ---------------------------------------------------------------------------


def resolve_ffmpeg(explicit_path: Optional[str] = None) -> str:
    """Return the absolute path of the ffmpeg binary to run."""
    if explicit_path and explicit_path.strip():
        if not os.path.isfile(explicit_path):
            raise ToolNotFound(f"ffmpeg not found: {explicit_path}")
        return os.path.abspath(explicit_path)

    found = shutil.which("ffmpeg")
    if found is None:
        raise ToolNotFound("ffmpeg not in PATH. Install or use --ffmpeg-path")
    return os.path.abspath(found)


def resolve_ffprobe(explicit_ffmpeg: Optional[str] = None) -> Optional[str]:
    """Locate ffprobe next to an explicit ffmpeg, else on PATH."""
    if explicit_ffmpeg and explicit_ffmpeg.strip():
        ffmpeg_dir = Path(explicit_ffmpeg).resolve().parent
        for name in _FFPROBE_NAMES:
            candidate = ffmpeg_dir / name
            if candidate.is_file():
                return str(candidate)

    return shutil.which("ffprobe")


# ---------------------------------------------------------------------------
# Probing
# ---------------------------------------------------------------------------


def probe_duration(
    media_path: Union[str, Path], ffmpeg_path: Optional[str] = None
) -> Optional[float]:
    """Return the duration of *media_path* in seconds, or ``None``.

    Any failure (ffprobe missing, non-zero exit, unparsable output) is
    treated as an unknown duration.
    """
    ffprobe = resolve_ffprobe(ffmpeg_path)
    if ffprobe is None:
        logger.debug("ffprobe not available, media duration unknown.")
        return None

    try:
        result = subprocess.run(
            [
                ffprobe, "-v", "error",
                "-show_entries", "format=duration",
                "-of", "default=noprint_wrappers=1:nokey=1",
                str(media_path),
            ],
            capture_output=True,
            text=True,
            check=True,
        )
        return float(result.stdout.strip())
    except (OSError, subprocess.SubprocessError, ValueError) as exc:
        logger.debug("Could not probe duration of %s: %s", media_path, exc)
        return None


# ---------------------------------------------------------------------------
# Execution
# ---------------------------------------------------------------------------


def quote_if_needed(value: str) -> str:
    if not value.strip() or any(c.isspace() or c in "\"'" for c in value):
        return '"' + value.replace('"', '\\"') + '"'
    return value


def format_command(binary: str, args: Sequence[str]) -> str:
    """Render *binary* and *args* as a copy-pasteable command line."""
    return " ".join([f'"{binary}"'] + [quote_if_needed(a) for a in args])


def run_ffmpeg(
    binary: str,
    args: Sequence[str],
    verbose: bool = False,
    reporter: Optional[Reporter] = None,
) -> None:
    """Run ffmpeg synchronously with *args* passed as a vector (no shell)."""
    reporter = reporter or Reporter()
    if verbose:
        reporter.info("Running ffmpeg:")
        reporter.info(format_command(binary, args))

    cmd: List[str] = [binary, *args]
    try:
        subprocess.run(cmd, check=True)
    except FileNotFoundError as exc:
        raise ToolNotFound(f"ffmpeg not found: {binary}") from exc
    except subprocess.CalledProcessError as exc:
        logger.debug("ffmpeg exited with %d", exc.returncode)
        raise ToolExecutionFailed(exc.returncode) from exc


def open_in_default_app(path: Union[str, Path]) -> None:
    """Open *path* with the OS default application. Raises OSError on failure."""
    if sys.platform.startswith("win"):
        os.startfile(str(path))  # type: ignore[attr-defined]
        return

    opener = "open" if sys.platform == "darwin" else "xdg-open"
    try:
        subprocess.run(
            [opener, str(path)],
            stdout=subprocess.DEVNULL,
            stderr=subprocess.DEVNULL,
            check=True,
        )
    except subprocess.CalledProcessError as exc:
        raise OSError(f"{opener} exited with {exc.returncode}") from exc
