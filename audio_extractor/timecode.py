"""Time-expression helpers.

Accepted forms are ``SS``, ``MM:SS`` and ``HH:MM:SS``; only the rightmost
(seconds) component may carry a fractional part, e.g. ``1:30.5``.
"""

import re
from typing import List, Optional

from audio_extractor.errors import TimeFormatError

_INT_PART = re.compile(r"[0-9]+")
_SECONDS_PART = re.compile(r"[0-9]+(?:\.[0-9]*)?|\.[0-9]+")


def _parse_int_part(part: str, text: str) -> int:
    if not _INT_PART.fullmatch(part):
        raise TimeFormatError(f"Invalid time format: {text}")
    return int(part)


def _parse_seconds_part(part: str, text: str) -> float:
    if not _SECONDS_PART.fullmatch(part):
        raise TimeFormatError(f"Invalid time format: {text}")
    return float(part)


def parse_time(text: Optional[str]) -> Optional[float]:
    """Convert a time expression to seconds.

    Returns ``None`` for a missing or blank expression and raises
    :class:`TimeFormatError` for anything malformed.
    """
    if text is None or not text.strip():
        return None

    parts: List[str] = text.strip().split(":")
    if len(parts) > 3:
        raise TimeFormatError(
            f"Invalid time format: {text} (use SS, MM:SS, or HH:MM:SS)"
        )

    hours = 0
    minutes = 0
    if len(parts) == 3:
        hours = _parse_int_part(parts[0], text)
    if len(parts) >= 2:
        minutes = _parse_int_part(parts[-2], text)
    seconds = _parse_seconds_part(parts[-1], text)

    return hours * 3600 + minutes * 60 + seconds


def to_file_time_token(text: str) -> str:
    """Render a time expression safely for use inside a filename."""
    return "".join(text.strip().replace(":", "-").split())
