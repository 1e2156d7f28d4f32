"""Output filename derivation and collision avoidance."""

import logging
from datetime import datetime
from pathlib import Path
from typing import List, Optional, Union

from audio_extractor.models import is_set
from audio_extractor.timecode import to_file_time_token

logger = logging.getLogger(__name__)

MAX_NUMBERED_SUFFIX = 9999


def build_output_name(
    input_path: Union[str, Path],
    no_tts: bool,
    start: Optional[str] = None,
    end: Optional[str] = None,
    duration: Optional[str] = None,
) -> Path:
    """Derive a descriptive ``.wav`` path next to *input_path*.

    ``podcast.mp4`` with ``start="00:05:30"`` and ``duration="00:00:20"``
    in speech mode becomes ``podcast_tts_s00-05-30_d00-00-20.wav``.
    """
    source = Path(input_path)
    mode = "_out" if no_tts else "_tts"

    tags: List[str] = []
    if is_set(start):
        tags.append(f"s{to_file_time_token(start)}")
    if is_set(end):
        tags.append(f"e{to_file_time_token(end)}")
    if is_set(duration):
        tags.append(f"d{to_file_time_token(duration)}")

    tag = "_" + "_".join(tags) if tags else ""
    return source.parent / f"{source.stem}{mode}{tag}.wav"


def non_clobber_path(path: Union[str, Path]) -> Path:
    """Return *path*, or the first ``<stem>_NNN<ext>`` sibling that is free.

    Falls back to a timestamp suffix once all numbered names are taken.
    """
    path = Path(path)
    if not path.exists():
        return path

    for i in range(1, MAX_NUMBERED_SUFFIX + 1):
        candidate = path.with_name(f"{path.stem}_{i:03d}{path.suffix}")
        if not candidate.exists():
            return candidate

    stamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    logger.debug("All numbered names taken for %s, using timestamp", path)
    return path.with_name(f"{path.stem}_{stamp}{path.suffix}")
