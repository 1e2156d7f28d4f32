"""Best-effort user preferences.

Preferences live in a single JSON file.  A missing or corrupt file is
treated as empty, and failures to write are logged and ignored: settings
must never stop an extraction.
"""

import json
import logging
import os
import sys
from pathlib import Path
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)

SETTINGS_ENV_VAR = "AUDIO_EXTRACTOR_SETTINGS"


def default_settings_path() -> Path:
    """Return the per-user settings file location for this platform."""
    override = os.environ.get(SETTINGS_ENV_VAR)
    if override:
        return Path(override)

    if sys.platform.startswith("win"):
        base = os.environ.get("LOCALAPPDATA") or str(Path.home() / "AppData" / "Local")
        return Path(base) / "AudioExtractor" / "settings.json"

    base = os.environ.get("XDG_CONFIG_HOME") or str(Path.home() / ".config")
    return Path(base) / "audio-extractor" / "settings.json"


class UserSettings:
    """Persists user preferences to a JSON file."""

    def __init__(self, path: Optional[Path] = None) -> None:
        self.path = path or default_settings_path()
        self.data: Dict[str, Any] = {}
        if self.path.exists():
            try:
                with open(self.path, "r", encoding="utf-8") as fh:
                    loaded = json.load(fh)
            except (OSError, ValueError) as exc:
                logger.debug("Ignoring unreadable settings %s: %s", self.path, exc)
            else:
                if isinstance(loaded, dict):
                    self.data = loaded

    # ------------------------------------------------------------------
    # Generic key/value helpers
    # ------------------------------------------------------------------

    def set(self, key: str, value: Any) -> None:
        self.data[key] = value
        self.save()

    # ------------------------------------------------------------------
    # Preferences
    # ------------------------------------------------------------------

    @property
    def ffmpeg_path(self) -> Optional[str]:
        value = self.data.get("ffmpeg_path")
        return value if isinstance(value, str) and value.strip() else None

    @ffmpeg_path.setter
    def ffmpeg_path(self, value: Optional[str]) -> None:
        self.set("ffmpeg_path", value)

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    def save(self) -> bool:
        """Write settings to disk. Returns False if that was not possible."""
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.path, "w", encoding="utf-8") as fh:
                json.dump(self.data, fh, ensure_ascii=False, indent=2)
        except OSError as exc:
            logger.warning("Could not save settings to %s: %s", self.path, exc)
            return False
        return True
