"""
Local key-value store for API keys and a few user preferences.

Values are stored verbatim (raw multi-key text included) in a small JSON file.
"""

import json
import os
from pathlib import Path
from typing import Dict, Optional

from bookcast.config import get_settings
from bookcast.utils.logger import get_logger

logger = get_logger(__name__)

GEMINI_KEYS = "nd_gemini_api_key"
OPENAI_KEYS = "nd_openai_api_key"
MODEL_PREF = "nd_model"
LANGUAGE_PREF = "nd_language"
FRAME_RATIO_PREF = "nd_frame_ratio"

# Pipeline input attribute -> store key
INPUT_FIELDS = {
    "gemini_keys": GEMINI_KEYS,
    "openai_keys": OPENAI_KEYS,
    "model": MODEL_PREF,
    "language": LANGUAGE_PREF,
    "frame_ratio": FRAME_RATIO_PREF,
}


class KeyStore:
    """JSON-file backed string store."""

    def __init__(self, path: Optional[str] = None):
        """Initialize the store; nothing is read until ``load``."""
        self.path = Path(path or get_settings().key_store_path).expanduser()
        self._data: Dict[str, str] = {}

    def load(self) -> Dict[str, str]:
        """Read the file; a missing or unreadable file yields an empty store."""
        self._data = {}
        if not self.path.exists():
            return dict(self._data)

        try:
            raw = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            logger.warning(f"Could not read key store {self.path}: {e}")
            return dict(self._data)

        if isinstance(raw, dict):
            self._data = {key: value for key, value in raw.items() if isinstance(value, str)}
        return dict(self._data)

    def get(self, key: str, default: str = "") -> str:
        return self._data.get(key, default)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def save(self) -> bool:
        """Write all values back; the file is readable by its owner only."""
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
            tmp_path.write_text(json.dumps(self._data, ensure_ascii=False, indent=2), encoding="utf-8")
            os.chmod(tmp_path, 0o600)
            os.replace(tmp_path, self.path)
        except OSError as e:
            logger.error(f"Error saving key store {self.path}: {e}")
            return False

        logger.info(f"Saved {len(self._data)} settings to {self.path}")
        return True

    def restore_into(self, inputs) -> None:
        """Copy stored keys and preferences onto ``inputs``; unset values keep their defaults."""
        for attr, key in INPUT_FIELDS.items():
            if key in self._data:
                setattr(inputs, attr, self._data[key])

    def capture_from(self, inputs) -> None:
        """Take the current keys and preferences from ``inputs``, verbatim."""
        for attr, key in INPUT_FIELDS.items():
            self._data[key] = str(getattr(inputs, attr))
