"""
Persisted user preferences (just the chosen language) in a small JSON file.
"""

from __future__ import annotations
import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional, Sequence

from portfolio_site.config import LANGUAGE_STORAGE_KEY

logger = logging.getLogger(__name__)


class PreferenceStore:
    def __init__(self, path: str | Path):
        self.path = Path(path)

    def _read(self) -> Dict[str, Any]:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            logger.warning("Ignoring unreadable preferences file %s: %s", self.path, e)
            return {}
        return data if isinstance(data, dict) else {}

    def get(self, key: str) -> Optional[Any]:
        return self._read().get(key)

    def set(self, key: str, value: Any) -> None:
        data = self._read()
        data[key] = value
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(data, ensure_ascii=False, indent=2), encoding="utf-8")

    def load_language(self, allowed: Sequence[str]) -> Optional[str]:
        """The saved language, or None if nothing valid was saved."""
        saved = self.get(LANGUAGE_STORAGE_KEY)
        return saved if saved in allowed else None

    def save_language(self, language: str) -> None:
        self.set(LANGUAGE_STORAGE_KEY, language)
