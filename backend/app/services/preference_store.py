"""
Preference Store
Best-effort persistence of display preferences in a local JSON file.

Preferences are never essential: every read returns None and every write
becomes a no-op (with a warning) when the file cannot be used.

Updates are a read-modify-write of the whole file, serialised by a lock and
written through a temporary file that replaces the original, so a reader never
sees a half-written file. The lock only covers this process.
"""
import json
import logging
import threading
from pathlib import Path
from typing import Optional

from app.config import settings
from app.models.user import UserPreferences

logger = logging.getLogger(__name__)


class PreferenceStore:
    """JSON-file backed preference storage keyed by username"""

    def __init__(self, path: Optional[str] = None):
        location = path if path is not None else settings.PREFERENCES_FILE
        self.path = Path(location) if location else None
        self._lock = threading.Lock()

    @property
    def available(self) -> bool:
        return self.path is not None

    def get(self, username: str) -> Optional[UserPreferences]:
        """Preferences for a user, or None when missing or unreadable."""
        data = self._read_all()
        if data is None or username not in data:
            return None
        try:
            return UserPreferences(username=username, **data[username])
        except (TypeError, ValueError) as e:
            logger.warning(f"Ignoring malformed preferences for {username}: {e}")
            return None

    def save(self, preferences: UserPreferences) -> bool:
        """Store preferences; returns False when storage is unavailable."""
        if not self.available:
            return False

        with self._lock:
            data = self._read_all() or {}
            data[preferences.username] = preferences.model_dump(exclude={"username"})
            try:
                self._write_all(data)
                return True
            except OSError as e:
                logger.warning(f"Preferences not saved to {self.path}: {e}")
                return False

    def clear(self, username: str) -> bool:
        with self._lock:
            data = self._read_all()
            if not data or username not in data:
                return False
            del data[username]
            try:
                self._write_all(data)
                return True
            except OSError as e:
                logger.warning(f"Preferences not cleared in {self.path}: {e}")
                return False

    def _read_all(self) -> Optional[dict]:
        if not self.available or not self.path.exists():
            return None
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            logger.warning(f"Preferences unreadable at {self.path}: {e}")
            return None
        return data if isinstance(data, dict) else None

    def _write_all(self, data: dict):
        temporary = self.path.with_name(f"{self.path.name}.tmp")
        temporary.write_text(json.dumps(data, ensure_ascii=False, indent=2), encoding="utf-8")
        temporary.replace(self.path)


# Singleton instance
preference_store = PreferenceStore()
