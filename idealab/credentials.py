import json
import logging
import os
import threading
from pathlib import Path
from typing import Dict, Optional, Protocol

logger = logging.getLogger(__name__)

CREDENTIAL_KEY = "gemini-api-key"
GEMINI_KEY_PREFIX = "AIza"


class KeyValueStore(Protocol):
    def get(self, key: str) -> Optional[str]:
        ...

    def set(self, key: str, value: str) -> None:
        ...

    def delete(self, key: str) -> None:
        ...


class MemoryStore:
    """Non-persistent store, handy for tests and throwaway sessions."""

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._data: Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def delete(self, key: str) -> None:
        self._data.pop(key, None)


class JsonFileStore:
    """
    Key-value store persisted as a single JSON file, so values survive
    restarts. The file is rewritten on every change.
    """

    def __init__(self, path: Path):
        self.path = Path(path)
        self._lock = threading.Lock()

    def _read(self) -> Dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as exc:
            logger.warning("Ignoring unreadable state file %s: %s", self.path, exc)
            return {}
        return data if isinstance(data, dict) else {}

    def _write(self, data: Dict[str, str]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        fd = os.open(tmp_path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
        with os.fdopen(fd, "w", encoding="utf-8") as handle:
            handle.write(json.dumps(data, indent=2))
        tmp_path.chmod(0o600)
        tmp_path.replace(self.path)

    def get(self, key: str) -> Optional[str]:
        with self._lock:
            value = self._read().get(key)
        return value if isinstance(value, str) else None

    def set(self, key: str, value: str) -> None:
        with self._lock:
            data = self._read()
            data[key] = value
            self._write(data)

    def delete(self, key: str) -> None:
        with self._lock:
            data = self._read()
            if key in data:
                del data[key]
                self._write(data)


def looks_valid(api_key: str) -> bool:
    """Advisory format check only; the gateway is the real judge."""
    return api_key.strip().startswith(GEMINI_KEY_PREFIX)


class CredentialStore:
    def __init__(self, store: KeyValueStore, key: str = CREDENTIAL_KEY):
        self.store = store
        self.key = key

    def load(self) -> Optional[str]:
        value = (self.store.get(self.key) or "").strip()
        return value or None

    def save(self, api_key: str) -> Optional[str]:
        """
        Persist the key and return an advisory warning when its format looks off.
        """
        api_key = (api_key or "").strip()
        if not api_key:
            raise ValueError("API key must not be empty.")
        self.store.set(self.key, api_key)
        logger.info("API key saved")
        if not looks_valid(api_key):
            return f"API keys usually start with '{GEMINI_KEY_PREFIX}'; double-check the value."
        return None

    def clear(self) -> None:
        self.store.delete(self.key)
        logger.info("API key cleared")

    @property
    def configured(self) -> bool:
        return self.load() is not None
