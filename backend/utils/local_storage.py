import json
import os
import tempfile
import threading
from pathlib import Path
from typing import Any, Dict, Optional
import logging

logger = logging.getLogger("recruitai")


class LocalStorage:
    """
    Minimal key/value storage persisted as a single JSON document on disk.
    The document maps each key to its stored value, so several records can
    share one file.
    """

    def __init__(self, path: str):
        self.path = Path(path)
        self._lock = threading.Lock()

    def _read_all(self) -> Dict[str, Any]:
        if not self.path.exists():
            return {}
        raw = self.path.read_text(encoding="utf-8")
        if not raw.strip():
            return {}
        data = json.loads(raw)
        if not isinstance(data, dict):
            raise ValueError(f"Storage file {self.path} does not contain a JSON object")
        return data

    def _write_all(self, data: Dict[str, Any]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(dir=self.path.parent, prefix=f".{self.path.name}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(data, f, ensure_ascii=False, indent=2)
            os.replace(tmp_path, self.path)
        except Exception:
            if os.path.exists(tmp_path):
                os.remove(tmp_path)
            raise

    def get_item(self, key: str) -> Optional[Any]:
        """
        Returns the stored value or None.
        Raises ValueError when the file exists but is not valid JSON.
        """
        with self._lock:
            return self._read_all().get(key)

    def set_item(self, key: str, value: Any) -> None:
        with self._lock:
            try:
                data = self._read_all()
            except ValueError:
                logger.warning(f"Overwriting unreadable storage file: {self.path}")
                data = {}
            data[key] = value
            self._write_all(data)

