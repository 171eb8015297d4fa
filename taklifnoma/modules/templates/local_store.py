import json
import time
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional

logger = logging.getLogger(__name__)

KEY_PREFIX = "custom_template_"
LOCAL_ID_PREFIX = "local_"


def is_local_id(template_id: str) -> bool:
    return template_id.startswith(LOCAL_ID_PREFIX)


class LocalTemplateStore:
    """Directory-backed key/value store used when Supabase cannot take a write.

    Each template is one JSON file named ``custom_template_<id>.json``.
    """

    def __init__(self, directory: str):
        self.directory = Path(directory)

    def _path(self, template_id: str) -> Path:
        return self.directory / f"{KEY_PREFIX}{template_id}.json"

    def _new_id(self) -> str:
        millis = int(time.time() * 1000)
        while self._path(f"{LOCAL_ID_PREFIX}{millis}").exists():
            millis += 1
        return f"{LOCAL_ID_PREFIX}{millis}"

    def save(self, record: Dict[str, Any]) -> Dict[str, Any]:
        self.directory.mkdir(parents=True, exist_ok=True)
        stored = dict(record)
        stored.setdefault("id", self._new_id())
        stored.setdefault("created_at", datetime.now(timezone.utc).isoformat())
        stored["is_local"] = True
        self._path(stored["id"]).write_text(json.dumps(stored, ensure_ascii=False), encoding="utf-8")
        logger.info(f"Template stored locally: {stored['id']}")
        return stored

    def get(self, template_id: str) -> Optional[Dict[str, Any]]:
        path = self._path(template_id)
        if not path.exists():
            return None
        return json.loads(path.read_text(encoding="utf-8"))

    def list(self, user_id: Optional[str] = None) -> List[Dict[str, Any]]:
        if not self.directory.exists():
            return []
        records = []
        for path in sorted(self.directory.glob(f"{KEY_PREFIX}*.json")):
            try:
                record = json.loads(path.read_text(encoding="utf-8"))
            except (OSError, ValueError) as e:
                logger.warning(f"Skipping unreadable local template {path.name}: {e}")
                continue
            if user_id is None or record.get("user_id") == user_id:
                records.append(record)
        return records

    def delete(self, template_id: str) -> bool:
        path = self._path(template_id)
        if not path.exists():
            return False
        path.unlink()
        return True
