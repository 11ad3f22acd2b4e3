"""JSON-file store used as the on-device fallback when the database is unavailable."""

import json
import logging
from pathlib import Path
from typing import Any, List, Optional, Union

from models import CourseTemplate, RoundState
from database.migrate import dump_round, dump_templates, migrate_round, migrate_templates

logger = logging.getLogger(__name__)

ROUND_FILE = "round.json"
TEMPLATES_FILE = "templates.json"


class JsonFileStorage:
    """StorageAdapter backed by two JSON files in a directory.

    Usage:
        store = JsonFileStorage("~/.scoring-method")
        store.save_round(round_state)
        restored = store.load_round()
    """

    def __init__(self, directory: Union[str, Path]):
        self.directory = Path(directory).expanduser()

    def _path(self, name: str) -> Path:
        return self.directory / name

    def _read(self, name: str) -> Any:
        path = self._path(name)
        if not path.exists():
            return None
        try:
            return json.loads(path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError):
            logger.warning("Ignoring unreadable store file %s", path, exc_info=True)
            return None

    def _write(self, name: str, payload: dict) -> None:
        self.directory.mkdir(parents=True, exist_ok=True)
        path = self._path(name)
        tmp = path.with_suffix(".tmp")
        tmp.write_text(json.dumps(payload), encoding="utf-8")
        tmp.replace(path)

    # ================================================================
    # Round
    # ================================================================

    def load_round(self) -> Optional[RoundState]:
        return migrate_round(self._read(ROUND_FILE))

    def save_round(self, round_state: RoundState) -> None:
        self._write(ROUND_FILE, dump_round(round_state))

    def clear_round(self) -> None:
        self._path(ROUND_FILE).unlink(missing_ok=True)

    # ================================================================
    # Templates
    # ================================================================

    def load_templates(self) -> List[CourseTemplate]:
        return migrate_templates(self._read(TEMPLATES_FILE))

    def save_template(self, template: CourseTemplate) -> None:
        """Newest first."""
        templates = [template, *self.load_templates()]
        self._write(TEMPLATES_FILE, dump_templates(templates))

    def delete_template(self, template_id: str) -> None:
        templates = [t for t in self.load_templates() if t.id != template_id]
        self._write(TEMPLATES_FILE, dump_templates(templates))
        logger.info("Deleted template %s from local store", template_id)
