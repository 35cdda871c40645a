"""Run archive — the append-only log of finished runs.

GameSession only talks to the narrow RunArchive protocol. The shipped
adapter keeps the whole archive as one JSON array in a single file:

    {data_dir}/
      textventure-runs.json   ← [RunRecord, RunRecord, ...] in insertion order

There is no dedup, eviction, size bound or migration. Reads never raise:
a missing, unreadable or corrupt file is an empty archive. Writes never
raise either: a failed append is logged and reported as False so the
caller can warn the player without interrupting play.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Protocol

from pydantic import ValidationError

from textventure.models import RunRecord

logger = logging.getLogger(__name__)

RUNS_FILE = "textventure-runs.json"


class RunArchive(Protocol):
    def append(self, record: RunRecord) -> bool: ...

    def load_all(self) -> list[RunRecord]: ...


class JsonRunArchive:
    def __init__(self, path: Path) -> None:
        self._path = path

    @property
    def path(self) -> Path:
        return self._path

    def _read_raw(self) -> list:
        if not self._path.is_file():
            return []
        try:
            data = json.loads(self._path.read_text())
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
            logger.warning("Run archive %s is unreadable, treating as empty: %s", self._path, e)
            return []
        if not isinstance(data, list):
            logger.warning("Run archive %s is not a JSON array, treating as empty", self._path)
            return []
        return data

    def load_all(self) -> list[RunRecord]:
        records: list[RunRecord] = []
        for i, raw in enumerate(self._read_raw()):
            try:
                records.append(RunRecord.model_validate(raw))
            except ValidationError as e:
                logger.warning("Skipping malformed run #%d in %s: %s", i, self._path, e)
        return records

    def append(self, record: RunRecord) -> bool:
        existing = self._read_raw()
        existing.append(record.model_dump(by_alias=True))
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            self._path.write_text(json.dumps(existing, indent=2))
        except OSError as e:
            logger.warning("Could not save run %s to %s: %s", record.id, self._path, e)
            return False
        logger.info("archived run %s (%s after %d turns)", record.id, record.status, record.turns)
        return True
