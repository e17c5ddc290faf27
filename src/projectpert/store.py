"""
Project snapshot storage.

A snapshot is the record of one computation: when it ran, the project start
it used, the input tasks and the resulting schedule. Stores only ever see
plain JSON-compatible dicts; the scheduler never touches them.
"""

from __future__ import annotations

import copy
import json
import logging
import re
import time
import uuid
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Dict, List

from .errors import ProjectNotFoundError

logger = logging.getLogger(__name__)

_ID_PATTERN = re.compile(r"^[A-Za-z0-9_\-]+$")


def new_project_id() -> str:
    """`project_<unix seconds>_<random hex>`, sortable by creation time."""
    return f"project_{int(time.time())}_{uuid.uuid4().hex[:13]}"


def summarize(project_id: str, record: Dict[str, Any]) -> Dict[str, Any]:
    results = record.get("results") or {}
    return {
        "id": project_id,
        "created_at": record.get("created_at"),
        "t0": record.get("t0"),
        "tasks_count": len(record.get("input_tasks") or []),
        "project_finish": results.get("projectFinish"),
    }


class ProjectStore(ABC):
    """Abstract snapshot store keyed by project id."""

    @abstractmethod
    def put(self, project_id: str, record: Dict[str, Any]) -> None:
        ...

    @abstractmethod
    def get(self, project_id: str) -> Dict[str, Any]:
        """Return the stored record or raise ProjectNotFoundError."""

    @abstractmethod
    def delete(self, project_id: str) -> None:
        """Remove a record or raise ProjectNotFoundError."""

    @abstractmethod
    def ids(self) -> List[str]:
        ...

    def list(self) -> List[Dict[str, Any]]:
        """Summaries of every readable project, newest first.

        Records that cannot be read or are not JSON objects are logged and
        left out.
        """
        out = []
        for pid in self.ids():
            try:
                record = self.get(pid)
            except (OSError, ValueError) as exc:
                logger.warning("Skipping unreadable project %s: %s", pid, exc)
                continue
            if not isinstance(record, dict):
                logger.warning("Skipping project %s: record is not an object", pid)
                continue
            out.append(summarize(pid, record))
        out.sort(key=lambda s: s.get("created_at") or "", reverse=True)
        return out


class MemoryProjectStore(ProjectStore):
    def __init__(self) -> None:
        self._records: Dict[str, Dict[str, Any]] = {}

    def put(self, project_id, record):
        self._records[project_id] = copy.deepcopy(record)

    def get(self, project_id):
        try:
            return copy.deepcopy(self._records[project_id])
        except KeyError:
            raise ProjectNotFoundError(project_id) from None

    def delete(self, project_id):
        if self._records.pop(project_id, None) is None:
            raise ProjectNotFoundError(project_id)

    def ids(self):
        return list(self._records)


class FileProjectStore(ProjectStore):
    """
    One pretty-printed JSON file per project inside `directory`.

    The directory is created on first write.
    """

    def __init__(self, directory: str | Path) -> None:
        self.directory = Path(directory)

    def _path(self, project_id: str) -> Path:
        if not _ID_PATTERN.match(project_id or ""):
            raise ProjectNotFoundError(project_id)
        return self.directory / f"{project_id}.json"

    def put(self, project_id, record):
        path = self._path(project_id)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(record, indent=2, ensure_ascii=False), encoding="utf-8")
        logger.info("Saved project snapshot to %s", path)

    def get(self, project_id):
        path = self._path(project_id)
        if not path.exists():
            raise ProjectNotFoundError(project_id)
        return json.loads(path.read_text(encoding="utf-8"))

    def delete(self, project_id):
        path = self._path(project_id)
        if not path.exists():
            raise ProjectNotFoundError(project_id)
        path.unlink()
        logger.info("Deleted project snapshot %s", path)

    def ids(self):
        if not self.directory.is_dir():
            return []
        return sorted(p.stem for p in self.directory.glob("*.json"))
