"""
Hosting layer around the scheduler.

Checks request shape and size, runs the computation, and snapshots the
result. Transports (CLI, Streamlit, an HTTP app) call into this instead of
the core so they share the same limits and storage behaviour.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Mapping, Optional, Tuple

from .config import Config, get_config
from .errors import InputTooLargeError, InvalidTaskError, ScheduleError
from .model import ScheduleResult
from .normalize import split_names
from .pert import compute_schedule
from .store import FileProjectStore, ProjectStore, new_project_id

logger = logging.getLogger(__name__)


def _predecessor_count(task: Any) -> int:
    preds = task.get("predecessors") if isinstance(task, Mapping) else getattr(task, "predecessors", None)
    if preds is None:
        return 0
    if isinstance(preds, str):
        preds = [preds]
    try:
        items = list(preds)
    except TypeError:
        return 0
    # strings may hold several names, counted as the normalizer will split them
    return sum(len(split_names(p)) if isinstance(p, str) else 1 for p in items)


def error_response(exc: ScheduleError) -> Dict[str, Any]:
    return {"error": exc.to_dict()}


class ScheduleService:
    def __init__(self, config: Optional[Config] = None, store: Optional[ProjectStore] = None) -> None:
        self.config = config or get_config()
        self.store = store if store is not None else FileProjectStore(self.config.project_dir)

    def check_limits(self, tasks: List[Any]) -> None:
        cfg = self.config
        if len(tasks) > cfg.max_tasks:
            raise InputTooLargeError("task count", len(tasks), cfg.max_tasks)
        for task in tasks:
            n = _predecessor_count(task)
            if n > cfg.max_predecessors:
                raise InputTooLargeError("predecessor count", n, cfg.max_predecessors)

    def calculate(self, request: Mapping[str, Any], save: Optional[bool] = None) -> Dict[str, Any]:
        """
        Compute a schedule for a `{t0, tasks}` request.

        Returns the schedule dict with an extra `project_id` key, which is
        None when the snapshot was not saved. A failed save is logged and
        does not fail the computation.
        """
        result, project_id = self.run(request, save=save)
        return {"project_id": project_id, **result.to_dict()}

    def run(self, request: Mapping[str, Any], save: Optional[bool] = None) -> Tuple[ScheduleResult, Optional[str]]:
        tasks = request.get("tasks") if isinstance(request, Mapping) else None
        if not isinstance(tasks, list):
            raise InvalidTaskError("request must contain a 'tasks' list")
        t0 = request.get("t0")
        if t0 is None:
            t0 = self.config.default_t0
        self.check_limits(tasks)

        result = compute_schedule(tasks, t0, strict_edges=self.config.strict_critical_edges)
        logger.info(
            "Computed schedule: %d tasks, finish=%d, critical=%s",
            len(result), result.project_finish, ",".join(result.critical_path),
        )

        project_id = None
        if self.config.save_projects if save is None else save:
            project_id = self._save(tasks, t0, result.to_dict())
        return result, project_id

    def _save(self, tasks: List[Any], t0: int, response: Dict[str, Any]) -> Optional[str]:
        project_id = new_project_id()
        try:
            record = {
                "created_at": datetime.now(timezone.utc).isoformat(),
                "t0": t0,
                "input_tasks": [dict(t) if isinstance(t, Mapping) else vars(t) for t in tasks],
                "results": response,
            }
            self.store.put(project_id, record)
        except (OSError, TypeError, ValueError) as exc:
            logger.error("Failed to save project snapshot %s: %s", project_id, exc)
            return None
        return project_id

    def list_projects(self) -> List[Dict[str, Any]]:
        return self.store.list()

    def get_project(self, project_id: str) -> Dict[str, Any]:
        return self.store.get(project_id)

    def delete_project(self, project_id: str) -> None:
        self.store.delete(project_id)
        logger.info("Deleted project %s", project_id)
