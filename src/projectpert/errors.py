from typing import Any, Dict, List, Optional, Sequence, Tuple


class ScheduleError(Exception):
    """Base class for every failure the scheduler reports to its caller."""

    kind = "schedule_error"

    def details(self) -> Dict[str, Any]:
        return {}

    def to_dict(self) -> Dict[str, Any]:
        return {"kind": self.kind, "message": str(self), **self.details()}


class InvalidTaskError(ScheduleError):
    kind = "invalid_task"

    def __init__(self, reason: str, index: Optional[int] = None, name: Optional[str] = None):
        self.reason = reason; self.index = index; self.name = name
        where = f"task {name!r}" if name else (f"task #{index}" if index is not None else "tasks")
        super().__init__(f"{where}: {reason}")

    def details(self):
        return {"index": self.index, "task": self.name, "reason": self.reason}


class UnknownPredecessorError(ScheduleError):
    """One or more predecessor names have no matching task.

    ``missing`` holds every offending ``(predecessor, task)`` pair, in input
    order, so callers can report all of them at once.
    """

    kind = "unknown_predecessor"

    def __init__(self, missing: Sequence[Tuple[str, str]]):
        self.missing: List[Tuple[str, str]] = list(missing)
        parts = [f"{p!r} referenced by {t!r}" for p, t in self.missing]
        super().__init__("unknown predecessor " + ", ".join(parts))

    @property
    def predecessor(self) -> str:
        return self.missing[0][0]

    @property
    def task(self) -> str:
        return self.missing[0][1]

    def details(self):
        return {"missing": [{"predecessor": p, "task": t} for p, t in self.missing]}


class CycleDetectedError(ScheduleError):
    kind = "cycle_detected"

    def __init__(self, tasks: Sequence[str]):
        self.tasks: List[str] = list(tasks)
        super().__init__("cycle detected, unordered tasks: " + ", ".join(self.tasks))

    def details(self):
        return {"tasks": self.tasks}


class InvalidProjectStartError(ScheduleError):
    kind = "invalid_project_start"

    def __init__(self, t0: Any):
        self.t0 = t0
        super().__init__(f"project start must be an integer >= 0, got {t0!r}")

    def details(self):
        return {"t0": repr(self.t0)}


class InputTooLargeError(ScheduleError):
    kind = "input_too_large"

    def __init__(self, limit: str, value: int, maximum: int):
        self.limit = limit; self.value = value; self.maximum = maximum
        super().__init__(f"{limit} is {value}, maximum allowed is {maximum}")

    def details(self):
        return {"limit": self.limit, "value": self.value, "maximum": self.maximum}


class ProjectNotFoundError(ScheduleError, KeyError):
    kind = "project_not_found"

    def __init__(self, project_id: str):
        self.project_id = project_id
        super().__init__(f"project {project_id!r} not found")

    def __str__(self):
        return f"project {self.project_id!r} not found"

    def details(self):
        return {"project_id": self.project_id}
