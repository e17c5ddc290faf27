from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Tuple


@dataclass(frozen=True)
class Task:
    name: str
    duration: int
    predecessors: Tuple[str, ...] = ()


@dataclass(frozen=True)
class TaskGraph:
    """Normalized tasks stored as an arena.

    ``tasks`` keeps input order; ``preds`` and ``succs`` hold positions into
    ``tasks`` and ``index`` maps each name to its position.
    """
    tasks: Tuple[Task, ...]
    index: Mapping[str, int]
    preds: Tuple[Tuple[int, ...], ...]
    succs: Tuple[Tuple[int, ...], ...]

    def __len__(self):
        return len(self.tasks)

    @property
    def names(self) -> List[str]:
        return [t.name for t in self.tasks]


@dataclass(frozen=True)
class TaskSchedule:
    name: str
    duration: int
    predecessors: Tuple[str, ...]
    successors: Tuple[str, ...]
    es: int
    ef: int
    ls: int
    lf: int
    total_slack: int
    free_slack: int
    is_critical: bool
    level: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            'ES': self.es, 'EF': self.ef, 'LS': self.ls, 'LF': self.lf,
            'totalSlack': self.total_slack, 'freeSlack': self.free_slack,
            'isCritical': self.is_critical,
            'duration': self.duration,
            'predecessors': list(self.predecessors),
            'successors': list(self.successors),
            'level': self.level,
        }


@dataclass(frozen=True)
class CriticalEdge:
    source: str
    target: str

    def to_dict(self):
        return {'from': self.source, 'to': self.target}


@dataclass(frozen=True)
class ScheduleResult:
    order: Tuple[str, ...]
    tasks: Mapping[str, TaskSchedule]
    project_start: int
    project_finish: int
    critical_path: Tuple[str, ...]
    critical_edges: Tuple[CriticalEdge, ...] = field(default=())

    def __post_init__(self):
        if not isinstance(self.tasks, MappingProxyType):
            object.__setattr__(self, 'tasks', MappingProxyType(dict(self.tasks)))

    def __getitem__(self, name: str) -> TaskSchedule:
        return self.tasks[name]

    def __iter__(self):
        return (self.tasks[n] for n in self.order)

    def __len__(self):
        return len(self.order)

    @property
    def project_duration(self) -> int:
        return self.project_finish - self.project_start + 1

    def to_dict(self) -> Dict[str, Any]:
        return {
            'order': list(self.order),
            'perTask': {n: self.tasks[n].to_dict() for n in self.order},
            'projectStart': self.project_start,
            'projectFinish': self.project_finish,
            'criticalPath': list(self.critical_path),
            'criticalEdges': [e.to_dict() for e in self.critical_edges],
        }

    def to_request(self) -> Dict[str, Any]:
        """Rebuild the normalized request this schedule was computed from."""
        return {
            't0': self.project_start,
            'tasks': [{'name': t.name, 'duration': t.duration, 'predecessors': list(t.predecessors)} for t in self],
        }
