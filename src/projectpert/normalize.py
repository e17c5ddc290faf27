import logging
import math
import re
from types import MappingProxyType
from typing import Any, Dict, Iterable, List, Mapping, Tuple

from .errors import InvalidTaskError, UnknownPredecessorError
from .model import Task, TaskGraph

logger = logging.getLogger(__name__)

_SPLIT = re.compile(r'[\s,;]+')


def split_names(text: str) -> List[str]:
    return [p for p in _SPLIT.split(text) if p]


def normalize_name(value: Any) -> str:
    return str(value).strip().upper() if value is not None else ''


def expected_duration(optimistic: float, most_likely: float, pessimistic: float) -> float:
    """Three-point (beta) PERT estimate: (o + 4m + p) / 6."""
    return (optimistic + 4 * most_likely + pessimistic) / 6.0


def round_duration(value: float) -> int:
    # half up, not banker's rounding; callers pass value > 0
    return max(1, int(math.floor(value + 0.5)))


def _field(raw: Any, key: str, default=None):
    if isinstance(raw, Mapping):
        return raw.get(key, default)
    return getattr(raw, key, default)


def _number(value: Any, idx: int, name: str, label: str) -> float:
    if isinstance(value, bool):
        raise InvalidTaskError(f"{label} must be numeric, got {value!r}", idx, name)
    try:
        x = float(value)
    except (TypeError, ValueError):
        raise InvalidTaskError(f"{label} must be numeric, got {value!r}", idx, name) from None
    if not math.isfinite(x) or x <= 0:
        raise InvalidTaskError(f"{label} must be a positive number, got {value!r}", idx, name)
    return x


def _duration(raw: Any, idx: int, name: str) -> int:
    value = _field(raw, 'duration')
    if value is None or value == '':
        three = [_field(raw, k) for k in ('optimistic', 'most_likely', 'pessimistic')]
        if any(v is None or v == '' for v in three):
            raise InvalidTaskError("missing duration", idx, name)
        o, m, p = (_number(v, idx, name, k) for v, k in zip(three, ('optimistic', 'most_likely', 'pessimistic')))
        return round_duration(expected_duration(o, m, p))
    return round_duration(_number(value, idx, name, 'duration'))


def _predecessors(raw: Any, idx: int, name: str) -> Tuple[str, ...]:
    value = _field(raw, 'predecessors')
    if value is None:
        return ()
    if isinstance(value, str):
        value = [value]
    elif not isinstance(value, Iterable) or isinstance(value, Mapping):
        raise InvalidTaskError(f"predecessors must be a list of names, got {value!r}", idx, name)
    seen: Dict[str, None] = {}
    for item in value:
        if item is None:
            continue
        if not isinstance(item, str):
            raise InvalidTaskError(f"predecessor names must be strings, got {item!r}", idx, name)
        for part in split_names(item):
            p = normalize_name(part)
            if p and p != name:
                seen.setdefault(p, None)
    return tuple(seen)


def normalize_task(raw: Any, idx: int = 0) -> Task:
    name = normalize_name(_field(raw, 'name'))
    if not name:
        raise InvalidTaskError("missing name", idx)
    return Task(name=name, duration=_duration(raw, idx, name), predecessors=_predecessors(raw, idx, name))


def normalize_tasks(raw_tasks: Iterable[Any]) -> TaskGraph:
    """Canonicalize raw task records into a referentially consistent graph.

    Raises InvalidTaskError for malformed records and UnknownPredecessorError
    listing every predecessor reference that names no task.
    """
    tasks: List[Task] = []
    index: Dict[str, int] = {}
    for i, raw in enumerate(raw_tasks):
        t = normalize_task(raw, i)
        if t.name in index:
            raise InvalidTaskError("duplicate task name", i, t.name)
        index[t.name] = len(tasks); tasks.append(t)
    if not tasks:
        raise InvalidTaskError("at least one task is required")

    missing = [(p, t.name) for t in tasks for p in t.predecessors if p not in index]
    if missing:
        raise UnknownPredecessorError(missing)

    preds = tuple(tuple(index[p] for p in t.predecessors) for t in tasks)
    succs: List[List[int]] = [[] for _ in tasks]
    for i, ps in enumerate(preds):
        for p in ps: succs[p].append(i)
    logger.debug("normalized %d tasks, %d precedence edges", len(tasks), sum(map(len, preds)))
    return TaskGraph(tasks=tuple(tasks), index=MappingProxyType(index), preds=preds, succs=tuple(tuple(s) for s in succs))
