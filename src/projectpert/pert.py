import logging
from typing import Any, Iterable

from .errors import InvalidProjectStartError
from .model import ScheduleResult, TaskSchedule
from .normalize import normalize_tasks
from .schedule import analyze_slack, backward_pass, critical_edges, critical_path, forward_pass, task_levels, topo_order

logger = logging.getLogger(__name__)


def check_project_start(t0: Any) -> int:
    if isinstance(t0, bool) or not isinstance(t0, int) or t0 < 0:
        raise InvalidProjectStartError(t0)
    return t0


def compute_schedule(raw_tasks: Iterable[Any], t0: int = 1, *, strict_edges: bool = False) -> ScheduleResult:
    """Normalize ``raw_tasks`` and run the full CPM computation.

    Each call is independent: nothing is cached and the caller's records
    are never retained. Any structural error is raised before dates are
    produced.
    """
    t0 = check_project_start(t0)
    graph = normalize_tasks(raw_tasks)
    order = topo_order(graph)
    es, ef, finish = forward_pass(graph, order, t0)
    ls, lf = backward_pass(graph, order, finish)
    total, free = analyze_slack(graph, es, ef, ls, finish)
    path = critical_path(order, total)
    edges = critical_edges(graph, path, es, ef, strict=strict_edges)
    level = task_levels(graph, order)

    names = graph.names
    per_task = {}
    for i in order:
        t = graph.tasks[i]
        per_task[t.name] = TaskSchedule(
            name=t.name, duration=t.duration, predecessors=t.predecessors,
            successors=tuple(names[s] for s in graph.succs[i]),
            es=es[i], ef=ef[i], ls=ls[i], lf=lf[i],
            total_slack=total[i], free_slack=free[i], is_critical=total[i] == 0,
            level=level[i],
        )
    logger.debug("scheduled %d tasks, finish=%d, %d critical", len(order), finish, len(path))
    return ScheduleResult(
        order=tuple(names[i] for i in order),
        tasks=per_task,
        project_start=t0,
        project_finish=finish,
        critical_path=tuple(names[i] for i in path),
        critical_edges=tuple(edges),
    )
