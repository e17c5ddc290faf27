import logging
from collections import deque
from typing import List, Sequence, Tuple

from .errors import CycleDetectedError
from .model import CriticalEdge, TaskGraph

logger = logging.getLogger(__name__)


def topo_order(graph: TaskGraph) -> List[int]:
    """Kahn's algorithm over task positions.

    Ties are broken by input order, so identical input always yields the
    identical order.
    """
    indeg = [len(ps) for ps in graph.preds]
    q = deque(i for i, d in enumerate(indeg) if d == 0); order = []
    while q:
        n = q.popleft(); order.append(n)
        for s in graph.succs[n]:
            indeg[s] -= 1
            if indeg[s] == 0: q.append(s)
    if len(order) != len(graph):
        placed = set(order)
        raise CycleDetectedError([t.name for i, t in enumerate(graph.tasks) if i not in placed])
    logger.debug("topological order over %d tasks", len(order))
    return order


def forward_pass(graph: TaskGraph, order: Sequence[int], t0: int = 1) -> Tuple[List[int], List[int], int]:
    es = [0] * len(graph); ef = [0] * len(graph)
    for i in order:
        ps = graph.preds[i]
        es[i] = t0 if not ps else max(ef[p] for p in ps) + 1
        ef[i] = es[i] + graph.tasks[i].duration - 1
    return es, ef, max(ef)


def backward_pass(graph: TaskGraph, order: Sequence[int], project_finish: int) -> Tuple[List[int], List[int]]:
    ls = [0] * len(graph); lf = [0] * len(graph)
    for i in reversed(order):
        ss = graph.succs[i]
        lf[i] = project_finish if not ss else min(ls[s] for s in ss) - 1
        ls[i] = lf[i] - graph.tasks[i].duration + 1
    return ls, lf


def analyze_slack(graph: TaskGraph, es, ef, ls, project_finish: int) -> Tuple[List[int], List[int]]:
    """Total slack (LS - ES) and free slack for every task position."""
    total = [ls[i] - es[i] for i in range(len(graph))]
    free = []
    for i, ss in enumerate(graph.succs):
        free.append(min(es[s] for s in ss) - 1 - ef[i] if ss else project_finish - ef[i])
    return total, free


def critical_path(order: Sequence[int], total_slack: Sequence[int]) -> List[int]:
    return [i for i in order if total_slack[i] == 0]


def critical_edges(graph: TaskGraph, path: Sequence[int], es=None, ef=None, strict: bool = False) -> List[CriticalEdge]:
    """Precedence edges whose two endpoints are both critical.

    With ``strict`` an edge is kept only when the predecessor finishes the
    day before the successor starts (``EF(p) + 1 == ES(s)``), which drops
    edges joining unrelated zero-slack chains.
    """
    crit = set(path); edges = []
    for i in path:
        for p in graph.preds[i]:
            if p not in crit:
                continue
            if strict and ef[p] + 1 != es[i]:
                continue
            edges.append(CriticalEdge(graph.tasks[p].name, graph.tasks[i].name))
    return edges


def task_levels(graph: TaskGraph, order: Sequence[int]) -> List[int]:
    """Longest predecessor-chain depth per task, used for diagram columns."""
    level = [0] * len(graph)
    for i in order:
        ps = graph.preds[i]
        if ps: level[i] = 1 + max(level[p] for p in ps)
    return level
