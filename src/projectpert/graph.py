from typing import Dict, List, Tuple

import networkx as nx

from .model import ScheduleResult


def to_digraph(result: ScheduleResult) -> nx.DiGraph:
    """Activity-on-node graph with schedule data on nodes and critical flags on edges."""
    crit_edges = {(e.source, e.target) for e in result.critical_edges}
    G = nx.DiGraph()
    for t in result:
        G.add_node(t.name, duration=t.duration, es=t.es, ef=t.ef, ls=t.ls, lf=t.lf,
                   total_slack=t.total_slack, free_slack=t.free_slack,
                   critical=t.is_critical, level=t.level)
    for t in result:
        for p in t.predecessors:
            G.add_edge(p, t.name, critical=(p, t.name) in crit_edges)
    return G


def to_mermaid(result: ScheduleResult) -> str:
    """
    Mermaid flowchart of the schedule.

    Node ids are `n<position in order>` and task names go in quoted labels,
    so names with spaces or punctuation still parse.
    """
    ids = {n: f"n{i}" for i, n in enumerate(result.order)}
    lines = ["flowchart LR"]
    lines += [f'  {ids[n]}["{n.replace(chr(34), "#quot;")}"]' for n in result.order]
    lines += [f"  {ids[p]} --> {ids[t.name]}" for t in result for p in t.predecessors]
    lines.append("classDef crit stroke:#d33,stroke-width:3px,color:#d33;")
    if result.critical_path:
        lines.append("class " + ",".join(ids[n] for n in result.critical_path) + " crit")
    return "\n".join(lines) + "\n"


def layout_positions(result: ScheduleResult, x_gap: float = 2.0, y_gap: float = 1.0) -> Dict[str, Tuple[float, float]]:
    """
    Column per level, tasks of a level spread vertically around y=0.

    Within a column tasks keep topological order.
    """
    by_level: Dict[int, List[str]] = {}
    for t in result:
        by_level.setdefault(t.level, []).append(t.name)
    pos = {}
    for level, names in by_level.items():
        count = len(names)
        for i, name in enumerate(names):
            y = ((count - 1) / 2 - i) * y_gap
            pos[name] = (level * x_gap, y)
    return pos
