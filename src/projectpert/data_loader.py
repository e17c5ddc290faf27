import json
from pathlib import Path
from typing import Any, Dict, List, Optional

import pandas as pd

from .model import ScheduleResult

COLUMNS = {
    'name': 'name', 'task': 'name', 'id': 'name',
    'duration': 'duration',
    'predecessors': 'predecessors', 'dependson': 'predecessors', 'prereq': 'predecessors',
    'optimistic': 'optimistic', 'mostlikely': 'most_likely', 'pessimistic': 'pessimistic',
}


def _column_key(col) -> Optional[str]:
    return COLUMNS.get(str(col).strip().lower().replace('_', '').replace(' ', ''))


def _cell(value):
    if value is None or (not isinstance(value, str) and pd.isna(value)):
        return None
    if hasattr(value, 'item'):
        value = value.item()
    return value


def _label(value) -> str:
    # numeric ids read back as 1.0 when the column holds blanks
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    return str(value).strip()


def tasks_from_frame(df: pd.DataFrame) -> List[Dict[str, Any]]:
    """Turn a task sheet into raw task records.

    Column names are matched case-insensitively (Name, Duration, Predecessors,
    Optimistic, MostLikely, Pessimistic). Rows without a name are skipped.
    Cells keep their column dtype, so integer durations stay integers.
    """
    cols = {c: _column_key(c) for c in df.columns}
    tasks = []
    for row in df.to_dict('records'):
        rec = {}
        for col, key in cols.items():
            if key and key not in rec:
                rec[key] = _cell(row[col])
        name = rec.get('name')
        if name is None or not _label(name):
            continue
        rec['name'] = _label(name)
        deps = rec.get('predecessors')
        rec['predecessors'] = [d.strip() for d in _label(deps).split(',') if d.strip()] if deps is not None else []
        tasks.append(rec)
    return tasks


def load_excel(path: str, sheet: Optional[str] = None):
    xls = pd.read_excel(path, sheet_name=None)
    if sheet is None:
        sheet = 'Tasks' if 'Tasks' in xls else next(iter(xls))
    return tasks_from_frame(xls[sheet])


def load_csv(path: str):
    return tasks_from_frame(pd.read_csv(path, dtype=str))


def load_request(path: str, default_t0: int = 1) -> Dict[str, Any]:
    """Read a `{t0, tasks}` request from .json, .csv or .xlsx/.xls."""
    p = Path(path); suffix = p.suffix.lower()
    if suffix == '.json':
        doc = json.loads(p.read_text(encoding='utf-8'))
        if isinstance(doc, list):
            doc = {'tasks': doc}
        return {'t0': doc.get('t0', default_t0), 'tasks': doc.get('tasks', [])}
    if suffix == '.csv':
        tasks = load_csv(str(p))
    elif suffix in ('.xlsx', '.xls'):
        tasks = load_excel(str(p))
    else:
        raise ValueError(f"unsupported task file type: {p.suffix or p.name}")
    return {'t0': default_t0, 'tasks': tasks}


def load_tasks(path: str) -> List[Dict[str, Any]]:
    return load_request(path)['tasks']


def schedule_frame(result: ScheduleResult) -> pd.DataFrame:
    rows = [{
        'Task': t.name, 'Duration': t.duration, 'Predecessors': ', '.join(t.predecessors),
        'ES': t.es, 'EF': t.ef, 'LS': t.ls, 'LF': t.lf,
        'TotalSlack': t.total_slack, 'FreeSlack': t.free_slack,
        'Critical': t.is_critical, 'Level': t.level,
    } for t in result]
    return pd.DataFrame(rows, columns=['Task', 'Duration', 'Predecessors', 'ES', 'EF', 'LS', 'LF',
                                       'TotalSlack', 'FreeSlack', 'Critical', 'Level'])
