from .model import ScheduleResult


def compute_kpis(result: ScheduleResult, near_critical: int = 2):
    tasks = list(result)
    return {
        'project_start': result.project_start,
        'project_finish': result.project_finish,
        'project_duration': result.project_duration,
        'task_count': len(tasks),
        'critical_tasks': list(result.critical_path),
        'critical_ratio': round(len(result.critical_path) / len(tasks), 3) if tasks else 0.0,
        'near_critical_tasks': [t.name for t in tasks if 0 < t.total_slack <= near_critical],
        'total_work': sum(t.duration for t in tasks),
        'max_level': max((t.level for t in tasks), default=0),
    }
