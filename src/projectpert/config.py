"""
Configuration for projectpert.

Every value can be overridden with a ``PP_*`` environment variable or by
constructing ``Config(...)`` directly.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Optional

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def _get_env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "y", "on"}


def _get_env_int(name: str, default: int) -> int:
    value = os.getenv(name)
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        return default


@dataclass
class Config:
    """
    Runtime settings for the scheduling service and its front ends.

    The scheduling core itself takes no configuration; these values bound
    the input a hosting layer accepts and control snapshot storage.
    """

    default_t0: int = 1

    # Input bounds enforced before the graph reaches the scheduler
    max_tasks: int = 5000
    max_predecessors: int = 500

    # Project snapshots
    project_dir: str = "projects"
    save_projects: bool = True

    strict_critical_edges: bool = False
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "Config":
        """
        Build a Config from environment variables (all optional):

        - PP_DEFAULT_T0          (int)
        - PP_MAX_TASKS           (int)
        - PP_MAX_PREDECESSORS    (int)
        - PP_PROJECT_DIR         (path)
        - PP_SAVE_PROJECTS       (true/false)
        - PP_STRICT_CRITICAL_EDGES (true/false)
        - PP_LOG_LEVEL           (DEBUG, INFO, ...)
        """
        defaults = cls()
        return cls(
            default_t0=_get_env_int("PP_DEFAULT_T0", defaults.default_t0),
            max_tasks=_get_env_int("PP_MAX_TASKS", defaults.max_tasks),
            max_predecessors=_get_env_int("PP_MAX_PREDECESSORS", defaults.max_predecessors),
            project_dir=os.getenv("PP_PROJECT_DIR", defaults.project_dir),
            save_projects=_get_env_bool("PP_SAVE_PROJECTS", defaults.save_projects),
            strict_critical_edges=_get_env_bool("PP_STRICT_CRITICAL_EDGES", defaults.strict_critical_edges),
            log_level=os.getenv("PP_LOG_LEVEL", defaults.log_level).strip().upper(),
        )


_CONFIG: Optional[Config] = None


def get_config(force_reload: bool = False) -> Config:
    """
    Return a process-wide Config, built from the environment on first use
    or again when `force_reload` is set.
    """
    global _CONFIG
    if _CONFIG is None or force_reload:
        _CONFIG = Config.from_env()
    return _CONFIG


def configure_logging(level: str = "INFO") -> logging.Logger:
    """
    Attach one console handler to the ``projectpert`` logger.

    Safe to call repeatedly: a handler installed by an earlier call is
    replaced, so output follows the current ``sys.stderr``.
    """
    logger = logging.getLogger("projectpert")
    logger.setLevel(getattr(logging, str(level).upper(), logging.INFO))
    for h in [h for h in logger.handlers if getattr(h, "_projectpert", False)]:
        logger.removeHandler(h)
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    handler._projectpert = True  # type: ignore[attr-defined]
    logger.addHandler(handler)
    return logger
