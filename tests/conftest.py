"""Pytest configuration and fixtures."""
from typing import Any, Dict, List

import pytest

from projectpert.config import Config
from projectpert.store import MemoryProjectStore


@pytest.fixture
def example_tasks() -> List[Dict[str, Any]]:
    """A(3) -> B(2), C(4) -> D(1); finishes on day 8 with A, C, D critical."""
    return [
        {'name': 'A', 'duration': 3, 'predecessors': []},
        {'name': 'B', 'duration': 2, 'predecessors': ['A']},
        {'name': 'C', 'duration': 4, 'predecessors': ['A']},
        {'name': 'D', 'duration': 1, 'predecessors': ['B', 'C']},
    ]


@pytest.fixture
def crossed_chains() -> List[Dict[str, Any]]:
    """Every task is critical but P -> Q does not carry the critical chain."""
    return [
        {'name': 'P', 'duration': 1, 'predecessors': []},
        {'name': 'R', 'duration': 3, 'predecessors': []},
        {'name': 'Q', 'duration': 1, 'predecessors': ['P', 'R']},
        {'name': 'S', 'duration': 3, 'predecessors': ['P']},
    ]


@pytest.fixture
def sample_graphs(example_tasks, crossed_chains) -> List[List[Dict[str, Any]]]:
    return [
        example_tasks,
        crossed_chains,
        [{'name': 'solo', 'duration': 5}],
        [
            {'name': 'design', 'duration': 10},
            {'name': 'steel', 'duration': 15, 'predecessors': ['design']},
            {'name': 'engine', 'duration': 25, 'predecessors': ['design']},
            {'name': 'hull', 'duration': 20, 'predecessors': ['steel']},
            {'name': 'install', 'duration': 8, 'predecessors': ['engine', 'hull']},
            {'name': 'permits', 'duration': 4},
            {'name': 'trials', 'duration': 10, 'predecessors': ['install', 'permits']},
        ],
        [
            {'name': 'x', 'duration': 2.6},
            {'name': 'y', 'duration': 0.2, 'predecessors': 'x'},
            {'name': 'z', 'duration': 7, 'predecessors': ['x', 'y', 'z']},
            {'name': 'w', 'duration': 1},
        ],
    ]


@pytest.fixture
def memory_store() -> MemoryProjectStore:
    return MemoryProjectStore()


@pytest.fixture
def config(tmp_path) -> Config:
    return Config(project_dir=str(tmp_path / 'projects'), save_projects=True)
