import logging

import pytest

from projectpert.config import Config
from projectpert.errors import CycleDetectedError, InputTooLargeError, InvalidTaskError
from projectpert.service import ScheduleService, error_response
from projectpert.store import FileProjectStore, MemoryProjectStore


class BrokenStore(MemoryProjectStore):
    def put(self, project_id, record):
        raise OSError('disk full')


def test_calculate_saves_snapshot(example_tasks, config, memory_store):
    service = ScheduleService(config, memory_store)
    response = service.calculate({'t0': 1, 'tasks': example_tasks})
    assert response['projectFinish'] == 8
    assert response['criticalPath'] == ['A', 'C', 'D']

    pid = response['project_id']
    assert pid.startswith('project_')
    record = service.get_project(pid)
    assert record['t0'] == 1
    assert record['input_tasks'] == example_tasks
    assert record['results']['criticalPath'] == ['A', 'C', 'D']
    assert 'project_id' not in record['results']

    [summary] = service.list_projects()
    assert summary['id'] == pid
    assert summary['tasks_count'] == 4
    assert summary['project_finish'] == 8

    service.delete_project(pid)
    assert service.list_projects() == []


def test_default_store_is_file_store(config):
    service = ScheduleService(config)
    assert isinstance(service.store, FileProjectStore)
    assert str(service.store.directory) == config.project_dir


def test_save_can_be_disabled(example_tasks, config, memory_store):
    service = ScheduleService(config, memory_store)
    assert service.calculate({'tasks': example_tasks}, save=False)['project_id'] is None
    assert memory_store.list() == []


def test_default_t0_from_config(example_tasks, memory_store):
    service = ScheduleService(Config(default_t0=10, save_projects=False), memory_store)
    response = service.calculate({'tasks': example_tasks})
    assert response['projectStart'] == 10
    assert response['projectFinish'] == 17


def test_failed_save_does_not_fail_request(example_tasks, config, caplog):
    service = ScheduleService(config, BrokenStore())
    with caplog.at_level(logging.ERROR, logger='projectpert'):
        response = service.calculate({'tasks': example_tasks})
    assert response['project_id'] is None
    assert response['projectFinish'] == 8
    assert 'disk full' in caplog.text


def test_task_count_limit(example_tasks, memory_store):
    service = ScheduleService(Config(max_tasks=3), memory_store)
    with pytest.raises(InputTooLargeError) as exc:
        service.calculate({'tasks': example_tasks})
    assert exc.value.to_dict() == {
        'kind': 'input_too_large', 'message': 'task count is 4, maximum allowed is 3',
        'limit': 'task count', 'value': 4, 'maximum': 3,
    }


def test_predecessor_limit(example_tasks, memory_store):
    service = ScheduleService(Config(max_predecessors=1), memory_store)
    with pytest.raises(InputTooLargeError):
        service.calculate({'tasks': example_tasks})


@pytest.mark.parametrize('preds', [
    ','.join(f'T{i}' for i in range(10)),
    [' '.join(f'T{i}' for i in range(5)), 'T5;T6', 'T7', 'T8,T9'],
])
def test_predecessor_limit_counts_names_inside_strings(preds, memory_store):
    tasks = [{'name': f'T{i}', 'duration': 1} for i in range(10)]
    tasks.append({'name': 'Z', 'duration': 1, 'predecessors': preds})
    service = ScheduleService(Config(max_predecessors=2), memory_store)
    with pytest.raises(InputTooLargeError) as exc:
        service.calculate({'tasks': tasks})
    assert exc.value.value == 10


@pytest.mark.parametrize('request_doc', [{}, {'tasks': 'A'}, None])
def test_malformed_request(request_doc, memory_store):
    with pytest.raises(InvalidTaskError):
        ScheduleService(Config(), memory_store).calculate(request_doc)


def test_errors_are_not_saved(memory_store):
    service = ScheduleService(Config(), memory_store)
    with pytest.raises(CycleDetectedError) as exc:
        service.calculate({'tasks': [
            {'name': 'A', 'duration': 1, 'predecessors': ['B']},
            {'name': 'B', 'duration': 1, 'predecessors': ['A']},
        ]})
    assert memory_store.list() == []
    assert error_response(exc.value)['error']['kind'] == 'cycle_detected'


def test_strict_edges_from_config(crossed_chains, memory_store):
    service = ScheduleService(Config(strict_critical_edges=True, save_projects=False), memory_store)
    response = service.calculate({'tasks': crossed_chains})
    assert response['criticalEdges'] == [{'from': 'P', 'to': 'S'}, {'from': 'R', 'to': 'Q'}]
