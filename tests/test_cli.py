import json

import pytest

from projectpert.cli import main


@pytest.fixture
def request_file(tmp_path, example_tasks):
    path = tmp_path / 'req.json'
    path.write_text(json.dumps({'t0': 1, 'tasks': example_tasks}), encoding='utf-8')
    return str(path)


@pytest.fixture
def project_dir(tmp_path):
    return str(tmp_path / 'projects')


def test_compute_summary(request_file, project_dir, capsys):
    assert main(['--project-dir', project_dir, 'compute', request_file]) == 0
    out = capsys.readouterr().out
    assert out.startswith('# Summary')
    kpis = json.loads(out.split('\n', 1)[1])
    assert kpis['project_finish'] == 8
    assert kpis['critical_tasks'] == ['A', 'C', 'D']


def test_compute_json_with_t0_override(request_file, project_dir, capsys):
    assert main(['--project-dir', project_dir, 'compute', request_file, '--format', 'json', '--t0', '0']) == 0
    doc = json.loads(capsys.readouterr().out)
    assert doc['project_id'] is None
    assert doc['projectStart'] == 0
    assert doc['projectFinish'] == 7


def test_compute_table_and_mermaid(request_file, project_dir, capsys):
    main(['--project-dir', project_dir, 'compute', request_file, '--format', 'table'])
    assert 'TotalSlack' in capsys.readouterr().out
    main(['--project-dir', project_dir, 'compute', request_file, '--format', 'mermaid'])
    assert capsys.readouterr().out.endswith('class n0,n2,n3 crit\n')


def test_save_then_manage_projects(request_file, project_dir, capsys):
    assert main(['--project-dir', project_dir, 'compute', request_file, '--save']) == 0
    capsys.readouterr()

    main(['--project-dir', project_dir, 'projects', 'list'])
    [summary] = json.loads(capsys.readouterr().out)
    assert summary['project_finish'] == 8

    main(['--project-dir', project_dir, 'projects', 'show', summary['id']])
    assert json.loads(capsys.readouterr().out)['t0'] == 1

    assert main(['--project-dir', project_dir, 'projects', 'delete', summary['id']]) == 0
    capsys.readouterr()
    assert main(['--project-dir', project_dir, 'projects', 'show', summary['id']]) == 2
    assert json.loads(capsys.readouterr().out)['error']['kind'] == 'project_not_found'


def test_cycle_exits_with_error_document(tmp_path, project_dir, capsys):
    path = tmp_path / 'cycle.json'
    path.write_text(json.dumps({'tasks': [
        {'name': 'A', 'duration': 1, 'predecessors': ['B']},
        {'name': 'B', 'duration': 1, 'predecessors': ['A']},
    ]}), encoding='utf-8')
    assert main(['--project-dir', project_dir, 'compute', str(path)]) == 2
    err = json.loads(capsys.readouterr().out)['error']
    assert err['kind'] == 'cycle_detected'
    assert err['tasks'] == ['A', 'B']


def test_missing_file(tmp_path, project_dir):
    assert main(['--project-dir', project_dir, 'compute', str(tmp_path / 'nope.json')]) == 1


def test_projects_show_needs_id(project_dir):
    with pytest.raises(SystemExit):
        main(['--project-dir', project_dir, 'projects', 'show'])
