import logging

from projectpert.config import Config, configure_logging, get_config


def test_defaults():
    cfg = Config()
    assert cfg.default_t0 == 1
    assert cfg.save_projects is True
    assert cfg.strict_critical_edges is False


def test_from_env(monkeypatch):
    monkeypatch.setenv('PP_DEFAULT_T0', '0')
    monkeypatch.setenv('PP_MAX_TASKS', '50')
    monkeypatch.setenv('PP_MAX_PREDECESSORS', 'lots')
    monkeypatch.setenv('PP_PROJECT_DIR', '/tmp/pert')
    monkeypatch.setenv('PP_SAVE_PROJECTS', 'no')
    monkeypatch.setenv('PP_STRICT_CRITICAL_EDGES', 'Yes')
    monkeypatch.setenv('PP_LOG_LEVEL', ' debug ')
    cfg = Config.from_env()
    assert cfg.default_t0 == 0
    assert cfg.max_tasks == 50
    assert cfg.max_predecessors == Config().max_predecessors
    assert cfg.project_dir == '/tmp/pert'
    assert cfg.save_projects is False
    assert cfg.strict_critical_edges is True
    assert cfg.log_level == 'DEBUG'


def test_get_config_reload(monkeypatch):
    monkeypatch.setenv('PP_MAX_TASKS', '7')
    assert get_config(force_reload=True).max_tasks == 7
    assert get_config() is get_config()
    monkeypatch.delenv('PP_MAX_TASKS')
    assert get_config(force_reload=True).max_tasks == Config().max_tasks


def test_configure_logging_installs_one_handler():
    logger = configure_logging('DEBUG')
    configure_logging('WARNING')
    ours = [h for h in logger.handlers if getattr(h, '_projectpert', False)]
    assert len(ours) == 1
    assert logger.level == logging.WARNING
