import logging

from chestnut import config
from chestnut.transforms import BudgetPolicy


def test_defaults(monkeypatch):
    for name in ("CHESTNUT_DEFAULT_BUDGET", "CHESTNUT_USE_SEED_DATA", "CHESTNUT_BUDGET_POLICY", "CHESTNUT_LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)
    assert config.default_budget() == 400
    assert config.use_seed_data() is False
    assert config.budget_policy() is BudgetPolicy.SYNC_DEFAULT
    assert config.log_level() == logging.INFO


def test_env_overrides(monkeypatch):
    monkeypatch.setenv("CHESTNUT_DEFAULT_BUDGET", "250")
    monkeypatch.setenv("CHESTNUT_USE_SEED_DATA", "Yes")
    monkeypatch.setenv("CHESTNUT_BUDGET_POLICY", "week_only")
    monkeypatch.setenv("CHESTNUT_LOG_LEVEL", "debug")
    assert config.default_budget() == 250
    assert config.use_seed_data() is True
    assert config.budget_policy() is BudgetPolicy.WEEK_ONLY
    assert config.log_level() == logging.DEBUG


def test_bad_values_fall_back(monkeypatch):
    monkeypatch.setenv("CHESTNUT_BUDGET_POLICY", "whatever")
    monkeypatch.setenv("CHESTNUT_LOG_LEVEL", "loud")
    for raw in ("abc", "-5", "0", ""):
        monkeypatch.setenv("CHESTNUT_DEFAULT_BUDGET", raw)
        assert config.default_budget() == 400
    assert config.budget_policy() is BudgetPolicy.SYNC_DEFAULT
    assert config.log_level() == logging.INFO


def test_configure_logging_adds_one_handler():
    logger = logging.getLogger("chestnut")
    saved_handlers, saved_level = list(logger.handlers), logger.level
    try:
        logger.handlers = []
        config.configure_logging(logging.WARNING)
        config.configure_logging(logging.WARNING)
        assert len(logger.handlers) == 1
        assert logger.level == logging.WARNING
    finally:
        logger.handlers = saved_handlers
        logger.setLevel(saved_level)


def test_default_data_dir_is_under_home(monkeypatch, tmp_path):
    monkeypatch.setenv("HOME", str(tmp_path))
    assert config.default_data_dir() == tmp_path / ".chestnut"
