import json
import logging

import pytest

from app.core.logging import QUIET_LOGGERS, ServiceContextFilter, setup_logging


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield root
    for handler in list(root.handlers):
        root.removeHandler(handler)
    for handler in handlers:
        root.addHandler(handler)
    root.setLevel(level)


def test_json_lines_carry_service_context(restore_root_logger, capsys):
    setup_logging("debug", service="station-test", env="test")

    logging.getLogger("app.test").info("Backup created", extra={"documents": 8})

    line = capsys.readouterr().err.strip().splitlines()[-1]
    record = json.loads(line)
    assert record["message"] == "Backup created"
    assert record["service"] == "station-test"
    assert record["env"] == "test"
    assert record["documents"] == 8
    assert restore_root_logger.level == logging.DEBUG


def test_noisy_loggers_are_quietened(restore_root_logger):
    setup_logging("INFO", json_output=False)

    for name in QUIET_LOGGERS:
        assert logging.getLogger(name).level == logging.WARNING


def test_filter_keeps_explicit_env():
    record = logging.LogRecord("x", logging.INFO, __file__, 1, "msg", None, None)
    record.env = "prod"

    assert ServiceContextFilter("svc", "dev").filter(record) is True
    assert record.service == "svc"
    assert record.env == "prod"
