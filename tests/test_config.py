import logging

import pytest

from crm import config, main
from crm.logging_config import setup_logging


def test_database_url_from_env(monkeypatch):
    monkeypatch.setenv("DATABASE_URL", "postgresql://crm@localhost/crm")
    assert config.get_database_url() == "postgresql://crm@localhost/crm"


def test_database_url_missing(monkeypatch):
    monkeypatch.delenv("DATABASE_URL", raising=False)
    with pytest.raises(RuntimeError):
        config.get_database_url()


def test_setup_logging_is_idempotent():
    root = logging.getLogger()
    setup_logging("DEBUG")
    handlers = list(root.handlers)

    setup_logging("DEBUG")

    assert root.handlers == handlers


def test_setup_logging_writes_to_logfile(monkeypatch, tmp_path):
    root = logging.getLogger()
    monkeypatch.setattr(root, "handlers", [])
    monkeypatch.setattr(root, "level", root.level)
    logfile = tmp_path / "logs" / "crm.log"

    setup_logging("info", str(logfile))
    added = list(root.handlers)
    try:
        logging.getLogger("crm.test").info("customer registered")
    finally:
        for handler in added:
            handler.close()

    assert len(added) == 2
    assert "[INFO] crm.test: customer registered" in logfile.read_text(encoding="utf-8")


def test_create_app_passes_log_file(monkeypatch):
    calls = []
    monkeypatch.setattr(config, "LOG_FILE", "/var/log/crm.log")
    monkeypatch.setattr(main, "setup_logging", lambda *args: calls.append(args))

    main.create_app()

    assert calls == [(config.LOG_LEVEL, "/var/log/crm.log")]
