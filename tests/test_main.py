"""Tests for bootstrap and logging setup."""

import logging

import pytest
import yaml

from storefront.main import bootstrap


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    for handler in root.handlers:
        handler.close()
    root.handlers[:] = handlers
    root.setLevel(level)


def test_bootstrap_builds_store_and_log_file(tmp_path, monkeypatch, restore_root_logger):
    monkeypatch.delenv("LOG_LEVEL", raising=False)
    monkeypatch.delenv("LOG_FILE", raising=False)
    monkeypatch.delenv("STOREFRONT_DB_PATH", raising=False)
    log_file = tmp_path / "logs" / "storefront.log"
    (tmp_path / "project.yaml").write_text(yaml.safe_dump({
        "logging": {"level": "INFO", "log_file": str(log_file)},
        "storage": {"db_path": str(tmp_path / "state.duckdb")},
    }))

    store = bootstrap(tmp_path)
    try:
        assert store.cart.items == []
        assert store.auth.is_authenticated() is False
        assert logging.getLogger().level == logging.INFO
    finally:
        store.close()

    assert log_file.exists()
    assert "Storefront state ready" in log_file.read_text()
