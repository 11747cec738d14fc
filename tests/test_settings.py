"""
Тесты настроек и журналирования.
"""

import json
import logging

import pytest
from pydantic import ValidationError

from resource_queue.bootstrap import bootstrap_app, create_store
from resource_queue.logging_config import ContextFormatter, JSONFormatter
from resource_queue.settings import Settings
from resource_queue.shared_kernel import StdLogger
from resource_queue.storage.infrastructure import (
    InMemoryDocumentStore,
    JsonFileDocumentStore,
)


def make_record(message: str, **context) -> logging.LogRecord:
    record = logging.LogRecord(
        "resource_queue.test", logging.INFO, __file__, 1, message, None, None
    )
    record.context = context
    return record


class TestSettings:
    def test_defaults(self, monkeypatch):
        monkeypatch.delenv("RESOURCE_QUEUE_STORAGE_BACKEND", raising=False)
        settings = Settings(_env_file=None)

        assert settings.storage_backend == "memory"
        assert settings.transaction_max_attempts == 3
        assert settings.strict_resource_names is True

    def test_environment_overrides(self, monkeypatch, tmp_path):
        monkeypatch.setenv("RESOURCE_QUEUE_STORAGE_BACKEND", "json")
        monkeypatch.setenv("RESOURCE_QUEUE_STORAGE_PATH", str(tmp_path / "s.json"))
        monkeypatch.setenv("RESOURCE_QUEUE_STRICT_RESOURCE_NAMES", "false")

        settings = Settings(_env_file=None)

        assert settings.strict_resource_names is False
        assert isinstance(create_store(settings), JsonFileDocumentStore)

    def test_invalid_attempts(self):
        with pytest.raises(ValidationError):
            Settings(_env_file=None, transaction_max_attempts=0)

    def test_bootstrap_uses_memory_store(self):
        app = bootstrap_app(
            Settings(_env_file=None, storage_backend="memory"), configure_logs=False
        )

        assert isinstance(app["store"], InMemoryDocumentStore)
        assert app["commands"].strict_resource_names is True

    def test_bootstrap_reads_settings_from_environment(self, monkeypatch):
        monkeypatch.setenv("RESOURCE_QUEUE_STORAGE_BACKEND", "memory")
        monkeypatch.setenv("RESOURCE_QUEUE_STRICT_RESOURCE_NAMES", "false")
        monkeypatch.setenv("RESOURCE_QUEUE_TRANSACTION_MAX_ATTEMPTS", "5")

        app = bootstrap_app(configure_logs=False)

        assert app["settings"].transaction_max_attempts == 5
        assert app["commands"].strict_resource_names is False


class TestLogging:
    def test_json_formatter_includes_context(self):
        line = JSONFormatter().format(make_record("Ресурс создан", name="Printer"))

        data = json.loads(line)
        assert data["message"] == "Ресурс создан"
        assert data["level"] == "INFO"
        assert data["context"] == {"name": "Printer"}

    def test_text_formatter_appends_context(self):
        line = ContextFormatter("%(message)s").format(
            make_record("Ресурс создан", name="Printer")
        )

        assert line == 'Ресурс создан {"name": "Printer"}'

    def test_std_logger_passes_context(self, caplog):
        with caplog.at_level(logging.INFO, logger="resource_queue.test"):
            StdLogger("resource_queue.test").info("Ресурс удален", resource_id="R1")

        record = caplog.records[-1]
        assert record.getMessage() == "Ресурс удален"
        assert record.context == {"resource_id": "R1"}
