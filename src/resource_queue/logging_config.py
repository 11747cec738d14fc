"""
Настройка журналирования.

Поддерживает обычный текстовый вывод и однострочный JSON для сбора логов.
Контекст, переданный в ``StdLogger`` именованными аргументами, попадает
в запись журнала атрибутом ``context``.
"""

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict

LOGGER_NAME = "resource_queue"
TEXT_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


class ContextFormatter(logging.Formatter):
    """Текстовый формат: контекст выводится как JSON после сообщения."""

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        context = getattr(record, "context", None)
        if not context:
            return line
        head, sep, tail = line.partition("\n")
        return f"{head} {json.dumps(context, default=str, ensure_ascii=False)}{sep}{tail}"


class JSONFormatter(logging.Formatter):
    """Форматирует запись журнала как однострочный JSON."""

    def format(self, record: logging.LogRecord) -> str:
        log_data: Dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        context = getattr(record, "context", None)
        if context:
            log_data["context"] = context
        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)
        return json.dumps(log_data, default=str, ensure_ascii=False)


def configure_logging(level: str = "INFO", json_output: bool = False) -> logging.Logger:
    """Настраивает логгер пакета и возвращает его."""
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level.upper())

    handler = logging.StreamHandler(sys.stderr)
    if json_output:
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(ContextFormatter(TEXT_FORMAT))

    for existing in list(logger.handlers):
        logger.removeHandler(existing)
    logger.addHandler(handler)
    logger.propagate = False
    return logger
