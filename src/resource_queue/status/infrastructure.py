"""
Инфраструктурный слой контекста статуса.

Настоящий транспорт (API мессенджера) находится вне движка; здесь только
адаптеры для журнала и для тестов.
"""

from typing import Dict, List, Optional, Tuple

from ..shared_kernel import ILogger, StdLogger
from . import interfaces as ports


class LoggingTopicSink(ports.ITopicSink):
    """Записывает статус в журнал вместо отправки в канал."""

    def __init__(self, logger: Optional[ILogger] = None):
        self._logger = logger or StdLogger(__name__)

    async def set_topic(self, channel: str, text: str) -> None:
        self._logger.info("Статус канала обновлен", channel=channel, text=text)


class RecordingTopicSink(ports.ITopicSink):
    """Запоминает последний статус каждого канала и историю отправок."""

    def __init__(self) -> None:
        self.topics: Dict[str, str] = {}
        self.history: List[Tuple[str, str]] = []

    async def set_topic(self, channel: str, text: str) -> None:
        self.topics[channel] = text
        self.history.append((channel, text))
