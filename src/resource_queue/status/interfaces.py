"""
Интерфейсы (порты) для контекста статуса.
"""

from typing import Protocol


class ITopicSink(Protocol):
    """Внешний получатель статуса: например, тема канала в мессенджере."""

    async def set_topic(self, channel: str, text: str) -> None: ...
