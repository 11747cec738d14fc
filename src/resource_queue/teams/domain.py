"""
Доменная модель контекста команд.

Команда - граница арендатора: все ресурсы и бронирования принадлежат
ровно одной команде.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from ..shared_kernel import DomainEvent, EntityId, now


class Team(BaseModel):
    """Команда внешней платформы."""

    id: EntityId
    created_at: datetime = Field(default_factory=now)
    publishing_channel: Optional[str] = None

    @property
    def is_publishing(self) -> bool:
        """Публикуется ли статус ресурсов в канал."""
        return self.publishing_channel is not None


class PublishingChannelChanged(DomainEvent):
    """Событие смены канала публикации."""

    publishing_channel: Optional[str] = None


def team_lock_key(team_id: EntityId) -> str:
    """Ключ транзакции для операций над записью команды."""
    return f"team:{team_id}"
