"""
Доменная модель контекста ресурсов.

Ресурс - общий объект, доступ к которому команда распределяет через
очередь бронирований. Удаление мягкое: ресурс помечается временем удаления
и больше никогда не восстанавливается.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from ..shared_kernel import DomainEvent, EntityId


class Resource(BaseModel):
    """Общий ресурс команды."""

    id: EntityId
    team_id: EntityId
    name: str = Field(..., min_length=1)
    deleted_at: Optional[datetime] = None

    @property
    def is_deleted(self) -> bool:
        return self.deleted_at is not None

    def mark_deleted(self, at: datetime) -> bool:
        """Помечает ресурс удаленным.

        Возвращает ``False``, если ресурс уже был удален: повторное удаление
        ничего не меняет и сохраняет исходное время удаления.
        """
        if self.is_deleted:
            return False
        self.deleted_at = at
        return True


class ResourceCreated(DomainEvent):
    """Событие создания ресурса."""

    resource_id: EntityId
    name: str


class ResourceDeleted(DomainEvent):
    """Событие удаления ресурса."""

    resource_id: EntityId
    name: str


def resource_lock_key(team_id: EntityId, resource_id: EntityId) -> str:
    """Ключ транзакции для операций над одним ресурсом и его очередью."""
    return f"resource:{team_id}:{resource_id}"


def resource_name_lock_key(team_id: EntityId, name: str) -> str:
    """Ключ транзакции для проверки уникальности имени ресурса."""
    return f"resource-name:{team_id}:{name}"
