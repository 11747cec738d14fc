"""
Общее ядро (Shared Kernel) движка очередей ресурсов.

Содержит общие типы данных и утилиты, используемые во всех ограниченных контекстах.
"""

from .domain import (
    BookingNotFoundError,
    BusinessRuleValidationException,
    ConcurrencyException,
    DomainEvent,
    # Исключения
    DomainException,
    DuplicateResourceNameError,
    # Базовые типы
    EntityId,
    # Логирование
    ILogger,
    ResourceNotFoundError,
    StdLogger,
    TeamNotFoundError,
    generate_id,
    # Утилиты
    now,
    retry_on_conflict,
)
from .event_bus import IEventBus, InMemoryEventBus

__all__ = [
    # Базовые типы
    "EntityId",
    "generate_id",
    "DomainEvent",
    # Исключения
    "DomainException",
    "ConcurrencyException",
    "BusinessRuleValidationException",
    "TeamNotFoundError",
    "ResourceNotFoundError",
    "BookingNotFoundError",
    "DuplicateResourceNameError",
    # Логирование
    "ILogger",
    "StdLogger",
    # События
    "IEventBus",
    "InMemoryEventBus",
    # Утилиты
    "now",
    "retry_on_conflict",
]
