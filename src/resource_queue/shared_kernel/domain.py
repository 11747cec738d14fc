"""
Основные доменные типы и утилиты общего ядра.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Awaitable, Callable, Optional, Protocol, TypeVar
from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict, Field

# Идентификаторы приходят из внешней платформы или генерируются хранилищем,
# поэтому в домене это просто непрозрачные строки.
EntityId = str

T = TypeVar("T")


def generate_id() -> EntityId:
    """Генерирует новый непрозрачный идентификатор."""
    return uuid4().hex


def now() -> datetime:
    """Возвращает текущие дату и время в UTC."""
    return datetime.now(timezone.utc)


class DomainEvent(BaseModel):
    """Базовый класс для всех доменных событий."""

    model_config = ConfigDict(frozen=True)

    event_id: UUID = Field(default_factory=uuid4)
    occurred_on: datetime = Field(default_factory=now)
    team_id: EntityId


# Общие исключения
class DomainException(Exception):
    """Базовое исключение для доменных ошибок."""

    pass


class ConcurrencyException(DomainException):
    """Исключение при конфликте версий документов в транзакции."""

    pass


class BusinessRuleValidationException(DomainException):
    """Исключение при нарушении бизнес-правил."""

    pass


class TeamNotFoundError(DomainException):
    """Команда не была зарегистрирована."""

    def __init__(self, team_id: EntityId):
        super().__init__(f"Команда {team_id} не найдена")
        self.team_id = team_id


class ResourceNotFoundError(DomainException):
    """Ресурс не найден по идентификатору или имени."""

    def __init__(self, team_id: EntityId, key: str):
        super().__init__(f"Ресурс {key!r} не найден в команде {team_id}")
        self.team_id = team_id
        self.key = key


class BookingNotFoundError(DomainException):
    """У ресурса нет неразрешенных бронирований."""

    def __init__(self, team_id: EntityId, resource_id: EntityId):
        super().__init__(
            f"У ресурса {resource_id} в команде {team_id} нет активных бронирований"
        )
        self.team_id = team_id
        self.resource_id = resource_id


class DuplicateResourceNameError(DomainException):
    """Активный ресурс с таким именем уже существует."""

    def __init__(self, team_id: EntityId, name: str):
        super().__init__(f"Ресурс с именем {name!r} уже существует")
        self.team_id = team_id
        self.name = name


class ILogger(Protocol):
    """Интерфейс для логгера."""

    def info(self, message: str, **kwargs: Any) -> None: ...
    def error(self, message: str, **kwargs: Any) -> None: ...
    def warning(self, message: str, **kwargs: Any) -> None: ...
    def debug(self, message: str, **kwargs: Any) -> None: ...


class StdLogger(ILogger):
    """Логгер поверх стандартного модуля logging.

    Дополнительный контекст передается как именованные аргументы и
    попадает в запись журнала атрибутом ``context``; форматирование
    настраивается в ``logging_config``.
    """

    def __init__(self, name: str = "resource_queue"):
        self._logger = logging.getLogger(name)

    def _log(self, level: int, message: str, context: dict, **log_kwargs: Any) -> None:
        self._logger.log(level, message, extra={"context": context}, **log_kwargs)

    def info(self, message: str, **kwargs: Any) -> None:
        self._log(logging.INFO, message, kwargs)

    def error(self, message: str, **kwargs: Any) -> None:
        exc_info = kwargs.pop("exc_info", False)
        self._log(logging.ERROR, message, kwargs, exc_info=exc_info)

    def warning(self, message: str, **kwargs: Any) -> None:
        self._log(logging.WARNING, message, kwargs)

    def debug(self, message: str, **kwargs: Any) -> None:
        self._log(logging.DEBUG, message, kwargs)


async def retry_on_conflict(
    operation: Callable[[], Awaitable[T]],
    attempts: int,
    logger: Optional[ILogger] = None,
) -> T:
    """Повторяет операцию при конфликте транзакции.

    Операция должна целиком перечитывать данные внутри своей транзакции,
    иначе повтор не имеет смысла. После исчерпания попыток последнее
    исключение пробрасывается дальше.
    """
    attempt = 1
    while True:
        try:
            return await operation()
        except ConcurrencyException as e:
            if attempt >= attempts:
                raise
            if logger is not None:
                logger.warning(
                    "Конфликт транзакции, повтор", attempt=attempt, error=str(e)
                )
            attempt += 1
