"""
Шина доменных событий в памяти.

Команды публикуют события после фиксации изменений; подписчики
(например, публикация статуса) выполняются в том же цикле событий.
"""

from typing import Awaitable, Callable, Dict, List, Optional, Protocol, Type, TypeVar

from .domain import DomainEvent, ILogger, StdLogger

T_Event = TypeVar("T_Event", bound=DomainEvent)
Handler = Callable[[DomainEvent], Awaitable[None]]


class IEventBus(Protocol):
    """Интерфейс для шины событий."""

    async def publish(self, event: DomainEvent) -> None: ...
    def subscribe(
        self, event_type: Type[T_Event], handler: Callable[[T_Event], Awaitable[None]]
    ) -> None: ...


class InMemoryEventBus(IEventBus):
    """Реализация шины событий в памяти."""

    def __init__(self, logger: Optional[ILogger] = None):
        self._subscribers: Dict[Type[DomainEvent], List[Handler]] = {}
        self._logger = logger or StdLogger(__name__)

    async def publish(self, event: DomainEvent) -> None:
        """Публикует событие.

        Ошибка обработчика логируется и не прерывает ни остальных
        обработчиков, ни вызывающую команду.
        """
        event_type = type(event)
        handlers = self._subscribers.get(event_type, [])
        if not handlers:
            self._logger.debug(f"Нет подписчиков на {event_type.__name__}")
            return

        self._logger.debug(
            f"Публикация события {event_type.__name__}",
            event=event.model_dump(mode="json"),
        )
        for handler in handlers:
            try:
                await handler(event)
            except Exception as e:
                self._logger.error(
                    f"Ошибка в обработчике события {event_type.__name__}",
                    error=str(e),
                    event=event.model_dump(mode="json"),
                    exc_info=True,
                )

    def subscribe(self, event_type: Type[T_Event], handler) -> None:
        """Подписывает обработчик на события указанного типа."""
        self._subscribers.setdefault(event_type, []).append(handler)
        self._logger.debug(f"Обработчик подписан на {event_type.__name__}")
