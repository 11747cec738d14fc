"""
Командный слой движка очередей ресурсов.

Точка входа для внешнего диспетчера: каждая операция при необходимости
регистрирует команду-арендатора, обращается к сервисам контекстов и после
успешной фиксации публикует доменное событие. Публикация статуса в канал
подписана на эти события и в сами сервисы не встроена.
"""

import functools
from typing import Any, Awaitable, Callable, List, Optional, TypeVar

from pydantic import BaseModel

from .bookings.application import BookingQueue
from .bookings.domain import (
    BookingQueued,
    BookingReceipt,
    BookingResolved,
    QueueState,
    Resolution,
    derive_queue_state,
)
from .resources.application import ResourceRegistry
from .resources.domain import Resource, ResourceCreated, ResourceDeleted
from .shared_kernel import (
    DomainException,
    EntityId,
    IEventBus,
    ILogger,
    ResourceNotFoundError,
    StdLogger,
)
from .teams.application import TeamDirectory
from .teams.domain import PublishingChannelChanged, Team

T = TypeVar("T")

_logger = StdLogger(__name__)


class ResourceWithBookings(BaseModel):
    """Ресурс вместе с текущим состоянием его очереди."""

    resource: Resource
    queue: QueueState


def logged_command(
    func: Callable[..., Awaitable[T]],
) -> Callable[..., Awaitable[T]]:
    """Журналирует ошибки команды и пробрасывает их дальше.

    Доменные ошибки ожидаемы (ресурс не найден, очередь пуста) и
    пишутся на уровне INFO; остальные - с трассировкой.
    """

    @functools.wraps(func)
    async def wrapper(self: "ResourceQueueCommands", *args: Any, **kwargs: Any) -> T:
        try:
            return await func(self, *args, **kwargs)
        except DomainException as e:
            self._logger.info(
                f"Команда {func.__name__} отклонена",
                error=type(e).__name__,
                detail=str(e),
            )
            raise
        except Exception as e:
            self._logger.error(
                f"Ошибка при выполнении команды {func.__name__}",
                error=str(e),
                exc_info=True,
            )
            raise

    return wrapper


class ResourceQueueCommands:
    """Команды над ресурсами и их очередями."""

    def __init__(
        self,
        teams: TeamDirectory,
        resources: ResourceRegistry,
        queue: BookingQueue,
        event_bus: IEventBus,
        strict_resource_names: bool = True,
        logger: Optional[ILogger] = None,
    ):
        self.teams = teams
        self.resources = resources
        self.queue = queue
        self.event_bus = event_bus
        self.strict_resource_names = strict_resource_names
        self._logger = logger or _logger

    async def _resource_by_name(self, team_id: EntityId, name: str) -> Resource:
        resource = await self.resources.find_by_name(team_id, name)
        if resource is None:
            raise ResourceNotFoundError(team_id, name)
        return resource

    @logged_command
    async def ensure_team(self, team_id: EntityId) -> Team:
        return await self.teams.ensure(team_id)

    @logged_command
    async def create_resource(self, team_id: EntityId, name: str) -> Resource:
        """Создает ресурс; в строгом режиме имя должно быть свободно."""
        await self.teams.ensure(team_id)
        if self.strict_resource_names:
            resource = await self.resources.create_unique(team_id, name)
        else:
            resource = await self.resources.create(team_id, name)
        await self.event_bus.publish(
            ResourceCreated(team_id=team_id, resource_id=resource.id, name=resource.name)
        )
        return resource

    @logged_command
    async def find_resource_by_name(self, team_id: EntityId, name: str) -> Resource:
        await self.teams.ensure(team_id)
        return await self._resource_by_name(team_id, name)

    @logged_command
    async def delete_resource(self, team_id: EntityId, resource_id: EntityId) -> Resource:
        """Удаляет ресурс по id; повторное удаление успешно."""
        await self.teams.ensure(team_id)
        resource = await self.resources.delete(team_id, resource_id)
        await self.event_bus.publish(
            ResourceDeleted(team_id=team_id, resource_id=resource.id, name=resource.name)
        )
        return resource

    @logged_command
    async def book_resource(
        self, team_id: EntityId, user_id: str, resource_name: str
    ) -> BookingReceipt:
        """Ставит пользователя в очередь на ресурс с указанным именем."""
        await self.teams.ensure(team_id)
        resource = await self._resource_by_name(team_id, resource_name)
        receipt = await self.queue.enqueue(team_id, user_id, resource)
        await self.event_bus.publish(
            BookingQueued(
                team_id=team_id,
                resource_id=resource.id,
                booking_id=receipt.booking.id,
                user_id=user_id,
                position=receipt.position,
            )
        )
        return receipt

    @logged_command
    async def resolve_active_booking(
        self, team_id: EntityId, resource_name: str
    ) -> Resolution:
        """Освобождает ресурс и передает его следующему в очереди."""
        await self.teams.ensure(team_id)
        resource = await self._resource_by_name(team_id, resource_name)
        resolution = await self.queue.resolve_and_promote(team_id, resource)
        await self.event_bus.publish(
            BookingResolved(
                team_id=team_id,
                resource_id=resource.id,
                booking_id=resolution.resolved.id,
                user_id=resolution.resolved.user_id,
                promoted_user_id=(
                    resolution.promoted.user_id if resolution.promoted else None
                ),
            )
        )
        return resolution

    @logged_command
    async def set_publishing_channel(
        self, team_id: EntityId, channel: Optional[str]
    ) -> Team:
        """Включает (канал) или выключает (``None``) публикацию статуса."""
        await self.teams.ensure(team_id)
        team = await self.teams.set_publishing_channel(team_id, channel)
        await self.event_bus.publish(
            PublishingChannelChanged(team_id=team_id, publishing_channel=channel)
        )
        return team

    @logged_command
    async def list_resources_with_bookings(
        self, team_id: EntityId
    ) -> List[ResourceWithBookings]:
        await self.teams.ensure(team_id)
        resources = await self.resources.list(team_id)
        bookings = await self.queue.list_unresolved(team_id)
        return [
            ResourceWithBookings(
                resource=resource, queue=derive_queue_state(resource.id, bookings)
            )
            for resource in resources
        ]
