"""
Прикладной слой контекста статуса.
"""

from typing import List, Optional

from ..bookings.application import BookingQueue
from ..resources.application import ResourceRegistry
from ..shared_kernel import DomainEvent, EntityId, ILogger, StdLogger
from ..teams.application import TeamDirectory
from . import interfaces as ports
from .domain import render_status_lines


class StatusPublisher:
    """Сервис публикации статуса ресурсов команды в канал."""

    def __init__(
        self,
        teams: TeamDirectory,
        resources: ResourceRegistry,
        queue: BookingQueue,
        sink: ports.ITopicSink,
        logger: Optional[ILogger] = None,
    ):
        self._teams = teams
        self._resources = resources
        self._queue = queue
        self._sink = sink
        self._logger = logger or StdLogger(__name__)

    async def render(self, team_id: EntityId) -> List[str]:
        """Строки статуса по всем неудаленным ресурсам команды."""
        resources = await self._resources.list(team_id)
        bookings = await self._queue.list_unresolved(team_id)
        return render_status_lines(resources, bookings)

    async def publish(self, team_id: EntityId) -> Optional[str]:
        """Отправляет статус в канал команды.

        Возвращает отправленный текст или ``None``, если публикация выключена.
        """
        team = await self._teams.get(team_id)
        if not team.is_publishing:
            return None

        text = "\n".join(await self.render(team_id))
        await self._sink.set_topic(team.publishing_channel, text)
        self._logger.debug(
            "Статус опубликован", team_id=team_id, channel=team.publishing_channel
        )
        return text

    async def on_queue_changed(self, event: DomainEvent) -> None:
        """Обработчик событий, изменяющих статус ресурсов."""
        await self.publish(event.team_id)
