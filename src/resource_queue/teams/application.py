"""
Прикладной слой контекста команд.
"""

from typing import Optional

from ..shared_kernel import EntityId, ILogger, StdLogger, TeamNotFoundError, now
from ..storage.interfaces import IDocumentStore
from .domain import Team, team_lock_key
from .infrastructure import DocumentTeamRepository, TeamUnitOfWork


class TeamDirectory:
    """Сервис регистрации команд и настройки канала публикации."""

    def __init__(self, store: IDocumentStore, logger: Optional[ILogger] = None):
        self._store = store
        self._logger = logger or StdLogger(__name__)

    async def ensure(self, team_id: EntityId) -> Team:
        """Возвращает команду, при первом обращении создавая ее.

        Повторные вызовы возвращают существующую запись без изменений.
        """
        async with TeamUnitOfWork(self._store, team_lock_key(team_id)) as uow:
            team = await uow.teams.get(team_id)
            if team is None:
                team = Team(id=team_id, created_at=now())
                await uow.teams.add(team)
                self._logger.info("Команда зарегистрирована", team_id=team_id)
        return team

    async def get(self, team_id: EntityId) -> Team:
        """Возвращает зарегистрированную команду."""
        team = await DocumentTeamRepository(self._store).get(team_id)
        if team is None:
            raise TeamNotFoundError(team_id)
        return team

    async def set_publishing_channel(
        self, team_id: EntityId, channel: Optional[str]
    ) -> Team:
        """Включает публикацию статуса в канал или выключает ее (``None``)."""
        async with TeamUnitOfWork(self._store, team_lock_key(team_id)) as uow:
            team = await uow.teams.get(team_id)
            if team is None:
                raise TeamNotFoundError(team_id)
            await uow.teams.update_publishing_channel(team_id, channel)
            team = team.model_copy(update={"publishing_channel": channel})

        self._logger.info(
            "Канал публикации изменен", team_id=team_id, publishing_channel=channel
        )
        return team
