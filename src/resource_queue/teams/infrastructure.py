"""
Инфраструктурный слой контекста команд.

Команды хранятся в коллекции ``teams``, идентификатор документа совпадает
с идентификатором команды во внешней платформе.
"""

from typing import Optional

from ..shared_kernel import EntityId
from ..storage.infrastructure import DocumentUnitOfWork
from ..storage.interfaces import IDocumentSession, document_path
from . import interfaces as ports
from .domain import Team

TEAMS_COLLECTION = "teams"


class DocumentTeamRepository(ports.ITeamRepository):
    """Репозиторий команд поверх документного хранилища."""

    def __init__(self, session: IDocumentSession):
        self._session = session

    async def get(self, team_id: EntityId) -> Optional[Team]:
        document = await self._session.get(TEAMS_COLLECTION, team_id)
        if document is None:
            return None
        return Team.model_validate(document)

    async def add(self, team: Team) -> None:
        fields = team.model_dump(mode="json", exclude={"id"})
        await self._session.set(TEAMS_COLLECTION, team.id, fields)

    async def update_publishing_channel(
        self, team_id: EntityId, channel: Optional[str]
    ) -> None:
        await self._session.update(
            document_path(TEAMS_COLLECTION, team_id), {"publishing_channel": channel}
        )


class TeamUnitOfWork(DocumentUnitOfWork):
    """Единица работы для контекста команд."""

    @property
    def teams(self) -> ports.ITeamRepository:
        return DocumentTeamRepository(self.session)
