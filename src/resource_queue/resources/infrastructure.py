"""
Инфраструктурный слой контекста ресурсов.

Ресурсы команды хранятся в подколлекции ``teams/{team_id}/resources``.
"""

from datetime import datetime
from typing import List, Optional

from ..shared_kernel import EntityId
from ..storage.infrastructure import DocumentUnitOfWork
from ..storage.interfaces import Document, IDocumentSession, document_path
from . import interfaces as ports
from .domain import Resource


def resources_collection(team_id: EntityId) -> str:
    return f"teams/{team_id}/resources"


class DocumentResourceRepository(ports.IResourceRepository):
    """Репозиторий ресурсов поверх документного хранилища."""

    def __init__(self, session: IDocumentSession):
        self._session = session

    @staticmethod
    def _to_domain(team_id: EntityId, document: Document) -> Resource:
        return Resource.model_validate({**document, "team_id": team_id})

    async def add(self, team_id: EntityId, name: str) -> Resource:
        resource_id = await self._session.insert(
            resources_collection(team_id), {"name": name, "deleted_at": None}
        )
        return Resource(id=resource_id, team_id=team_id, name=name)

    async def get_by_id(
        self, team_id: EntityId, resource_id: EntityId
    ) -> Optional[Resource]:
        document = await self._session.get(resources_collection(team_id), resource_id)
        if document is None:
            return None
        return self._to_domain(team_id, document)

    async def list_active(self, team_id: EntityId) -> List[Resource]:
        documents = await self._session.query(
            resources_collection(team_id), deleted_at=None
        )
        resources = [self._to_domain(team_id, document) for document in documents]
        return sorted(resources, key=lambda r: (r.name, r.id))

    async def find_active_by_name(self, team_id: EntityId, name: str) -> List[Resource]:
        documents = await self._session.query(
            resources_collection(team_id), name=name, deleted_at=None
        )
        return [self._to_domain(team_id, document) for document in documents]

    async def mark_deleted(
        self, team_id: EntityId, resource_id: EntityId, at: datetime
    ) -> None:
        await self._session.update(
            document_path(resources_collection(team_id), resource_id),
            {"deleted_at": at.isoformat()},
        )


class ResourceUnitOfWork(DocumentUnitOfWork):
    """Единица работы для контекста ресурсов."""

    @property
    def resources(self) -> ports.IResourceRepository:
        return DocumentResourceRepository(self.session)
