"""
Прикладной слой контекста ресурсов.
"""

from typing import List, Optional

from ..shared_kernel import (
    DuplicateResourceNameError,
    EntityId,
    ILogger,
    ResourceNotFoundError,
    StdLogger,
    now,
    retry_on_conflict,
)
from ..storage.interfaces import IDocumentStore
from .domain import Resource, resource_lock_key, resource_name_lock_key
from .infrastructure import DocumentResourceRepository, ResourceUnitOfWork


class ResourceRegistry:
    """Сервис жизненного цикла ресурсов команды."""

    def __init__(
        self,
        store: IDocumentStore,
        transaction_attempts: int = 3,
        logger: Optional[ILogger] = None,
    ):
        self._store = store
        self._repository = DocumentResourceRepository(store)
        self._transaction_attempts = transaction_attempts
        self._logger = logger or StdLogger(__name__)

    async def create(self, team_id: EntityId, name: str) -> Resource:
        """Создает ресурс.

        Уникальность имени здесь не проверяется: вызывающий код сам
        ищет ресурс через ``find_by_name`` перед созданием.
        """
        resource = await self._repository.add(team_id, name)
        self._logger.info(
            "Ресурс создан", team_id=team_id, resource_id=resource.id, name=name
        )
        return resource

    async def create_unique(self, team_id: EntityId, name: str) -> Resource:
        """Создает ресурс, если в команде нет активного ресурса с таким именем.

        Проверка и вставка выполняются в одной транзакции по ключу имени.
        """

        async def attempt() -> Resource:
            async with ResourceUnitOfWork(
                self._store, resource_name_lock_key(team_id, name)
            ) as uow:
                if await uow.resources.find_active_by_name(team_id, name):
                    raise DuplicateResourceNameError(team_id, name)
                return await uow.resources.add(team_id, name)

        resource = await retry_on_conflict(
            attempt, self._transaction_attempts, self._logger
        )
        self._logger.info(
            "Ресурс создан", team_id=team_id, resource_id=resource.id, name=name
        )
        return resource

    async def list(self, team_id: EntityId) -> List[Resource]:
        """Возвращает все неудаленные ресурсы команды."""
        return await self._repository.list_active(team_id)

    async def get(self, team_id: EntityId, resource_id: EntityId) -> Resource:
        """Возвращает ресурс по id, в том числе уже удаленный."""
        resource = await self._repository.get_by_id(team_id, resource_id)
        if resource is None:
            raise ResourceNotFoundError(team_id, resource_id)
        return resource

    async def find_by_name(self, team_id: EntityId, name: str) -> Optional[Resource]:
        """Ищет неудаленный ресурс с точно таким именем."""
        matches = await self._repository.find_active_by_name(team_id, name)
        if len(matches) > 1:
            self._logger.warning(
                "Найдено несколько ресурсов с одним именем",
                team_id=team_id,
                name=name,
                resource_ids=[r.id for r in matches],
            )
        return matches[0] if matches else None

    async def delete(self, team_id: EntityId, resource_id: EntityId) -> Resource:
        """Мягко удаляет ресурс. Повторное удаление ничего не меняет."""

        async def attempt() -> tuple[Resource, bool]:
            async with ResourceUnitOfWork(
                self._store, resource_lock_key(team_id, resource_id)
            ) as uow:
                resource = await uow.resources.get_by_id(team_id, resource_id)
                if resource is None:
                    raise ResourceNotFoundError(team_id, resource_id)
                deleted_at = now()
                changed = resource.mark_deleted(deleted_at)
                if changed:
                    await uow.resources.mark_deleted(team_id, resource_id, deleted_at)
            return resource, changed

        resource, changed = await retry_on_conflict(
            attempt, self._transaction_attempts, self._logger
        )
        if changed:
            self._logger.info("Ресурс удален", team_id=team_id, resource_id=resource_id)
        return resource
