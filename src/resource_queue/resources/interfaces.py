"""
Интерфейсы (порты) для контекста ресурсов.
"""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional, Protocol

from ..shared_kernel import EntityId
from .domain import Resource


class IResourceRepository(Protocol):
    """Интерфейс репозитория ресурсов."""

    async def add(self, team_id: EntityId, name: str) -> Resource: ...
    async def get_by_id(
        self, team_id: EntityId, resource_id: EntityId
    ) -> Optional[Resource]: ...
    async def list_active(self, team_id: EntityId) -> List[Resource]: ...
    async def find_active_by_name(
        self, team_id: EntityId, name: str
    ) -> List[Resource]: ...
    async def mark_deleted(
        self, team_id: EntityId, resource_id: EntityId, at: datetime
    ) -> None: ...
