"""
Интерфейсы (порты) для контекста команд.
"""

from __future__ import annotations

from typing import Optional, Protocol

from ..shared_kernel import EntityId
from .domain import Team


class ITeamRepository(Protocol):
    """Интерфейс репозитория команд."""

    async def get(self, team_id: EntityId) -> Optional[Team]: ...
    async def add(self, team: Team) -> None: ...
    async def update_publishing_channel(
        self, team_id: EntityId, channel: Optional[str]
    ) -> None: ...
