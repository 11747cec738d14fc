"""
Интерфейсы (порты) для контекста бронирований.
"""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional, Protocol

from ..shared_kernel import EntityId
from .domain import Booking


class IBookingRepository(Protocol):
    """Интерфейс репозитория бронирований."""

    async def add(self, booking: Booking) -> Booking: ...
    async def list_unresolved(
        self, team_id: EntityId, resource_id: Optional[EntityId] = None
    ) -> List[Booking]: ...
    async def mark_started(
        self, team_id: EntityId, booking_id: EntityId, at: datetime
    ) -> None: ...
    async def mark_resolved(
        self, team_id: EntityId, booking_id: EntityId, at: datetime
    ) -> None: ...
