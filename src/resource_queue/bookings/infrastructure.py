"""
Инфраструктурный слой контекста бронирований.

Бронирования команды хранятся в подколлекции ``teams/{team_id}/bookings``.
"""

from datetime import datetime
from typing import List, Optional

from ..resources.infrastructure import DocumentResourceRepository
from ..resources.interfaces import IResourceRepository
from ..shared_kernel import EntityId
from ..storage.infrastructure import DocumentUnitOfWork
from ..storage.interfaces import IDocumentSession, document_path
from . import interfaces as ports
from .domain import Booking


def bookings_collection(team_id: EntityId) -> str:
    return f"teams/{team_id}/bookings"


class DocumentBookingRepository(ports.IBookingRepository):
    """Репозиторий бронирований поверх документного хранилища."""

    def __init__(self, session: IDocumentSession):
        self._session = session

    async def add(self, booking: Booking) -> Booking:
        fields = booking.model_dump(mode="json", exclude={"id", "team_id"})
        booking_id = await self._session.insert(
            bookings_collection(booking.team_id), fields
        )
        return booking.model_copy(update={"id": booking_id})

    async def list_unresolved(
        self, team_id: EntityId, resource_id: Optional[EntityId] = None
    ) -> List[Booking]:
        filters = {"resolved_at": None}
        if resource_id is not None:
            filters["resource_id"] = resource_id
        documents = await self._session.query(bookings_collection(team_id), **filters)
        return [
            Booking.model_validate({**document, "team_id": team_id})
            for document in documents
        ]

    async def mark_started(
        self, team_id: EntityId, booking_id: EntityId, at: datetime
    ) -> None:
        await self._session.update(
            document_path(bookings_collection(team_id), booking_id),
            {"started_at": at.isoformat()},
        )

    async def mark_resolved(
        self, team_id: EntityId, booking_id: EntityId, at: datetime
    ) -> None:
        await self._session.update(
            document_path(bookings_collection(team_id), booking_id),
            {"resolved_at": at.isoformat()},
        )


class BookingUnitOfWork(DocumentUnitOfWork):
    """Единица работы для контекста бронирований."""

    @property
    def bookings(self) -> ports.IBookingRepository:
        return DocumentBookingRepository(self.session)

    @property
    def resources(self) -> IResourceRepository:
        return DocumentResourceRepository(self.session)
