"""
Прикладной слой контекста бронирований.

Постановка в очередь и освобождение ресурса выполняются в транзакции,
ключом которой служит ресурс: чтение очереди и запись по ее результату
не пересекаются с другими операциями над тем же ресурсом.
"""

from datetime import datetime
from typing import List, Optional

from ..resources.domain import Resource, resource_lock_key
from ..shared_kernel import (
    BookingNotFoundError,
    EntityId,
    ILogger,
    ResourceNotFoundError,
    StdLogger,
    retry_on_conflict,
)
from ..shared_kernel import now as current_time
from ..storage.interfaces import IDocumentStore
from .domain import (
    Booking,
    BookingReceipt,
    QueueState,
    Resolution,
    derive_queue_state,
    order_by_creation,
)
from .infrastructure import BookingUnitOfWork, DocumentBookingRepository


class BookingQueue:
    """Сервис очереди бронирований ресурса."""

    def __init__(
        self,
        store: IDocumentStore,
        transaction_attempts: int = 3,
        logger: Optional[ILogger] = None,
    ):
        self._store = store
        self._repository = DocumentBookingRepository(store)
        self._transaction_attempts = transaction_attempts
        self._logger = logger or StdLogger(__name__)

    async def list_unresolved(
        self, team_id: EntityId, resource_id: Optional[EntityId] = None
    ) -> List[Booking]:
        """Возвращает неразрешенные бронирования команды или одного ресурса."""
        bookings = await self._repository.list_unresolved(team_id, resource_id)
        return order_by_creation(bookings)

    async def queue_state(self, team_id: EntityId, resource_id: EntityId) -> QueueState:
        bookings = await self._repository.list_unresolved(team_id, resource_id)
        return derive_queue_state(resource_id, bookings)

    async def enqueue(
        self,
        team_id: EntityId,
        user_id: str,
        resource: Resource,
        now: Optional[datetime] = None,
    ) -> BookingReceipt:
        """Ставит пользователя в очередь на ресурс.

        Если очередь пуста, бронирование сразу становится активным.
        """
        if resource.is_deleted:
            raise ResourceNotFoundError(team_id, resource.id)

        async def attempt() -> BookingReceipt:
            async with BookingUnitOfWork(
                self._store, resource_lock_key(team_id, resource.id)
            ) as uow:
                # Удаление ресурса берет тот же ключ транзакции
                current = await uow.resources.get_by_id(team_id, resource.id)
                if current is None or current.is_deleted:
                    raise ResourceNotFoundError(team_id, resource.id)
                state = derive_queue_state(
                    resource.id, await uow.bookings.list_unresolved(team_id, resource.id)
                )
                # Новый запрос не может оказаться раньше уже стоящих в очереди
                at = max(
                    [now or current_time()] + [b.created_at for b in state.bookings]
                )
                booking = Booking.queue(
                    team_id,
                    resource.id,
                    user_id,
                    at=at,
                    start=state.is_free,
                )
                booking = await uow.bookings.add(booking)
            return BookingReceipt(booking=booking, queue_before=state.bookings)

        receipt = await retry_on_conflict(
            attempt, self._transaction_attempts, self._logger
        )
        self._logger.info(
            "Бронирование поставлено в очередь",
            team_id=team_id,
            resource_id=resource.id,
            user_id=user_id,
            position=receipt.position,
        )
        return receipt

    async def book(
        self,
        team_id: EntityId,
        user_id: str,
        resource: Resource,
        now: Optional[datetime] = None,
    ) -> List[Booking]:
        """Ставит пользователя в очередь и возвращает очередь до постановки."""
        receipt = await self.enqueue(team_id, user_id, resource, now)
        return receipt.queue_before

    async def resolve_and_promote(
        self,
        team_id: EntityId,
        resource: Resource,
        now: Optional[datetime] = None,
    ) -> Resolution:
        """Освобождает ресурс и передает его следующему в очереди."""

        async def attempt() -> Resolution:
            async with BookingUnitOfWork(
                self._store, resource_lock_key(team_id, resource.id)
            ) as uow:
                ordered = derive_queue_state(
                    resource.id, await uow.bookings.list_unresolved(team_id, resource.id)
                ).bookings
                if not ordered:
                    raise BookingNotFoundError(team_id, resource.id)

                at = now or current_time()
                resolved = ordered[0]
                resolved.resolve(at)
                await uow.bookings.mark_resolved(team_id, resolved.id, at)

                promoted = None
                if len(ordered) > 1:
                    promoted = ordered[1]
                    promoted.start(at)
                    await uow.bookings.mark_started(team_id, promoted.id, at)
            return Resolution(resolved=resolved, promoted=promoted)

        resolution = await retry_on_conflict(
            attempt, self._transaction_attempts, self._logger
        )
        self._logger.info(
            "Ресурс освобожден",
            team_id=team_id,
            resource_id=resource.id,
            user_id=resolution.resolved.user_id,
            promoted_user_id=resolution.promoted.user_id if resolution.promoted else None,
        )
        return resolution

    async def resolve(
        self,
        team_id: EntityId,
        resource: Resource,
        now: Optional[datetime] = None,
    ) -> Booking:
        """Освобождает ресурс и возвращает разрешенное бронирование."""
        resolution = await self.resolve_and_promote(team_id, resource, now)
        return resolution.resolved
