"""
Доменная модель контекста бронирований.

Бронирования образуют журнал, в который записи только добавляются.
Состояние ресурса (свободен, занят, есть очередь) нигде не хранится,
а вычисляется по неразрешенным бронированиям функцией
``derive_queue_state`` - единой для очереди и для публикации статуса.
"""

from datetime import datetime
from enum import Enum
from typing import Iterable, List, Optional

from pydantic import BaseModel

from ..shared_kernel import BusinessRuleValidationException, DomainEvent, EntityId


class Booking(BaseModel):
    """Запрос пользователя на ресурс: ожидающий, активный или разрешенный."""

    id: Optional[EntityId] = None
    team_id: EntityId
    resource_id: EntityId
    user_id: str
    created_at: datetime
    started_at: Optional[datetime] = None
    resolved_at: Optional[datetime] = None

    @property
    def is_resolved(self) -> bool:
        return self.resolved_at is not None

    @property
    def is_active(self) -> bool:
        """Держит ли бронирование ресурс прямо сейчас."""
        return self.started_at is not None and not self.is_resolved

    @property
    def is_pending(self) -> bool:
        """Ожидает ли бронирование освобождения ресурса."""
        return self.started_at is None and not self.is_resolved

    def start(self, at: datetime) -> None:
        """Делает бронирование активным."""
        if self.is_resolved:
            raise BusinessRuleValidationException(
                f"Бронирование {self.id} уже разрешено и не может быть начато"
            )
        if self.started_at is None:
            self.started_at = at

    def resolve(self, at: datetime) -> None:
        """Освобождает ресурс (или снимает запрос из очереди)."""
        if self.is_resolved:
            raise BusinessRuleValidationException(
                f"Бронирование {self.id} уже разрешено"
            )
        self.resolved_at = at

    @classmethod
    def queue(
        cls,
        team_id: EntityId,
        resource_id: EntityId,
        user_id: str,
        at: datetime,
        start: bool,
    ) -> "Booking":
        """Создает новое бронирование; ``start`` - ресурс был свободен."""
        return cls(
            team_id=team_id,
            resource_id=resource_id,
            user_id=user_id,
            created_at=at,
            started_at=at if start else None,
        )


class ResourceStatus(str, Enum):
    """Производное состояние ресурса."""

    FREE = "free"
    ACTIVE = "active"
    QUEUED = "queued"


class QueueState(BaseModel):
    """Очередь ресурса: активное бронирование и ожидающие за ним."""

    resource_id: EntityId
    active: Optional[Booking] = None
    pending: List[Booking] = []

    @property
    def status(self) -> ResourceStatus:
        if self.pending:
            return ResourceStatus.QUEUED
        if self.active is not None:
            return ResourceStatus.ACTIVE
        return ResourceStatus.FREE

    @property
    def is_free(self) -> bool:
        return self.active is None and not self.pending

    @property
    def bookings(self) -> List[Booking]:
        """Все неразрешенные бронирования в порядке очереди."""
        head = [self.active] if self.active is not None else []
        return head + list(self.pending)


def order_by_creation(bookings: Iterable[Booking], newest_first: bool = False) -> List[Booking]:
    """Упорядочивает бронирования по времени создания.

    Сортировка устойчивая: при равном времени сохраняется порядок чтения.
    """
    return sorted(bookings, key=lambda b: b.created_at, reverse=newest_first)


def derive_queue_state(resource_id: EntityId, bookings: Iterable[Booking]) -> QueueState:
    """Вычисляет состояние очереди ресурса по его бронированиям.

    Разрешенные бронирования игнорируются. Начатое бронирование всегда
    стоит во главе очереди, даже если время создания ожидающих меньше;
    ожидающие упорядочены по времени создания.
    """
    unresolved = [
        b for b in bookings if b.resource_id == resource_id and not b.is_resolved
    ]
    ordered = sorted(unresolved, key=lambda b: (b.started_at is None, b.created_at))
    if ordered and ordered[0].is_active:
        return QueueState(resource_id=resource_id, active=ordered[0], pending=ordered[1:])
    return QueueState(resource_id=resource_id, pending=ordered)


class BookingReceipt(BaseModel):
    """Результат постановки в очередь."""

    booking: Booking
    queue_before: List[Booking]

    @property
    def position(self) -> int:
        """Сколько бронирований стояло в очереди перед новым."""
        return len(self.queue_before)


class Resolution(BaseModel):
    """Результат освобождения ресурса."""

    resolved: Booking
    promoted: Optional[Booking] = None


class BookingQueued(DomainEvent):
    """Событие постановки бронирования в очередь."""

    resource_id: EntityId
    booking_id: EntityId
    user_id: str
    position: int


class BookingResolved(DomainEvent):
    """Событие освобождения ресурса."""

    resource_id: EntityId
    booking_id: EntityId
    user_id: str
    promoted_user_id: Optional[str] = None
