"""
Доменная модель контекста статуса.

Строка статуса ресурса: ``"<имя> - <цепочка пользователей>"``, где
пользователи перечислены от самого свежего запроса к текущему владельцу,
либо ``"<имя> - free"``, если ресурс свободен.
"""

from typing import Iterable, List

from ..bookings.domain import Booking, derive_queue_state
from ..resources.domain import Resource

FREE_LABEL = "free"
ARROW = " → "


def mention(user_id: str) -> str:
    """Упоминание пользователя в формате платформы."""
    return f"<@{user_id}>"


def render_status_line(resource: Resource, bookings: Iterable[Booking]) -> str:
    """Строка статуса одного ресурса."""
    state = derive_queue_state(resource.id, bookings)
    newest_first = list(reversed(state.bookings))
    if not newest_first:
        return f"{resource.name} - {FREE_LABEL}"
    chain = ARROW.join(mention(b.user_id) for b in newest_first)
    return f"{resource.name} - {chain}"


def render_status_lines(
    resources: Iterable[Resource], bookings: Iterable[Booking]
) -> List[str]:
    """Строки статуса для всех переданных ресурсов."""
    bookings = list(bookings)
    return [render_status_line(resource, bookings) for resource in resources]
