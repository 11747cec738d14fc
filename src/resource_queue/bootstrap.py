from typing import Any, Dict, Optional

from .bookings.application import BookingQueue
from .bookings.domain import BookingQueued, BookingResolved
from .commands import ResourceQueueCommands
from .logging_config import configure_logging
from .resources.application import ResourceRegistry
from .resources.domain import ResourceCreated, ResourceDeleted
from .settings import Settings, get_settings
from .shared_kernel import InMemoryEventBus
from .status.application import StatusPublisher
from .status.infrastructure import LoggingTopicSink
from .status.interfaces import ITopicSink
from .storage.infrastructure import InMemoryDocumentStore, JsonFileDocumentStore
from .storage.interfaces import IDocumentStore
from .teams.application import TeamDirectory
from .teams.domain import PublishingChannelChanged

# События, после которых статус ресурсов команды публикуется заново
STATUS_EVENTS = (
    ResourceCreated,
    ResourceDeleted,
    BookingQueued,
    BookingResolved,
    PublishingChannelChanged,
)


def create_store(settings: Settings) -> IDocumentStore:
    """Создает документное хранилище по настройкам."""
    if settings.storage_backend == "json":
        return JsonFileDocumentStore(settings.storage_path)
    return InMemoryDocumentStore()


def bootstrap_app(
    settings: Optional[Settings] = None,
    store: Optional[IDocumentStore] = None,
    sink: Optional[ITopicSink] = None,
    configure_logs: bool = True,
) -> Dict[str, Any]:
    """Создает и настраивает все компоненты приложения."""
    settings = settings or get_settings()
    if configure_logs:
        configure_logging(settings.log_level, settings.log_json)

    # 1. Хранилище и сервисы контекстов
    store = store or create_store(settings)
    teams = TeamDirectory(store)
    resources = ResourceRegistry(store, settings.transaction_max_attempts)
    queue = BookingQueue(store, settings.transaction_max_attempts)

    # 2. Публикация статуса подписывается на события команд
    event_bus = InMemoryEventBus()
    status_publisher = StatusPublisher(
        teams, resources, queue, sink or LoggingTopicSink()
    )
    for event_type in STATUS_EVENTS:
        event_bus.subscribe(event_type, status_publisher.on_queue_changed)

    commands = ResourceQueueCommands(
        teams,
        resources,
        queue,
        event_bus,
        strict_resource_names=settings.strict_resource_names,
    )

    return {
        "settings": settings,
        "store": store,
        "commands": commands,
        "status_publisher": status_publisher,
        "event_bus": event_bus,
    }
