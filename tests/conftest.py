"""
Конфигурация тестов для pytest.
Добавляет каталог src в PYTHONPATH и предоставляет общие фикстуры.
"""
import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest

# Добавляем каталог с исходниками в PYTHONPATH
src_dir = str(Path(__file__).parent.parent / "src")
if src_dir not in sys.path:
    sys.path.insert(0, src_dir)

from resource_queue.bookings.application import BookingQueue  # noqa: E402
from resource_queue.resources.application import ResourceRegistry  # noqa: E402
from resource_queue.storage.infrastructure import InMemoryDocumentStore  # noqa: E402
from resource_queue.teams.application import TeamDirectory  # noqa: E402

TEAM_ID = "T001"


@pytest.fixture
def team_id() -> str:
    return TEAM_ID


@pytest.fixture
def store() -> InMemoryDocumentStore:
    return InMemoryDocumentStore()


@pytest.fixture
def teams(store: InMemoryDocumentStore) -> TeamDirectory:
    return TeamDirectory(store)


@pytest.fixture
def registry(store: InMemoryDocumentStore) -> ResourceRegistry:
    return ResourceRegistry(store)


@pytest.fixture
def queue(store: InMemoryDocumentStore) -> BookingQueue:
    return BookingQueue(store)


@pytest.fixture
def clock():
    """Возвращает функцию, выдающую возрастающие моменты времени."""
    start = datetime(2024, 1, 15, 9, 0, tzinfo=timezone.utc)
    ticks = iter(range(10_000))

    def tick() -> datetime:
        return start + timedelta(seconds=next(ticks))

    return tick
