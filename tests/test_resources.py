"""
Тесты контекста ресурсов: создание, поиск и мягкое удаление.
"""

import asyncio

import pytest

from resource_queue.resources.application import ResourceRegistry
from resource_queue.shared_kernel import (
    DuplicateResourceNameError,
    ResourceNotFoundError,
)


class TestResourceRegistry:
    """Тесты для ResourceRegistry."""

    async def test_create_and_get(self, registry: ResourceRegistry, team_id: str):
        resource = await registry.create(team_id, "Printer")

        assert resource.id
        assert resource.team_id == team_id
        assert resource.name == "Printer"
        assert not resource.is_deleted
        assert await registry.get(team_id, resource.id) == resource

    async def test_get_unknown_resource(self, registry: ResourceRegistry, team_id: str):
        with pytest.raises(ResourceNotFoundError):
            await registry.get(team_id, "missing")

    async def test_resources_are_scoped_by_team(
        self, registry: ResourceRegistry, team_id: str
    ):
        resource = await registry.create(team_id, "Printer")

        assert await registry.list("T002") == []
        assert await registry.find_by_name("T002", "Printer") is None
        with pytest.raises(ResourceNotFoundError):
            await registry.get("T002", resource.id)

    async def test_list_is_stable(self, registry: ResourceRegistry, team_id: str):
        for name in ["Scanner", "Printer", "Laptop"]:
            await registry.create(team_id, name)

        first = await registry.list(team_id)
        second = await registry.list(team_id)

        assert [r.name for r in first] == ["Laptop", "Printer", "Scanner"]
        assert first == second

    async def test_find_by_name_is_exact(self, registry: ResourceRegistry, team_id: str):
        resource = await registry.create(team_id, "Printer")

        assert await registry.find_by_name(team_id, "Printer") == resource
        assert await registry.find_by_name(team_id, "printer") is None
        assert await registry.find_by_name(team_id, "Print") is None

    async def test_create_does_not_enforce_uniqueness(
        self, registry: ResourceRegistry, team_id: str
    ):
        first = await registry.create(team_id, "Printer")
        await registry.create(team_id, "Printer")

        assert len(await registry.list(team_id)) == 2
        assert await registry.find_by_name(team_id, "Printer") == first

    async def test_delete_hides_resource_from_list_and_search(
        self, registry: ResourceRegistry, team_id: str
    ):
        resource = await registry.create(team_id, "Printer")

        deleted = await registry.delete(team_id, resource.id)

        assert deleted.is_deleted
        assert await registry.list(team_id) == []
        assert await registry.find_by_name(team_id, "Printer") is None
        # По id удаленный ресурс по-прежнему доступен
        fetched = await registry.get(team_id, resource.id)
        assert fetched.name == "Printer"
        assert fetched.is_deleted

    async def test_delete_is_idempotent(self, registry: ResourceRegistry, team_id: str):
        resource = await registry.create(team_id, "Printer")

        first = await registry.delete(team_id, resource.id)
        second = await registry.delete(team_id, resource.id)

        assert first.deleted_at is not None
        assert second.deleted_at == first.deleted_at
        assert (await registry.get(team_id, resource.id)).deleted_at == first.deleted_at

    async def test_delete_unknown_resource(self, registry: ResourceRegistry, team_id: str):
        with pytest.raises(ResourceNotFoundError):
            await registry.delete(team_id, "missing")

    async def test_name_can_be_reused_after_delete(
        self, registry: ResourceRegistry, team_id: str
    ):
        old = await registry.create_unique(team_id, "Printer")
        await registry.delete(team_id, old.id)

        new = await registry.create_unique(team_id, "Printer")

        assert new.id != old.id
        assert await registry.find_by_name(team_id, "Printer") == new


class TestUniqueResourceNames:
    """Тесты строгого создания ресурсов."""

    async def test_create_unique_rejects_duplicate(
        self, registry: ResourceRegistry, team_id: str
    ):
        await registry.create_unique(team_id, "Printer")

        with pytest.raises(DuplicateResourceNameError):
            await registry.create_unique(team_id, "Printer")

    async def test_create_unique_is_case_sensitive(
        self, registry: ResourceRegistry, team_id: str
    ):
        await registry.create_unique(team_id, "Printer")
        await registry.create_unique(team_id, "printer")

        assert len(await registry.list(team_id)) == 2

    async def test_concurrent_create_unique_creates_one(
        self, registry: ResourceRegistry, team_id: str
    ):
        results = await asyncio.gather(
            *(registry.create_unique(team_id, "Printer") for _ in range(5)),
            return_exceptions=True,
        )

        created = [r for r in results if not isinstance(r, Exception)]
        rejected = [r for r in results if isinstance(r, DuplicateResourceNameError)]
        assert len(created) == 1
        assert len(rejected) == 4
        assert len(await registry.list(team_id)) == 1
