"""
Сценарные тесты командного слоя: полная сборка приложения через
bootstrap_app, публикация статуса после каждой изменяющей команды.
"""

import pytest

from resource_queue import bootstrap_app
from resource_queue.commands import ResourceQueueCommands
from resource_queue.settings import Settings
from resource_queue.shared_kernel import (
    BookingNotFoundError,
    DuplicateResourceNameError,
    ResourceNotFoundError,
)
from resource_queue.status.infrastructure import RecordingTopicSink


class FailingTopicSink:
    async def set_topic(self, channel: str, text: str) -> None:
        raise ConnectionError("platform unavailable")


@pytest.fixture
def sink() -> RecordingTopicSink:
    return RecordingTopicSink()


def build_commands(sink, **settings) -> ResourceQueueCommands:
    app = bootstrap_app(Settings(**settings), sink=sink, configure_logs=False)
    return app["commands"]


@pytest.fixture
def commands(sink: RecordingTopicSink) -> ResourceQueueCommands:
    return build_commands(sink)


class TestResourceQueueCommands:
    """Тесты для ResourceQueueCommands."""

    async def test_printer_scenario_publishes_status(
        self, commands: ResourceQueueCommands, sink: RecordingTopicSink, team_id: str
    ):
        await commands.set_publishing_channel(team_id, "C1")
        await commands.create_resource(team_id, "Printer")
        assert sink.topics["C1"] == "Printer - free"

        receipt = await commands.book_resource(team_id, "A", "Printer")
        assert receipt.position == 0
        assert sink.topics["C1"] == "Printer - <@A>"

        receipt = await commands.book_resource(team_id, "B", "Printer")
        assert receipt.position == 1
        assert [b.user_id for b in receipt.queue_before] == ["A"]
        assert sink.topics["C1"] == "Printer - <@B> → <@A>"

        resolution = await commands.resolve_active_booking(team_id, "Printer")
        assert resolution.resolved.user_id == "A"
        assert resolution.promoted.user_id == "B"
        assert sink.topics["C1"] == "Printer - <@B>"

        resolution = await commands.resolve_active_booking(team_id, "Printer")
        assert resolution.resolved.user_id == "B"
        assert resolution.promoted is None
        assert sink.topics["C1"] == "Printer - free"

        with pytest.raises(BookingNotFoundError):
            await commands.resolve_active_booking(team_id, "Printer")

    async def test_unpublishing_stops_status_updates(
        self, commands: ResourceQueueCommands, sink: RecordingTopicSink, team_id: str
    ):
        await commands.set_publishing_channel(team_id, "C1")
        await commands.create_resource(team_id, "Printer")
        await commands.set_publishing_channel(team_id, None)
        sent = len(sink.history)

        await commands.book_resource(team_id, "A", "Printer")
        await commands.resolve_active_booking(team_id, "Printer")

        assert len(sink.history) == sent

    async def test_delete_resource(
        self, commands: ResourceQueueCommands, sink: RecordingTopicSink, team_id: str
    ):
        await commands.set_publishing_channel(team_id, "C1")
        printer = await commands.create_resource(team_id, "Printer")
        await commands.create_resource(team_id, "Scanner")

        deleted = await commands.delete_resource(team_id, printer.id)
        again = await commands.delete_resource(team_id, printer.id)

        assert deleted.is_deleted
        assert again.deleted_at == deleted.deleted_at
        assert sink.topics["C1"] == "Scanner - free"
        with pytest.raises(ResourceNotFoundError):
            await commands.find_resource_by_name(team_id, "Printer")

    async def test_strict_names_reject_duplicates(
        self, commands: ResourceQueueCommands, team_id: str
    ):
        await commands.create_resource(team_id, "Printer")

        with pytest.raises(DuplicateResourceNameError):
            await commands.create_resource(team_id, "Printer")

    async def test_advisory_names_allow_duplicates(
        self, sink: RecordingTopicSink, team_id: str
    ):
        commands = build_commands(sink, strict_resource_names=False)

        await commands.create_resource(team_id, "Printer")
        await commands.create_resource(team_id, "Printer")

        listed = await commands.list_resources_with_bookings(team_id)
        assert [item.resource.name for item in listed] == ["Printer", "Printer"]

    async def test_unknown_resource_name(
        self, commands: ResourceQueueCommands, team_id: str
    ):
        with pytest.raises(ResourceNotFoundError):
            await commands.book_resource(team_id, "A", "Missing")
        with pytest.raises(ResourceNotFoundError):
            await commands.resolve_active_booking(team_id, "Missing")

    async def test_list_resources_with_bookings(
        self, commands: ResourceQueueCommands, team_id: str
    ):
        await commands.create_resource(team_id, "Printer")
        await commands.create_resource(team_id, "Scanner")
        await commands.book_resource(team_id, "A", "Printer")
        await commands.book_resource(team_id, "B", "Printer")

        listed = {
            item.resource.name: item.queue
            for item in await commands.list_resources_with_bookings(team_id)
        }

        assert listed["Printer"].active.user_id == "A"
        assert [b.user_id for b in listed["Printer"].pending] == ["B"]
        assert listed["Scanner"].is_free

    async def test_commands_bootstrap_team(
        self, commands: ResourceQueueCommands, team_id: str
    ):
        await commands.create_resource(team_id, "Printer")

        team = await commands.teams.get(team_id)
        assert team.id == team_id
        assert team.publishing_channel is None

    async def test_failing_sink_does_not_fail_command(self, team_id: str):
        commands = build_commands(FailingTopicSink())
        await commands.set_publishing_channel(team_id, "C1")

        resource = await commands.create_resource(team_id, "Printer")
        receipt = await commands.book_resource(team_id, "A", "Printer")

        assert resource.name == "Printer"
        assert receipt.booking.is_active
