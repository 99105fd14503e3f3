"""Unit tests for InMemoryEventBus."""

from dataclasses import dataclass

import pytest

from domain.menu.core.events.base import DomainEvent
from domain.menu.core.events.menu_analyzed import MenuAnalyzed
from infrastructure.events.in_memory_bus import InMemoryEventBus


def _event() -> MenuAnalyzed:
    return MenuAnalyzed.create(
        analysis_id="a-1",
        image_hash="0" * 64,
        is_korean_menu=True,
        dish_count=1,
        generated_count=0,
        cost_usd=0.0,
    )


class Recorder:
    def __init__(self):
        self.events = []

    async def handle(self, event):
        self.events.append(event)


@pytest.fixture
def bus():
    return InMemoryEventBus()


class TestInMemoryEventBus:
    @pytest.mark.asyncio
    async def test_publish_to_subscribers(self, bus):
        recorder = Recorder()
        bus.subscribe(MenuAnalyzed, recorder.handle)

        event = _event()
        await bus.publish(event)

        assert recorder.events == [event]

    @pytest.mark.asyncio
    async def test_publish_without_handlers(self, bus):
        await bus.publish(_event())

        assert bus.get_handler_count(MenuAnalyzed) == 0

    @pytest.mark.asyncio
    async def test_base_class_subscribers_receive_subclass_events(self, bus):
        exact, base = Recorder(), Recorder()
        bus.subscribe(DomainEvent, base.handle)
        bus.subscribe(MenuAnalyzed, exact.handle)

        await bus.publish(_event())

        assert len(exact.events) == 1
        assert len(base.events) == 1
        assert bus.get_handler_count(MenuAnalyzed) == 2

    @pytest.mark.asyncio
    async def test_failing_handler_does_not_stop_others(self, bus):
        recorder = Recorder()

        async def failing(event):
            raise RuntimeError("handler bug")

        bus.subscribe(MenuAnalyzed, failing)
        bus.subscribe(MenuAnalyzed, recorder.handle)

        await bus.publish(_event())

        assert len(recorder.events) == 1

    def test_unsubscribe(self, bus):
        recorder = Recorder()
        bus.subscribe(MenuAnalyzed, recorder.handle)

        assert bus.unsubscribe(MenuAnalyzed, recorder.handle) is True
        assert bus.unsubscribe(MenuAnalyzed, recorder.handle) is False
        assert bus.get_handler_count(MenuAnalyzed) == 0

    def test_clear(self, bus):
        bus.subscribe(MenuAnalyzed, Recorder().handle)
        bus.clear()

        assert bus.get_handler_count(MenuAnalyzed) == 0


@dataclass(frozen=True)
class _OtherEvent(DomainEvent):
    pass


@pytest.mark.asyncio
async def test_unrelated_event_types_are_isolated():
    bus = InMemoryEventBus()
    recorder = Recorder()
    bus.subscribe(_OtherEvent, recorder.handle)

    await bus.publish(_event())

    assert recorder.events == []
