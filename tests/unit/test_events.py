"""In-process domain event bus."""

import logging

import pytest
from libs.common.events import DomainEvent, EventBus


def _event(name="review.accepted"):
    return DomainEvent(name=name, entity_type="video_review_request", entity_id=1, actor_id=7)


@pytest.mark.asyncio
@pytest.mark.unit
async def test_handlers_receive_named_and_wildcard_events():
    bus = EventBus()
    named, everything = [], []

    async def on_accept(event):
        named.append(event.name)

    async def on_any(event):
        everything.append(event.name)

    bus.subscribe("review.accepted", on_accept)
    bus.subscribe("*", on_any)

    await bus.publish(_event("review.accepted"))
    await bus.publish(_event("review.completed"))

    assert named == ["review.accepted"]
    assert everything == ["review.accepted", "review.completed"]


@pytest.mark.asyncio
@pytest.mark.unit
async def test_failing_handler_is_logged_and_others_still_run(caplog):
    bus = EventBus()
    delivered = []

    async def broken(event):
        raise RuntimeError("notification service down")

    async def healthy(event):
        delivered.append(event.entity_id)

    bus.subscribe("review.accepted", broken)
    bus.subscribe("review.accepted", healthy)

    with caplog.at_level(logging.ERROR):
        await bus.publish(_event())

    assert delivered == [1]
    assert "Event handler broken failed" in caplog.text


@pytest.mark.asyncio
@pytest.mark.unit
async def test_subscribe_is_idempotent_and_unsubscribe_removes():
    bus = EventBus()
    calls = []

    async def handler(event):
        calls.append(event)

    bus.subscribe("*", handler)
    bus.subscribe("*", handler)
    await bus.publish(_event())
    bus.unsubscribe("*", handler)
    await bus.publish(_event())

    assert len(calls) == 1
