import uuid
from datetime import timedelta

import pytest
import pytest_asyncio

from app.core.errors import NotFound, Unauthenticated
from app.domains.documents.services import DocumentService
from app.domains.presence.services import PresenceTracker

pytestmark = pytest.mark.asyncio


@pytest.fixture()
def tracker(session, clock):
    return PresenceTracker(
        session,
        clock,
        window=timedelta(seconds=30),
        retention=timedelta(hours=1)
    )


@pytest_asyncio.fixture()
async def document(session, clock):
    return await DocumentService(session, clock).create("owner-1", "Plan")


async def test_heartbeat_makes_user_live(tracker, document):
    await tracker.heartbeat(document.uuid, "bob", "Bob", "https://img/bob.png")

    live = await tracker.list_live(document.uuid)

    assert [(record.user_id, record.name) for record in live] == [("bob", "Bob")]


async def test_heartbeat_upserts_single_record(tracker, document, clock):
    await tracker.heartbeat(document.uuid, "bob", "Bob", "")
    clock.advance(seconds=10)
    await tracker.heartbeat(document.uuid, "bob", "Robert", "https://img/r.png")

    live = await tracker.list_live(document.uuid)

    assert len(live) == 1
    assert live[0].name == "Robert"
    assert live[0].last_seen == clock.now


async def test_record_goes_stale_after_window(tracker, document, clock):
    await tracker.heartbeat(document.uuid, "bob", "Bob", "")

    clock.advance(seconds=29, milliseconds=999)
    assert len(await tracker.list_live(document.uuid)) == 1

    clock.advance(milliseconds=2)
    assert await tracker.list_live(document.uuid) == []


async def test_record_is_stale_exactly_at_window(tracker, document, clock):
    await tracker.heartbeat(document.uuid, "bob", "Bob", "")
    clock.advance(seconds=30)

    assert await tracker.list_live(document.uuid) == []


async def test_heartbeat_revives_stale_record(tracker, document, clock):
    await tracker.heartbeat(document.uuid, "bob", "Bob", "")
    clock.advance(minutes=5)
    await tracker.heartbeat(document.uuid, "bob", "Bob", "")

    assert len(await tracker.list_live(document.uuid)) == 1


async def test_presence_is_per_document(tracker, document, session, clock):
    other = await DocumentService(session, clock).create("owner-1", "Other")
    await tracker.heartbeat(document.uuid, "bob", "Bob", "")
    await tracker.heartbeat(other.uuid, "carol", "Carol", "")

    assert [record.user_id for record in await tracker.list_live(document.uuid)] == ["bob"]
    assert await tracker.list_live(uuid.uuid4()) == []


async def test_heartbeat_requires_identity(tracker, document):
    with pytest.raises(Unauthenticated):
        await tracker.heartbeat(document.uuid, None, "Anon", "")


async def test_purge_stale_removes_old_records(tracker, document, clock):
    await tracker.heartbeat(document.uuid, "bob", "Bob", "")
    clock.advance(minutes=50)
    await tracker.heartbeat(document.uuid, "carol", "Carol", "")
    clock.advance(minutes=20)

    removed = await tracker.purge_stale()

    assert removed == 1
    await tracker.heartbeat(document.uuid, "carol", "Carol", "")
    assert [record.user_id for record in await tracker.list_live(document.uuid)] == ["carol"]


async def test_heartbeat_on_missing_document(tracker):
    ghost = uuid.uuid4()

    with pytest.raises(NotFound):
        await tracker.heartbeat(ghost, "bob", "Bob", "")

    assert await tracker.list_live(ghost) == []


async def test_heartbeat_falls_back_to_update_when_insert_races(tracker, document, clock, monkeypatch):
    await tracker.heartbeat(document.uuid, "bob", "Bob", "")
    clock.advance(seconds=5)

    real_touch = tracker.presence_repository.touch
    calls = []

    async def touch_missing_once(*args, **kwargs):
        calls.append(args)
        if len(calls) == 1:
            return False
        return await real_touch(*args, **kwargs)

    monkeypatch.setattr(tracker.presence_repository, "touch", touch_missing_once)

    await tracker.heartbeat(document.uuid, "bob", "Robert", "")

    live = await tracker.list_live(document.uuid)
    assert len(calls) == 2
    assert [(record.name, record.last_seen) for record in live] == [("Robert", clock.now)]
