import uuid

import pytest

from app.core.errors import NotFound, Unauthenticated, Unauthorized
from app.domains.access.entities import Role
from app.domains.access.services import AccessRegistry, AccessRequestFlow
from app.domains.documents.services import DocumentService
from app.domains.invitations.services import InvitationLifecycle
from app.domains.presence.services import PresenceTracker

pytestmark = pytest.mark.asyncio


@pytest.fixture()
def documents(session, clock):
    return DocumentService(session, clock)


async def test_create_requires_owner(documents):
    with pytest.raises(Unauthenticated):
        await documents.create(None, "Plan")


async def test_get_respects_read_access(documents, session, clock):
    doc = await documents.create("owner-1", "Plan")

    assert (await documents.get(doc.uuid, "owner-1")).title == "Plan"
    assert await documents.get(doc.uuid, "bob") is None
    assert await documents.get(uuid.uuid4(), "owner-1") is None

    await AccessRegistry(session, clock).grant_access(doc.uuid, "owner-1", "bob", Role.VIEWER)
    assert await documents.get(doc.uuid, "bob") is not None


async def test_archive_and_restore(documents, clock):
    doc = await documents.create("owner-1", "Plan")

    archived = await documents.archive(doc.uuid, "owner-1")
    assert archived.is_archived
    assert [item.uuid for item in await documents.list_archived("owner-1")] == [doc.uuid]
    assert await documents.list_active("owner-1") == []

    clock.advance(minutes=1)
    restored = await documents.restore(doc.uuid, "owner-1")
    assert not restored.is_archived
    assert restored.updated_at == clock.now


async def test_only_owner_changes_document(documents):
    doc = await documents.create("owner-1", "Plan")

    with pytest.raises(Unauthorized):
        await documents.archive(doc.uuid, "bob")
    with pytest.raises(Unauthorized):
        await documents.set_published(doc.uuid, "bob", True)
    with pytest.raises(Unauthenticated):
        await documents.remove(doc.uuid, None)
    with pytest.raises(NotFound):
        await documents.restore(uuid.uuid4(), "owner-1")


async def test_list_active_newest_first(documents, clock):
    first = await documents.create("owner-1", "One")
    clock.advance(seconds=1)
    second = await documents.create("owner-1", "Two")
    await documents.create("owner-2", "Foreign")

    assert [item.uuid for item in await documents.list_active("owner-1")] == [second.uuid, first.uuid]
    assert await documents.list_active(None) == []


async def test_remove_deletes_related_rows(documents, session, clock):
    doc = await documents.create("owner-1", "Plan")
    registry = AccessRegistry(session, clock)
    await registry.grant_access(doc.uuid, "owner-1", "bob", Role.EDITOR)
    await InvitationLifecycle(session, clock, registry).create(doc.uuid, "owner-1", "carol@example.com", Role.VIEWER)
    await AccessRequestFlow(session, clock, registry).request(doc.uuid, "dave")
    tracker = PresenceTracker(session, clock)
    await tracker.heartbeat(doc.uuid, "bob", "Bob", "")

    await documents.remove(doc.uuid, "owner-1")

    assert await documents.get(doc.uuid, "owner-1") is None
    assert await registry.list_shared_with("bob") == []
    assert await InvitationLifecycle(session, clock, registry).list_actionable("carol@example.com") == []
    assert await tracker.list_live(doc.uuid) == []
