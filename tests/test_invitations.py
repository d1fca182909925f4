import uuid
from datetime import timedelta

import pytest
import pytest_asyncio

from app.core.errors import Conflict, Expired, NotFound, Unauthenticated, Unauthorized
from app.db.repositories.invitation_repository import InvitationRepository
from app.domains.access.entities import Role
from app.domains.access.services import AccessRegistry
from app.domains.documents.services import DocumentService
from app.domains.invitations.entities import InvitationStatus
from app.domains.invitations.services import InvitationLifecycle

pytestmark = pytest.mark.asyncio


@pytest.fixture()
def registry(session, clock):
    return AccessRegistry(session, clock)


@pytest.fixture()
def invitations(session, clock, registry):
    return InvitationLifecycle(session, clock, registry, ttl=timedelta(days=7))


@pytest_asyncio.fixture()
async def document(session, clock, registry):
    return await DocumentService(session, clock, registry).create("owner-1", "Plan")


async def test_create_sets_pending_and_expiry(invitations, document, clock):
    invitation = await invitations.create(document.uuid, "owner-1", "Bob@Example.com", Role.EDITOR)

    assert invitation.status == InvitationStatus.PENDING
    assert invitation.invited_email == "bob@example.com"
    assert invitation.expires_at == clock.now + timedelta(days=7)


async def test_create_checks_caller(invitations, document):
    with pytest.raises(Unauthenticated):
        await invitations.create(document.uuid, None, "bob@example.com", Role.VIEWER)
    with pytest.raises(NotFound):
        await invitations.create(uuid.uuid4(), "owner-1", "bob@example.com", Role.VIEWER)
    with pytest.raises(Unauthorized):
        await invitations.create(document.uuid, "mallory", "bob@example.com", Role.VIEWER)


async def test_duplicate_pending_invitation_conflicts(invitations, document):
    await invitations.create(document.uuid, "owner-1", "bob@example.com", Role.VIEWER)

    with pytest.raises(Conflict):
        await invitations.create(document.uuid, "owner-1", "BOB@example.com", Role.EDITOR)

    assert len(await invitations.list_for_document(document.uuid, "owner-1")) == 1


async def test_reinvite_after_decline(invitations, document):
    first = await invitations.create(document.uuid, "owner-1", "bob@example.com", Role.VIEWER)
    await invitations.decline(first.uuid, "bob")

    second = await invitations.create(document.uuid, "owner-1", "bob@example.com", Role.VIEWER)

    assert second.uuid != first.uuid
    assert second.status == InvitationStatus.PENDING


async def test_accept_grants_invited_role(invitations, registry, document):
    invitation = await invitations.create(document.uuid, "owner-1", "bob@example.com", Role.EDITOR)

    grant = await invitations.accept(invitation.uuid, "bob")

    assert grant.role == Role.EDITOR
    assert grant.invited_by == "owner-1"
    assert await registry.can_write(document.uuid, "bob")
    listed = await invitations.list_for_document(document.uuid, "owner-1")
    assert listed[0].status == InvitationStatus.ACCEPTED


async def test_accept_twice_conflicts(invitations, registry, document):
    invitation = await invitations.create(document.uuid, "owner-1", "bob@example.com", Role.VIEWER)
    await invitations.accept(invitation.uuid, "bob")

    with pytest.raises(Conflict):
        await invitations.accept(invitation.uuid, "bob")

    assert len(await registry.list_grants(document.uuid, "owner-1")) == 1


async def test_accept_keeps_existing_role(invitations, registry, document):
    await registry.grant_access(document.uuid, "owner-1", "bob", Role.VIEWER)
    invitation = await invitations.create(document.uuid, "owner-1", "bob@example.com", Role.EDITOR)

    grant = await invitations.accept(invitation.uuid, "bob")

    assert grant.role == Role.VIEWER
    assert len(await registry.list_grants(document.uuid, "owner-1")) == 1


async def test_accept_requires_identity(invitations, document):
    invitation = await invitations.create(document.uuid, "owner-1", "bob@example.com", Role.VIEWER)

    with pytest.raises(Unauthenticated):
        await invitations.accept(invitation.uuid, None)
    with pytest.raises(NotFound):
        await invitations.accept(uuid.uuid4(), "bob")


async def test_expired_invitation_cannot_be_accepted(invitations, registry, document, clock):
    invitation = await invitations.create(document.uuid, "owner-1", "bob@example.com", Role.EDITOR)
    clock.advance(days=8)

    with pytest.raises(Expired):
        await invitations.accept(invitation.uuid, "bob")

    assert not await registry.can_read(document.uuid, "bob")
    listed = await invitations.list_for_document(document.uuid, "owner-1")
    assert listed[0].status == InvitationStatus.PENDING


async def test_invitation_expires_exactly_at_ttl(invitations, document, clock):
    invitation = await invitations.create(document.uuid, "owner-1", "bob@example.com", Role.VIEWER)
    clock.advance(days=7)

    assert await invitations.list_actionable("bob@example.com") == []
    with pytest.raises(Expired):
        await invitations.accept(invitation.uuid, "bob")


async def test_expired_invitation_can_be_declined(invitations, document, clock):
    invitation = await invitations.create(document.uuid, "owner-1", "bob@example.com", Role.VIEWER)
    clock.advance(days=30)

    declined = await invitations.decline(invitation.uuid, "bob")

    assert declined.status == InvitationStatus.DECLINED


async def test_decline_does_not_grant(invitations, registry, document):
    invitation = await invitations.create(document.uuid, "owner-1", "bob@example.com", Role.EDITOR)

    await invitations.decline(invitation.uuid, "bob")

    assert not await registry.can_read(document.uuid, "bob")
    with pytest.raises(Conflict):
        await invitations.accept(invitation.uuid, "bob")
    with pytest.raises(Conflict):
        await invitations.decline(invitation.uuid, "bob")


async def test_decline_requires_identity(invitations, document):
    invitation = await invitations.create(document.uuid, "owner-1", "bob@example.com", Role.VIEWER)

    with pytest.raises(Unauthenticated):
        await invitations.decline(invitation.uuid, None)


async def test_list_actionable_filters_by_status_and_expiry(invitations, session, clock):
    documents = DocumentService(session, clock)
    first = await documents.create("owner-1", "One")
    second = await documents.create("owner-1", "Two")
    third = await documents.create("owner-1", "Three")

    stale = await invitations.create(first.uuid, "owner-1", "bob@example.com", Role.VIEWER)
    clock.advance(days=6)
    fresh = await invitations.create(second.uuid, "owner-1", "bob@example.com", Role.VIEWER)
    declined = await invitations.create(third.uuid, "owner-1", "bob@example.com", Role.VIEWER)
    await invitations.decline(declined.uuid, "bob")
    clock.advance(days=2)

    actionable = await invitations.list_actionable("BOB@example.com")

    assert [item.uuid for item in actionable] == [fresh.uuid]
    assert stale.uuid not in [item.uuid for item in actionable]
    assert await invitations.list_actionable("") == []


async def test_list_for_document_only_for_owner(invitations, document):
    await invitations.create(document.uuid, "owner-1", "bob@example.com", Role.VIEWER)

    assert await invitations.list_for_document(document.uuid, "bob") == []
    assert await invitations.list_for_document(document.uuid, None) == []
    assert await invitations.list_for_document(uuid.uuid4(), "owner-1") == []


async def test_delete_by_owner_in_any_status(invitations, document):
    invitation = await invitations.create(document.uuid, "owner-1", "bob@example.com", Role.VIEWER)
    await invitations.accept(invitation.uuid, "bob")

    with pytest.raises(Unauthorized):
        await invitations.delete(invitation.uuid, "bob")

    await invitations.delete(invitation.uuid, "owner-1")

    assert await invitations.list_for_document(document.uuid, "owner-1") == []
    with pytest.raises(NotFound):
        await invitations.delete(invitation.uuid, "owner-1")


async def test_transition_applies_once(invitations, session, document, clock):
    invitation = await invitations.create(document.uuid, "owner-1", "bob@example.com", Role.VIEWER)
    repository = InvitationRepository(session)

    moved = await repository.transition(
        invitation.uuid, InvitationStatus.PENDING, InvitationStatus.ACCEPTED, updated_at=clock.now
    )
    moved_again = await repository.transition(
        invitation.uuid, InvitationStatus.PENDING, InvitationStatus.DECLINED, updated_at=clock.now
    )

    assert moved
    assert not moved_again


async def test_concurrent_duplicate_invitation_conflicts(invitations, document, monkeypatch):
    await invitations.create(document.uuid, "owner-1", "bob@example.com", Role.VIEWER)

    async def no_pending(*args, **kwargs):
        return None

    monkeypatch.setattr(invitations.invitation_repository, "get_pending", no_pending)

    with pytest.raises(Conflict):
        await invitations.create(document.uuid, "owner-1", "bob@example.com", Role.EDITOR)

    listed = await invitations.list_for_document(document.uuid, "owner-1")
    assert [item.role for item in listed] == [Role.VIEWER]


async def test_concurrent_accept_grants_once(invitations, registry, document, monkeypatch):
    invitation = await invitations.create(document.uuid, "owner-1", "bob@example.com", Role.EDITOR)
    await invitations.accept(invitation.uuid, "bob")

    # Второй вызов видит приглашение еще в состоянии pending
    async def stale_lookup(*args, **kwargs):
        return invitation

    monkeypatch.setattr(invitations.invitation_repository, "get_by_uuid", stale_lookup)

    with pytest.raises(Conflict):
        await invitations.accept(invitation.uuid, "carol")

    grants = await registry.list_grants(document.uuid, "owner-1")
    assert [grant.user_id for grant in grants] == ["bob"]
