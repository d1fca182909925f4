from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Optional
import uuid

from app.core.auth import get_current_identity, subject_of
from app.core.db import get_db
from app.core.errors import Unauthenticated
from app.domains.access.schemas import GrantResponse
from app.domains.identity.entities import Identity
from app.domains.invitations.entities import Invitation
from app.domains.invitations.schemas import InvitationCreate, InvitationResponse, InvitationListResponse
from app.domains.invitations.services import InvitationLifecycle

router = APIRouter(tags=["invitations"])


@router.post(
    "/documents/{document_uuid}/invitations",
    response_model=InvitationResponse,
    status_code=status.HTTP_201_CREATED
)
async def create_invitation(
    document_uuid: uuid.UUID,
    invitation_data: InvitationCreate,
    identity: Optional[Identity] = Depends(get_current_identity),
    db: AsyncSession = Depends(get_db)
):
    """Приглашение пользователя по email"""
    invitation = await InvitationLifecycle(db).create(
        document_uuid,
        subject_of(identity),
        invitation_data.email,
        invitation_data.role
    )
    return InvitationResponse.model_validate(invitation)


@router.get("/documents/{document_uuid}/invitations", response_model=InvitationListResponse)
async def list_document_invitations(
    document_uuid: uuid.UUID,
    identity: Optional[Identity] = Depends(get_current_identity),
    db: AsyncSession = Depends(get_db)
):
    invitations = await InvitationLifecycle(db).list_for_document(document_uuid, subject_of(identity))
    return InvitationListResponse(
        invitations=[InvitationResponse.model_validate(item) for item in invitations],
        total=len(invitations)
    )


@router.get("/invitations", response_model=InvitationListResponse)
async def list_my_invitations(
    email: Optional[str] = Query(None),
    identity: Optional[Identity] = Depends(get_current_identity),
    db: AsyncSession = Depends(get_db)
):
    """Актуальные приглашения на email, подтвержденный провайдером"""
    if identity is None:
        raise Unauthenticated()
    
    # Чужой email в параметре дает пустой список
    own_email = Invitation.normalize_email(identity.email) if identity.email else None
    if email is not None and Invitation.normalize_email(email) != own_email:
        return InvitationListResponse(invitations=[], total=0)
    
    invitations = await InvitationLifecycle(db).list_actionable(own_email)
    return InvitationListResponse(
        invitations=[InvitationResponse.model_validate(item) for item in invitations],
        total=len(invitations)
    )


@router.post("/invitations/{invitation_uuid}/accept", response_model=GrantResponse)
async def accept_invitation(
    invitation_uuid: uuid.UUID,
    identity: Optional[Identity] = Depends(get_current_identity),
    db: AsyncSession = Depends(get_db)
):
    grant = await InvitationLifecycle(db).accept(invitation_uuid, subject_of(identity))
    return GrantResponse.model_validate(grant)


@router.post("/invitations/{invitation_uuid}/decline", response_model=InvitationResponse)
async def decline_invitation(
    invitation_uuid: uuid.UUID,
    identity: Optional[Identity] = Depends(get_current_identity),
    db: AsyncSession = Depends(get_db)
):
    invitation = await InvitationLifecycle(db).decline(invitation_uuid, subject_of(identity))
    return InvitationResponse.model_validate(invitation)


@router.delete("/invitations/{invitation_uuid}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_invitation(
    invitation_uuid: uuid.UUID,
    identity: Optional[Identity] = Depends(get_current_identity),
    db: AsyncSession = Depends(get_db)
):
    await InvitationLifecycle(db).delete(invitation_uuid, subject_of(identity))
