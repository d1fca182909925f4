from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Optional
import uuid

from app.core.auth import get_current_identity, subject_of
from app.core.db import get_db
from app.domains.access.schemas import (
    GrantCreate, GrantResponse, GrantListResponse,
    AccessRequestCreate, AccessRequestResponse, AccessRequestListResponse,
    AccessRequestApprove
)
from app.domains.access.services import AccessRegistry, AccessRequestFlow
from app.domains.identity.entities import Identity

router = APIRouter(tags=["access"])


@router.post("/documents/{document_uuid}/access", response_model=GrantResponse)
async def grant_access(
    document_uuid: uuid.UUID,
    grant_data: GrantCreate,
    identity: Optional[Identity] = Depends(get_current_identity),
    db: AsyncSession = Depends(get_db)
):
    """Выдача права на документ владельцем"""
    grant = await AccessRegistry(db).grant_access(
        document_uuid,
        subject_of(identity),
        grant_data.user_id,
        grant_data.role
    )
    return GrantResponse.model_validate(grant)


@router.get("/documents/{document_uuid}/access", response_model=GrantListResponse)
async def list_grants(
    document_uuid: uuid.UUID,
    identity: Optional[Identity] = Depends(get_current_identity),
    db: AsyncSession = Depends(get_db)
):
    grants = await AccessRegistry(db).list_grants(document_uuid, subject_of(identity))
    return GrantListResponse(
        grants=[GrantResponse.model_validate(grant) for grant in grants],
        total=len(grants)
    )


@router.delete("/documents/{document_uuid}/access/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
async def revoke_access(
    document_uuid: uuid.UUID,
    user_id: str,
    identity: Optional[Identity] = Depends(get_current_identity),
    db: AsyncSession = Depends(get_db)
):
    await AccessRegistry(db).revoke_access(document_uuid, subject_of(identity), user_id)


@router.get("/access/shared-with-me", response_model=GrantListResponse)
async def list_shared_with_me(
    identity: Optional[Identity] = Depends(get_current_identity),
    db: AsyncSession = Depends(get_db)
):
    """Документы, к которым пользователю выдан доступ"""
    grants = await AccessRegistry(db).list_shared_with(subject_of(identity))
    return GrantListResponse(
        grants=[GrantResponse.model_validate(grant) for grant in grants],
        total=len(grants)
    )


@router.post("/documents/{document_uuid}/access-requests", response_model=AccessRequestResponse)
async def request_access(
    document_uuid: uuid.UUID,
    request_data: AccessRequestCreate,
    identity: Optional[Identity] = Depends(get_current_identity),
    db: AsyncSession = Depends(get_db)
):
    """Запрос доступа к документу"""
    access_request = await AccessRequestFlow(db).request(
        document_uuid,
        subject_of(identity),
        request_data.reason
    )
    return AccessRequestResponse.model_validate(access_request)


@router.get("/access-requests", response_model=AccessRequestListResponse)
async def list_access_requests(
    identity: Optional[Identity] = Depends(get_current_identity),
    db: AsyncSession = Depends(get_db)
):
    """Входящие запросы ко всем документам владельца"""
    requests = await AccessRequestFlow(db).list_for_owner(subject_of(identity))
    return AccessRequestListResponse(
        requests=[AccessRequestResponse.model_validate(item) for item in requests],
        total=len(requests)
    )


@router.post("/access-requests/{request_uuid}/approve", response_model=GrantResponse)
async def approve_access_request(
    request_uuid: uuid.UUID,
    approve_data: AccessRequestApprove,
    identity: Optional[Identity] = Depends(get_current_identity),
    db: AsyncSession = Depends(get_db)
):
    grant = await AccessRequestFlow(db).approve(request_uuid, subject_of(identity), approve_data.role)
    return GrantResponse.model_validate(grant)


@router.post("/access-requests/{request_uuid}/reject", status_code=status.HTTP_204_NO_CONTENT)
async def reject_access_request(
    request_uuid: uuid.UUID,
    identity: Optional[Identity] = Depends(get_current_identity),
    db: AsyncSession = Depends(get_db)
):
    await AccessRequestFlow(db).reject(request_uuid, subject_of(identity))
