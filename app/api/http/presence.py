from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Optional
import uuid

from app.core.auth import get_current_identity, subject_of
from app.core.db import get_db
from app.domains.identity.entities import Identity
from app.domains.presence.schemas import HeartbeatRequest, PresenceResponse, ActiveUsersResponse
from app.domains.presence.services import PresenceTracker

router = APIRouter(prefix="/documents", tags=["presence"])


@router.post("/{document_uuid}/presence", status_code=status.HTTP_204_NO_CONTENT)
async def heartbeat(
    document_uuid: uuid.UUID,
    heartbeat_data: HeartbeatRequest,
    identity: Optional[Identity] = Depends(get_current_identity),
    db: AsyncSession = Depends(get_db)
):
    """Отметка присутствия пользователя в документе"""
    name = heartbeat_data.name
    avatar_url = heartbeat_data.avatar_url
    if identity is not None:
        name = name or identity.name or identity.email or identity.subject
        avatar_url = avatar_url or identity.avatar_url or ""
    
    await PresenceTracker(db).heartbeat(document_uuid, subject_of(identity), name, avatar_url)


@router.get("/{document_uuid}/presence", response_model=ActiveUsersResponse)
async def list_active_users(
    document_uuid: uuid.UUID,
    db: AsyncSession = Depends(get_db)
):
    """Пользователи, активные в документе прямо сейчас"""
    records = await PresenceTracker(db).list_live(document_uuid)
    return ActiveUsersResponse(
        document_id=document_uuid,
        active_users=[PresenceResponse.model_validate(record) for record in records],
        total_active=len(records)
    )
