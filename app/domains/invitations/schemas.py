from pydantic import BaseModel, EmailStr, ConfigDict
from typing import List
import uuid
from datetime import datetime

from app.domains.access.entities import Role
from app.domains.invitations.entities import InvitationStatus


class InvitationCreate(BaseModel):
    """Схема для создания приглашения"""
    email: EmailStr
    role: Role = Role.VIEWER


class InvitationResponse(BaseModel):
    """Схема для ответа с данными приглашения"""
    uuid: uuid.UUID
    document_id: uuid.UUID
    invited_by: str
    invited_email: str
    role: Role
    status: InvitationStatus
    created_at: datetime
    expires_at: datetime
    
    model_config = ConfigDict(from_attributes=True)


class InvitationListResponse(BaseModel):
    invitations: List[InvitationResponse]
    total: int
