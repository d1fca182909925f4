from pydantic import BaseModel, Field, ConfigDict
from typing import Optional, List
import uuid
from datetime import datetime

from app.domains.access.entities import Role


class GrantCreate(BaseModel):
    """Схема для выдачи права на документ"""
    user_id: str = Field(..., min_length=1, max_length=255)
    role: Role = Role.VIEWER


class GrantResponse(BaseModel):
    """Схема для ответа с выданным правом"""
    uuid: uuid.UUID
    document_id: uuid.UUID
    user_id: str
    role: Role
    invited_by: str
    created_at: Optional[datetime] = None
    
    model_config = ConfigDict(from_attributes=True)


class GrantListResponse(BaseModel):
    grants: List[GrantResponse]
    total: int


class PermissionsResponse(BaseModel):
    """Права вызывающего на документ"""
    document_id: uuid.UUID
    can_read: bool
    can_write: bool
    is_owner: bool


class AccessRequestCreate(BaseModel):
    """Схема для запроса доступа"""
    reason: Optional[str] = Field(None, max_length=2000)


class AccessRequestResponse(BaseModel):
    uuid: uuid.UUID
    document_id: uuid.UUID
    user_id: str
    reason: Optional[str] = None
    created_at: Optional[datetime] = None
    
    model_config = ConfigDict(from_attributes=True)


class AccessRequestListResponse(BaseModel):
    requests: List[AccessRequestResponse]
    total: int


class AccessRequestApprove(BaseModel):
    """Роль, с которой одобряется запрос"""
    role: Role = Role.VIEWER
