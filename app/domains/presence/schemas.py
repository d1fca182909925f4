from pydantic import BaseModel, Field, ConfigDict
from typing import List
import uuid
from datetime import datetime


class HeartbeatRequest(BaseModel):
    """Отметка присутствия; без имени берется имя из токена"""
    name: str = Field(default="", max_length=255)
    avatar_url: str = Field(default="", max_length=2048)


class PresenceResponse(BaseModel):
    document_id: uuid.UUID
    user_id: str
    name: str
    avatar_url: str
    last_seen: datetime
    
    model_config = ConfigDict(from_attributes=True)


class ActiveUsersResponse(BaseModel):
    """Схема для ответа с активными пользователями"""
    document_id: uuid.UUID
    active_users: List[PresenceResponse]
    total_active: int
