from pydantic import BaseModel, Field, field_validator, ConfigDict
from typing import List
import uuid
from datetime import datetime


class DocumentCreate(BaseModel):
    """Схема для создания документа"""
    title: str = Field(default="Untitled", min_length=1, max_length=255)
    
    @field_validator('title')
    @classmethod
    def validate_title(cls, v):
        if not v.strip():
            raise ValueError('Title cannot be empty')
        return v.strip()


class DocumentResponse(BaseModel):
    """Схема для ответа с данными документа"""
    uuid: uuid.UUID
    owner_id: str
    title: str
    is_archived: bool
    is_published: bool
    created_at: datetime
    updated_at: datetime
    
    model_config = ConfigDict(from_attributes=True)


class DocumentListResponse(BaseModel):
    """Схема для списка документов"""
    documents: List[DocumentResponse]
    total: int
