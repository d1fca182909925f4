import uuid
from datetime import datetime
from enum import Enum
from typing import Optional


class Role(str, Enum):
    """Роль соавтора в документе"""
    VIEWER = "viewer"
    EDITOR = "editor"


class AccessGrant:
    """Выданное право пользователя на документ"""
    
    def __init__(
        self,
        uuid: uuid.UUID,
        document_id: uuid.UUID,
        user_id: str,
        role: Role,
        invited_by: str,
        created_at: Optional[datetime] = None
    ):
        self.uuid = uuid
        self.document_id = document_id
        self.user_id = user_id
        self.role = role
        self.invited_by = invited_by
        self.created_at = created_at
    
    def allows_write(self) -> bool:
        return self.role == Role.EDITOR
    
    def __repr__(self) -> str:
        return f"AccessGrant(doc={self.document_id}, user={self.user_id}, role={self.role.value})"


class AccessRequest:
    """Запрос доступа; само существование записи означает ожидание"""
    
    def __init__(
        self,
        uuid: uuid.UUID,
        document_id: uuid.UUID,
        user_id: str,
        reason: Optional[str] = None,
        created_at: Optional[datetime] = None
    ):
        self.uuid = uuid
        self.document_id = document_id
        self.user_id = user_id
        self.reason = reason
        self.created_at = created_at
    
    def __repr__(self) -> str:
        return f"AccessRequest(doc={self.document_id}, user={self.user_id})"


class DocumentAccess:
    """Права конкретного пользователя на конкретный документ"""
    
    def __init__(self, document, user_id: Optional[str], grant: Optional[AccessGrant] = None):
        self.document = document
        self.user_id = user_id
        # Анонимный пользователь не может иметь выданного права
        self.grant = grant if user_id is not None else None
    
    def is_owner(self) -> bool:
        """Проверка является ли пользователь владельцем"""
        return self.document.is_owned_by(self.user_id)
    
    def can_read(self) -> bool:
        """Проверка доступа на чтение"""
        return self.document.is_publicly_readable() or self.is_owner() or self.grant is not None
    
    def can_write(self) -> bool:
        """Проверка прав на редактирование"""
        if self.is_owner():
            return True
        return self.grant is not None and self.grant.allows_write()
