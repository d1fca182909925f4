import uuid
from datetime import datetime
from typing import Optional


class Document:
    """Сущность документа домена Documents"""
    
    def __init__(
        self,
        uuid: uuid.UUID,
        owner_id: str,
        title: str = "Untitled",
        is_archived: bool = False,
        is_published: bool = False,
        created_at: Optional[datetime] = None,
        updated_at: Optional[datetime] = None
    ):
        self.uuid = uuid
        self.owner_id = owner_id
        self.title = title
        self.is_archived = is_archived
        self.is_published = is_published
        self.created_at = created_at
        self.updated_at = updated_at
    
    def is_owned_by(self, user_id: Optional[str]) -> bool:
        """Проверка является ли пользователь владельцем"""
        return user_id is not None and user_id == self.owner_id
    
    def is_publicly_readable(self) -> bool:
        """Опубликованный и не архивный документ доступен всем"""
        return self.is_published and not self.is_archived
    
    def __eq__(self, other) -> bool:
        if not isinstance(other, Document):
            return False
        return self.uuid == other.uuid
    
    def __repr__(self) -> str:
        return f"Document(uuid={self.uuid}, owner={self.owner_id}, archived={self.is_archived})"
