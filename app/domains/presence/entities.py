import uuid
from datetime import datetime, timedelta
from typing import Optional


class PresenceRecord:
    """Отметка присутствия пользователя в документе"""
    
    def __init__(
        self,
        document_id: uuid.UUID,
        user_id: str,
        name: str,
        avatar_url: str,
        last_seen: datetime,
        uuid: Optional[uuid.UUID] = None
    ):
        self.uuid = uuid
        self.document_id = document_id
        self.user_id = user_id
        self.name = name
        self.avatar_url = avatar_url
        self.last_seen = last_seen
    
    def is_live(self, now: datetime, window: timedelta) -> bool:
        """Запись жива, пока now - last_seen < window"""
        return now - self.last_seen < window
    
    @staticmethod
    def live_since(now: datetime, window: timedelta) -> datetime:
        """Нижняя граница last_seen для живых записей (строго больше)"""
        return now - window
    
    def __repr__(self) -> str:
        return f"PresenceRecord(doc={self.document_id}, user={self.user_id}, last_seen={self.last_seen})"
