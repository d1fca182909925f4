import uuid
from datetime import datetime, timedelta
from enum import Enum
from typing import Optional

from app.domains.access.entities import Role


class InvitationStatus(str, Enum):
    """Состояния приглашения: pending -> accepted | declined"""
    PENDING = "pending"
    ACCEPTED = "accepted"
    DECLINED = "declined"


class Invitation:
    """Приглашение по email с ограниченным сроком действия"""
    
    def __init__(
        self,
        uuid: uuid.UUID,
        document_id: uuid.UUID,
        invited_by: str,
        invited_email: str,
        role: Role,
        status: InvitationStatus,
        created_at: datetime,
        expires_at: datetime
    ):
        self.uuid = uuid
        self.document_id = document_id
        self.invited_by = invited_by
        self.invited_email = invited_email
        self.role = role
        self.status = status
        self.created_at = created_at
        self.expires_at = expires_at
    
    def is_pending(self) -> bool:
        return self.status == InvitationStatus.PENDING
    
    def is_expired(self, now: datetime) -> bool:
        """Просрочено ли приглашение; статус при этом не меняется"""
        return self.expires_at <= now
    
    def is_actionable(self, now: datetime) -> bool:
        """Видно ли приглашение получателю"""
        return self.is_pending() and not self.is_expired(now)
    
    @staticmethod
    def expiry_for(created_at: datetime, ttl: timedelta) -> datetime:
        return created_at + ttl
    
    @staticmethod
    def normalize_email(email: str) -> str:
        return email.strip().lower()
    
    def __repr__(self) -> str:
        return f"Invitation(doc={self.document_id}, email={self.invited_email}, status={self.status.value})"
