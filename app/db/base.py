from uuid import uuid4

from sqlalchemy import Column, DateTime, UUID

from app.core.clock import utcnow
from app.core.db import Base


class BaseModel(Base):
    """Базовая модель: UUID первичный ключ и метки времени"""
    __abstract__ = True

    uuid = Column(UUID(as_uuid=True), primary_key=True, default=uuid4)
    created_at = Column(DateTime, nullable=False, default=utcnow)
    updated_at = Column(DateTime, nullable=False, default=utcnow, onupdate=utcnow)
