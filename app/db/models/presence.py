from sqlalchemy import Column, String, DateTime, ForeignKey, UUID, UniqueConstraint
from sqlalchemy.orm import relationship

from app.core.clock import utcnow
from app.db.base import BaseModel


class PresenceRecord(BaseModel):
    __tablename__ = "presence"
    
    document_id = Column(
        UUID(as_uuid=True), ForeignKey("documents.uuid", ondelete="CASCADE"), index=True, nullable=False
    )
    user_id = Column(String(255), nullable=False)
    name = Column(String(255), nullable=False, default="")
    avatar_url = Column(String(2048), nullable=False, default="")
    last_seen = Column(DateTime, nullable=False, default=utcnow)
    
    __table_args__ = (
        UniqueConstraint("document_id", "user_id", name="uq_presence_document_user"),
    )
    
    # Relationships
    document = relationship("Document", back_populates="presence")
