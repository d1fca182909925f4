from sqlalchemy import Column, String, Boolean
from sqlalchemy.orm import relationship

from app.db.base import BaseModel


class Document(BaseModel):
    __tablename__ = "documents"
    
    owner_id = Column(String(255), index=True, nullable=False)
    title = Column(String(255), nullable=False, default="Untitled")
    is_archived = Column(Boolean, nullable=False, default=False)
    is_published = Column(Boolean, nullable=False, default=False)
    
    # Relationships
    grants = relationship("AccessGrant", back_populates="document", cascade="all, delete-orphan")
    invitations = relationship("Invitation", back_populates="document", cascade="all, delete-orphan")
    access_requests = relationship("AccessRequest", back_populates="document", cascade="all, delete-orphan")
    presence = relationship("PresenceRecord", back_populates="document", cascade="all, delete-orphan")
