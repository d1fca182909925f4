from sqlalchemy import Column, String, Text, ForeignKey, UUID, Enum, UniqueConstraint
from sqlalchemy.orm import relationship

from app.db.base import BaseModel
from app.domains.access.entities import Role


def _enum_values(enum_cls):
    return [member.value for member in enum_cls]


role_enum = Enum(
    Role,
    name="access_role",
    native_enum=False,
    length=20,
    values_callable=_enum_values,
)


class AccessGrant(BaseModel):
    __tablename__ = "access_grants"
    
    document_id = Column(
        UUID(as_uuid=True), ForeignKey("documents.uuid", ondelete="CASCADE"), index=True, nullable=False
    )
    user_id = Column(String(255), index=True, nullable=False)
    role = Column(role_enum, nullable=False)
    invited_by = Column(String(255), nullable=False)
    
    __table_args__ = (
        UniqueConstraint("document_id", "user_id", name="uq_access_grants_document_user"),
    )
    
    # Relationships
    document = relationship("Document", back_populates="grants")


class AccessRequest(BaseModel):
    __tablename__ = "access_requests"
    
    document_id = Column(
        UUID(as_uuid=True), ForeignKey("documents.uuid", ondelete="CASCADE"), index=True, nullable=False
    )
    user_id = Column(String(255), nullable=False)
    reason = Column(Text, nullable=True)
    
    __table_args__ = (
        UniqueConstraint("document_id", "user_id", name="uq_access_requests_document_user"),
    )
    
    # Relationships
    document = relationship("Document", back_populates="access_requests")
