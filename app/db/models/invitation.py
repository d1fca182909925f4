from sqlalchemy import Column, String, DateTime, ForeignKey, UUID, Enum, Index, text
from sqlalchemy.orm import relationship

from app.db.base import BaseModel
from app.db.models.access import role_enum, _enum_values
from app.domains.invitations.entities import InvitationStatus


invitation_status_enum = Enum(
    InvitationStatus,
    name="invitation_status",
    native_enum=False,
    length=20,
    values_callable=_enum_values,
)


class Invitation(BaseModel):
    __tablename__ = "invitations"
    
    document_id = Column(
        UUID(as_uuid=True), ForeignKey("documents.uuid", ondelete="CASCADE"), index=True, nullable=False
    )
    invited_by = Column(String(255), nullable=False)
    invited_email = Column(String(320), index=True, nullable=False)
    role = Column(role_enum, nullable=False)
    status = Column(invitation_status_enum, index=True, nullable=False, default=InvitationStatus.PENDING)
    expires_at = Column(DateTime, nullable=False)
    
    # Не более одного ожидающего приглашения на (документ, email)
    __table_args__ = (
        Index(
            "uq_invitations_pending_email",
            "document_id",
            "invited_email",
            unique=True,
            postgresql_where=text("status = 'pending'"),
            sqlite_where=text("status = 'pending'"),
        ),
    )
    
    # Relationships
    document = relationship("Document", back_populates="invitations")
