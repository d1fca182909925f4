from app.domains.invitations.entities import Invitation, InvitationStatus
from app.domains.invitations.schemas import InvitationCreate, InvitationResponse, InvitationListResponse

__all__ = [
    "Invitation", "InvitationStatus",
    "InvitationCreate", "InvitationResponse", "InvitationListResponse"
]
