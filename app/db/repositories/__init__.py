from app.db.repositories.document_repository import DocumentRepository
from app.db.repositories.access_repository import AccessGrantRepository, AccessRequestRepository
from app.db.repositories.invitation_repository import InvitationRepository
from app.db.repositories.presence_repository import PresenceRepository

__all__ = [
    "DocumentRepository",
    "AccessGrantRepository",
    "AccessRequestRepository",
    "InvitationRepository",
    "PresenceRepository"
]
