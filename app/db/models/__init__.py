from app.core.db import Base
from app.db.models.document import Document
from app.db.models.access import AccessGrant, AccessRequest
from app.db.models.invitation import Invitation
from app.db.models.presence import PresenceRecord

__all__ = [
    "Base",
    "Document",
    "AccessGrant",
    "AccessRequest",
    "Invitation",
    "PresenceRecord"
]
