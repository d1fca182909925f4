from app.domains.identity.entities import Identity
from app.domains.identity.services import IdentityService

__all__ = [
    "Identity",
    "IdentityService"
]
