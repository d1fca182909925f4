from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from app.domains.identity.entities import Identity
from app.domains.identity.services import IdentityService

bearer_scheme = HTTPBearer(auto_error=False)


async def get_current_identity(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> Optional[Identity]:
    """Идентичность вызывающего или None для анонимного запроса"""
    if credentials is None:
        return None
    return IdentityService.identity_from_token(credentials.credentials)


def subject_of(identity: Optional[Identity]) -> Optional[str]:
    return identity.subject if identity else None
