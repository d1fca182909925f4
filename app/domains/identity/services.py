import logging
from typing import Optional

from app.core.security import verify_token
from app.domains.identity.entities import Identity

logger = logging.getLogger(__name__)


class IdentityService:
    """Сервис разбора идентичности из токена провайдера"""

    @staticmethod
    def identity_from_token(token: str) -> Optional[Identity]:
        """Получение идентичности из JWT токена"""
        payload = verify_token(token)
        if not payload:
            logger.debug("Rejected bearer token")
            return None

        subject = payload.get("sub")
        if not subject:
            return None

        return Identity(
            subject=str(subject),
            email=payload.get("email"),
            name=payload.get("name"),
            avatar_url=payload.get("picture"),
        )
