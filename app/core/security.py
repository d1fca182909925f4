from typing import Optional, Dict, Any
from jose import JWTError, jwt

from app.core.config import settings


def verify_token(token: str) -> Optional[Dict[str, Any]]:
    """Проверка JWT токена провайдера и извлечение данных"""
    try:
        payload = jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_algorithm])
        return payload
    except JWTError:
        return None
