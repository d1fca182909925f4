from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class Identity:
    """Идентичность, выданная внешним провайдером"""
    subject: str
    email: Optional[str] = None
    name: Optional[str] = None
    avatar_url: Optional[str] = None
