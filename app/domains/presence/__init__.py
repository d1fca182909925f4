from app.domains.presence.entities import PresenceRecord
from app.domains.presence.schemas import HeartbeatRequest, PresenceResponse, ActiveUsersResponse

__all__ = [
    "PresenceRecord",
    "HeartbeatRequest", "PresenceResponse", "ActiveUsersResponse"
]
