from app.api.http.health import router as health_router
from app.api.http.documents import router as documents_router
from app.api.http.access import router as access_router
from app.api.http.invitations import router as invitations_router
from app.api.http.presence import router as presence_router

__all__ = [
    "health_router",
    "documents_router",
    "access_router",
    "invitations_router",
    "presence_router"
]
