from app.domains.access.entities import Role, AccessGrant, AccessRequest, DocumentAccess
from app.domains.access.schemas import (
    GrantCreate, GrantResponse, GrantListResponse, PermissionsResponse,
    AccessRequestCreate, AccessRequestResponse, AccessRequestListResponse,
    AccessRequestApprove
)

__all__ = [
    "Role", "AccessGrant", "AccessRequest", "DocumentAccess",
    "GrantCreate", "GrantResponse", "GrantListResponse", "PermissionsResponse",
    "AccessRequestCreate", "AccessRequestResponse", "AccessRequestListResponse",
    "AccessRequestApprove"
]
