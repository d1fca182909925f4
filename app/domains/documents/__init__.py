from app.domains.documents.entities import Document
from app.domains.documents.schemas import DocumentCreate, DocumentResponse, DocumentListResponse

__all__ = [
    "Document",
    "DocumentCreate", "DocumentResponse", "DocumentListResponse"
]
