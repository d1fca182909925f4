import logging
from typing import Optional, List
from sqlalchemy.ext.asyncio import AsyncSession
import uuid

from app.core.clock import Clock, utcnow
from app.core.errors import NotFound, Unauthenticated, Unauthorized
from app.db.repositories.document_repository import DocumentRepository
from app.domains.access.services import AccessRegistry
from app.domains.documents.entities import Document

logger = logging.getLogger(__name__)


class DocumentService:
    """Сервис для работы с документами"""
    
    def __init__(
        self,
        session: AsyncSession,
        clock: Clock = utcnow,
        registry: Optional[AccessRegistry] = None
    ):
        self.session = session
        self.clock = clock
        self.registry = registry or AccessRegistry(session, clock)
        self.document_repository = DocumentRepository(session)
    
    async def create(self, owner_id: Optional[str], title: str = "Untitled") -> Document:
        """Создание нового документа"""
        if owner_id is None:
            raise Unauthenticated()
        
        document = await self.document_repository.create(owner_id, title, self.clock())
        await self.session.commit()
        
        logger.info(f"Document {document.uuid} created by {owner_id}")
        return document
    
    async def get(self, document_id: uuid.UUID, user_id: Optional[str]) -> Optional[Document]:
        """Документ, если пользователь может его читать"""
        access = await self.registry.get_access(document_id, user_id)
        
        if not access or not access.can_read():
            return None
        
        return access.document
    
    async def archive(self, document_id: uuid.UUID, user_id: Optional[str]) -> Document:
        """Перемещение в корзину"""
        document = await self._patch_as_owner(document_id, user_id, is_archived=True)
        logger.info(f"Document {document_id} archived")
        return document
    
    async def restore(self, document_id: uuid.UUID, user_id: Optional[str]) -> Document:
        """Восстановление из корзины"""
        document = await self._patch_as_owner(document_id, user_id, is_archived=False)
        logger.info(f"Document {document_id} restored")
        return document
    
    async def set_published(self, document_id: uuid.UUID, user_id: Optional[str], is_published: bool) -> Document:
        document = await self._patch_as_owner(document_id, user_id, is_published=is_published)
        logger.info(f"Document {document_id} published={is_published}")
        return document
    
    async def remove(self, document_id: uuid.UUID, user_id: Optional[str]) -> None:
        """Окончательное удаление вместе со связанными записями"""
        await self._load_for_owner(document_id, user_id)
        
        await self.document_repository.delete(document_id)
        await self.session.commit()
        
        logger.info(f"Document {document_id} removed by {user_id}")
    
    async def list_active(self, user_id: Optional[str]) -> List[Document]:
        if user_id is None:
            return []
        return await self.document_repository.get_by_owner(user_id, archived=False)
    
    async def list_archived(self, user_id: Optional[str]) -> List[Document]:
        if user_id is None:
            return []
        return await self.document_repository.get_by_owner(user_id, archived=True)
    
    async def _load_for_owner(self, document_id: uuid.UUID, user_id: Optional[str]) -> Document:
        if user_id is None:
            raise Unauthenticated()
        
        document = await self.document_repository.get_by_uuid(document_id)
        if not document:
            raise NotFound("Document not found")
        if not document.is_owned_by(user_id):
            raise Unauthorized()
        
        return document
    
    async def _patch_as_owner(self, document_id: uuid.UUID, user_id: Optional[str], **values) -> Document:
        await self._load_for_owner(document_id, user_id)
        
        document = await self.document_repository.patch(document_id, updated_at=self.clock(), **values)
        await self.session.commit()
        return document
