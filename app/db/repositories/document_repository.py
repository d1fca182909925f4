from typing import Optional, List, TYPE_CHECKING
from datetime import datetime
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, update, delete
import uuid

from app.db.models.document import Document as DocumentModel
from app.db.models.access import AccessGrant as AccessGrantModel, AccessRequest as AccessRequestModel
from app.db.models.invitation import Invitation as InvitationModel
from app.db.models.presence import PresenceRecord as PresenceModel

if TYPE_CHECKING:
    from app.domains.documents.entities import Document


class DocumentRepository:
    """Репозиторий для работы с документами"""
    
    def __init__(self, session: AsyncSession):
        self.session = session
    
    async def create(self, owner_id: str, title: str, created_at: datetime) -> "Document":
        """Создание нового документа"""
        db_document = DocumentModel(
            uuid=uuid.uuid4(),
            owner_id=owner_id,
            title=title,
            is_archived=False,
            is_published=False,
            created_at=created_at,
            updated_at=created_at
        )
        
        self.session.add(db_document)
        await self.session.flush()
        return self._to_domain(db_document)
    
    async def get_by_uuid(self, document_uuid: uuid.UUID) -> Optional["Document"]:
        """Получение документа по UUID"""
        result = await self.session.execute(
            select(DocumentModel).where(DocumentModel.uuid == document_uuid)
        )
        db_document = result.scalar_one_or_none()
        return self._to_domain(db_document) if db_document else None
    
    async def get_by_owner(self, owner_id: str, archived: Optional[bool] = None) -> List["Document"]:
        """Получение документов по владельцу"""
        query = select(DocumentModel).where(DocumentModel.owner_id == owner_id)
        
        if archived is not None:
            query = query.where(DocumentModel.is_archived == archived)
        
        result = await self.session.execute(
            query.order_by(DocumentModel.created_at.desc())
        )
        db_documents = result.scalars().all()
        return [self._to_domain(doc) for doc in db_documents]
    
    async def patch(self, document_uuid: uuid.UUID, **values) -> Optional["Document"]:
        """Частичное обновление флагов документа"""
        stmt = (
            update(DocumentModel)
            .where(DocumentModel.uuid == document_uuid)
            .values(**values)
        )
        
        await self.session.execute(stmt)
        await self.session.flush()
        
        return await self.get_by_uuid(document_uuid)
    
    async def delete(self, document_uuid: uuid.UUID) -> bool:
        """Удаление документа вместе с правами, приглашениями, запросами и присутствием"""
        for model in (AccessGrantModel, InvitationModel, AccessRequestModel, PresenceModel):
            await self.session.execute(delete(model).where(model.document_id == document_uuid))
        
        result = await self.session.execute(
            delete(DocumentModel).where(DocumentModel.uuid == document_uuid)
        )
        return result.rowcount > 0
    
    def _to_domain(self, db_document: DocumentModel) -> "Document":
        """Преобразование модели БД в доменную сущность"""
        from app.domains.documents.entities import Document
        
        return Document(
            uuid=db_document.uuid,
            owner_id=db_document.owner_id,
            title=db_document.title,
            is_archived=db_document.is_archived,
            is_published=db_document.is_published,
            created_at=db_document.created_at,
            updated_at=db_document.updated_at
        )
