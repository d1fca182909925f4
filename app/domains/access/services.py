import logging
from typing import Optional, List
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.exc import IntegrityError
import uuid

from app.core.clock import Clock, utcnow
from app.core.errors import CollaborationError, Conflict, NotFound, Unauthenticated, Unauthorized
from app.db.repositories.access_repository import AccessGrantRepository, AccessRequestRepository
from app.db.repositories.document_repository import DocumentRepository
from app.domains.access.entities import AccessGrant, AccessRequest, DocumentAccess, Role

logger = logging.getLogger(__name__)


class AccessRegistry:
    """Единственный источник ответа на вопрос «кто что может делать с документом»"""
    
    def __init__(self, session: AsyncSession, clock: Clock = utcnow):
        self.session = session
        self.clock = clock
        self.document_repository = DocumentRepository(session)
        self.grant_repository = AccessGrantRepository(session)
    
    async def get_access(self, document_id: uuid.UUID, user_id: Optional[str]) -> Optional[DocumentAccess]:
        """Права пользователя на документ или None, если документа нет"""
        document = await self.document_repository.get_by_uuid(document_id)
        if not document:
            return None
        
        grant = None
        if user_id is not None:
            grant = await self.grant_repository.get_for_user(document_id, user_id)
        
        return DocumentAccess(document, user_id, grant)
    
    async def can_read(self, document_id: uuid.UUID, user_id: Optional[str]) -> bool:
        """Публичный документ, владелец или любое выданное право"""
        access = await self.get_access(document_id, user_id)
        return access is not None and access.can_read()
    
    async def can_write(self, document_id: uuid.UUID, user_id: Optional[str]) -> bool:
        """Только владелец или право с ролью editor"""
        access = await self.get_access(document_id, user_id)
        return access is not None and access.can_write()
    
    async def describe_access(self, document_id: uuid.UUID, user_id: Optional[str]) -> dict:
        """Проверка доступа к документу"""
        access = await self.get_access(document_id, user_id)
        
        if not access:
            return {"can_read": False, "can_write": False, "is_owner": False}
        
        return {
            "can_read": access.can_read(),
            "can_write": access.can_write(),
            "is_owner": access.is_owner()
        }
    
    async def grant_access(
        self,
        document_id: uuid.UUID,
        granter_id: Optional[str],
        target_user_id: str,
        role: Role,
        commit: bool = True
    ) -> AccessGrant:
        """Выдача права; повторный вызов для той же пары ничего не меняет.

        Первая запись побеждает: повторная выдача с другой ролью сохраняет
        исходную роль. При commit=False изменения остаются в текущей
        транзакции вызывающего.
        """
        if granter_id is None:
            raise Unauthenticated()
        
        document = await self.document_repository.get_by_uuid(document_id)
        if not document:
            raise NotFound("Document not found")
        if not document.is_owned_by(granter_id):
            raise Unauthorized()
        
        existing = await self.grant_repository.get_for_user(document_id, target_user_id)
        if existing:
            logger.debug(f"Grant for user {target_user_id} on document {document_id} already exists")
            return existing
        
        try:
            grant = await self.grant_repository.create(
                document_id=document_id,
                user_id=target_user_id,
                role=role,
                invited_by=granter_id,
                created_at=self.clock()
            )
            if commit:
                await self.session.commit()
        except IntegrityError:
            if not commit:
                raise
            await self.session.rollback()
            # Параллельный вызов успел вставить ту же пару
            existing = await self.grant_repository.get_for_user(document_id, target_user_id)
            if not existing:
                raise NotFound("Document not found")
            return existing
        
        logger.info(f"Granted {role.value} on document {document_id} to user {target_user_id}")
        return grant
    
    async def revoke_access(self, document_id: uuid.UUID, requester_id: Optional[str], user_id: str) -> None:
        """Отзыв права владельцем"""
        if requester_id is None:
            raise Unauthenticated()
        
        document = await self.document_repository.get_by_uuid(document_id)
        if not document:
            raise NotFound("Document not found")
        if not document.is_owned_by(requester_id):
            raise Unauthorized()
        
        if not await self.grant_repository.delete(document_id, user_id):
            raise NotFound("Access grant not found")
        
        await self.session.commit()
        logger.info(f"Revoked access on document {document_id} from user {user_id}")
    
    async def list_grants(self, document_id: uuid.UUID, requester_id: Optional[str]) -> List[AccessGrant]:
        """Список прав на документ; не владельцу возвращается пустой список"""
        document = await self.document_repository.get_by_uuid(document_id)
        
        if not document:
            return []
        if not document.is_owned_by(requester_id):
            return []
        
        return await self.grant_repository.get_by_document(document_id)
    
    async def list_shared_with(self, user_id: Optional[str]) -> List[AccessGrant]:
        """Права, выданные пользователю на чужие документы"""
        if user_id is None:
            return []
        return await self.grant_repository.get_by_user(user_id)


class AccessRequestFlow:
    """Запросы доступа от пользователей без прав"""
    
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
        self.request_repository = AccessRequestRepository(session)
    
    async def request(
        self,
        document_id: uuid.UUID,
        user_id: Optional[str],
        reason: Optional[str] = None
    ) -> AccessRequest:
        """Создание запроса; повторный запрос возвращает уже существующий"""
        if user_id is None:
            raise Unauthenticated()
        
        if not await self.document_repository.get_by_uuid(document_id):
            raise NotFound("Document not found")
        
        existing = await self.request_repository.get_for_user(document_id, user_id)
        if existing:
            logger.debug(f"Access request from {user_id} on document {document_id} already outstanding")
            return existing
        
        try:
            access_request = await self.request_repository.create(
                document_id=document_id,
                user_id=user_id,
                reason=reason,
                created_at=self.clock()
            )
            await self.session.commit()
        except IntegrityError:
            await self.session.rollback()
            existing = await self.request_repository.get_for_user(document_id, user_id)
            if not existing:
                raise NotFound("Document not found")
            return existing
        
        logger.info(f"User {user_id} requested access to document {document_id}")
        return access_request
    
    async def list_for_owner(self, owner_id: Optional[str]) -> List[AccessRequest]:
        """Все ожидающие запросы ко всем документам владельца"""
        if owner_id is None:
            return []
        
        documents = await self.document_repository.get_by_owner(owner_id)
        
        requests = []
        for document in documents:
            requests.extend(await self.request_repository.get_by_document(document.uuid))
        
        return requests
    
    async def approve(self, request_id: uuid.UUID, owner_id: Optional[str], role: Role) -> AccessGrant:
        """Одобрение: выдача права и удаление запроса одной транзакцией"""
        access_request = await self._load_for_owner(request_id, owner_id)
        
        try:
            grant = await self.registry.grant_access(
                access_request.document_id,
                owner_id,
                access_request.user_id,
                role,
                commit=False
            )
            await self.request_repository.delete(access_request.uuid)
            await self.session.commit()
        except IntegrityError:
            await self.session.rollback()
            raise Conflict("Access request was resolved concurrently")
        except CollaborationError:
            await self.session.rollback()
            raise
        
        logger.info(f"Access request {request_id} approved as {role.value}")
        return grant
    
    async def reject(self, request_id: uuid.UUID, owner_id: Optional[str]) -> None:
        """Отклонение: запрос просто удаляется"""
        access_request = await self._load_for_owner(request_id, owner_id)
        
        await self.request_repository.delete(access_request.uuid)
        await self.session.commit()
        
        logger.info(f"Access request {request_id} rejected")
    
    async def resolve(
        self,
        request_id: uuid.UUID,
        owner_id: Optional[str],
        role: Optional[Role] = None
    ) -> Optional[AccessGrant]:
        """С ролью запрос одобряется, без роли отклоняется"""
        if role is None:
            await self.reject(request_id, owner_id)
            return None
        return await self.approve(request_id, owner_id, role)
    
    async def _load_for_owner(self, request_id: uuid.UUID, owner_id: Optional[str]) -> AccessRequest:
        if owner_id is None:
            raise Unauthenticated()
        
        access_request = await self.request_repository.get_by_uuid(request_id)
        if not access_request:
            raise NotFound("Access request not found")
        
        document = await self.document_repository.get_by_uuid(access_request.document_id)
        if not document or not document.is_owned_by(owner_id):
            raise Unauthorized()
        
        return access_request
