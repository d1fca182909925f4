import logging
from datetime import timedelta
from typing import Optional, List
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.exc import IntegrityError
import uuid

from app.core.clock import Clock, utcnow
from app.core.config import settings
from app.core.errors import CollaborationError, Conflict, Expired, NotFound, Unauthenticated, Unauthorized
from app.db.repositories.document_repository import DocumentRepository
from app.db.repositories.invitation_repository import InvitationRepository
from app.domains.access.entities import AccessGrant, Role
from app.domains.access.services import AccessRegistry
from app.domains.invitations.entities import Invitation, InvitationStatus

logger = logging.getLogger(__name__)


class InvitationLifecycle:
    """Жизненный цикл приглашения: pending -> accepted | declined.

    Срок действия не меняет статус: просроченное приглашение остается
    pending в БД, но не показывается получателю и не может быть принято.
    """
    
    def __init__(
        self,
        session: AsyncSession,
        clock: Clock = utcnow,
        registry: Optional[AccessRegistry] = None,
        ttl: Optional[timedelta] = None
    ):
        self.session = session
        self.clock = clock
        self.ttl = ttl or timedelta(days=settings.invitation_ttl_days)
        self.registry = registry or AccessRegistry(session, clock)
        self.document_repository = DocumentRepository(session)
        self.invitation_repository = InvitationRepository(session)
    
    async def create(
        self,
        document_id: uuid.UUID,
        inviter_id: Optional[str],
        email: str,
        role: Role
    ) -> Invitation:
        """Создание приглашения владельцем документа"""
        if inviter_id is None:
            raise Unauthenticated()
        
        document = await self.document_repository.get_by_uuid(document_id)
        if not document:
            raise NotFound("Document not found")
        if not document.is_owned_by(inviter_id):
            raise Unauthorized()
        
        email = Invitation.normalize_email(email)
        
        if await self.invitation_repository.get_pending(document_id, email):
            raise Conflict("Invitation already exists for this email")
        
        now = self.clock()
        try:
            invitation = await self.invitation_repository.create(
                document_id=document_id,
                invited_by=inviter_id,
                invited_email=email,
                role=role,
                created_at=now,
                expires_at=Invitation.expiry_for(now, self.ttl)
            )
            await self.session.commit()
        except IntegrityError:
            # Уникальный индекс по ожидающим приглашениям закрывает гонку
            await self.session.rollback()
            raise Conflict("Invitation already exists for this email")
        
        # Отправка письма вне ядра; только фиксируем событие
        logger.info(f"Invitation {invitation.uuid} created for {email} on document {document_id} as {role.value}")
        return invitation
    
    async def list_for_document(self, document_id: uuid.UUID, requester_id: Optional[str]) -> List[Invitation]:
        """Приглашения документа; не владельцу возвращается пустой список"""
        document = await self.document_repository.get_by_uuid(document_id)
        
        if not document:
            return []
        if not document.is_owned_by(requester_id):
            return []
        
        return await self.invitation_repository.get_by_document(document_id)
    
    async def list_actionable(self, email: Optional[str]) -> List[Invitation]:
        """Ожидающие и не просроченные приглашения для email"""
        if not email or not email.strip():
            return []
        
        return await self.invitation_repository.get_actionable(
            Invitation.normalize_email(email),
            self.clock()
        )
    
    async def accept(self, invitation_id: uuid.UUID, user_id: Optional[str]) -> AccessGrant:
        """Принятие приглашения: смена статуса и выдача права одной транзакцией"""
        if user_id is None:
            raise Unauthenticated()
        
        invitation = await self.invitation_repository.get_by_uuid(invitation_id)
        if not invitation:
            raise NotFound("Invitation not found")
        if not invitation.is_pending():
            raise Conflict("Invitation already processed")
        
        now = self.clock()
        if invitation.is_expired(now):
            raise Expired()
        
        try:
            moved = await self.invitation_repository.transition(
                invitation.uuid,
                InvitationStatus.PENDING,
                InvitationStatus.ACCEPTED,
                updated_at=now
            )
            if not moved:
                raise Conflict("Invitation already processed")
            
            # Владелец неизменен, поэтому пригласивший выступает выдающим право
            grant = await self.registry.grant_access(
                invitation.document_id,
                invitation.invited_by,
                user_id,
                invitation.role,
                commit=False
            )
            await self.session.commit()
        except IntegrityError:
            await self.session.rollback()
            raise Conflict("Invitation already processed")
        except CollaborationError:
            await self.session.rollback()
            raise
        
        logger.info(f"Invitation {invitation_id} accepted by user {user_id}")
        return grant
    
    async def decline(self, invitation_id: uuid.UUID, user_id: Optional[str]) -> Invitation:
        """Отклонение приглашения; допустимо и для просроченного"""
        if user_id is None:
            raise Unauthenticated()
        
        invitation = await self.invitation_repository.get_by_uuid(invitation_id)
        if not invitation:
            raise NotFound("Invitation not found")
        if not invitation.is_pending():
            raise Conflict("Invitation already processed")
        
        moved = await self.invitation_repository.transition(
            invitation.uuid,
            InvitationStatus.PENDING,
            InvitationStatus.DECLINED,
            updated_at=self.clock()
        )
        if not moved:
            await self.session.rollback()
            raise Conflict("Invitation already processed")
        
        await self.session.commit()
        
        logger.info(f"Invitation {invitation_id} declined by user {user_id}")
        invitation.status = InvitationStatus.DECLINED
        return invitation
    
    async def delete(self, invitation_id: uuid.UUID, requester_id: Optional[str]) -> None:
        """Удаление приглашения владельцем в любом статусе"""
        if requester_id is None:
            raise Unauthenticated()
        
        invitation = await self.invitation_repository.get_by_uuid(invitation_id)
        if not invitation:
            raise NotFound("Invitation not found")
        
        document = await self.document_repository.get_by_uuid(invitation.document_id)
        if not document or not document.is_owned_by(requester_id):
            raise Unauthorized()
        
        await self.invitation_repository.delete(invitation.uuid)
        await self.session.commit()
        
        logger.info(f"Invitation {invitation_id} deleted by owner {requester_id}")
