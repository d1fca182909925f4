from typing import Optional, List, TYPE_CHECKING
from datetime import datetime
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, update, delete, and_
import uuid

from app.db.models.invitation import Invitation as InvitationModel
from app.domains.access.entities import Role
from app.domains.invitations.entities import InvitationStatus

if TYPE_CHECKING:
    from app.domains.invitations.entities import Invitation


class InvitationRepository:
    """Репозиторий для работы с приглашениями"""
    
    def __init__(self, session: AsyncSession):
        self.session = session
    
    async def create(
        self,
        document_id: uuid.UUID,
        invited_by: str,
        invited_email: str,
        role: Role,
        created_at: datetime,
        expires_at: datetime
    ) -> "Invitation":
        """Создание ожидающего приглашения"""
        db_invitation = InvitationModel(
            uuid=uuid.uuid4(),
            document_id=document_id,
            invited_by=invited_by,
            invited_email=invited_email,
            role=role,
            status=InvitationStatus.PENDING,
            created_at=created_at,
            updated_at=created_at,
            expires_at=expires_at
        )
        
        self.session.add(db_invitation)
        await self.session.flush()
        return self._to_domain(db_invitation)
    
    async def get_by_uuid(self, invitation_uuid: uuid.UUID) -> Optional["Invitation"]:
        """Получение приглашения по UUID"""
        result = await self.session.execute(
            select(InvitationModel).where(InvitationModel.uuid == invitation_uuid)
        )
        db_invitation = result.scalar_one_or_none()
        return self._to_domain(db_invitation) if db_invitation else None
    
    async def get_pending(self, document_id: uuid.UUID, invited_email: str) -> Optional["Invitation"]:
        """Получение ожидающего приглашения по документу и email"""
        result = await self.session.execute(
            select(InvitationModel).where(
                and_(
                    InvitationModel.document_id == document_id,
                    InvitationModel.invited_email == invited_email,
                    InvitationModel.status == InvitationStatus.PENDING
                )
            )
        )
        db_invitation = result.scalar_one_or_none()
        return self._to_domain(db_invitation) if db_invitation else None
    
    async def get_by_document(self, document_id: uuid.UUID) -> List["Invitation"]:
        """Получение приглашений документа, новые первыми"""
        result = await self.session.execute(
            select(InvitationModel)
            .where(InvitationModel.document_id == document_id)
            .order_by(InvitationModel.created_at.desc())
        )
        return [self._to_domain(invitation) for invitation in result.scalars().all()]
    
    async def get_actionable(self, invited_email: str, now: datetime) -> List["Invitation"]:
        """Ожидающие и не просроченные приглашения для email"""
        result = await self.session.execute(
            select(InvitationModel)
            .where(
                and_(
                    InvitationModel.invited_email == invited_email,
                    InvitationModel.status == InvitationStatus.PENDING,
                    InvitationModel.expires_at > now
                )
            )
            .order_by(InvitationModel.created_at.desc())
        )
        return [self._to_domain(invitation) for invitation in result.scalars().all()]
    
    async def transition(
        self,
        invitation_uuid: uuid.UUID,
        from_status: InvitationStatus,
        to_status: InvitationStatus,
        updated_at: datetime
    ) -> bool:
        """Смена статуса только из ожидаемого исходного состояния"""
        stmt = (
            update(InvitationModel)
            .where(
                and_(
                    InvitationModel.uuid == invitation_uuid,
                    InvitationModel.status == from_status
                )
            )
            .values(status=to_status, updated_at=updated_at)
        )
        result = await self.session.execute(stmt)
        return result.rowcount > 0
    
    async def delete(self, invitation_uuid: uuid.UUID) -> bool:
        """Удаление приглашения"""
        result = await self.session.execute(
            delete(InvitationModel).where(InvitationModel.uuid == invitation_uuid)
        )
        return result.rowcount > 0
    
    def _to_domain(self, db_invitation: InvitationModel) -> "Invitation":
        """Преобразование модели БД в доменную сущность"""
        from app.domains.invitations.entities import Invitation
        
        return Invitation(
            uuid=db_invitation.uuid,
            document_id=db_invitation.document_id,
            invited_by=db_invitation.invited_by,
            invited_email=db_invitation.invited_email,
            role=Role(db_invitation.role),
            status=InvitationStatus(db_invitation.status),
            created_at=db_invitation.created_at,
            expires_at=db_invitation.expires_at
        )
