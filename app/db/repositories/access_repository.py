from typing import Optional, List, TYPE_CHECKING
from datetime import datetime
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, delete, and_
import uuid

from app.db.models.access import AccessGrant as AccessGrantModel, AccessRequest as AccessRequestModel
from app.domains.access.entities import Role

if TYPE_CHECKING:
    from app.domains.access.entities import AccessGrant, AccessRequest


class AccessGrantRepository:
    """Репозиторий для работы с выданными правами"""
    
    def __init__(self, session: AsyncSession):
        self.session = session
    
    async def create(
        self,
        document_id: uuid.UUID,
        user_id: str,
        role: Role,
        invited_by: str,
        created_at: datetime
    ) -> "AccessGrant":
        """Создание нового права; дубликат пары (документ, пользователь) отклоняет БД"""
        db_grant = AccessGrantModel(
            uuid=uuid.uuid4(),
            document_id=document_id,
            user_id=user_id,
            role=role,
            invited_by=invited_by,
            created_at=created_at,
            updated_at=created_at
        )
        
        self.session.add(db_grant)
        await self.session.flush()
        return self._to_domain(db_grant)
    
    async def get_for_user(self, document_id: uuid.UUID, user_id: str) -> Optional["AccessGrant"]:
        """Получение права по документу и пользователю"""
        result = await self.session.execute(
            select(AccessGrantModel).where(
                and_(
                    AccessGrantModel.document_id == document_id,
                    AccessGrantModel.user_id == user_id
                )
            )
        )
        db_grant = result.scalar_one_or_none()
        return self._to_domain(db_grant) if db_grant else None
    
    async def get_by_document(self, document_id: uuid.UUID) -> List["AccessGrant"]:
        """Получение всех прав на документ"""
        result = await self.session.execute(
            select(AccessGrantModel)
            .where(AccessGrantModel.document_id == document_id)
            .order_by(AccessGrantModel.created_at.asc())
        )
        return [self._to_domain(grant) for grant in result.scalars().all()]
    
    async def get_by_user(self, user_id: str) -> List["AccessGrant"]:
        """Получение всех прав пользователя"""
        result = await self.session.execute(
            select(AccessGrantModel)
            .where(AccessGrantModel.user_id == user_id)
            .order_by(AccessGrantModel.created_at.desc())
        )
        return [self._to_domain(grant) for grant in result.scalars().all()]
    
    async def delete(self, document_id: uuid.UUID, user_id: str) -> bool:
        """Удаление права"""
        stmt = delete(AccessGrantModel).where(
            and_(
                AccessGrantModel.document_id == document_id,
                AccessGrantModel.user_id == user_id
            )
        )
        result = await self.session.execute(stmt)
        return result.rowcount > 0
    
    def _to_domain(self, db_grant: AccessGrantModel) -> "AccessGrant":
        """Преобразование модели БД в доменную сущность"""
        from app.domains.access.entities import AccessGrant
        
        return AccessGrant(
            uuid=db_grant.uuid,
            document_id=db_grant.document_id,
            user_id=db_grant.user_id,
            role=Role(db_grant.role),
            invited_by=db_grant.invited_by,
            created_at=db_grant.created_at
        )


class AccessRequestRepository:
    """Репозиторий для работы с запросами доступа"""
    
    def __init__(self, session: AsyncSession):
        self.session = session
    
    async def create(
        self,
        document_id: uuid.UUID,
        user_id: str,
        reason: Optional[str],
        created_at: datetime
    ) -> "AccessRequest":
        """Создание нового запроса"""
        db_request = AccessRequestModel(
            uuid=uuid.uuid4(),
            document_id=document_id,
            user_id=user_id,
            reason=reason,
            created_at=created_at,
            updated_at=created_at
        )
        
        self.session.add(db_request)
        await self.session.flush()
        return self._to_domain(db_request)
    
    async def get_by_uuid(self, request_uuid: uuid.UUID) -> Optional["AccessRequest"]:
        """Получение запроса по UUID"""
        result = await self.session.execute(
            select(AccessRequestModel).where(AccessRequestModel.uuid == request_uuid)
        )
        db_request = result.scalar_one_or_none()
        return self._to_domain(db_request) if db_request else None
    
    async def get_for_user(self, document_id: uuid.UUID, user_id: str) -> Optional["AccessRequest"]:
        """Получение запроса по документу и пользователю"""
        result = await self.session.execute(
            select(AccessRequestModel).where(
                and_(
                    AccessRequestModel.document_id == document_id,
                    AccessRequestModel.user_id == user_id
                )
            )
        )
        db_request = result.scalar_one_or_none()
        return self._to_domain(db_request) if db_request else None
    
    async def get_by_document(self, document_id: uuid.UUID) -> List["AccessRequest"]:
        """Получение запросов к документу"""
        result = await self.session.execute(
            select(AccessRequestModel)
            .where(AccessRequestModel.document_id == document_id)
            .order_by(AccessRequestModel.created_at.asc())
        )
        return [self._to_domain(request) for request in result.scalars().all()]
    
    async def delete(self, request_uuid: uuid.UUID) -> bool:
        """Удаление запроса"""
        result = await self.session.execute(
            delete(AccessRequestModel).where(AccessRequestModel.uuid == request_uuid)
        )
        return result.rowcount > 0
    
    def _to_domain(self, db_request: AccessRequestModel) -> "AccessRequest":
        """Преобразование модели БД в доменную сущность"""
        from app.domains.access.entities import AccessRequest
        
        return AccessRequest(
            uuid=db_request.uuid,
            document_id=db_request.document_id,
            user_id=db_request.user_id,
            reason=db_request.reason,
            created_at=db_request.created_at
        )
