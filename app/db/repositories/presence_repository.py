from typing import List, TYPE_CHECKING
from datetime import datetime
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, update, delete, and_
import uuid

from app.db.models.presence import PresenceRecord as PresenceModel

if TYPE_CHECKING:
    from app.domains.presence.entities import PresenceRecord


class PresenceRepository:
    """Репозиторий для работы с присутствием пользователей"""
    
    def __init__(self, session: AsyncSession):
        self.session = session
    
    async def touch(
        self,
        document_id: uuid.UUID,
        user_id: str,
        name: str,
        avatar_url: str,
        seen_at: datetime
    ) -> bool:
        """Обновление существующей записи; False если записи нет"""
        stmt = (
            update(PresenceModel)
            .where(
                and_(
                    PresenceModel.document_id == document_id,
                    PresenceModel.user_id == user_id
                )
            )
            .values(
                name=name,
                avatar_url=avatar_url,
                last_seen=seen_at,
                updated_at=seen_at
            )
        )
        
        result = await self.session.execute(stmt)
        return result.rowcount > 0
    
    async def create(
        self,
        document_id: uuid.UUID,
        user_id: str,
        name: str,
        avatar_url: str,
        seen_at: datetime
    ) -> None:
        """Создание записи присутствия"""
        db_record = PresenceModel(
            uuid=uuid.uuid4(),
            document_id=document_id,
            user_id=user_id,
            name=name,
            avatar_url=avatar_url,
            last_seen=seen_at,
            created_at=seen_at,
            updated_at=seen_at
        )
        self.session.add(db_record)
        await self.session.flush()
    
    async def get_seen_after(self, document_id: uuid.UUID, since: datetime) -> List["PresenceRecord"]:
        """Записи документа с last_seen строго позже since"""
        result = await self.session.execute(
            select(PresenceModel)
            .where(
                and_(
                    PresenceModel.document_id == document_id,
                    PresenceModel.last_seen > since
                )
            )
            .order_by(PresenceModel.last_seen.desc())
        )
        return [self._to_domain(record) for record in result.scalars().all()]
    
    async def delete_seen_before(self, cutoff: datetime) -> int:
        """Удаление записей, не обновлявшихся с cutoff"""
        result = await self.session.execute(
            delete(PresenceModel).where(PresenceModel.last_seen < cutoff)
        )
        return result.rowcount
    
    def _to_domain(self, db_record: PresenceModel) -> "PresenceRecord":
        """Преобразование модели БД в доменную сущность"""
        from app.domains.presence.entities import PresenceRecord
        
        return PresenceRecord(
            uuid=db_record.uuid,
            document_id=db_record.document_id,
            user_id=db_record.user_id,
            name=db_record.name,
            avatar_url=db_record.avatar_url,
            last_seen=db_record.last_seen
        )
