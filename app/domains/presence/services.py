import logging
from datetime import timedelta
from typing import Optional, List
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.exc import IntegrityError
import uuid

from app.core.clock import Clock, utcnow
from app.core.config import settings
from app.core.errors import NotFound, Unauthenticated
from app.db.repositories.document_repository import DocumentRepository
from app.db.repositories.presence_repository import PresenceRepository
from app.domains.presence.entities import PresenceRecord

logger = logging.getLogger(__name__)


class PresenceTracker:
    """Присутствие пользователей в документе.

    Не является механизмом безопасности. Запись считается живой, пока
    с последнего heartbeat прошло меньше окна устаревания; старые записи
    не удаляются, а просто перестают попадать в выборку.
    """
    
    def __init__(
        self,
        session: AsyncSession,
        clock: Clock = utcnow,
        window: Optional[timedelta] = None,
        retention: Optional[timedelta] = None
    ):
        self.session = session
        self.clock = clock
        self.window = window or timedelta(seconds=settings.presence_window_seconds)
        self.retention = retention or timedelta(minutes=settings.presence_retention_minutes)
        self.document_repository = DocumentRepository(session)
        self.presence_repository = PresenceRepository(session)
    
    async def heartbeat(
        self,
        document_id: uuid.UUID,
        user_id: Optional[str],
        name: str,
        avatar_url: str
    ) -> None:
        """Upsert по (документ, пользователь)"""
        if user_id is None:
            raise Unauthenticated()
        
        if not await self.document_repository.get_by_uuid(document_id):
            raise NotFound("Document not found")
        
        now = self.clock()
        
        # Сначала пытаемся обновить существующую запись
        if await self.presence_repository.touch(document_id, user_id, name, avatar_url, now):
            await self.session.commit()
            return
        
        # Если запись не найдена, создаем новую
        try:
            await self.presence_repository.create(document_id, user_id, name, avatar_url, now)
            await self.session.commit()
        except IntegrityError:
            await self.session.rollback()
            # Соседняя вкладка успела вставить запись первой
            if not await self.presence_repository.touch(document_id, user_id, name, avatar_url, now):
                raise NotFound("Document not found")
            await self.session.commit()
        
        logger.debug(f"User {user_id} joined presence of document {document_id}")
    
    async def list_live(self, document_id: uuid.UUID) -> List[PresenceRecord]:
        """Записи, обновленные в пределах окна устаревания"""
        since = PresenceRecord.live_since(self.clock(), self.window)
        return await self.presence_repository.get_seen_after(document_id, since)
    
    async def purge_stale(self, older_than: Optional[timedelta] = None) -> int:
        """Очистка давно устаревших записей"""
        cutoff = self.clock() - (older_than or self.retention)
        removed = await self.presence_repository.delete_seen_before(cutoff)
        await self.session.commit()
        
        if removed:
            logger.info(f"Purged {removed} stale presence records")
        return removed
