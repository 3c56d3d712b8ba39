import logging
from abc import ABC, abstractmethod
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from sqlalchemy.ext.asyncio import AsyncSession


class AbstractRepository(ABC):
    """
    Minimal, framework-agnostic repository contract.

    Concrete implementations should implement these operations. Expected
    absence is reported as ``None``/``False``, never raised.
    """

    def __init__(self, db: AsyncSession, logger: Optional[logging.Logger] = None):
        self.db = db
        self.logger = logger or logging.getLogger(type(self).__module__)

    @abstractmethod
    async def insert(self, obj): ...

    @abstractmethod
    async def update(self, entity_id, obj): ...

    @abstractmethod
    async def delete(self, entity_id) -> bool: ...

    @abstractmethod
    async def get(self, entity_id): ...

    @abstractmethod
    async def list(self, page: int, page_size: int): ...

    @staticmethod
    def offset_for(page: int, page_size: int) -> int:
        # pages are 1-indexed
        return max(page - 1, 0) * page_size

    @asynccontextmanager
    async def atomic(self) -> AsyncIterator[AsyncSession]:
        """
        Run a block of writes as one transaction: commit on success,
        roll back and re-raise on any failure.
        """
        try:
            yield self.db
            await self.db.commit()
        except Exception:
            await self.db.rollback()
            raise
