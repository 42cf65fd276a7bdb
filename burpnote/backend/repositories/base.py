"""
Base Repository.

Base class for all repositories with common operations keyed on an
integer primary key.
"""

from collections.abc import Iterable
from typing import Generic, TypeVar

from sqlalchemy import delete
from sqlalchemy.ext.asyncio import AsyncSession

from burpnote.backend.models.base import Base

ModelType = TypeVar("ModelType", bound=Base)


class BaseRepository(Generic[ModelType]):
    """
    Base repository with common operations.

    Subclasses should set the model class:

        class NoteRepository(BaseRepository[Note]):
            model = Note
    """

    model: type[ModelType]

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def delete_by_ids(self, ids: Iterable[int]) -> int:
        """
        Delete every record whose id is in ids, in one statement.

        Args:
            ids: Primary keys to delete

        Returns:
            Number of rows affected
        """
        result = await self.session.execute(
            delete(self.model)
            .where(self.model.id.in_(list(ids)))
            .execution_options(synchronize_session=False)
        )
        return result.rowcount
