"""
Note Repository.

Data access layer for notes. Every statement binds user input as
parameters; nothing typed by the user is formatted into SQL.
"""

from sqlalchemy import insert, select
from sqlalchemy.ext.asyncio import AsyncSession

from burpnote.backend.models.note import Note
from burpnote.backend.repositories.base import BaseRepository


class NoteRepository(BaseRepository[Note]):
    """
    Repository for Note model.

    Inherits delete_by_ids from BaseRepository and adds
    the domain lookups.
    """

    model = Note

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session)

    async def insert(self, domain: str, content: str) -> int:
        """
        Insert a note. id and create_time are assigned by the database.

        Returns:
            Number of rows affected
        """
        result = await self.session.execute(
            insert(Note.__table__).values(domain=domain, content=content)
        )
        return result.rowcount

    async def find_by_domain(self, domain: str) -> list[Note]:
        """Notes whose domain equals the given domain."""
        result = await self.session.execute(
            select(Note).where(Note.domain == domain)
        )
        return list(result.scalars().all())

    async def find_by_domain_containing(self, fragment: str) -> list[Note]:
        """
        Notes whose domain contains fragment as a substring.

        LIKE wildcards in fragment are escaped, so "%" and "_" match
        literally. Case sensitivity follows the column collation.
        """
        result = await self.session.execute(
            select(Note).where(Note.domain.contains(fragment, autoescape=True))
        )
        return list(result.scalars().all())

    async def list_newest_first(self) -> list[Note]:
        """All notes, most recently created first."""
        result = await self.session.execute(
            select(Note).order_by(Note.created_at.desc(), Note.id.desc())
        )
        return list(result.scalars().all())
