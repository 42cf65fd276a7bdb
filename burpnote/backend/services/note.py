"""
Note Service.

Business logic layer for notes. Validates input before any SQL is
issued, delegates to NoteRepository, and applies the delete policy.
"""

from collections.abc import Iterable

from burpnote.backend.core.database import ConnectionManager
from burpnote.backend.core.exceptions import (
    NotConnectedError,
    NotFoundError,
    QueryError,
    ValidationError,
)
from burpnote.backend.repositories.note import NoteRepository
from burpnote.backend.schemas.note import NoteRecord, SearchMode
from burpnote.backend.services.base import BaseService


class NoteService(BaseService):
    """
    Service for note business logic.

    Every operation requires an established connection and fails with
    NotConnectedError before touching the database otherwise.
    """

    def __init__(
        self,
        connections: ConnectionManager,
        delete_missing_is_error: bool = True,
    ) -> None:
        super().__init__(connections)
        self.delete_missing_is_error = delete_missing_is_error

    def _require_connection(self) -> None:
        if not self._connections.is_connected:
            raise NotConnectedError()

    async def insert_note(self, domain: str, content: str) -> None:
        """
        Store a new note.

        Args:
            domain: Domain the note belongs to (may be empty)
            content: Note text (required)

        Raises:
            ValidationError: If content is empty
            NotConnectedError: If no connection is established
            QueryError: If the insert fails or affects no row
        """
        domain = (domain or "").strip()
        content = (content or "").strip()
        self._validate_required({"content": content}, ["content"], "Content cannot be empty.")
        self._require_connection()

        self._log_operation("Inserting note", domain=domain)

        affected = await self._execute_db_operation(
            "insert_note",
            lambda session: NoteRepository(session).insert(domain, content),
        )
        if affected != 1:
            raise QueryError("Insert failed: No rows affected.")

        self._log_debug("Note inserted", domain=domain)

    async def search_notes(self, domain: str, mode: SearchMode) -> list[NoteRecord]:
        """
        Find notes by domain.

        Args:
            domain: Domain to match
            mode: EXACT for equality, FUZZY for substring match

        Returns:
            Matching notes in the database's result order

        Raises:
            ValidationError: If domain is empty
            NotConnectedError: If no connection is established
            QueryError: If the query fails
        """
        domain = (domain or "").strip()
        self._validate_required({"domain": domain}, ["domain"], "Please enter a domain to search.")
        self._require_connection()

        self._log_debug("Searching notes", domain=domain, mode=mode.value)

        async def _search(session):
            repo = NoteRepository(session)
            if mode is SearchMode.EXACT:
                notes = await repo.find_by_domain(domain)
            else:
                notes = await repo.find_by_domain_containing(domain)
            return [NoteRecord.model_validate(note) for note in notes]

        records = await self._execute_db_operation("search_notes", _search)
        self._log_operation("Search completed", domain=domain, found=len(records))
        return records

    async def list_notes(self) -> list[NoteRecord]:
        """
        List every note, newest first.

        Raises:
            NotConnectedError: If no connection is established
            QueryError: If the query fails
        """
        self._require_connection()

        async def _list(session):
            notes = await NoteRepository(session).list_newest_first()
            return [NoteRecord.model_validate(note) for note in notes]

        records = await self._execute_db_operation("list_notes", _list)
        self._log_operation("Loaded notes", count=len(records))
        return records

    async def delete_notes(self, ids: Iterable[int]) -> bool:
        """
        Delete the notes with the given ids in a single statement.

        Args:
            ids: Primary keys of the notes to delete

        Returns:
            True if at least one row was deleted. False only when nothing
            was deleted and delete_missing_is_error is off.

        Raises:
            ValidationError: If ids is empty
            NotConnectedError: If no connection is established
            NotFoundError: If nothing was deleted and delete_missing_is_error is on
            QueryError: If the statement fails
        """
        id_list = list(dict.fromkeys(ids))
        if not id_list:
            raise ValidationError("No notes selected.")
        self._require_connection()

        self._log_operation("Deleting notes", ids=id_list)

        affected = await self._execute_db_operation(
            "delete_notes",
            lambda session: NoteRepository(session).delete_by_ids(id_list),
        )
        if affected > 0:
            self._log_operation("Deleted notes", requested=len(id_list), affected=affected)
            return True

        self._log_operation("Delete affected no rows", ids=id_list)
        if self.delete_missing_is_error:
            raise NotFoundError("Delete failed: Records not found.")
        return False
