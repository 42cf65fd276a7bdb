# Pydantic schemas package
from burpnote.backend.schemas.note import (
    ConnectionParams,
    NoteRecord,
    SearchMode,
)

__all__ = [
    "ConnectionParams",
    "NoteRecord",
    "SearchMode",
]
