"""
Note Schemas.

Pydantic schemas passed between the note store and the UI.
"""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class SearchMode(str, Enum):
    """How a search domain is matched against stored domains."""

    EXACT = "exact"
    FUZZY = "fuzzy"


class ConnectionParams(BaseModel):
    """
    User-supplied connection parameters.

    Held as typed text, exactly as entered in the connection panel.
    Blank-field checks happen in ConnectionManager.connect so they
    surface as ValidationError, not as pydantic errors.
    """

    host: str = Field(default="", description="MySQL server host")
    port: str = Field(default="", description="MySQL server port")
    database: str = Field(default="", description="Database name")
    user: str = Field(default="", description="Login user")
    password: str = Field(default="", repr=False, description="Login password")


class NoteRecord(BaseModel):
    """A stored note as displayed in the results tables."""

    id: int = Field(description="Note primary key")
    domain: str | None = Field(default=None, description="Domain the note is keyed by")
    content: str | None = Field(default=None, description="Note content")
    created_at: datetime | None = Field(default=None, description="Creation timestamp")

    model_config = ConfigDict(from_attributes=True, frozen=True)
