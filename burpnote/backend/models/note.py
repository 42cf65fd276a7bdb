"""
Note Model.

Database model for notes. The table layout is shared with existing
BurpNote databases and must not change:

    CREATE TABLE burp_notes (
        id INT AUTO_INCREMENT PRIMARY KEY,
        domain VARCHAR(255),
        content TEXT,
        create_time TIMESTAMP DEFAULT CURRENT_TIMESTAMP
    ) CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci
"""

from datetime import datetime

from sqlalchemy import TIMESTAMP, Integer, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column

from burpnote.backend.models.base import Base

NOTES_TABLE = "burp_notes"


class Note(Base):
    """
    Note database model.

    A free-text note keyed by domain. id and created_at are assigned
    by the database on insert and never change afterwards.
    """

    __tablename__ = NOTES_TABLE
    __table_args__ = {
        "mysql_charset": "utf8mb4",
        "mysql_collate": "utf8mb4_unicode_ci",
    }

    id: Mapped[int] = mapped_column(
        Integer,
        primary_key=True,
        autoincrement=True,
    )
    domain: Mapped[str | None] = mapped_column(
        String(255),
        nullable=True,
    )
    content: Mapped[str | None] = mapped_column(
        Text,
        nullable=True,
    )
    created_at: Mapped[datetime | None] = mapped_column(
        "create_time",
        TIMESTAMP,
        nullable=True,
        server_default=func.current_timestamp(),
    )

    def __repr__(self) -> str:
        return f"<Note(id={self.id}, domain={self.domain!r})>"
