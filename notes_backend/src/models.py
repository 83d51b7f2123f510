from sqlalchemy import BigInteger, Column, Integer, String, Text

from src.db import Base

TITLE_MAX_LENGTH = 200
# 64-bit identity column; SQLite's INTEGER PRIMARY KEY is already 64-bit.
NOTE_ID_MAX = 2**63 - 1


class NoteRow(Base):
    """SQLAlchemy model for the notes table."""
    __tablename__ = "notes"

    id = Column(BigInteger().with_variant(Integer, "sqlite"), primary_key=True, autoincrement=True, index=True)
    title = Column(String(TITLE_MAX_LENGTH), nullable=False)
    # Large object: Text maps to TEXT on PostgreSQL and SQLite, with no size ceiling.
    content = Column(Text, nullable=False)

    def __repr__(self) -> str:
        return f"<NoteRow(id={self.id}, title={self.title!r})>"
