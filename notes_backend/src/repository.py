import logging
from typing import List

from sqlalchemy import select
from sqlalchemy.orm import Session

from src.domain import Note
from src.errors import NoteIdentityError, NoteNotFoundError
from src.models import NOTE_ID_MAX, NoteRow

logger = logging.getLogger(__name__)


def to_row(note: Note) -> NoteRow:
    """Map a note onto a new ORM row (id left for the database when transient)."""
    return NoteRow(id=note.id, title=note.title, content=note.content)


def to_domain(row: NoteRow) -> Note:
    """Map an ORM row to a detached note."""
    return Note(title=row.title, content=row.content, id=row.id)


# PUBLIC_INTERFACE
class NoteRepository:
    """
    Storage collaborator for notes.

    Callers work with `Note` objects only; rows never leave this class.
    Each mutating call commits its own transaction.
    """

    def __init__(self, session: Session):
        self.session = session

    def _row(self, note_id: int) -> NoteRow:
        # Ids outside the column range cannot exist; the driver would reject them.
        if not 1 <= note_id <= NOTE_ID_MAX:
            raise NoteNotFoundError(note_id)
        row = self.session.get(NoteRow, note_id)
        if row is None:
            raise NoteNotFoundError(note_id)
        return row

    def add(self, note: Note) -> Note:
        """Persist a transient note and assign its id."""
        if note.is_persisted:
            raise NoteIdentityError(f"Note {note.id} is already persisted")

        row = to_row(note)
        try:
            self.session.add(row)
            self.session.commit()
        except Exception:
            self.session.rollback()
            logger.exception("Failed creating note title_len=%s", len(note.title))
            raise
        self.session.refresh(row)

        note.id = row.id
        logger.info("Created note id=%s title_len=%s content_len=%s", row.id, len(note.title), len(note.content))
        return note

    def get(self, note_id: int) -> Note:
        return to_domain(self._row(note_id))

    def list(self) -> List[Note]:
        """All notes, most recent (highest id) first."""
        rows = self.session.execute(select(NoteRow).order_by(NoteRow.id.desc())).scalars().all()
        return [to_domain(row) for row in rows]

    def update(self, note: Note) -> Note:
        """Replace title and content of a persisted note."""
        if not note.is_persisted:
            raise NoteIdentityError("Cannot update a note that has not been persisted")

        row = self._row(note.id)
        row.title = note.title
        row.content = note.content
        try:
            self.session.commit()
        except Exception:
            self.session.rollback()
            logger.exception("Failed updating note id=%s", note.id)
            raise
        self.session.refresh(row)

        logger.info("Updated note id=%s title_len=%s content_len=%s", row.id, len(row.title), len(row.content))
        return to_domain(row)

    def delete(self, note_id: int) -> None:
        row = self._row(note_id)
        try:
            self.session.delete(row)
            self.session.commit()
        except Exception:
            self.session.rollback()
            logger.exception("Failed deleting note id=%s", note_id)
            raise
        logger.info("Deleted note id=%s", note_id)
