class NoteError(Exception):
    """Base class for note storage errors."""


class NoteNotFoundError(NoteError):
    """Raised when no note exists for the requested id."""

    def __init__(self, note_id: int):
        super().__init__(f"Note {note_id} not found")
        self.note_id = note_id


class NoteIdentityError(NoteError):
    """Raised when a note's identifier is missing, already set, or being changed."""
