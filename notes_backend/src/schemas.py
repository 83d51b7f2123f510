from pydantic import BaseModel, ConfigDict, Field, field_validator

from src.models import TITLE_MAX_LENGTH


def _strip_title(value: str | None) -> str | None:
    return value.strip() if isinstance(value, str) else value


class NoteBase(BaseModel):
    title: str = Field(..., min_length=1, max_length=TITLE_MAX_LENGTH, description="Short note title (1-200 chars).")
    content: str = Field(..., min_length=1, description="Full note content (non-empty, no upper bound).")

    @field_validator("title", mode="before")
    @classmethod
    def strip_title(cls, v):
        return _strip_title(v)


class NoteCreate(NoteBase):
    """Schema for creating a note."""


class NoteReplace(NoteBase):
    """Schema for a full update; both fields are required."""


class NoteUpdate(BaseModel):
    """Schema for updating a note (partial update)."""
    title: str | None = Field(None, min_length=1, max_length=TITLE_MAX_LENGTH, description="Updated title (1-200 chars).")
    content: str | None = Field(None, min_length=1, description="Updated content (non-empty).")

    @field_validator("title", mode="before")
    @classmethod
    def strip_title(cls, v):
        return _strip_title(v)


class NoteOut(BaseModel):
    """Schema returned for a note; stored values pass through unchanged."""
    model_config = ConfigDict(from_attributes=True)

    id: int = Field(..., description="Database ID of the note.")
    title: str = Field(..., description="Note title as stored.")
    content: str = Field(..., description="Note content as stored.")
