"""
Note Schemas.

Pydantic models for the current state of a note and its archived snapshots.
Documents are stored with the field names used here (minus ``id``), and
timestamps are serialized as ISO 8601 strings.
"""

from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from modules.notes.store.base import Document


class Category(str, Enum):
    """Fixed set of note categories."""

    WORK = "work"
    PERSONAL = "personal"
    OTHER = "other"


class NoteFields(BaseModel):
    """User-editable fields, supplied to create and update."""

    model_config = ConfigDict(extra="forbid")

    title: str = Field(
        ...,
        min_length=1,
        description="Note title",
        examples=["Quarterly plan"],
    )
    content: str = Field(
        default="",
        description="Note content, may be empty",
    )
    category: Category = Field(description="Note category")

    @field_validator("title")
    @classmethod
    def title_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("title must not be blank")
        return value


class Note(BaseModel):
    """Current state of one note."""

    model_config = ConfigDict(frozen=True)

    id: str
    title: str
    content: str = ""
    category: Category
    owner_id: str | None = None
    updated_at: datetime

    @classmethod
    def from_document(cls, document: Document) -> "Note":
        return cls(id=document.id, **document.fields)

    def to_fields(self) -> dict[str, Any]:
        """Document fields for this note, as stored."""
        return self.model_dump(mode="json", exclude={"id"})

    def __repr__(self) -> str:
        return f"<Note(id={self.id}, title={self.title!r})>"


class HistoryEntry(BaseModel):
    """
    Archived snapshot of a note.

    Holds a copy of the note's fields as they were immediately before
    the update that archived them, plus the time of archival. Entries
    are write-once.
    """

    model_config = ConfigDict(frozen=True)

    id: str
    note_id: str
    title: str
    content: str = ""
    category: Category
    owner_id: str | None = None
    updated_at: datetime
    saved_at: datetime

    @classmethod
    def from_document(cls, document: Document) -> "HistoryEntry":
        return cls(id=document.id, **document.fields)

    @classmethod
    def snapshot_fields(cls, note: Note, saved_at: datetime) -> dict[str, Any]:
        """Document fields archiving ``note`` at ``saved_at``."""
        fields = note.to_fields()
        fields["note_id"] = note.id
        fields["saved_at"] = saved_at.isoformat()
        return fields

    def restored_fields(self) -> dict[str, Any]:
        """Title, content, and category exactly as archived, without re-validation."""
        return {"title": self.title, "content": self.content, "category": self.category}
