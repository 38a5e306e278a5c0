# Pydantic schemas package
from modules.notes.schemas.note import Category, HistoryEntry, Note, NoteFields

__all__ = [
    "Category",
    "HistoryEntry",
    "Note",
    "NoteFields",
]
