"""Unit tests for note schemas."""

from datetime import datetime

import pytest
from pydantic import ValidationError

from modules.notes.schemas.note import Category, HistoryEntry, Note, NoteFields
from modules.notes.store.base import Document


class TestNoteFields:
    def test_defaults_content_to_empty(self):
        fields = NoteFields(title="T", category="work")

        assert fields.content == ""
        assert fields.category is Category.WORK

    @pytest.mark.parametrize("title", ["", "   "])
    def test_rejects_empty_title(self, title):
        with pytest.raises(ValidationError):
            NoteFields(title=title, category="work")

    def test_accepts_long_title_and_content(self):
        fields = NoteFields(title="x" * 300, content="y" * 20000, category="work")

        assert len(fields.title) == 300
        assert len(fields.content) == 20000

    def test_rejects_unknown_category(self):
        with pytest.raises(ValidationError):
            NoteFields(title="T", category="errands")

    def test_rejects_missing_category(self):
        with pytest.raises(ValidationError):
            NoteFields(title="T")

    def test_rejects_extra_fields(self):
        with pytest.raises(ValidationError):
            NoteFields(title="T", category="work", owner_id="mallory")


class TestNote:
    def test_round_trips_through_document_fields(self):
        note = Note(
            id="n1",
            title="T",
            content="C",
            category=Category.PERSONAL,
            owner_id="alice",
            updated_at=datetime(2026, 3, 4, 5, 6, 7, 123456),
        )

        fields = note.to_fields()

        assert "id" not in fields
        assert fields["category"] == "personal"
        assert fields["updated_at"] == "2026-03-04T05:06:07.123456"
        assert Note.from_document(Document(id="n1", fields=fields)) == note

    def test_is_immutable(self):
        note = Note(id="n1", title="T", category="work", updated_at=datetime(2026, 1, 1))

        with pytest.raises(ValidationError):
            note.title = "changed"


class TestHistoryEntry:
    def test_snapshot_fields_copy_note_state(self):
        note = Note(
            id="n1",
            title="T",
            content="C",
            category="other",
            owner_id="alice",
            updated_at=datetime(2026, 1, 1),
        )
        saved_at = datetime(2026, 1, 2)

        fields = HistoryEntry.snapshot_fields(note, saved_at)
        entry = HistoryEntry.from_document(Document(id="h1", fields=fields))

        assert entry.note_id == "n1"
        assert entry.title == "T"
        assert entry.content == "C"
        assert entry.category is Category.OTHER
        assert entry.owner_id == "alice"
        assert entry.updated_at == datetime(2026, 1, 1)
        assert entry.saved_at == saved_at
        assert entry.restored_fields() == {"title": "T", "content": "C", "category": Category.OTHER}
