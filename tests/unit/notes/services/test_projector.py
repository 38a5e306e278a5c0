"""Unit tests for the live view projector."""

from datetime import datetime

import pytest

from modules.notes.schemas.note import Category, HistoryEntry
from modules.notes.services.projector import LiveViewProjector
from modules.notes.store.base import Document


def _doc(note_id: str, title: str, category: str = "work") -> Document:
    return Document(
        id=note_id,
        fields={
            "title": title,
            "content": "",
            "category": category,
            "owner_id": "alice",
            "updated_at": "2026-01-01T00:00:00",
        },
    )


def _entry(note_id: str, title: str) -> HistoryEntry:
    return HistoryEntry(
        id=f"h-{title}",
        note_id=note_id,
        title=title,
        category="work",
        updated_at=datetime(2026, 1, 1),
        saved_at=datetime(2026, 1, 2),
    )


@pytest.fixture
def projector() -> LiveViewProjector:
    return LiveViewProjector()


class TestSnapshots:
    def test_starts_empty(self, projector):
        assert projector.current_notes() == []
        assert projector.snapshots_applied == 0

    def test_snapshot_replaces_wholesale(self, projector):
        projector.apply_snapshot([_doc("a", "A"), _doc("b", "B")])
        projector.apply_snapshot([_doc("b", "B2")])

        notes = projector.current_notes()
        assert [(n.id, n.title) for n in notes] == [("b", "B2")]
        assert projector.snapshots_applied == 2

    def test_malformed_documents_are_skipped(self, projector):
        bad = Document(id="x", fields={"title": "no category"})

        projector.apply_snapshot([_doc("a", "A"), bad])

        assert [n.id for n in projector.current_notes()] == ["a"]

    def test_get_by_id(self, projector):
        projector.apply_snapshot([_doc("a", "A")])

        assert projector.get("a").title == "A"
        assert projector.get("zzz") is None


class TestCategoryFilter:
    def test_filters_current_notes(self, projector):
        projector.apply_snapshot([_doc("a", "A", "work"), _doc("b", "B", "personal")])

        projector.set_category_filter("personal")

        assert projector.category_filter is Category.PERSONAL
        assert [n.id for n in projector.filtered_notes()] == ["b"]

    def test_filter_applies_to_later_snapshots(self, projector):
        projector.set_category_filter(Category.WORK)

        projector.apply_snapshot([_doc("a", "A", "other"), _doc("b", "B", "work")])

        assert [n.id for n in projector.filtered_notes()] == ["b"]

    def test_clearing_filter_shows_everything(self, projector):
        projector.apply_snapshot([_doc("a", "A", "work"), _doc("b", "B", "personal")])
        projector.set_category_filter("work")

        projector.set_category_filter(None)

        assert [n.id for n in projector.filtered_notes()] == ["a", "b"]


class TestHistoryView:
    def test_show_and_hide(self, projector):
        projector.show_history("a", [_entry("a", "old")])

        assert projector.is_viewing_history("a")
        assert [e.title for e in projector.history] == ["old"]

        projector.hide_history()

        assert projector.history_note_id is None
        assert projector.history == []

    def test_second_note_replaces_first(self, projector):
        projector.show_history("a", [_entry("a", "old-a")])
        projector.show_history("b", [_entry("b", "old-b")])

        assert not projector.is_viewing_history("a")
        assert [e.title for e in projector.history] == ["old-b"]

    def test_view_dropped_when_note_disappears(self, projector):
        projector.apply_snapshot([_doc("a", "A")])
        projector.show_history("a", [_entry("a", "old")])

        projector.apply_snapshot([])

        assert projector.history_note_id is None

    def test_view_kept_while_note_present(self, projector):
        projector.apply_snapshot([_doc("a", "A")])
        projector.show_history("a", [_entry("a", "old")])

        projector.apply_snapshot([_doc("a", "A2")])

        assert projector.is_viewing_history("a")
