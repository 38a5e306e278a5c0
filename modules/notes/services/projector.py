"""
Live View Projector.

Holds the latest full snapshot of the note collection, replaced
wholesale on every subscription event, plus view state: the selected
category filter and the history of at most one note being viewed.

Snapshots arrive on the store's subscription channel, independently of
writes, so right after a write the projection may still show the
previous state until the next event is handled.
"""

from collections.abc import Sequence

from pydantic import ValidationError as PydanticValidationError

from modules.notes.core.logging import get_logger, log_with_source
from modules.notes.schemas.note import Category, HistoryEntry, Note
from modules.notes.services.filtering import filter_by_category
from modules.notes.store.base import Document

logger = get_logger(__name__)


class LiveViewProjector:
    """In-memory, always-current list of notes and the state of its view."""

    def __init__(self) -> None:
        self._notes: list[Note] = []
        self._category: Category | None = None
        self._history_note_id: str | None = None
        self._history: list[HistoryEntry] = []
        self._snapshots_applied = 0

    def apply_snapshot(self, documents: Sequence[Document]) -> None:
        """Replace the held notes with ``documents``. Used as the subscription callback."""
        notes = []
        for document in documents:
            try:
                notes.append(Note.from_document(document))
            except PydanticValidationError as e:
                log_with_source(
                    logger, "projector", "warning", "Skipping malformed note document",
                    note_id=document.id, error=str(e),
                )
        self._notes = notes
        self._snapshots_applied += 1

        if self._history_note_id is not None and not any(
            note.id == self._history_note_id for note in notes
        ):
            self.hide_history()

        log_with_source(logger, "projector", "debug", "Snapshot applied", notes=len(notes))

    @property
    def snapshots_applied(self) -> int:
        return self._snapshots_applied

    def current_notes(self) -> list[Note]:
        return list(self._notes)

    def get(self, note_id: str) -> Note | None:
        for note in self._notes:
            if note.id == note_id:
                return note
        return None

    # -------------------------------------------------------------------------
    # Category filter
    # -------------------------------------------------------------------------

    @property
    def category_filter(self) -> Category | None:
        return self._category

    def set_category_filter(self, category: Category | str | None) -> None:
        self._category = Category(category) if category else None

    def filtered_notes(self) -> list[Note]:
        return filter_by_category(self._notes, self._category)

    # -------------------------------------------------------------------------
    # History view
    # -------------------------------------------------------------------------

    @property
    def history_note_id(self) -> str | None:
        return self._history_note_id

    @property
    def history(self) -> list[HistoryEntry]:
        return list(self._history)

    def is_viewing_history(self, note_id: str) -> bool:
        return self._history_note_id == note_id

    def show_history(self, note_id: str, entries: Sequence[HistoryEntry]) -> None:
        """Show ``entries`` for ``note_id``, replacing any other note's history."""
        self._history_note_id = note_id
        self._history = list(entries)

    def hide_history(self) -> None:
        self._history_note_id = None
        self._history = []
