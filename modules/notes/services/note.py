"""
Note Service.

Entry point for callers (CLI, UI, other consumers). Writes go through
the note repository; reads come from the live view projector, which is
fed by a subscription to the note collection.

Usage:
    service = NoteService(store)
    await service.start()

    note = await service.create_note({"title": "T1", "category": "work"}, owner_id="u1")
    await service.wait_for_sync()
    service.current_filtered_notes()

    await service.stop()
"""

from collections.abc import Mapping
from datetime import datetime
from typing import Any

from modules.notes.core.logging import get_logger
from modules.notes.events.publishers import NoteEventPublisher
from modules.notes.repositories.history import HistoryLog
from modules.notes.repositories.note import NoteRepository
from modules.notes.schemas.note import Category, HistoryEntry, Note, NoteFields
from modules.notes.services.base import BaseService
from modules.notes.services.projector import LiveViewProjector
from modules.notes.store.base import DocumentStore, Subscription

logger = get_logger(__name__)


class NoteService(BaseService):
    """
    Service for shared, versioned notes.

    Every mutation either completes or raises an ApplicationError
    subclass; nothing is retried here.
    """

    def __init__(
        self,
        store: DocumentStore,
        collection: str = "notes",
        history_collection: str = "history",
        archive_on_revert: bool = False,
        sort_history: bool = True,
        publisher: NoteEventPublisher | None = None,
    ) -> None:
        super().__init__(store)
        self.history = HistoryLog(
            store,
            notes_collection=collection,
            history_collection=history_collection,
            sort_entries=sort_history,
        )
        self.repo = NoteRepository(
            store,
            history=self.history,
            collection=collection,
            archive_on_revert=archive_on_revert,
        )
        self.projector = LiveViewProjector()
        self.publisher = publisher or NoteEventPublisher()
        self._subscription: Subscription | None = None

    @classmethod
    def from_config(cls, store: DocumentStore) -> "NoteService":
        """Build a service using the collection and history settings in notes.yaml."""
        from modules.notes.core.config import get_app_config

        notes_config = get_app_config().notes
        return cls(
            store,
            collection=notes_config.collection,
            history_collection=notes_config.history_collection,
            archive_on_revert=notes_config.archive_on_revert,
            sort_history=notes_config.sort_history,
        )

    # -------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------

    async def start(self) -> None:
        """Subscribe the projector to the note collection."""
        if self._subscription is not None:
            return
        self._subscription = await self.store.subscribe(
            self.repo.collection, self.projector.apply_snapshot,
        )
        self._log_debug("Subscribed to notes", collection=self.repo.collection)

    async def stop(self) -> None:
        if self._subscription is not None:
            self._subscription.unsubscribe()
            self._subscription = None

    async def wait_for_sync(self) -> None:
        """Wait until the projector has handled every snapshot delivered so far."""
        if self._subscription is not None:
            await self._subscription.wait_idle()

    # -------------------------------------------------------------------------
    # Writes
    # -------------------------------------------------------------------------

    async def create_note(self, fields: NoteFields | Mapping[str, Any], owner_id: str) -> Note:
        """
        Create a note.

        Raises:
            ValidationError: If fields are invalid
            StoreUnavailableError: If the store write fails
        """
        note = await self.repo.create(fields, owner_id)
        self._log_operation("Note created", note_id=note.id)
        await self.publisher.note_created(note.id, note.title)
        return note

    async def update_note(
        self,
        note_id: str,
        fields: NoteFields | Mapping[str, Any],
        owner_id: str,
        expected_updated_at: datetime | None = None,
    ) -> Note:
        """
        Update a note, archiving its previous state.

        Raises:
            ValidationError: If fields are invalid
            NotFoundError: If the note does not exist
            ConflictError: If ``expected_updated_at`` no longer matches
            StoreUnavailableError: If the store write fails
        """
        note = await self.repo.update(
            note_id, fields, owner_id, expected_updated_at=expected_updated_at,
        )
        self._log_operation("Note updated", note_id=note_id)
        await self.publisher.note_updated(note_id)
        return note

    async def delete_note(self, note_id: str, acting_identity: str) -> None:
        """
        Delete a note owned by ``acting_identity``.

        Raises:
            NotFoundError: If the note does not exist
            PermissionDeniedError: If ``acting_identity`` is not the owner
            StoreUnavailableError: If the store write fails
        """
        await self.repo.delete(note_id, acting_identity)
        if self.projector.is_viewing_history(note_id):
            self.projector.hide_history()
        self._log_operation("Note deleted", note_id=note_id)
        await self.publisher.note_deleted(note_id)

    async def revert_note(self, note_id: str, entry: HistoryEntry) -> Note:
        """
        Revert a note to a history entry and close the history view.

        Raises:
            ValidationError: If the entry belongs to another note
            NotFoundError: If the note does not exist
            StoreUnavailableError: If the store write fails
        """
        note = await self.repo.revert(note_id, entry)
        self.projector.hide_history()
        self._log_operation("Note reverted", note_id=note_id, entry_id=entry.id)
        await self.publisher.note_reverted(note_id, entry.id)
        return note

    # -------------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------------

    async def get_note(self, note_id: str) -> Note:
        """
        Read a note's current state from the store.

        Raises:
            NotFoundError: If the note does not exist
        """
        return await self.repo.get_by_id(note_id)

    async def view_history(self, note_id: str) -> list[HistoryEntry]:
        """
        Load and show the history of ``note_id``.

        Replaces any other note's history in the view. Entries of a
        deleted note are still returned.
        """
        entries = await self.history.list(note_id)
        self.projector.show_history(note_id, entries)
        self._log_debug("History loaded", note_id=note_id, entries=len(entries))
        return entries

    async def toggle_history(self, note_id: str) -> list[HistoryEntry]:
        """Hide the history if ``note_id`` is already shown, otherwise show it."""
        if self.projector.is_viewing_history(note_id):
            self.projector.hide_history()
            return []
        return await self.view_history(note_id)

    def set_category_filter(self, category: Category | str | None) -> None:
        """
        Select the category to narrow the view by; None shows every note.

        Raises:
            ValidationError: If the category is not one of the fixed set
        """
        self.projector.set_category_filter(self._validate_category(category))

    def current_filtered_notes(self) -> list[Note]:
        """The projected notes, narrowed by the selected category."""
        return self.projector.filtered_notes()
