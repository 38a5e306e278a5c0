"""
History Log.

Append-only, per-note log of archived note snapshots. Each note's
entries live in the ``history`` sub-collection under the note document.
Entries are never modified or deleted here; deleting a note leaves its
entries in place.
"""

from datetime import datetime

from modules.notes.core.logging import get_logger
from modules.notes.schemas.note import HistoryEntry, Note
from modules.notes.store.base import Document, DocumentStore, WriteBatch, subcollection

logger = get_logger(__name__)


class HistoryLog:
    """Archived snapshots of notes, one sub-collection per note."""

    def __init__(
        self,
        store: DocumentStore,
        notes_collection: str = "notes",
        history_collection: str = "history",
        sort_entries: bool = True,
    ) -> None:
        self.store = store
        self.notes_collection = notes_collection
        self.history_collection = history_collection
        self.sort_entries = sort_entries

    def collection_for(self, note_id: str) -> str:
        return subcollection(self.notes_collection, note_id, self.history_collection)

    def stage_append(
        self,
        batch: WriteBatch,
        note_id: str,
        snapshot: Note,
        saved_at: datetime,
    ) -> HistoryEntry:
        """
        Stage archival of ``snapshot`` in ``batch``.

        Nothing is written until the batch commits, which lets callers
        archive and overwrite a note in one atomic write.
        """
        fields = HistoryEntry.snapshot_fields(snapshot, saved_at)
        entry_id = batch.create(self.collection_for(note_id), fields)
        return HistoryEntry.from_document(Document(id=entry_id, fields=fields))

    async def append(self, note_id: str, snapshot: Note) -> HistoryEntry:
        """Archive ``snapshot`` as a new entry for ``note_id``, saved now."""
        batch = self.store.batch()
        entry = self.stage_append(batch, note_id, snapshot, self.store.now())
        await batch.commit()
        logger.debug("History entry appended", extra={"note_id": note_id, "entry_id": entry.id})
        return entry

    async def list(self, note_id: str) -> list[HistoryEntry]:
        """
        All entries for ``note_id``.

        Ordered by ``saved_at`` ascending when ``sort_entries`` is set,
        ties keeping the store's enumeration order; otherwise in the
        store's enumeration order.
        """
        documents = await self.store.list_documents(self.collection_for(note_id))
        entries = [HistoryEntry.from_document(document) for document in documents]
        if self.sort_entries:
            entries.sort(key=lambda entry: entry.saved_at)
        return entries

    async def count(self, note_id: str) -> int:
        return len(await self.store.list_documents(self.collection_for(note_id)))
