"""
Note Repository.

Owns current note state. Updates archive the existing state into the
history log and overwrite the note in one batch, so either both effects
are applied or neither is. Reverts overwrite from a history entry
without archiving unless ``archive_on_revert`` is set.
"""

from collections.abc import Mapping
from datetime import datetime
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from modules.notes.core.exceptions import ConflictError, PermissionDeniedError, ValidationError
from modules.notes.core.logging import get_logger
from modules.notes.core.ownership import can_delete
from modules.notes.repositories.base import BaseRepository
from modules.notes.repositories.history import HistoryLog
from modules.notes.schemas.note import HistoryEntry, Note, NoteFields
from modules.notes.store.base import DocumentStore

logger = get_logger(__name__)


def parse_note_fields(fields: NoteFields | Mapping[str, Any]) -> NoteFields:
    """
    Validate user-supplied fields.

    Raises:
        ValidationError: If title is empty or category is not one of the fixed set
    """
    if isinstance(fields, NoteFields):
        return fields
    try:
        return NoteFields.model_validate(dict(fields))
    except PydanticValidationError as e:
        raise ValidationError(
            "Invalid note fields",
            details={
                ".".join(str(part) for part in error["loc"]): error["msg"]
                for error in e.errors()
            },
        ) from e


def _require_identity(identity: str | None, name: str) -> str:
    if not isinstance(identity, str) or not identity.strip():
        raise ValidationError(f"{name} is required", details={name: "must be a non-empty string"})
    return identity


class NoteRepository(BaseRepository[Note]):
    """Repository for current note documents."""

    model = Note

    def __init__(
        self,
        store: DocumentStore,
        history: HistoryLog | None = None,
        collection: str = "notes",
        archive_on_revert: bool = False,
    ) -> None:
        super().__init__(store, collection)
        self.history = history or HistoryLog(store, notes_collection=collection)
        self.archive_on_revert = archive_on_revert

    async def create(self, fields: NoteFields | Mapping[str, Any], owner_id: str) -> Note:
        """
        Create a note owned by ``owner_id``. No history entry is written.

        Raises:
            ValidationError: If fields or owner_id are invalid
        """
        data = parse_note_fields(fields)
        owner_id = _require_identity(owner_id, "owner_id")

        document = {
            **data.model_dump(mode="json"),
            "owner_id": owner_id,
            "updated_at": self.store.now().isoformat(),
        }
        note_id = await self.store.create_document(self.collection, document)

        logger.info("Note created", extra={"note_id": note_id, "owner_id": owner_id})
        return Note.model_validate({"id": note_id, **document})

    async def update(
        self,
        id: str,
        fields: NoteFields | Mapping[str, Any],
        owner_id: str,
        expected_updated_at: datetime | None = None,
    ) -> Note:
        """
        Archive the note's current state, then overwrite it.

        The archive entry and the overwrite are committed as one batch.
        Ownership is never reassigned: the stored owner is kept even if
        ``owner_id`` differs.

        Args:
            id: Note ID
            fields: New title, content, and category
            owner_id: Acting identity
            expected_updated_at: If given, the update only applies when the
                stored ``updated_at`` still equals it

        Raises:
            ValidationError: If fields are invalid
            NotFoundError: If the note does not exist
            ConflictError: If ``expected_updated_at`` no longer matches
        """
        data = parse_note_fields(fields)
        _require_identity(owner_id, "owner_id")

        current = await self.get_by_id(id)
        if expected_updated_at is not None and current.updated_at != expected_updated_at:
            raise ConflictError(f"Note {id} was modified since it was read")

        now = self.store.now()
        updated = current.model_copy(update={**dict(data), "updated_at": now})

        batch = self.store.batch()
        entry = self.history.stage_append(batch, id, current, saved_at=now)
        batch.update(self.collection, id, updated.to_fields())
        await batch.commit()

        logger.info(
            "Note updated",
            extra={"note_id": id, "entry_id": entry.id, "acting_identity": owner_id},
        )
        return updated

    async def delete(self, id: str, acting_identity: str) -> None:
        """
        Delete a note. Its history entries are left in place.

        Raises:
            NotFoundError: If the note does not exist
            PermissionDeniedError: If ``acting_identity`` does not own the note
        """
        current = await self.get_by_id(id)
        if not can_delete(current, acting_identity):
            logger.warning(
                "Note delete denied",
                extra={"note_id": id, "acting_identity": acting_identity},
            )
            raise PermissionDeniedError(f"Only the owner may delete note {id}")

        await self.store.delete_document(self.collection, id)
        logger.info("Note deleted", extra={"note_id": id})

    async def revert(self, id: str, target: HistoryEntry) -> Note:
        """
        Overwrite a note's title, content, and category from ``target``.

        The overwritten state is archived only when ``archive_on_revert``
        is set.

        Raises:
            ValidationError: If ``target`` belongs to a different note
            NotFoundError: If the note does not exist
        """
        if target.note_id != id:
            raise ValidationError(
                "History entry belongs to another note",
                details={"note_id": id, "entry_note_id": target.note_id},
            )

        current = await self.get_by_id(id)
        now = self.store.now()
        reverted = current.model_copy(
            update={**target.restored_fields(), "updated_at": now},
        )

        batch = self.store.batch()
        if self.archive_on_revert:
            self.history.stage_append(batch, id, current, saved_at=now)
        batch.update(self.collection, id, reverted.to_fields())
        await batch.commit()

        logger.info("Note reverted", extra={"note_id": id, "entry_id": target.id})
        return reverted
