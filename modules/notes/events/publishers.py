"""
Event Publishers.

Note event publisher. Wraps the broker's publish() method with the
correct stream name and event schema.

The publisher checks the events_publish_enabled feature flag before
publishing. When disabled, events are silently skipped.

Usage:
    from modules.notes.events.publishers import NoteEventPublisher

    publisher = NoteEventPublisher()
    await publisher.note_created(note_id, title, correlation_id=correlation_id)
"""

from uuid import uuid4

from modules.notes.core.logging import get_logger
from modules.notes.events.schemas import (
    EventEnvelope,
    NoteCreated,
    NoteDeleted,
    NoteReverted,
    NoteUpdated,
)

logger = get_logger(__name__)


class NoteEventPublisher:
    """Publishes note domain events to Redis Streams."""

    SOURCE = "note-service"

    STREAM_CREATED = "notes:note-created"
    STREAM_UPDATED = "notes:note-updated"
    STREAM_REVERTED = "notes:note-reverted"
    STREAM_DELETED = "notes:note-deleted"

    async def note_created(
        self, note_id: str, title: str, correlation_id: str | None = None,
    ) -> None:
        """Publish a notes.note.created event."""
        await self._publish(
            self.STREAM_CREATED,
            NoteCreated(
                source=self.SOURCE,
                correlation_id=correlation_id or uuid4().hex,
                payload={"note_id": note_id, "title": title},
            ),
        )

    async def note_updated(
        self, note_id: str, correlation_id: str | None = None,
    ) -> None:
        """Publish a notes.note.updated event."""
        await self._publish(
            self.STREAM_UPDATED,
            NoteUpdated(
                source=self.SOURCE,
                correlation_id=correlation_id or uuid4().hex,
                payload={"note_id": note_id},
            ),
        )

    async def note_reverted(
        self, note_id: str, entry_id: str, correlation_id: str | None = None,
    ) -> None:
        """Publish a notes.note.reverted event."""
        await self._publish(
            self.STREAM_REVERTED,
            NoteReverted(
                source=self.SOURCE,
                correlation_id=correlation_id or uuid4().hex,
                payload={"note_id": note_id, "history_entry_id": entry_id},
            ),
        )

    async def note_deleted(
        self, note_id: str, correlation_id: str | None = None,
    ) -> None:
        """Publish a notes.note.deleted event."""
        await self._publish(
            self.STREAM_DELETED,
            NoteDeleted(
                source=self.SOURCE,
                correlation_id=correlation_id or uuid4().hex,
                payload={"note_id": note_id},
            ),
        )

    async def _publish(self, stream: str, event: EventEnvelope) -> None:
        """Publish an event if the feature flag is enabled."""
        from modules.notes.core.config import get_app_config

        if not get_app_config().features.events_publish_enabled:
            return

        from modules.notes.events.broker import get_event_broker

        broker = get_event_broker()
        await broker.publish(event.model_dump(), stream=stream)
        logger.debug(
            "Event published",
            extra={"stream": stream, "event_type": event.event_type, "event_id": event.event_id},
        )
