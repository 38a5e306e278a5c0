"""
Event Schemas.

Standardized event envelope and note event types.
All events published through the event bus use the EventEnvelope base.

Naming convention for event_type: domain.entity.action (dot notation)
Stream naming convention: {domain}:{event-type} (colon-separated)

Usage:
    from modules.notes.events.schemas import NoteCreated

    event = NoteCreated(
        source="note-service",
        correlation_id=correlation_id,
        payload={"note_id": note.id, "title": note.title},
    )
"""

from uuid import uuid4

from pydantic import BaseModel, Field

from modules.notes.core.utils import utc_now


class EventEnvelope(BaseModel):
    """Base event envelope. All events inherit from this.

    Fields:
        event_id: Unique event identifier (auto-generated UUID)
        event_type: Domain event type in dot notation (e.g. notes.note.created)
        event_version: Schema version for forward compatibility
        timestamp: ISO 8601 UTC timestamp
        source: Service/module that published the event
        correlation_id: ID tying together events caused by one caller action
        payload: Event-specific data
    """

    event_id: str = Field(default_factory=lambda: str(uuid4()))
    event_type: str
    event_version: int = 1
    timestamp: str = Field(default_factory=lambda: utc_now().isoformat())
    source: str
    correlation_id: str
    payload: dict


class NoteCreated(EventEnvelope):
    """Published when a new note is created."""

    event_type: str = "notes.note.created"


class NoteUpdated(EventEnvelope):
    """Published when a note is updated and its prior state archived."""

    event_type: str = "notes.note.updated"


class NoteReverted(EventEnvelope):
    """Published when a note is reverted to a history entry."""

    event_type: str = "notes.note.reverted"


class NoteDeleted(EventEnvelope):
    """Published when a note is deleted."""

    event_type: str = "notes.note.deleted"
