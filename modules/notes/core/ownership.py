"""
Ownership Guard.

Decides which mutations an identity may perform on a note. This is a
predicate for gating operations and affordances in this process; it is
not an access-control boundary at the storage layer.
"""

from modules.notes.schemas.note import Note


def can_delete(note: Note, acting_identity: str | None) -> bool:
    """True iff ``acting_identity`` created ``note``. Unowned notes cannot be deleted."""
    if note.owner_id is None or acting_identity is None:
        return False
    return note.owner_id == acting_identity
