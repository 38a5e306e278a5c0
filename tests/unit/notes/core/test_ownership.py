"""Unit tests for the ownership guard."""

from datetime import datetime

import pytest

from modules.notes.core.ownership import can_delete
from modules.notes.schemas.note import Category, Note


def _note(owner_id: str | None) -> Note:
    return Note(
        id="n1",
        title="T",
        category=Category.WORK,
        owner_id=owner_id,
        updated_at=datetime(2026, 1, 1),
    )


class TestCanDelete:
    def test_owner_may_delete(self):
        assert can_delete(_note("alice"), "alice") is True

    @pytest.mark.parametrize("identity", ["bob", "", "ALICE", None])
    def test_other_identities_may_not(self, identity):
        assert can_delete(_note("alice"), identity) is False

    @pytest.mark.parametrize("identity", ["alice", None])
    def test_unowned_note_cannot_be_deleted(self, identity):
        assert can_delete(_note(None), identity) is False
