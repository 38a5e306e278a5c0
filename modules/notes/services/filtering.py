"""
Category Filter.

Narrows a note list to one category.
"""

from collections.abc import Sequence

from modules.notes.schemas.note import Category, Note


def filter_by_category(notes: Sequence[Note], category: Category | str | None) -> list[Note]:
    """
    Notes whose category equals ``category``, in their original order.

    A None or empty ``category`` returns every note unchanged.
    """
    if not category:
        return list(notes)
    return [note for note in notes if note.category == category]
