"""
Shared Notes.

Versioned note store: current note state, per-note history log,
revert, and a live projection of the collection for observers.
"""
