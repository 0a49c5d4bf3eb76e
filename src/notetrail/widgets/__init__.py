"""notetrail widgets."""

from .note_pane import NotePane, pane_id, pane_title
from .search_bar import SearchBar

__all__ = [
    "NotePane",
    "SearchBar",
    "pane_id",
    "pane_title",
]
