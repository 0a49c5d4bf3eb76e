"""Search input widget."""

from textual.app import ComposeResult
from textual.containers import Horizontal
from textual.events import Key
from textual.message import Message
from textual.widgets import Input, Static


class SearchBar(Horizontal):
    """Single-line search input across all notes of the site."""

    class SearchSubmitted(Message):
        """Message emitted when a search is submitted."""

        def __init__(self, term: str) -> None:
            super().__init__()
            self.term = term

    class SearchCancelled(Message):
        """Message emitted when the search input is left with Escape."""

        pass

    DEFAULT_CSS = """
    SearchBar {
        width: 100%;
        height: 1;
        background: $primary-background;
    }

    SearchBar > #search-label {
        width: auto;
        color: $accent;
        text-style: bold;
        padding: 0 1;
    }

    SearchBar > #search-input {
        width: 1fr;
        height: 1;
        border: none;
        padding: 0 1;
    }
    """

    def compose(self) -> ComposeResult:
        yield Static("SEARCH", id="search-label")
        yield Input(placeholder="Search notes (at least 3 characters)...", id="search-input")

    @property
    def search_input(self) -> Input:
        return self.query_one("#search-input", Input)

    def on_input_submitted(self, event: Input.Submitted) -> None:
        """Handle Enter key in search input."""
        if event.input.id == "search-input":
            event.stop()
            self.post_message(self.SearchSubmitted(event.value))

    def on_key(self, event: Key) -> None:
        """Escape leaves the search input."""
        if event.key == "escape":
            self.search_input.value = ""
            self.post_message(self.SearchCancelled())
            event.stop()
