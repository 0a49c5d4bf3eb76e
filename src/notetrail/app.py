"""Main Textual application for notetrail."""

import logging

from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import HorizontalScroll
from textual.widgets import Footer, Header
from textual.worker import Worker

from .config import Config
from .controller import NavigationController
from .errors import NoteError
from .fetcher import NoteFetcher
from .links import decorate_links
from .models import Note, Page
from .navigation import NavigationStack
from .protocols import ERROR_TITLE, SEVERITIES
from .repository import PageRepository
from .search import load_search_index
from .widgets import NotePane, SearchBar, pane_id

logger = logging.getLogger(__name__)

WELCOME_NOTE = """\
The home note of this site could not be loaded:

> {error}

Use the search bar (`s`) to find notes.
"""


class NoteTrailApp(App):
    """notetrail - Notes Trail Browser TUI.

    The app is the rendering and notification side of the navigation
    controller: it mounts a pane per trail page and shows toasts.
    """

    TITLE = "notetrail"
    SUB_TITLE = "Notes Trail Browser"

    CSS = """
    #trail {
        width: 100%;
        height: 1fr;
    }
    """

    BINDINGS = [
        Binding("q", "quit", "Quit"),
        Binding("s", "search", "Search"),
        Binding("b", "go_back", "Back"),
        Binding("f", "go_forward", "Forward"),
        Binding("escape", "go_back", "Back", show=False),
        Binding("?", "help", "Help"),
    ]

    def __init__(self, config: Config, fetcher: NoteFetcher | None = None) -> None:
        super().__init__()
        self.config = config
        self.location = config.site_url
        self.fetcher = fetcher or NoteFetcher(timeout=config.fetch_timeout)
        repository = PageRepository(self.fetcher, self, config.fetch_timeout)
        self.controller = NavigationController(
            repository=repository,
            stack=NavigationStack(repository),
            renderer=self,
            notifier=self,
            location=self.location,
        )

    def compose(self) -> ComposeResult:
        yield Header()
        yield SearchBar(id="search-bar")
        yield HorizontalScroll(id="trail")
        yield Footer()

    async def on_mount(self) -> None:
        """Load the home note and the search index in background workers."""
        self.sub_title = f"{self.SUB_TITLE} │ {self.location}"
        self.run_worker(self._load_home(), name="_load_home", group="startup")
        self.run_worker(
            self._load_search_index(), name="_load_search_index", group="startup"
        )

    async def _load_home(self) -> Page:
        try:
            note = await self.fetcher.fetch_note(self.location)
        except NoteError as e:
            logger.warning("Home note unavailable: %s", e)
            note = Note(title="Home", content=WELCOME_NOTE.format(error=e))
        return self.controller.bootstrap_home(note)

    async def _load_search_index(self):
        return await load_search_index(self.fetcher, self.location)

    def on_worker_state_changed(self, event: Worker.StateChanged) -> None:
        """Handle background worker completion."""
        if event.state.name != "SUCCESS":
            return

        if event.worker.name == "_load_search_index":
            index = event.worker.result
            self.controller.search_index = index
            logger.info("Search ready: %d tokens", len(index))
        elif event.worker.name == "_load_home":
            # The home pane is mounted but may not be composed yet
            self.call_after_refresh(self.focus_page, event.worker.result)

    async def on_unmount(self) -> None:
        """Clean up when app closes."""
        await self.controller.repository.aclose()
        await self.fetcher.aclose()

    # PageRenderer

    def _find_pane(self, page: Page) -> NotePane | None:
        panes = self.query(f"#{pane_id(page.id)}")
        return panes.first(NotePane) if panes else None

    def mount_page(self, page: Page, position: int) -> None:
        """Add a pane for a page at the end of the trail."""
        pane = NotePane(page, self.location)
        self.query_one("#trail", HorizontalScroll).mount(pane)
        logger.debug("Mounted %s at position %d", page.id, position)
        self.call_after_refresh(self.focus_page, page)

    def detach_page(self, page: Page) -> None:
        """Remove the pane of an evicted page."""
        pane = self._find_pane(page)
        if pane is not None:
            pane.remove()

    def decorate_page(self, page: Page) -> None:
        """Render a page's note with resolved and marked links."""
        pane = self._find_pane(page)
        if pane is None or page.content is None:
            return
        pane.set_content(
            decorate_links(page.content.content, self.location, self.controller.is_visited)
        )

    def focus_page(self, page: Page) -> None:
        """Scroll a page's pane into view and focus it."""
        pane = self._find_pane(page)
        if pane is not None:
            pane.refresh_header()
            pane.focus_content()

    # Notifier

    def notify_user(self, title: str, message: str) -> None:
        severity = SEVERITIES.get(title, "information")
        self.notify(message, title=title, severity=severity)

    # Events and actions

    def on_note_pane_link_activated(self, event: NotePane.LinkActivated) -> None:
        """Follow a link to another note."""
        self.run_worker(
            self.controller.activate(event.url, event.origin_page_id),
            group="navigation",
        )

    def on_note_pane_link_failed(self, event: NotePane.LinkFailed) -> None:
        self.notify_user(ERROR_TITLE, event.reason)

    def on_search_bar_search_submitted(self, event: SearchBar.SearchSubmitted) -> None:
        """Run a search; results replace the home note."""
        self.run_worker(self.controller.submit_search(event.term), group="search")

    def on_search_bar_search_cancelled(self, event: SearchBar.SearchCancelled) -> None:
        top = self.controller.stack.top
        if top is not None:
            self.focus_page(top)

    def _current_page(self) -> Page | None:
        """Get the page whose pane holds focus."""
        focused = self.focused
        if focused is None:
            return None
        for node in focused.ancestors_with_self:
            if isinstance(node, NotePane):
                return node.page
        return None

    def action_search(self) -> None:
        """Focus the search input."""
        self.query_one("#search-bar", SearchBar).search_input.focus()

    def action_go_back(self) -> None:
        """Focus the previous pane of the trail."""
        stack = self.controller.stack
        current = self._current_page()
        if current is None:
            target = stack.top
        else:
            target = stack.previous(current.id)
        if target is not None:
            self.focus_page(target)

    def action_go_forward(self) -> None:
        """Focus the next pane of the trail."""
        current = self._current_page()
        if current is None:
            return
        target = self.controller.stack.next(current.id)
        if target is not None:
            self.focus_page(target)

    def action_help(self) -> None:
        """Show help information."""
        self.notify(
            "Click a link to open a note, s=Search, b=Back, f=Forward, q=Quit",
            timeout=5,
        )


def run_app(config: Config) -> None:
    """Run the notetrail application."""
    app = NoteTrailApp(config)
    app.run()
