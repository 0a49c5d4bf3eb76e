"""Pane displaying one note of the trail."""

from textual.app import ComposeResult
from textual.containers import Vertical, VerticalScroll
from textual.css.query import NoMatches
from textual.message import Message
from textual.widgets import Markdown, Static

from ..errors import ResolutionError
from ..links import VISITED_MARKER
from ..models import Page
from ..urls import LinkKind, classify_link


def pane_id(page_id: str) -> str:
    """Widget id of the pane showing a page."""
    return f"pane-{page_id}"


def pane_title(page: Page) -> str:
    """Header text of a pane; revisited pages carry the visited marker."""
    title = page.title or page.url
    if page.visited:
        return f"{title} {VISITED_MARKER}"
    return title


class NotePane(Vertical):
    """Widget displaying a note of the trail."""

    class LinkActivated(Message):
        """Message emitted when a link to another note is clicked."""

        def __init__(self, url: str, origin_page_id: str) -> None:
            super().__init__()
            self.url = url
            self.origin_page_id = origin_page_id

    class LinkFailed(Message):
        """Message emitted when a clicked link cannot be resolved."""

        def __init__(self, href: str, reason: str) -> None:
            super().__init__()
            self.href = href
            self.reason = reason

    DEFAULT_CSS = """
    NotePane {
        width: 60;
        height: 1fr;
        border: solid $primary;
    }

    NotePane:focus-within {
        border: solid $accent;
    }

    NotePane > .pane-header {
        background: $primary-background;
        color: $success;
        text-style: bold;
        padding: 0 1;
        height: 1;
    }

    NotePane > VerticalScroll {
        height: 1fr;
    }

    NotePane Markdown {
        padding: 0 1;
    }
    """

    def __init__(self, page: Page, location: str, **kwargs) -> None:
        super().__init__(id=pane_id(page.id), **kwargs)
        self.page = page
        self._location = location
        self._content = ""

    def compose(self) -> ComposeResult:
        yield Static(pane_title(self.page), classes="pane-header")
        with VerticalScroll(classes="pane-scroll"):
            yield Markdown(self._content, open_links=False)

    @property
    def scroll_view(self) -> VerticalScroll:
        return self.query_one(".pane-scroll", VerticalScroll)

    @property
    def markdown_widget(self) -> Markdown:
        return self.query_one(Markdown)

    def set_content(self, content: str) -> None:
        """Set decorated note markdown; rendered now or when the pane mounts."""
        self._content = content
        if self.is_mounted:
            self.call_later(self._show_content)

    def refresh_header(self) -> None:
        """Update the header from the page's title and visited flag."""
        try:
            header = self.query_one(".pane-header", Static)
        except NoMatches:
            # Not composed yet; compose reads the page itself
            return
        header.update(pane_title(self.page))

    def focus_content(self) -> None:
        """Scroll the pane into view and focus its note."""
        try:
            scroll = self.scroll_view
        except NoMatches:
            self.call_after_refresh(self.focus_content)
            return
        self.scroll_visible()
        scroll.focus()

    async def _show_content(self) -> None:
        self.refresh_header()
        await self.markdown_widget.update(self._content)
        self.scroll_view.scroll_home(animate=False)

    def on_markdown_link_clicked(self, event: Markdown.LinkClicked) -> None:
        """Route link clicks: notes to the trail, other sites to the browser."""
        event.prevent_default()
        event.stop()

        try:
            target = classify_link(event.href, self._location)
        except ResolutionError as e:
            self.post_message(self.LinkFailed(event.href, str(e)))
            return

        if target.kind is LinkKind.FRAGMENT:
            return
        if target.kind is LinkKind.EXTERNAL:
            self.app.open_url(target.url)
            return
        self.post_message(self.LinkActivated(target.url, self.page.id))
