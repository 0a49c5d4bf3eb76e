"""Link activation and search flows."""

import asyncio
import logging

from .errors import NoteError, QueryTooShort, ResolutionError
from .models import HOME_PAGE_ID, HOME_PAGE_URL, Note, Page, SearchHit
from .navigation import NavigationStack
from .protocols import ERROR_TITLE, SEARCH_TITLE, Notifier, PageRenderer
from .repository import PageRepository
from .search import SearchIndex
from .urls import page_url

logger = logging.getLogger(__name__)


def format_search_results(term: str, hits: list[SearchHit]) -> Note:
    """Build the note shown on the home page for a search."""
    lines = [f"# Notes containing *{term}*", ""]
    for hit in hits:
        suffix = "hit" if hit.hits == 1 else "hits"
        lines.append(f"- [{hit.title or hit.url}]({hit.url}) ({hit.hits} {suffix})")
    return Note(title=f"Search: {term}", content="\n".join(lines) + "\n")


class NavigationController:
    """Coordinates the repository, the trail and the user interface.

    Created once per session by the app and handed to whatever needs it.
    """

    def __init__(
        self,
        repository: PageRepository,
        stack: NavigationStack,
        renderer: PageRenderer,
        notifier: Notifier,
        location: str,
        search_index: SearchIndex | None = None,
    ) -> None:
        self.repository = repository
        self.stack = stack
        self.renderer = renderer
        self.notifier = notifier
        self.location = location
        self.search_index = search_index if search_index is not None else SearchIndex()
        # Activations and search results run one at a time
        self._lock = asyncio.Lock()

    @property
    def home(self) -> Page | None:
        return self.repository.get_by_id(HOME_PAGE_ID)

    def is_visited(self, url: str) -> bool:
        """Check if a page URL is already loaded (used for link markers)."""
        page = self.repository.get(url)
        return page is not None and not page.is_shell

    def bootstrap_home(self, note: Note) -> Page:
        """Install the already rendered home note at trail position 0.

        Only the first call has an effect; later calls return the existing
        home page.
        """
        existing = self.home
        if existing is not None:
            logger.warning("Home page already bootstrapped, ignoring")
            return existing

        page = Page(id=HOME_PAGE_ID, url=HOME_PAGE_URL, content=note)
        self.repository.register_home(page)
        self.stack.append(page)
        self.renderer.mount_page(page, 0)
        self.renderer.decorate_page(page)
        return page

    async def activate(self, target_url_raw: str, origin_page_id: str) -> Page | None:
        """Follow a link found on ``origin_page_id``.

        Pages after the origin are dropped from the trail first; that stays
        in effect even when loading the target fails.

        Activations are serialized. A click queued behind another one whose
        truncation removed its origin pane is dropped.

        Returns:
            The displayed page, or None if it could not be loaded
        """
        try:
            url = page_url(target_url_raw, self.location)
        except ResolutionError as e:
            logger.warning("Cannot follow link %r: %s", target_url_raw, e)
            self.notifier.notify_user(ERROR_TITLE, str(e))
            return None

        async with self._lock:
            if origin_page_id not in self.stack:
                logger.debug(
                    "Dropping link to %s: origin %s left the trail", url, origin_page_id
                )
                return None

            await self.stack.truncate_after(origin_page_id)

            try:
                page = await self.repository.get_or_create(url, origin_page_id)
            except NoteError as e:
                self.notifier.notify_user(ERROR_TITLE, str(e))
                return None

            if page.id in self.stack:
                # Already on the trail (a link back to an earlier page)
                self.renderer.focus_page(page)
                return page

            self.stack.append(page)
            self.renderer.mount_page(page, len(self.stack) - 1)
            self.renderer.decorate_page(page)
            return page

    async def submit_search(self, term: str) -> list[SearchHit] | None:
        """Run a search and show the results on the home page."""
        try:
            hits = self.search_index.query(term)
        except QueryTooShort:
            self.notifier.notify_user(
                SEARCH_TITLE, "More than three characters needed for searching"
            )
            return None

        if hits is None:
            self.notifier.notify_user(SEARCH_TITLE, f"No notes found for {term}")
            return None

        logger.info("Search %r: %d result(s)", term, len(hits))
        home = self.home
        if home is None:
            return hits

        async with self._lock:
            home.content = format_search_results(term.strip(), hits)
            await self.stack.truncate_after(home.id)
            self.renderer.decorate_page(home)
            self.renderer.focus_page(home)
        return hits
