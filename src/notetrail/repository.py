"""Store of loaded pages, indexed by id and by url."""

import asyncio
import logging
import uuid

from .errors import LogicError, NoteError, TransportError
from .fetcher import NoteFetcher
from .models import Page
from .protocols import PageRenderer

logger = logging.getLogger(__name__)


def new_page_id() -> str:
    """Generate an identifier for a new page."""
    return str(uuid.uuid4())


class PageRepository:
    """Owns every live page of the session.

    Both indices are only ever changed together while holding ``_lock``, so
    the set of pages reachable by id always equals the set reachable by url.

    A page is registered as a shell before its note is fetched. A second
    request for the same url finds the shell and waits on the same load
    instead of fetching again.
    """

    def __init__(
        self,
        fetcher: NoteFetcher,
        renderer: PageRenderer,
        fetch_timeout: float = 10.0,
    ) -> None:
        self._fetcher = fetcher
        self._renderer = renderer
        self._fetch_timeout = fetch_timeout
        self._by_id: dict[str, Page] = {}
        self._by_url: dict[str, Page] = {}
        self._loads: dict[str, asyncio.Task] = {}
        self._lock = asyncio.Lock()

    def __len__(self) -> int:
        return len(self._by_id)

    def __contains__(self, page_id: str) -> bool:
        return page_id in self._by_id

    def get(self, url: str) -> Page | None:
        """Get the live page for a url, or None."""
        return self._by_url.get(url)

    def get_by_id(self, page_id: str) -> Page | None:
        """Get the live page with an id, or None."""
        return self._by_id.get(page_id)

    def urls(self) -> set[str]:
        return set(self._by_url)

    def ids(self) -> set[str]:
        return set(self._by_id)

    def is_loading(self, url: str) -> bool:
        """Check if the page for a url is a shell waiting for its note."""
        page = self._by_url.get(url)
        return page is not None and page.id in self._loads

    def _register(self, page: Page) -> None:
        if page.id in self._by_id or page.url in self._by_url:
            raise LogicError(f"Page {page.id} ({page.url}) is already registered")
        self._by_id[page.id] = page
        self._by_url[page.url] = page

    def _unregister(self, page: Page) -> bool:
        # Only drop entries that still point at this exact page
        if self._by_id.get(page.id) is not page:
            return False
        del self._by_id[page.id]
        del self._by_url[page.url]
        return True

    def register_home(self, page: Page) -> None:
        """Register the pre-rendered home page, bypassing fetch.

        Raises:
            LogicError: if its id or url is already taken
        """
        if not page.is_home:
            raise LogicError(f"Page {page.id} is not the home page")
        # Synchronous: nothing can interleave between check and insert
        self._register(page)
        logger.info("Registered home page %s", page.url)

    async def get_or_create(self, url: str, origin_page_id: str | None = None) -> Page:
        """Return the page for a url, fetching its note on first use.

        Args:
            url: Absolute page URL
            origin_page_id: Page whose link triggered the request (for logging)

        Raises:
            NoteError: the fetch failed; no trace of the page remains
        """
        async with self._lock:
            page = self._by_url.get(url)
            created = page is None
            if created:
                page = Page(id=new_page_id(), url=url)
                self._register(page)
                self._loads[page.id] = asyncio.ensure_future(self._load(page))
                logger.info("Loading %s (from %s) as %s", url, origin_page_id, page.id)
            load = self._loads.get(page.id)

        if load is not None:
            # Shielded so a cancelled caller does not abort other waiters
            await asyncio.shield(load)

        if not created:
            page.visited = True
        return page

    async def _load(self, page: Page) -> None:
        try:
            page.content = await asyncio.wait_for(
                self._fetcher.fetch_note(page.url), self._fetch_timeout
            )
        except asyncio.TimeoutError:
            await self._discard(page)
            logger.warning("Timed out loading %s", page.url)
            raise TransportError(
                f"Timed out after {self._fetch_timeout:g}s loading {page.url}"
            ) from None
        except BaseException as e:
            await self._discard(page)
            if isinstance(e, NoteError):
                logger.warning("Failed to load %s: %s", page.url, e)
            raise
        finally:
            self._loads.pop(page.id, None)
        logger.debug("Loaded %s: %r", page.url, page.title)

    async def _discard(self, page: Page) -> None:
        """Roll back a shell whose load failed."""
        async with self._lock:
            self._unregister(page)

    async def remove(self, page_id: str) -> None:
        """Evict a page and detach its display. Unknown ids are ignored.

        Raises:
            LogicError: when asked to evict the home page
        """
        async with self._lock:
            page = self._by_id.get(page_id)
            if page is None:
                return
            if page.is_home:
                raise LogicError("The home page cannot be evicted")
            self._unregister(page)

        logger.debug("Evicted %s (%s)", page.id, page.url)
        self._renderer.detach_page(page)

    async def aclose(self) -> None:
        """Cancel loads still in flight."""
        loads = list(self._loads.values())
        for load in loads:
            load.cancel()
        if loads:
            await asyncio.gather(*loads, return_exceptions=True)
