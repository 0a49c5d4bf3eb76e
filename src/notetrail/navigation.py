"""The trail of visited pages."""

import asyncio
import logging
from typing import Iterator

from .errors import LogicError
from .models import Page
from .repository import PageRepository

logger = logging.getLogger(__name__)


class NavigationStack:
    """Ordered trail of visited pages, home page at position 0.

    Following a link from a page in the middle of the trail replaces
    everything after it: the later pages are evicted from the repository,
    and revisiting them fetches them again.
    """

    def __init__(self, repository: PageRepository) -> None:
        self._repository = repository
        self._stack: list[Page] = []
        self._lock = asyncio.Lock()

    def append(self, page: Page) -> None:
        """Push a page onto the trail; it becomes the new top."""
        self._stack.append(page)
        logger.debug("Trail: %d page(s), top %s", len(self._stack), page.id)

    def position_of(self, page_id: str) -> int | None:
        """Return the trail position of a page, or None."""
        for index, page in enumerate(self._stack):
            if page.id == page_id:
                return index
        return None

    async def truncate_after(self, page_id: str) -> list[Page]:
        """Remove every page after ``page_id`` from the trail and the repository.

        Returns:
            The removed pages, in trail order

        Raises:
            LogicError: if ``page_id`` is not on the trail
        """
        async with self._lock:
            position = self.position_of(page_id)
            if position is None:
                raise LogicError(f"Origin page {page_id} is not on the trail")

            removed = self._stack[position + 1 :]
            if not removed:
                return []

            for page in removed:
                await self._repository.remove(page.id)
            del self._stack[position + 1 :]

        logger.info("Truncated %d page(s) after %s", len(removed), page_id)
        return removed

    @property
    def pages(self) -> list[Page]:
        return list(self._stack)

    @property
    def top(self) -> Page | None:
        return self._stack[-1] if self._stack else None

    def previous(self, page_id: str) -> Page | None:
        """Get the page before ``page_id`` on the trail, or None."""
        position = self.position_of(page_id)
        if position is None or position == 0:
            return None
        return self._stack[position - 1]

    def next(self, page_id: str) -> Page | None:
        """Get the page after ``page_id`` on the trail, or None."""
        position = self.position_of(page_id)
        if position is None or position + 1 >= len(self._stack):
            return None
        return self._stack[position + 1]

    def __contains__(self, page_id: str) -> bool:
        return self.position_of(page_id) is not None

    def __iter__(self) -> Iterator[Page]:
        return iter(list(self._stack))

    def __len__(self) -> int:
        return len(self._stack)
