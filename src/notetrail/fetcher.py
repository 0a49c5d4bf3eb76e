"""HTTP access to the notes site."""

import logging

import httpx

from .errors import DecodeError, NotFound, TransportError
from .models import Note, SearchRecord
from .urls import note_index_url, origin

logger = logging.getLogger(__name__)

SEARCH_INDEX_PATH = "/search/index.json"


def _parse_note(data: object) -> Note:
    """Validate a decoded note payload."""
    if not isinstance(data, dict):
        raise DecodeError("Note payload is not an object")
    title = data.get("title")
    content = data.get("content")
    if not isinstance(title, str) or not isinstance(content, str):
        raise DecodeError("Note payload needs string 'title' and 'content'")
    return Note(title=title, content=content)


def _parse_record(raw: object) -> SearchRecord | None:
    """Parse one corpus entry, or None if it is malformed."""
    if not isinstance(raw, dict):
        return None
    try:
        return SearchRecord(
            title=str(raw["title"]),
            content=str(raw["content"]),
            id=str(raw["id"]),
            url=str(raw["url"]),
        )
    except KeyError:
        return None


class NoteFetcher:
    """Fetches notes and the search corpus with an httpx async client."""

    def __init__(
        self,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._client = httpx.AsyncClient(
            headers={"Accept": "application/json"},
            timeout=timeout,
            follow_redirects=True,
            transport=transport,
        )

    async def _get_json(self, url: str) -> object:
        try:
            response = await self._client.get(url)
        except httpx.HTTPError as e:
            raise TransportError(f"Request to {url} failed: {e}") from e

        if response.is_client_error or response.is_server_error:
            raise NotFound(response.reason_phrase or "Note not found")

        try:
            return response.json()
        except ValueError as e:
            raise DecodeError(f"Invalid JSON from {url}: {e}") from e

    async def fetch_note(self, url: str) -> Note:
        """Fetch a note by its page URL.

        Raises:
            NotFound: server answered with a 4xx/5xx status
            DecodeError: body is not a note
            TransportError: network failure
        """
        endpoint = note_index_url(url)
        logger.debug("Fetching note %s", endpoint)
        return _parse_note(await self._get_json(endpoint))

    async def fetch_corpus(self, site_url: str) -> list[SearchRecord]:
        """Fetch the full search corpus of a site.

        Raises the same errors as fetch_note; malformed entries are skipped.
        """
        endpoint = origin(site_url) + SEARCH_INDEX_PATH
        logger.info("Fetching search corpus %s", endpoint)
        data = await self._get_json(endpoint)
        if not isinstance(data, list):
            raise DecodeError("Search corpus is not a list")

        records = []
        skipped = 0
        for raw in data:
            record = _parse_record(raw)
            if record is None:
                skipped += 1
            else:
                records.append(record)
        if skipped:
            logger.warning("Skipped %d malformed search corpus entries", skipped)
        return records

    async def aclose(self) -> None:
        """Close the underlying HTTP client."""
        await self._client.aclose()
