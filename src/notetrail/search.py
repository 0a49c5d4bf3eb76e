"""Inverted index over the notes of a site."""

import logging
from collections import defaultdict
from typing import Iterable

from .errors import NoteError, QueryTooShort
from .fetcher import NoteFetcher
from .models import SearchHit, SearchRecord

logger = logging.getLogger(__name__)

# Minimum length of a (trimmed) search query
MIN_QUERY_LENGTH = 3


def tokenize(text: str) -> list[str]:
    """Split text on single spaces and lowercase each token.

    No punctuation stripping, no stemming. Empty tokens produced by
    consecutive spaces are dropped.
    """
    return [token.lower() for token in text.split(" ") if token]


class SearchIndex:
    """Maps lowercase tokens to the (url, title) pairs containing them.

    Built once per session and never mutated afterwards.
    """

    def __init__(self, index: dict[str, frozenset[tuple[str, str]]] | None = None) -> None:
        self._index: dict[str, frozenset[tuple[str, str]]] = dict(index or {})
        self.lookups = 0

    @classmethod
    def build(cls, corpus: Iterable[SearchRecord]) -> "SearchIndex":
        """Build the index from corpus records."""
        index: dict[str, set[tuple[str, str]]] = defaultdict(set)
        documents = 0
        for record in corpus:
            documents += 1
            for token in tokenize(f"{record.title} {record.content}"):
                index[token].add((record.url, record.title))

        logger.info("Search index built: %d documents, %d tokens", documents, len(index))
        return cls({token: frozenset(pairs) for token, pairs in index.items()})

    def __len__(self) -> int:
        return len(self._index)

    def query(self, term: str) -> list[SearchHit] | None:
        """Search for notes containing the query's terms.

        Each query term found in a note counts one hit for that note.
        The index itself is never modified; only the ``lookups`` counter
        advances, once per term looked up.

        Args:
            term: Space-separated search terms

        Returns:
            Hits sorted by hit count descending, then url ascending, or
            None when no term matched anything.

        Raises:
            QueryTooShort: if the trimmed query is shorter than MIN_QUERY_LENGTH
        """
        if len(term.strip()) < MIN_QUERY_LENGTH:
            raise QueryTooShort(MIN_QUERY_LENGTH)

        logger.debug("Searching for %r", term)
        counts: dict[str, int] = {}
        titles: dict[str, str] = {}
        for sub_term in tokenize(term):
            self.lookups += 1
            for url, title in sorted(self._index.get(sub_term, ())):
                if url not in counts:
                    counts[url] = 0
                    titles[url] = title
                counts[url] += 1

        if not counts:
            return None

        hits = [SearchHit(url=url, title=titles[url], hits=count) for url, count in counts.items()]
        hits.sort(key=lambda h: (-h.hits, h.url))
        return hits


async def load_search_index(fetcher: NoteFetcher, site_url: str) -> SearchIndex:
    """Fetch the corpus and build the index.

    A failed download is logged and produces an empty index; search then
    simply finds nothing.
    """
    try:
        corpus = await fetcher.fetch_corpus(site_url)
    except NoteError as e:
        logger.warning("Search corpus unavailable, search disabled: %s", e)
        corpus = []
    return SearchIndex.build(corpus)
