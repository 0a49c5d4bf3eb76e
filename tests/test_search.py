"""Tests for notetrail.search module."""

import asyncio

import pytest

from notetrail.errors import QueryTooShort, TransportError
from notetrail.models import SearchHit, SearchRecord
from notetrail.search import MIN_QUERY_LENGTH, SearchIndex, load_search_index, tokenize

from conftest import FakeFetcher


class TestTokenize:
    def test_split_and_lowercase(self):
        assert tokenize("Cats are GREAT") == ["cats", "are", "great"]

    def test_punctuation_kept(self):
        assert tokenize("cats, dogs.") == ["cats,", "dogs."]

    def test_consecutive_spaces(self):
        assert tokenize("a  b") == ["a", "b"]

    def test_only_spaces_split(self):
        assert tokenize("line\nbreak tab\there") == ["line\nbreak", "tab\there"]


class TestBuild:
    def test_tokens_indexed(self, corpus):
        index = SearchIndex.build(corpus)
        # cats, are, great, dogs, and
        assert len(index) == 5

    def test_empty_corpus(self):
        index = SearchIndex.build([])
        assert len(index) == 0
        assert index.query("anything") is None


class TestQuery:
    def test_too_short(self, corpus):
        index = SearchIndex.build(corpus)
        with pytest.raises(QueryTooShort) as exc_info:
            index.query("ab")
        assert exc_info.value.min_length == MIN_QUERY_LENGTH
        assert index.lookups == 0

    def test_too_short_after_trim(self, corpus):
        index = SearchIndex.build(corpus)
        with pytest.raises(QueryTooShort):
            index.query("  ab  ")
        assert index.lookups == 0

    def test_minimum_length_proceeds(self, corpus):
        index = SearchIndex.build(corpus)
        assert index.query("abc") is None
        assert index.lookups == 1

    def test_ranking_corpus(self, corpus):
        index = SearchIndex.build(corpus)
        hits = index.query("cats")
        assert hits == [
            SearchHit(url="/a", title="Cats", hits=1),
            SearchHit(url="/b", title="Dogs", hits=1),
        ]

    def test_multi_term_counts(self, corpus):
        index = SearchIndex.build(corpus)
        hits = index.query("cats dogs")
        assert hits == [
            SearchHit(url="/b", title="Dogs", hits=2),
            SearchHit(url="/a", title="Cats", hits=1),
        ]

    def test_repeated_document_tokens_count_once(self):
        index = SearchIndex.build(
            [SearchRecord(title="Echo", content="echo echo echo", id="1", url="/e")]
        )
        assert index.query("echo") == [SearchHit(url="/e", title="Echo", hits=1)]

    def test_repeated_query_terms_count_each(self, corpus):
        index = SearchIndex.build(corpus)
        hits = index.query("great great")
        assert hits == [SearchHit(url="/a", title="Cats", hits=2)]

    def test_case_insensitive(self, corpus):
        index = SearchIndex.build(corpus)
        hits = index.query("DOGS")
        assert [h.url for h in hits] == ["/b"]

    def test_no_results(self, corpus):
        index = SearchIndex.build(corpus)
        assert index.query("parrots") is None

    def test_unmatched_terms_ignored(self, corpus):
        index = SearchIndex.build(corpus)
        hits = index.query("parrots and")
        assert hits == [SearchHit(url="/b", title="Dogs", hits=1)]

    def test_tie_break_by_url(self):
        index = SearchIndex.build([
            SearchRecord(title="Z", content="shared", id="1", url="/z"),
            SearchRecord(title="M", content="shared", id="2", url="/m"),
            SearchRecord(title="A", content="shared", id="3", url="/a"),
        ])
        assert [h.url for h in index.query("shared")] == ["/a", "/m", "/z"]

    def test_query_does_not_mutate_index(self, corpus):
        index = SearchIndex.build(corpus)
        size = len(index)
        index.query("cats dogs parrots")
        assert len(index) == size


class TestLoadSearchIndex:
    def test_load(self, corpus):
        fetcher = FakeFetcher(corpus=corpus)
        index = asyncio.run(load_search_index(fetcher, "http://notes.test"))
        assert len(index) == 5

    def test_failure_gives_empty_index(self):
        class BrokenFetcher(FakeFetcher):
            async def fetch_corpus(self, site_url):
                raise TransportError("connection refused")

        index = asyncio.run(load_search_index(BrokenFetcher(), "http://notes.test"))
        assert len(index) == 0
