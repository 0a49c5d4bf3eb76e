"""Shared fixtures for notetrail tests."""

import asyncio

import pytest

from notetrail.controller import NavigationController
from notetrail.errors import NotFound
from notetrail.models import Note, SearchRecord
from notetrail.navigation import NavigationStack
from notetrail.repository import PageRepository

SITE = "http://notes.test"


class FakeFetcher:
    """In-memory stand-in for NoteFetcher that records every request."""

    def __init__(self, notes=None, errors=None, corpus=None):
        self.notes = dict(notes or {})
        self.errors = dict(errors or {})
        self.corpus = list(corpus or [])
        self.calls: list[str] = []
        self.gate: asyncio.Event | None = None

    async def fetch_note(self, url):
        self.calls.append(url)
        if self.gate is not None:
            await self.gate.wait()
        if url in self.errors:
            raise self.errors[url]
        if url in self.notes:
            return self.notes[url]
        raise NotFound("Not Found")

    async def fetch_corpus(self, site_url):
        return self.corpus

    async def aclose(self):
        pass


class RecordingRenderer:
    """PageRenderer that records calls."""

    def __init__(self):
        self.mounted = []
        self.detached = []
        self.decorated = []
        self.focused = []

    def mount_page(self, page, position):
        self.mounted.append((page, position))

    def detach_page(self, page):
        self.detached.append(page)

    def decorate_page(self, page):
        self.decorated.append(page)

    def focus_page(self, page):
        self.focused.append(page)


class RecordingNotifier:
    """Notifier that records (title, message) pairs."""

    def __init__(self):
        self.messages = []

    def notify_user(self, title, message):
        self.messages.append((title, message))


@pytest.fixture
def notes():
    """Notes served by the fake site, keyed by page url."""
    return {
        f"{SITE}/a": Note("Alpha", "Go to [beta](/b)"),
        f"{SITE}/b": Note("Beta", "Go to [gamma](/c)"),
        f"{SITE}/c": Note("Gamma", "The end, see [alpha](/a)"),
        f"{SITE}/d": Note("Delta", "Elsewhere"),
    }


@pytest.fixture
def fetcher(notes):
    return FakeFetcher(notes)


@pytest.fixture
def renderer():
    return RecordingRenderer()


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
def repository(fetcher, renderer):
    return PageRepository(fetcher, renderer, fetch_timeout=1.0)


@pytest.fixture
def stack(repository):
    return NavigationStack(repository)


@pytest.fixture
def controller(repository, stack, renderer, notifier):
    return NavigationController(
        repository=repository,
        stack=stack,
        renderer=renderer,
        notifier=notifier,
        location=SITE,
    )


@pytest.fixture
def corpus():
    return [
        SearchRecord(title="Cats", content="cats are great", id="1", url="/a"),
        SearchRecord(title="Dogs", content="cats and dogs", id="2", url="/b"),
    ]
