"""Data types shared by the repository, navigation trail and search index."""

from dataclasses import dataclass, field

# Fixed identity of the home page (trail position 0)
HOME_PAGE_ID = "page-0"
HOME_PAGE_URL = "/"


@dataclass
class Note:
    """Title and markdown body of a note as served by the site."""

    title: str
    content: str


@dataclass(eq=False)
class Page:
    """One loaded note in the trail.

    Pages compare by identity: two lookups of the same live page return
    the same object.
    """

    id: str
    url: str
    content: Note | None = None
    visited: bool = field(default=False)  # requested again while live; marks the pane header

    @property
    def is_home(self) -> bool:
        return self.id == HOME_PAGE_ID

    @property
    def is_shell(self) -> bool:
        """True while the note content has not arrived yet."""
        return self.content is None

    @property
    def title(self) -> str:
        return self.content.title if self.content else ""


@dataclass(frozen=True)
class SearchRecord:
    """One entry of the search corpus."""

    title: str
    content: str
    id: str
    url: str


@dataclass(frozen=True)
class SearchHit:
    """A search result: matched note and number of query term hits."""

    url: str
    title: str
    hits: int
