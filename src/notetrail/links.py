"""Link scanning and decoration for note markdown."""

import logging
import re
from typing import Callable

from .errors import ResolutionError
from .urls import LinkKind, classify_link

logger = logging.getLogger(__name__)

# Pattern to match inline markdown links: [text](href) or [text](href "title")
LINK_PATTERN = re.compile(r"(?<!!)\[([^\]]*)\]\(\s*<?([^)\s>]+)>?(\s+\"[^\"]*\")?\s*\)")

VISITED_MARKER = "✓"
EXTERNAL_MARKER = "↗"


def scan_links(content: str) -> list[str]:
    """Return the hrefs of all inline links in a note, in document order."""
    return [match.group(2) for match in LINK_PATTERN.finditer(content)]


def decorate_links(
    content: str,
    location: str,
    is_visited: Callable[[str], bool],
) -> str:
    """Rewrite the links of a note for display.

    Converts:
        [Other note](/notes/other) -> [Other note](http://site/notes/other)
        [Seen](/notes/seen)        -> [Seen ✓](http://site/notes/seen)
        [Docs](https://elsewhere)  -> [Docs ↗](https://elsewhere/)
        [1](#fn1)                  -> unchanged

    Args:
        content: Markdown body of the note
        location: URL of the current document (the site root)
        is_visited: Predicate telling whether a page URL is already loaded

    Returns:
        The markdown with resolved and marked links
    """

    def replace_link(match: re.Match) -> str:
        text, href, title = match.group(1), match.group(2), match.group(3) or ""
        try:
            target = classify_link(href, location)
        except ResolutionError as e:
            logger.warning("Leaving link unresolved: %s", e)
            return match.group(0)

        if target.kind is LinkKind.FRAGMENT:
            return match.group(0)
        if target.kind is LinkKind.EXTERNAL:
            text = f"{text} {EXTERNAL_MARKER}"
        elif is_visited(target.url):
            text = f"{text} {VISITED_MARKER}"
        return f"[{text}]({target.url}{title})"

    return LINK_PATTERN.sub(replace_link, content)
