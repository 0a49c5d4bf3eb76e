"""URL resolution and classification for links found in notes.

The same functions are used when a note is decorated for display and when
a link in it is followed, so "visited" markers always agree with what a
click actually opens.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from urllib.parse import SplitResult, urldefrag, urljoin, urlsplit, urlunsplit

from .errors import ResolutionError

logger = logging.getLogger(__name__)

DEFAULT_PORTS = {"http": 80, "https": 443}


class LinkKind(Enum):
    """How a link in a note is handled."""

    INTERNAL = "internal"  # another note on the same site
    EXTERNAL = "external"  # different origin, opened in the system browser
    FRAGMENT = "fragment"  # anchor within the current document


@dataclass(frozen=True)
class LinkTarget:
    """A classified link: its kind and the URL to act on."""

    kind: LinkKind
    url: str


def _split(url: str) -> SplitResult:
    """Split a URL, raising ValueError for malformed hosts or ports."""
    parts = urlsplit(url)
    # Accessing .port validates it
    parts.port
    return parts


def _host_port(parts: SplitResult) -> str:
    """Return the lowercase host with a non-default port."""
    host = (parts.hostname or "").lower()
    if ":" in host:
        host = f"[{host}]"
    port = parts.port
    if port is not None and port != DEFAULT_PORTS.get(parts.scheme.lower()):
        host = f"{host}:{port}"
    return host


def _normalize(parts: SplitResult) -> str:
    scheme = parts.scheme.lower()
    if not parts.netloc:
        return urlunsplit((scheme, "", parts.path, parts.query, parts.fragment))

    netloc = _host_port(parts)
    if parts.username is not None:
        userinfo = parts.username
        if parts.password is not None:
            userinfo += f":{parts.password}"
        netloc = f"{userinfo}@{netloc}"
    return urlunsplit((scheme, netloc, parts.path or "/", parts.query, parts.fragment))


def origin(url: str) -> str:
    """Return ``scheme://host[:port]`` for a URL.

    URLs without a host (``mailto:``, bare paths) have no origin of their
    own; they are logged and returned unchanged, so they never compare
    equal to a web origin.
    """
    try:
        parts = _split(url)
    except ValueError as e:
        logger.warning("Invalid URL %r: %s", url, e)
        return url

    if not parts.scheme or not parts.hostname:
        logger.debug("URL has no host, no origin: %s", url)
        return url

    return f"{parts.scheme.lower()}://{_host_port(parts)}"


def same_origin(first: str, second: str) -> bool:
    """Check whether two URLs share scheme, host and port."""
    return origin(first) == origin(second)


def resolve_url(raw: str, location: str) -> str:
    """Resolve a possibly relative link against the current location.

    Absolute URLs are returned normalized. A URL without a scheme is joined
    onto the origin of ``location`` and parsed a second time; if it is still
    not absolute, ResolutionError is raised. A string that cannot be parsed
    at all is logged and returned as given.

    Args:
        raw: The href as written in the note
        location: URL of the current document (the site root)

    Returns:
        The absolute URL
    """
    raw = raw.strip()
    try:
        parts = _split(raw)
    except ValueError as e:
        logger.warning("Cannot parse URL %r: %s", raw, e)
        return raw

    if parts.scheme:
        return _normalize(parts)

    # Relative: prefix the origin and try once more
    candidate = urljoin(origin(location) + "/", raw)
    try:
        parts = _split(candidate)
    except ValueError as e:
        raise ResolutionError(f"Cannot resolve {raw!r}: {e}") from e

    if not parts.scheme or not parts.netloc:
        raise ResolutionError(f"Cannot resolve {raw!r} against {location!r}")

    return _normalize(parts)


def page_url(raw: str, location: str) -> str:
    """Resolve a link to the URL used as the page key (fragment dropped)."""
    return urldefrag(resolve_url(raw, location)).url


def classify_link(href: str, location: str) -> LinkTarget:
    """Decide how a link should be handled.

    Raises:
        ResolutionError: if the href cannot be made absolute
    """
    if href.strip().startswith("#"):
        return LinkTarget(LinkKind.FRAGMENT, href.strip())

    resolved = resolve_url(href, location)
    if not same_origin(resolved, location):
        return LinkTarget(LinkKind.EXTERNAL, resolved)

    document, fragment = urldefrag(resolved)
    if fragment and document == urldefrag(resolve_url(location, location)).url:
        return LinkTarget(LinkKind.FRAGMENT, resolved)

    return LinkTarget(LinkKind.INTERNAL, document)


def note_index_url(url: str) -> str:
    """Return the JSON endpoint of a note: ``{url}/index.json``."""
    parts = urlsplit(url)
    path = parts.path.rstrip("/") + "/index.json"
    return urlunsplit((parts.scheme, parts.netloc, path, "", ""))
