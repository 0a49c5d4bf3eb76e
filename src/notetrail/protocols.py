"""Interfaces the core expects from the user interface.

The Textual app implements both; tests use recording fakes.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from .models import Page

# Notification titles and the toast severity each one is shown with
ERROR_TITLE = "Error"
SEARCH_TITLE = "Search"
SEVERITIES = {
    ERROR_TITLE: "error",
    SEARCH_TITLE: "warning",
}


@runtime_checkable
class PageRenderer(Protocol):
    """Displays pages of the trail."""

    def mount_page(self, page: Page, position: int) -> None: ...
    def detach_page(self, page: Page) -> None: ...
    def decorate_page(self, page: Page) -> None: ...
    def focus_page(self, page: Page) -> None: ...


@runtime_checkable
class Notifier(Protocol):
    """Shows user-visible failures and search feedback."""

    def notify_user(self, title: str, message: str) -> None: ...
