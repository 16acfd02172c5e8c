from __future__ import annotations

from collections import deque
from typing import Callable, Iterable
from urllib.parse import urljoin

from .formatters import INSTAGRAM_BASE_URL
from .page_types import PageType
from .request_debug import ScrapeRequest


def profile_url(username: str, *, base_url: str = INSTAGRAM_BASE_URL) -> str:
    """Resolve a username, path or absolute URL against the site's base URL."""
    name = (username or "").strip()
    if not name:
        raise ValueError("username must be non-empty")
    return urljoin(base_url.rstrip("/") + "/", name)


class RequestQueue:
    """
    FIFO queue of page requests, skipping URLs that are already queued.

    A URL can be queued again after it has been popped.
    """

    def __init__(self, initial: Iterable[ScrapeRequest] | None = None) -> None:
        self._queue: deque[ScrapeRequest] = deque()
        self._present: set[str] = set()

        if initial is not None:
            for request in initial:
                self.add(request)

    def __len__(self) -> int:
        return len(self._queue)

    def add(self, request: ScrapeRequest) -> bool:
        key = (request.url or "").strip()
        if not key or key in self._present:
            return False

        self._present.add(key)
        self._queue.append(request)
        return True

    def pop(self) -> ScrapeRequest | None:
        if not self._queue:
            return None
        request = self._queue.popleft()
        self._present.discard(request.url.strip())
        return request


def create_add_profile(
    queue: RequestQueue, *, base_url: str = INSTAGRAM_BASE_URL
) -> Callable[[str], bool]:
    """Return a function that schedules a profile page for a username."""

    def add_profile(username: str) -> bool:
        return queue.add(
            ScrapeRequest(
                url=profile_url(username, base_url=base_url),
                user_data={"pageType": PageType.PROFILE.value},
            )
        )

    return add_profile
