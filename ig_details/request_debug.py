from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping, Sequence

from .page_types import PageType


@dataclass(frozen=True)
class ScrapeRequest:
    """A page request as seen by the crawler that loaded it."""

    url: str
    id: str | None = None
    loaded_url: str | None = None
    method: str = "GET"
    retry_count: int = 0
    error_messages: Sequence[str] = ()
    status_code: int | None = None
    user_data: Mapping[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class ItemSpec:
    """The entity a page was classified as, passed through to collaborators."""

    page_type: PageType | str
    url: str | None = None
    id: str | None = None
    name: str | None = None


def request_debug_info(request: ScrapeRequest | None) -> dict[str, Any]:
    """Build the `#debug` value attached to every top-level output record."""
    if request is None:
        return {}

    return {
        "requestId": request.id,
        "url": request.url,
        "loadedUrl": request.loaded_url,
        "method": request.method,
        "retryCount": int(request.retry_count),
        "errorMessages": list(request.error_messages),
        "statusCode": request.status_code,
    }
