from __future__ import annotations

from apify_client.errors import ApifyApiError


def _status_code(exc: BaseException) -> int | None:
    for attr in ("status_code", "statusCode", "status"):
        val = getattr(exc, attr, None)
        if val is None:
            continue
        try:
            return int(val)
        except (TypeError, ValueError):
            continue
    return None


def _looks_like_network_error(exc: BaseException) -> bool:
    name = type(exc).__name__.casefold()
    mod = type(exc).__module__.casefold()
    return any(part in name or part in mod for part in ("timeout", "connect"))


def is_retryable_push_error(exc: BaseException) -> tuple[bool, str | None]:
    """
    Retry dataset pushes on:
    - HTTP 429 and 500+
    - network/connection errors and timeouts
    """
    if isinstance(exc, ApifyApiError):
        code = _status_code(exc)
        reason = f"http_{code}" if code is not None else "http_status"
        return (code == 429 or (code is not None and code >= 500)), reason

    if isinstance(exc, (ConnectionError, TimeoutError)) or _looks_like_network_error(exc):
        return True, "network_error"

    return False, None
