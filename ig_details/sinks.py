from __future__ import annotations

import asyncio
import json
from pathlib import Path
from typing import Any, Mapping

from apify_client import ApifyClient
from apify_client.errors import ApifyApiError

from .apify_retry import is_retryable_push_error
from .errors import OutputError
from .retry import OnRetryFn, RetryConfig, SleepFn, call_with_retries

_DEFAULT_PUSH_RETRY = RetryConfig(
    max_attempts=5,
    base_delay_seconds=0.5,
    max_delay_seconds=20.0,
    jitter_ratio=0.0,
)


def _json_dumps(value: Any) -> str:
    return json.dumps(value, ensure_ascii=False, separators=(",", ":"), default=str)


class CollectingSink:
    """Keeps emitted records in memory, in emission order."""

    def __init__(self) -> None:
        self.records: list[dict[str, Any]] = []
        self.metas: list[dict[str, Any]] = []

    async def emit(self, record: Mapping[str, Any], meta: Mapping[str, Any]) -> None:
        self.records.append(dict(record))
        self.metas.append(dict(meta))


class JsonlOutputSink:
    """Appends each record as one JSON line to a file."""

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    async def emit(self, record: Mapping[str, Any], meta: Mapping[str, Any]) -> None:
        line = _json_dumps(dict(record))
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            with self._path.open("a", encoding="utf-8", newline="\n") as fp:
                fp.write(line + "\n")
        except OSError as e:
            raise OutputError(f"Failed to write record to {self._path}: {e}") from e


class ApifyDatasetSink:
    """
    Pushes records to an Apify dataset.

    The Apify client is synchronous; pushes run in a worker thread so the
    scrape task is not blocked.
    """

    def __init__(
        self,
        token: str,
        dataset_id: str,
        *,
        client: ApifyClient | None = None,
        retry: RetryConfig | None = None,
        on_retry: OnRetryFn | None = None,
        sleep_fn: SleepFn | None = None,
    ) -> None:
        ds = (dataset_id or "").strip()
        if not ds:
            raise OutputError("dataset_id must be a non-empty string")

        self._dataset_id = ds
        self._retry = retry or _DEFAULT_PUSH_RETRY
        self._on_retry = on_retry
        self._sleep_fn = sleep_fn
        # Client-level retries are disabled so our policy applies uniformly.
        self._client = client if client is not None else ApifyClient(token=token, max_retries=0)

    def push(self, record: Mapping[str, Any]) -> None:
        item = dict(record)

        def _do_push() -> None:
            self._client.dataset(self._dataset_id).push_items(item)

        try:
            call_with_retries(
                _do_push,
                cfg=self._retry,
                is_retryable=is_retryable_push_error,
                operation=f"apify.dataset.push_items:{self._dataset_id}",
                on_retry=self._on_retry,
                sleep_fn=self._sleep_fn,
            )
        except ApifyApiError as e:
            raise OutputError(f"Failed to push record to dataset ({self._dataset_id}): {e}") from e
        except Exception as e:
            raise OutputError(
                f"Unexpected error while pushing to dataset ({self._dataset_id}): {e}"
            ) from e

    async def emit(self, record: Mapping[str, Any], meta: Mapping[str, Any]) -> None:
        await asyncio.to_thread(self.push, record)
