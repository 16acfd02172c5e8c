from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping, Sequence

from .collaborators import ResultSelector
from .config_schema import AppConfig
from .errors import ConfigError
from .request_debug import ItemSpec


def _limited(values: Sequence[str], limit: int) -> list[str]:
    if limit <= 0:
        return []
    return [v for v in values if isinstance(v, str)][:limit]


def load_json_file(path: str | Path) -> Any:
    p = Path(path)
    try:
        return json.loads(p.read_text(encoding="utf-8"))
    except OSError as e:
        raise ConfigError(f"Failed to read JSON file: {p}") from e
    except ValueError as e:
        raise ConfigError(f"Invalid JSON in {p}: {e}") from e


@dataclass
class OfflineConnectionsFetcher:
    """
    Network-free enrichment lists, e.g. captured earlier into a JSON file.

    Lists are cut to the limits in config.scrape the same way a live fetcher
    stops paginating.
    """

    following: Sequence[str] = ()
    followed_by: Sequence[str] = ()
    liked_by: Sequence[str] = ()

    @classmethod
    def from_file(cls, path: str | Path) -> "OfflineConnectionsFetcher":
        data = load_json_file(path)
        if not isinstance(data, Mapping):
            raise ConfigError(f"Connections file {path} must contain a JSON object")
        return cls(
            following=tuple(data.get("following") or ()),
            followed_by=tuple(data.get("followedBy") or ()),
            liked_by=tuple(data.get("likedBy") or ()),
        )

    async def fetch_profile_following(
        self, page: Any, item_spec: ItemSpec, config: AppConfig
    ) -> list[str]:
        return _limited(self.following, config.scrape.following_limit)

    async def fetch_profile_followed_by(
        self, page: Any, item_spec: ItemSpec, config: AppConfig
    ) -> list[str]:
        return _limited(self.followed_by, config.scrape.followed_by_limit)

    async def fetch_post_likers(
        self, page: Any, item_spec: ItemSpec, config: AppConfig
    ) -> list[str]:
        return _limited(self.liked_by, config.scrape.liked_by_limit)


class OfflineAuxiliaryQuery:
    """Answers auxiliary queries with a stored response; fails when it has none."""

    def __init__(self, response: Any = None) -> None:
        self._response = response
        self.calls: list[dict[str, Any]] = []

    async def run_query(
        self,
        query_id: str,
        variables: Mapping[str, Any],
        select: ResultSelector,
        page: Any,
        item_spec: ItemSpec,
        label: str,
    ) -> Any:
        self.calls.append({"query_id": query_id, "variables": dict(variables), "label": label})
        if self._response is None:
            raise LookupError(f"No stored response for {label} query {query_id}")
        return select(self._response)
