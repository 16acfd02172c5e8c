from __future__ import annotations

from typing import Any, Callable, Mapping, Protocol, Sequence

from .config_schema import AppConfig
from .request_debug import ItemSpec

ResultSelector = Callable[[Any], Any]


class ConnectionsFetcher(Protocol):
    """Fetches paginated account lists for profile and post enrichment."""

    async def fetch_profile_following(
        self, page: Any, item_spec: ItemSpec, config: AppConfig
    ) -> Sequence[str]: ...

    async def fetch_profile_followed_by(
        self, page: Any, item_spec: ItemSpec, config: AppConfig
    ) -> Sequence[str]: ...

    async def fetch_post_likers(
        self, page: Any, item_spec: ItemSpec, config: AppConfig
    ) -> Sequence[str]: ...


class AuxiliaryQuery(Protocol):
    """Authenticated secondary GraphQL fetch made from the loaded page."""

    async def run_query(
        self,
        query_id: str,
        variables: Mapping[str, Any],
        select: ResultSelector,
        page: Any,
        item_spec: ItemSpec,
        label: str,
    ) -> Any: ...


class OutputSink(Protocol):
    """Receives finished output records for persistence."""

    async def emit(self, record: Mapping[str, Any], meta: Mapping[str, Any]) -> None: ...
