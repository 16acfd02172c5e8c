from __future__ import annotations

from typing import Any, Mapping

from .collaborators import AuxiliaryQuery, ConnectionsFetcher, OutputSink
from .config_schema import AppConfig
from .errors import NotAProfilePage, PagePayloadMissing, PublicStoryLookupFailed, UnsupportedPageType
from .fields import get_in
from .formatters import OutputRecord, format_hashtag, format_place, format_post_page, format_profile
from .page_types import PAGE_CONTAINERS, PageType
from .request_debug import ItemSpec, ScrapeRequest, request_debug_info
from .run_log import RunLogger

_STORIES_LABEL = "Stories"


def _page_node(entry_data: Mapping[str, Any], page_type: PageType) -> Mapping[str, Any]:
    container, key = PAGE_CONTAINERS[page_type]
    node = get_in(entry_data, container, 0, "graphql", key)
    if not isinstance(node, Mapping):
        raise PagePayloadMissing(
            f"entry_data.{container}[0].graphql.{key} not found for {page_type.value} page"
        )
    return node


async def get_output_from_entry_data(
    *,
    config: AppConfig,
    item_spec: ItemSpec,
    request: ScrapeRequest | None,
    entry_data: Mapping[str, Any],
    page: Any,
    connections: ConnectionsFetcher,
) -> OutputRecord:
    """
    Pick the formatter for the classified page type and build its record.

    Profile and post pages first await their enrichment lists, then call
    the pure formatter with them.
    """
    page_type = PageType.parse(item_spec.page_type)
    if page_type is None:
        raise UnsupportedPageType(f"Not supported page type: {item_spec.page_type!r}")

    debug = request_debug_info(request)
    base_url = config.scrape.base_url

    if page_type is PageType.PLACE:
        return format_place(_page_node(entry_data, page_type), debug=debug, base_url=base_url)

    if page_type is PageType.PROFILE:
        node = _page_node(entry_data, page_type)
        following = await connections.fetch_profile_following(page, item_spec, config)
        followed_by = await connections.fetch_profile_followed_by(page, item_spec, config)
        return format_profile(
            node,
            following=following,
            followed_by=followed_by,
            debug=debug,
            base_url=base_url,
        )

    if page_type is PageType.HASHTAG:
        return format_hashtag(_page_node(entry_data, page_type), debug=debug, base_url=base_url)

    node = _page_node(entry_data, page_type)
    liked_by = await connections.fetch_post_likers(page, item_spec, config)
    return format_post_page(node, liked_by=liked_by, debug=debug, base_url=base_url)


async def load_public_stories(
    *,
    config: AppConfig,
    data: Mapping[str, Any],
    page: Any,
    item_spec: ItemSpec,
    aux_query: AuxiliaryQuery,
) -> Any:
    """
    Run the secondary query that tells whether a profile has a public story.

    Any failure of the query is raised as PublicStoryLookupFailed.
    """
    profile_pages = get_in(data, "entry_data", "ProfilePage")
    if not profile_pages:
        raise NotAProfilePage("Not a profile page")

    user_id = get_in(profile_pages, 0, "graphql", "user", "id")
    if user_id is None:
        raise NotAProfilePage("Profile page has no user id")

    variables = {
        "user_id": user_id,
        "include_chaining": False,
        "include_reel": False,
        "include_suggested_users": False,
        "include_logged_out_extras": True,
        "include_highlight_reels": True,
        "include_live_status": True,
    }

    try:
        return await aux_query.run_query(
            config.query_ids.profile_public_stories,
            variables,
            lambda d: d,
            page,
            item_spec,
            _STORIES_LABEL,
        )
    except Exception as e:
        raise PublicStoryLookupFailed(
            f"XHR for hasPublicStory not loaded correctly (user_id={user_id}): {e}"
        ) from e


async def scrape_details(
    *,
    config: AppConfig,
    request: ScrapeRequest | None,
    item_spec: ItemSpec,
    data: Mapping[str, Any],
    page: Any,
    connections: ConnectionsFetcher,
    sink: OutputSink,
    aux_query: AuxiliaryQuery | None = None,
    include_has_stories: bool | None = None,
    logger: RunLogger | None = None,
) -> OutputRecord:
    """
    Build, emit and return the details record for one classified page.

    `include_has_stories` defaults to config.scrape.include_has_stories. When
    set, the public-story query runs before any other enrichment.
    """
    with_stories = (
        config.scrape.include_has_stories if include_has_stories is None else include_has_stories
    )
    url = request.url if request is not None else item_spec.url

    stories: Any = None
    if with_stories:
        if aux_query is None:
            raise PublicStoryLookupFailed("No auxiliary query configured for hasPublicStory")
        stories = await load_public_stories(
            config=config,
            data=data,
            page=page,
            item_spec=item_spec,
            aux_query=aux_query,
        )

    output = await get_output_from_entry_data(
        config=config,
        item_spec=item_spec,
        request=request,
        entry_data=get_in(data, "entry_data", default={}),
        page=page,
        connections=connections,
    )

    if with_stories:
        output = {**output, "hasPublicStory": get_in(stories, "user", "has_public_story", default=False)}

    await sink.emit(output, {"label": "details", "page": page})

    if logger is not None:
        logger.bind(
            page_type=str(getattr(item_spec.page_type, "value", item_spec.page_type)),
            entity=item_spec.name or item_spec.id,
        ).info("page_details_saved", url=url, entity_id=output.get("id"))

    return output
