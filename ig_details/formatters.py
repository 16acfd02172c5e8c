from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Mapping, Sequence

from .address import format_json_address
from .caption import parse_caption
from .fields import edge_count, edge_list, edge_nodes, get_in, resolve_synonym

INSTAGRAM_BASE_URL = "https://www.instagram.com"

_TYPENAME_PREFIX = "Graph"

OutputRecord = dict[str, Any]


def _first_caption(node: Any) -> str:
    text = get_in(node, "edge_media_to_caption", "edges", 0, "node", "text")
    return text if isinstance(text, str) else ""


def _post_type(node: Any) -> str:
    typename = get_in(node, "__typename")
    if isinstance(typename, str) and typename:
        return typename.removeprefix(_TYPENAME_PREFIX)
    return "Video" if get_in(node, "is_video") else "Image"


def _iso_timestamp(value: Any) -> str | None:
    if value is None or isinstance(value, bool):
        return None
    try:
        seconds = int(value)
    except (TypeError, ValueError):
        return None
    if not seconds:
        return None
    try:
        ts = datetime.fromtimestamp(seconds, tz=timezone.utc)
    except (OverflowError, OSError, ValueError):
        return None
    return ts.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def _latest_comments(comments: Any) -> list[dict[str, Any]]:
    # Comment edges arrive newest-first; records list them oldest-first.
    out = [
        {
            "ownerUsername": get_in(edge, "node", "owner", "username", default=""),
            "text": get_in(edge, "node", "text"),
        }
        for edge in edge_list(comments)
    ]
    out.reverse()
    return out


def format_display_resources(edges: Sequence[Mapping[str, Any]] | None) -> list[str]:
    """Map sidecar child edges to their display URLs, dropping empty ones."""
    if not edges:
        return []
    urls = (get_in(edge, "node", "display_url") for edge in edges)
    return [url for url in urls if url]


def sidecar_images(node: Any) -> list[str]:
    return format_display_resources(edge_list(get_in(node, "edge_sidecar_to_children")))


def format_post(node: Mapping[str, Any], *, base_url: str = INSTAGRAM_BASE_URL) -> OutputRecord:
    """
    Format a post node from any page type into a flat post record.

    Comment and like collections are resolved through FIELD_SYNONYMS, so
    feed, hashtag, location and post pages produce the same fields.
    """
    comments = resolve_synonym(node, "comments")
    likes = resolve_synonym(node, "likes")
    caption = _first_caption(node)
    extracted = parse_caption(caption)
    short_code = get_in(node, "shortcode")
    comment_edges = edge_list(comments)

    return {
        "type": _post_type(node),
        "shortCode": short_code,
        "caption": caption,
        "hashtags": list(extracted.hashtags),
        "mentions": list(extracted.mentions),
        "url": f"{base_url.rstrip('/')}/p/{short_code}" if short_code else None,
        "commentsCount": edge_count(comments) if comments is not None else None,
        "latestComments": _latest_comments(comments),
        "dimensionsHeight": get_in(node, "dimensions", "height"),
        "dimensionsWidth": get_in(node, "dimensions", "width"),
        "displayUrl": get_in(node, "display_url"),
        "images": sidecar_images(node),
        "videoUrl": get_in(node, "video_url"),
        "id": get_in(node, "id"),
        "firstComment": get_in(comment_edges, 0, "node", "text"),
        "alt": get_in(node, "accessibility_caption"),
        "likesCount": edge_count(likes) if likes is not None else None,
        "videoViewCount": get_in(node, "video_view_count"),
        "timestamp": _iso_timestamp(get_in(node, "taken_at_timestamp")),
        "locationName": get_in(node, "location", "name"),
        "locationId": get_in(node, "location", "id"),
        "ownerFullName": get_in(node, "owner", "full_name"),
        "ownerUsername": get_in(node, "owner", "username"),
        "ownerId": get_in(node, "owner", "id"),
        "productType": get_in(node, "product_type"),
        "isSponsored": get_in(node, "is_ad"),
        "videoDuration": get_in(node, "video_duration"),
    }


def format_post_page(
    node: Mapping[str, Any],
    *,
    liked_by: Sequence[str],
    debug: Mapping[str, Any] | None = None,
    base_url: str = INSTAGRAM_BASE_URL,
) -> OutputRecord:
    """
    Format the single post shown on a post page.

    Unlike list contexts, sidecar children are expanded into full post records.
    """
    sidecar = get_in(node, "edge_sidecar_to_children")
    tagged = (
        get_in(edge, "node", "user", "username")
        for edge in edge_list(get_in(node, "edge_media_to_tagged_user"))
    )

    return {
        "#debug": dict(debug or {}),
        **format_post(node, base_url=base_url),
        "captionIsEdited": get_in(node, "caption_is_edited"),
        "hasRankedComments": get_in(node, "has_ranked_comments"),
        "commentsDisabled": get_in(node, "comments_disabled"),
        "displayResourceUrls": (
            format_display_resources(edge_list(sidecar)) if sidecar is not None else None
        ),
        "childPosts": (
            [format_post(child, base_url=base_url) for child in edge_nodes(sidecar)]
            if sidecar is not None
            else None
        ),
        "locationSlug": get_in(node, "location", "slug"),
        "isAdvertisement": get_in(node, "is_ad"),
        "taggedUsers": [username for username in tagged if username],
        "likedBy": list(liked_by),
    }


def format_igtv_video(edge: Mapping[str, Any]) -> OutputRecord:
    node = get_in(edge, "node", default={})
    likes = get_in(node, "edge_liked_by")
    comments = get_in(node, "edge_media_to_comment")

    return {
        "type": "Video",
        "shortCode": get_in(node, "shortcode"),
        "title": get_in(node, "title"),
        "caption": _first_caption(node),
        "commentsCount": edge_count(comments),
        "commentsDisabled": get_in(node, "comments_disabled"),
        "dimensionsHeight": get_in(node, "dimensions", "height"),
        "dimensionsWidth": get_in(node, "dimensions", "width"),
        "displayUrl": get_in(node, "display_url"),
        "likesCount": edge_count(likes) if likes is not None else None,
        "videoDuration": get_in(node, "video_duration") or 0,
        "videoViewCount": get_in(node, "video_view_count"),
    }


def _format_posts(collection: Any, *, base_url: str) -> list[OutputRecord]:
    return [format_post(node, base_url=base_url) for node in edge_nodes(collection)]


def format_profile(
    node: Mapping[str, Any],
    *,
    following: Sequence[str],
    followed_by: Sequence[str],
    debug: Mapping[str, Any] | None = None,
    base_url: str = INSTAGRAM_BASE_URL,
) -> OutputRecord:
    """
    Format a profile page's user node.

    `following` and `followed_by` are fetched by the caller beforehand.
    `hasPublicStory` reflects the page payload; callers that run the
    public-story query replace it on a copy of the record.
    """
    igtv = get_in(node, "edge_felix_video_timeline")
    timeline = get_in(node, "edge_owner_to_timeline_media")

    return {
        "#debug": dict(debug or {}),
        "id": get_in(node, "id"),
        "username": get_in(node, "username"),
        "fullName": get_in(node, "full_name"),
        "biography": get_in(node, "biography"),
        "externalUrl": get_in(node, "external_url"),
        "externalUrlShimmed": get_in(node, "external_url_linkshimmed"),
        "followersCount": edge_count(get_in(node, "edge_followed_by")),
        "followsCount": edge_count(get_in(node, "edge_follow")),
        "hasChannel": get_in(node, "has_channel"),
        "highlightReelCount": get_in(node, "highlight_reel_count"),
        "isBusinessAccount": get_in(node, "is_business_account"),
        "joinedRecently": get_in(node, "is_joined_recently"),
        "businessCategoryName": get_in(node, "business_category_name"),
        "private": get_in(node, "is_private"),
        "verified": get_in(node, "is_verified"),
        "profilePicUrl": get_in(node, "profile_pic_url"),
        "profilePicUrlHD": get_in(node, "profile_pic_url_hd"),
        "facebookPage": get_in(node, "connected_fb_page"),
        "igtvVideoCount": edge_count(igtv),
        "latestIgtvVideos": [format_igtv_video(edge) for edge in edge_list(igtv)],
        "postsCount": edge_count(timeline),
        "latestPosts": _format_posts(timeline, base_url=base_url),
        "following": list(following),
        "followedBy": list(followed_by),
        "hasPublicStory": get_in(node, "has_public_story"),
    }


def format_place(
    node: Mapping[str, Any],
    *,
    debug: Mapping[str, Any] | None = None,
    base_url: str = INSTAGRAM_BASE_URL,
) -> OutputRecord:
    media = get_in(node, "edge_location_to_media")

    return {
        "#debug": dict(debug or {}),
        "id": get_in(node, "id"),
        "name": get_in(node, "name"),
        "public": get_in(node, "has_public_page"),
        "lat": get_in(node, "lat"),
        "lng": get_in(node, "lng"),
        "slug": get_in(node, "slug"),
        "description": get_in(node, "blurb"),
        "website": get_in(node, "website"),
        "phone": get_in(node, "phone"),
        "aliasOnFacebook": get_in(node, "primary_alias_on_fb"),
        **format_json_address(get_in(node, "address_json")),
        "profilePicUrl": get_in(node, "profile_pic_url"),
        "postsCount": edge_count(media),
        "topPosts": _format_posts(get_in(node, "edge_location_to_top_posts"), base_url=base_url),
        "latestPosts": _format_posts(media, base_url=base_url),
    }


def format_hashtag(
    node: Mapping[str, Any],
    *,
    debug: Mapping[str, Any] | None = None,
    base_url: str = INSTAGRAM_BASE_URL,
) -> OutputRecord:
    media = get_in(node, "edge_hashtag_to_media")

    return {
        "#debug": dict(debug or {}),
        "id": get_in(node, "id"),
        "name": get_in(node, "name"),
        "public": get_in(node, "has_public_page"),
        "topPostsOnly": get_in(node, "is_top_media_only"),
        "profilePicUrl": get_in(node, "profile_pic_url"),
        "postsCount": edge_count(media),
        "topPosts": _format_posts(get_in(node, "edge_hashtag_to_top_posts"), base_url=base_url),
        "latestPosts": _format_posts(media, base_url=base_url),
    }
