from __future__ import annotations

from .address import format_json_address
from .caption import CaptionExtraction, parse_caption
from .config import load_config
from .config_schema import AppConfig
from .details import get_output_from_entry_data, load_public_stories, scrape_details
from .errors import (
    ConfigError,
    NotAProfilePage,
    OutputError,
    PagePayloadMissing,
    PublicStoryLookupFailed,
    UnsupportedPageType,
)
from .formatters import (
    format_hashtag,
    format_igtv_video,
    format_place,
    format_post,
    format_post_page,
    format_profile,
)
from .page_types import PageType
from .request_queue import RequestQueue, create_add_profile

__all__ = [
    "AppConfig",
    "CaptionExtraction",
    "ConfigError",
    "NotAProfilePage",
    "OutputError",
    "PagePayloadMissing",
    "PageType",
    "PublicStoryLookupFailed",
    "RequestQueue",
    "UnsupportedPageType",
    "create_add_profile",
    "format_hashtag",
    "format_igtv_video",
    "format_json_address",
    "format_place",
    "format_post",
    "format_post_page",
    "format_profile",
    "get_output_from_entry_data",
    "load_config",
    "load_public_stories",
    "parse_caption",
    "scrape_details",
]
