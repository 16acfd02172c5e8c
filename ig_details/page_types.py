from __future__ import annotations

from enum import Enum
from typing import Mapping


class PageType(str, Enum):
    PLACE = "PLACE"
    PROFILE = "PROFILE"
    HASHTAG = "HASHTAG"
    POST = "POST"

    @classmethod
    def parse(cls, value: "str | PageType") -> "PageType | None":
        if isinstance(value, PageType):
            return value
        try:
            return cls((value or "").strip().upper())
        except ValueError:
            return None


# Where each page type keeps its entity inside window._sharedData.entry_data:
# entry_data[<container>][0]["graphql"][<graphql key>]
PAGE_CONTAINERS: Mapping[PageType, tuple[str, str]] = {
    PageType.PLACE: ("LocationsPage", "location"),
    PageType.PROFILE: ("ProfilePage", "user"),
    PageType.HASHTAG: ("TagPage", "hashtag"),
    PageType.POST: ("PostPage", "shortcode_media"),
}
