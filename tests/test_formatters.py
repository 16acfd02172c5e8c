from __future__ import annotations

import copy
import unittest
from typing import Any

from ig_details.formatters import (
    format_hashtag,
    format_igtv_video,
    format_place,
    format_post,
    format_post_page,
    format_profile,
)

_POST_FIELDS = [
    "type",
    "shortCode",
    "caption",
    "hashtags",
    "mentions",
    "url",
    "commentsCount",
    "latestComments",
    "dimensionsHeight",
    "dimensionsWidth",
    "displayUrl",
    "images",
    "videoUrl",
    "id",
    "firstComment",
    "alt",
    "likesCount",
    "videoViewCount",
    "timestamp",
    "locationName",
    "locationId",
    "ownerFullName",
    "ownerUsername",
    "ownerId",
    "productType",
    "isSponsored",
    "videoDuration",
]


def _comments(*texts: str) -> dict[str, Any]:
    return {
        "count": len(texts),
        "edges": [{"node": {"text": t, "owner": {"username": f"u_{t}"}}} for t in texts],
    }


def _post_node(**extra: Any) -> dict[str, Any]:
    node: dict[str, Any] = {
        "__typename": "GraphImage",
        "id": "100",
        "shortcode": "AbC",
        "display_url": "https://cdn.example/abc.jpg",
        "dimensions": {"height": 1080, "width": 1080},
        "taken_at_timestamp": 1600000000,
        "edge_media_to_caption": {"edges": [{"node": {"text": "Hi #sun @bob"}}]},
        "owner": {"id": "7", "username": "alice", "full_name": "Alice A"},
        "location": {"id": "55", "name": "Park", "slug": "park"},
        "accessibility_caption": "photo of a park",
        "is_ad": False,
        "product_type": "feed",
    }
    node.update(extra)
    return node


class TestFormatPost(unittest.TestCase):
    def test_minimal_node_has_all_fields_defaulted(self) -> None:
        out = format_post({})

        self.assertEqual(list(out), _POST_FIELDS)
        self.assertEqual(out["type"], "Image")
        self.assertEqual(out["caption"], "")
        self.assertEqual(out["hashtags"], [])
        self.assertEqual(out["mentions"], [])
        self.assertEqual(out["latestComments"], [])
        self.assertEqual(out["images"], [])
        for key in (
            "commentsCount",
            "likesCount",
            "timestamp",
            "firstComment",
            "locationName",
            "locationId",
            "ownerFullName",
            "ownerUsername",
            "ownerId",
            "dimensionsHeight",
            "url",
        ):
            self.assertIsNone(out[key], msg=key)

    def test_common_fields(self) -> None:
        out = format_post(_post_node())

        self.assertEqual(out["type"], "Image")
        self.assertEqual(out["url"], "https://www.instagram.com/p/AbC")
        self.assertEqual(out["caption"], "Hi #sun @bob")
        self.assertEqual(out["hashtags"], ["sun"])
        self.assertEqual(out["mentions"], ["bob"])
        self.assertEqual(out["timestamp"], "2020-09-13T12:26:40.000Z")
        self.assertEqual(out["ownerUsername"], "alice")
        self.assertEqual(out["ownerId"], "7")
        self.assertEqual(out["locationName"], "Park")
        self.assertEqual(out["alt"], "photo of a park")
        self.assertEqual(out["dimensionsWidth"], 1080)
        self.assertIs(out["isSponsored"], False)

    def test_type_discriminator(self) -> None:
        self.assertEqual(format_post({"__typename": "GraphImage"})["type"], "Image")
        self.assertEqual(format_post({"__typename": "GraphSidecar"})["type"], "Sidecar")
        self.assertEqual(format_post({"is_video": True})["type"], "Video")
        self.assertEqual(format_post({"is_video": False})["type"], "Image")

    def test_primary_comments_win_over_preview(self) -> None:
        node = _post_node(
            edge_media_to_comment=_comments("a", "b"),
            edge_media_preview_comment=_comments("x", "y", "z"),
        )
        out = format_post(node)

        self.assertEqual(out["commentsCount"], 2)
        self.assertEqual([c["text"] for c in out["latestComments"]], ["b", "a"])

    def test_comment_order_and_first_comment(self) -> None:
        out = format_post(_post_node(edge_media_to_parent_comment=_comments("c1", "c2", "c3")))

        self.assertEqual([c["text"] for c in out["latestComments"]], ["c3", "c2", "c1"])
        self.assertEqual(out["latestComments"][0]["ownerUsername"], "u_c3")
        self.assertEqual(out["firstComment"], "c1")

    def test_comment_without_owner_gets_empty_username(self) -> None:
        node = _post_node(edge_media_to_comment={"count": 1, "edges": [{"node": {"text": "hey"}}]})
        out = format_post(node)
        self.assertEqual(out["latestComments"], [{"ownerUsername": "", "text": "hey"}])

    def test_count_without_edges(self) -> None:
        out = format_post(_post_node(edge_media_preview_comment={"count": 40}))
        self.assertEqual(out["commentsCount"], 40)
        self.assertEqual(out["latestComments"], [])
        self.assertIsNone(out["firstComment"])

    def test_likes_synonyms(self) -> None:
        self.assertEqual(format_post(_post_node(edge_liked_by={"count": 5}))["likesCount"], 5)
        self.assertEqual(
            format_post(_post_node(edge_media_preview_like={"count": 9}))["likesCount"], 9
        )
        self.assertIsNone(format_post(_post_node())["likesCount"])

    def test_sidecar_images_skip_empty_urls(self) -> None:
        node = _post_node(
            edge_sidecar_to_children={
                "edges": [
                    {"node": {"display_url": "https://cdn.example/1.jpg"}},
                    {"node": {"display_url": ""}},
                    {"node": {"display_url": "https://cdn.example/2.jpg"}},
                ]
            }
        )
        self.assertEqual(
            format_post(node)["images"],
            ["https://cdn.example/1.jpg", "https://cdn.example/2.jpg"],
        )

    def test_is_pure(self) -> None:
        node = _post_node(edge_media_to_comment=_comments("a", "b", "c"))
        before = copy.deepcopy(node)

        first = format_post(node)
        second = format_post(node)

        self.assertEqual(first, second)
        self.assertEqual(node, before)


class TestFormatPostPage(unittest.TestCase):
    def test_sidecar_children_become_full_posts(self) -> None:
        node = _post_node(
            __typename="GraphSidecar",
            edge_sidecar_to_children={
                "edges": [
                    {"node": {"__typename": "GraphImage", "display_url": "https://cdn.example/1.jpg"}},
                    {"node": {"__typename": "GraphVideo", "display_url": "https://cdn.example/2.jpg"}},
                ]
            },
        )
        out = format_post_page(node, liked_by=["x"], debug={"url": "u"})

        self.assertEqual(out["#debug"], {"url": "u"})
        self.assertEqual(out["type"], "Sidecar")
        self.assertEqual(len(out["images"]), 2)
        self.assertEqual(len(out["displayResourceUrls"]), 2)
        self.assertEqual(len(out["childPosts"]), 2)
        self.assertEqual([c["type"] for c in out["childPosts"]], ["Image", "Video"])
        for child in out["childPosts"]:
            self.assertEqual(list(child), _POST_FIELDS)
            self.assertEqual(child["latestComments"], [])
            self.assertIsNone(child["commentsCount"])
        self.assertEqual(out["likedBy"], ["x"])

    def test_minimal_post_page(self) -> None:
        out = format_post_page({}, liked_by=[])

        self.assertEqual(out["#debug"], {})
        self.assertIsNone(out["displayResourceUrls"])
        self.assertIsNone(out["childPosts"])
        self.assertIsNone(out["captionIsEdited"])
        self.assertIsNone(out["locationSlug"])
        self.assertIsNone(out["isAdvertisement"])
        self.assertEqual(out["taggedUsers"], [])
        self.assertEqual(out["likedBy"], [])

    def test_tagged_users_and_location_slug(self) -> None:
        node = _post_node(
            caption_is_edited=True,
            edge_media_to_tagged_user={
                "edges": [{"node": {"user": {"username": "t1"}}}, {"node": {"user": {}}}]
            },
        )
        out = format_post_page(node, liked_by=[])
        self.assertEqual(out["taggedUsers"], ["t1"])
        self.assertEqual(out["locationSlug"], "park")
        self.assertIs(out["captionIsEdited"], True)


class TestFormatIGTVVideo(unittest.TestCase):
    def test_minimal_edge(self) -> None:
        out = format_igtv_video({"node": {}})

        self.assertEqual(out["type"], "Video")
        self.assertEqual(out["caption"], "")
        self.assertEqual(out["videoDuration"], 0)
        self.assertIsNone(out["likesCount"])
        self.assertIsNone(out["commentsCount"])
        self.assertIsNone(out["dimensionsHeight"])

    def test_full_edge(self) -> None:
        edge = {
            "node": {
                "shortcode": "TV1",
                "title": "Episode 1",
                "edge_media_to_caption": {"edges": [{"node": {"text": "cap"}}]},
                "edge_media_to_comment": {"count": 3},
                "edge_liked_by": {"count": 10},
                "video_duration": 61.5,
                "video_view_count": 1000,
            }
        }
        out = format_igtv_video(edge)

        self.assertEqual(out["shortCode"], "TV1")
        self.assertEqual(out["caption"], "cap")
        self.assertEqual(out["commentsCount"], 3)
        self.assertEqual(out["likesCount"], 10)
        self.assertEqual(out["videoDuration"], 61.5)


class TestFormatProfile(unittest.TestCase):
    def test_minimal_profile(self) -> None:
        out = format_profile({}, following=[], followed_by=[])

        self.assertEqual(out["#debug"], {})
        self.assertIsNone(out["followersCount"])
        self.assertIsNone(out["igtvVideoCount"])
        self.assertIsNone(out["postsCount"])
        self.assertIsNone(out["hasPublicStory"])
        self.assertEqual(out["latestIgtvVideos"], [])
        self.assertEqual(out["latestPosts"], [])
        self.assertEqual(out["following"], [])
        self.assertEqual(out["followedBy"], [])

    def test_profile_fields_and_enrichment(self) -> None:
        node = {
            "id": "7",
            "username": "alice",
            "full_name": "Alice A",
            "edge_followed_by": {"count": 100},
            "edge_follow": {"count": 50},
            "is_private": False,
            "is_verified": True,
            "has_public_story": True,
            "edge_felix_video_timeline": {"count": 1, "edges": [{"node": {"shortcode": "TV"}}]},
            "edge_owner_to_timeline_media": {
                "count": 300,
                "edges": [{"node": _post_node()}, {"node": _post_node(shortcode="Def")}],
            },
        }
        out = format_profile(node, following=["f1"], followed_by=["b1", "b2"], debug={"url": "u"})

        self.assertEqual(out["fullName"], "Alice A")
        self.assertEqual(out["followersCount"], 100)
        self.assertEqual(out["followsCount"], 50)
        self.assertIs(out["private"], False)
        self.assertIs(out["verified"], True)
        self.assertIs(out["hasPublicStory"], True)
        self.assertEqual(out["igtvVideoCount"], 1)
        self.assertEqual(out["latestIgtvVideos"][0]["shortCode"], "TV")
        self.assertEqual(out["postsCount"], 300)
        self.assertEqual([p["shortCode"] for p in out["latestPosts"]], ["AbC", "Def"])
        self.assertEqual(out["following"], ["f1"])
        self.assertEqual(out["followedBy"], ["b1", "b2"])

    def test_is_pure(self) -> None:
        node = {"id": "1", "edge_owner_to_timeline_media": {"edges": [{"node": _post_node()}]}}
        first = format_profile(node, following=["a"], followed_by=["b"])
        second = format_profile(node, following=["a"], followed_by=["b"])
        self.assertEqual(first, second)


class TestFormatPlace(unittest.TestCase):
    def test_minimal_place(self) -> None:
        out = format_place({})

        self.assertEqual(out["#debug"], {})
        self.assertIsNone(out["postsCount"])
        self.assertEqual(out["topPosts"], [])
        self.assertEqual(out["latestPosts"], [])
        self.assertNotIn("addressStreetAddress", out)

    def test_place_with_address_and_posts(self) -> None:
        node = {
            "id": "55",
            "name": "Park",
            "blurb": "A park",
            "lat": 50.1,
            "lng": 14.4,
            "address_json": '{"street_address": "1 Main St", "city_name": "Prague"}',
            "edge_location_to_media": {"count": 9, "edges": [{"node": _post_node()}]},
        }
        out = format_place(node)

        self.assertEqual(out["description"], "A park")
        self.assertEqual(out["addressStreetAddress"], "1 Main St")
        self.assertEqual(out["addressCityName"], "Prague")
        self.assertEqual(out["postsCount"], 9)
        self.assertEqual(out["topPosts"], [])
        self.assertEqual(len(out["latestPosts"]), 1)

    def test_malformed_address_is_ignored(self) -> None:
        out = format_place({"address_json": "{oops"})
        self.assertFalse([k for k in out if k.startswith("address")])


class TestFormatHashtag(unittest.TestCase):
    def test_minimal_hashtag(self) -> None:
        out = format_hashtag({})

        self.assertEqual(out["#debug"], {})
        self.assertIsNone(out["postsCount"])
        self.assertEqual(out["topPosts"], [])
        self.assertEqual(out["latestPosts"], [])

    def test_top_and_latest_posts(self) -> None:
        node = {
            "name": "sun",
            "is_top_media_only": False,
            "edge_hashtag_to_top_posts": {"edges": [{"node": _post_node(shortcode="T1")}]},
            "edge_hashtag_to_media": {
                "count": 2000,
                "edges": [{"node": _post_node(shortcode="L1")}, {"node": _post_node(shortcode="L2")}],
            },
        }
        out = format_hashtag(node, debug={"requestId": "r1"})

        self.assertEqual(out["#debug"], {"requestId": "r1"})
        self.assertIs(out["topPostsOnly"], False)
        self.assertEqual(out["postsCount"], 2000)
        self.assertEqual([p["shortCode"] for p in out["topPosts"]], ["T1"])
        self.assertEqual([p["shortCode"] for p in out["latestPosts"]], ["L1", "L2"])


if __name__ == "__main__":
    unittest.main()
