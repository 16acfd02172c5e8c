from __future__ import annotations

import unittest

from ig_details.caption import CaptionExtraction, parse_caption


class TestParseCaption(unittest.TestCase):
    def test_extracts_unique_terms_in_order(self) -> None:
        out = parse_caption("Morning run #Run #coffee with @anna.b and @joe. #run")
        self.assertEqual(out.hashtags, ("Run", "coffee"))
        self.assertEqual(out.mentions, ("anna.b", "joe"))

    def test_empty_text(self) -> None:
        self.assertEqual(parse_caption(""), CaptionExtraction())
        self.assertEqual(parse_caption(None), CaptionExtraction())

    def test_unicode_hashtags(self) -> None:
        out = parse_caption("#café #東京")
        self.assertEqual(out.hashtags, ("café", "東京"))


if __name__ == "__main__":
    unittest.main()
