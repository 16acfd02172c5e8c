from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Iterable

_HASHTAG_RE = re.compile(r"#(\w+)")
_MENTION_RE = re.compile(r"@([A-Za-z0-9_.]+)")


@dataclass(frozen=True)
class CaptionExtraction:
    hashtags: tuple[str, ...] = ()
    mentions: tuple[str, ...] = ()


def _dedupe_terms(values: Iterable[str]) -> tuple[str, ...]:
    out: list[str] = []
    seen: set[str] = set()
    for item in values:
        term = (item or "").strip()
        if not term:
            continue
        key = term.casefold()
        if key in seen:
            continue
        seen.add(key)
        out.append(term)
    return tuple(out)


def parse_caption(text: str | None) -> CaptionExtraction:
    """
    Extract hashtags and mentions from a caption.

    Terms keep their first spelling and order; `#`/`@` are stripped.
    """
    if not isinstance(text, str) or not text.strip():
        return CaptionExtraction()

    hashtags = _dedupe_terms(_HASHTAG_RE.findall(text))
    # Usernames cannot end with a dot, so "@user." is punctuation.
    mentions = _dedupe_terms(m.rstrip(".") for m in _MENTION_RE.findall(text))
    return CaptionExtraction(hashtags=hashtags, mentions=mentions)
