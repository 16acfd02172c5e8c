from __future__ import annotations

from typing import Any, Mapping, Sequence

# Ordered raw-field candidates per logical field; the first one present wins.
# Page types name the same collections differently.
FIELD_SYNONYMS: Mapping[str, tuple[tuple[str, ...], ...]] = {
    "comments": (
        ("edge_media_to_comment",),
        ("edge_media_to_parent_comment",),
        ("edge_media_preview_comment",),
    ),
    "likes": (
        ("edge_liked_by",),
        ("edge_media_preview_like",),
    ),
}


def get_in(value: Any, *path: str | int, default: Any = None) -> Any:
    """
    Walk a nested mapping/sequence by keys and indexes.

    Returns `default` as soon as a step is missing or `None`, or the
    container has the wrong shape for the step.
    """
    current = value
    for step in path:
        if isinstance(step, int):
            if not isinstance(current, Sequence) or isinstance(current, (str, bytes)):
                return default
            if step >= len(current) or step < -len(current):
                return default
            current = current[step]
        else:
            if not isinstance(current, Mapping):
                return default
            current = current.get(step)
        if current is None:
            return default
    return current


def edge_count(collection: Any) -> int | None:
    count = get_in(collection, "count")
    return count if isinstance(count, int) and not isinstance(count, bool) else None


def edge_list(collection: Any) -> list[Mapping[str, Any]]:
    edges = get_in(collection, "edges")
    if not isinstance(edges, list):
        return []
    return [edge for edge in edges if isinstance(edge, Mapping)]


def edge_nodes(collection: Any) -> list[Mapping[str, Any]]:
    out: list[Mapping[str, Any]] = []
    for edge in edge_list(collection):
        node = edge.get("node")
        if isinstance(node, Mapping):
            out.append(node)
    return out


def resolve_synonym(node: Any, field: str) -> Any:
    """
    Return the first present raw value for a logical field, or None.

    Candidates come from FIELD_SYNONYMS in priority order.
    """
    try:
        candidates = FIELD_SYNONYMS[field]
    except KeyError:
        raise KeyError(f"Unknown synonym field: {field}") from None

    for path in candidates:
        value = get_in(node, *path)
        if value is not None:
            return value
    return None
