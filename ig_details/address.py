from __future__ import annotations

import json
from typing import Any, Mapping


def _pascal_case(key: str) -> str:
    return "".join(part[:1].upper() + part[1:] for part in key.split("_"))


def format_json_address(json_address: Any) -> dict[str, Any]:
    """
    Decode a place's JSON-encoded address into `address<Key>` fields.

    Address data is optional enrichment: a missing or malformed value
    yields an empty mapping instead of an error.
    """
    if not isinstance(json_address, str) or not json_address.strip():
        return {}

    try:
        address = json.loads(json_address)
    except ValueError:
        return {}

    if not isinstance(address, Mapping):
        return {}

    return {f"address{_pascal_case(str(key))}": value for key, value in address.items()}
