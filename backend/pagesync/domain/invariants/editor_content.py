from collections import Counter
from typing import Any, Dict, List


def _duplicates(items: List[Dict[str, Any]]) -> List[str]:
    ids = [
        (item.get("props") or {}).get("id")
        for item in items
        if isinstance(item, dict)
    ]
    counts = Counter(item_id for item_id in ids if item_id is not None)
    return sorted(item_id for item_id, count in counts.items() if count > 1)


def find_duplicate_item_ids(editor_content: Dict[str, Any] | None) -> Dict[str, List[str]]:
    """
    Report content items sharing a ``props.id`` inside the same list.

    Keys are ``"content"`` or ``"zones.<name>"``. Duplicates are reported,
    not rejected.
    """
    if not editor_content:
        return {}

    found: Dict[str, List[str]] = {}

    duplicates = _duplicates(editor_content.get("content") or [])
    if duplicates:
        found["content"] = duplicates

    for zone, items in (editor_content.get("zones") or {}).items():
        duplicates = _duplicates(items or [])
        if duplicates:
            found[f"zones.{zone}"] = duplicates

    return found
