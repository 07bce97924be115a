# pagesync/utils/paths.py
from typing import Any, Dict


class _Missing:
    """Sentinel for a path that does not resolve. Distinct from a stored None."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self):
        return False

    def __repr__(self):
        return "MISSING"


MISSING = _Missing()


def set_nested_value(root: Dict[str, Any], path: str, value: Any) -> None:
    """
    Set ``value`` at a dot-separated ``path`` inside ``root``.

    Intermediate nodes that are absent or not dicts are replaced with
    empty dicts. No type validation; last assignment wins.

        >>> doc = {}
        >>> set_nested_value(doc, "meta.title", "Home")
        >>> doc
        {'meta': {'title': 'Home'}}
    """
    keys = path.split(".")
    current = root

    for key in keys[:-1]:
        if not isinstance(current.get(key), dict):
            current[key] = {}
        current = current[key]

    current[keys[-1]] = value


def get_nested_value(root: Dict[str, Any], path: str) -> Any:
    """
    Read the value at a dot-separated ``path``.

    Returns ``MISSING`` if any segment is absent or the walk hits
    something that is not a dict (None, a scalar, a list).
    """
    current: Any = root

    for key in path.split("."):
        if not isinstance(current, dict) or key not in current:
            return MISSING
        current = current[key]

    return current


def deep_merge(target: Dict[str, Any], source: Dict[str, Any]) -> Dict[str, Any]:
    """
    Merge ``source`` into ``target`` in place and return ``target``.

    Dicts on both sides merge key by key; anything else (lists, scalars,
    None) from ``source`` replaces the target value outright.
    """
    for key, source_value in source.items():
        target_value = target.get(key)

        if isinstance(source_value, dict) and isinstance(target_value, dict):
            target[key] = deep_merge(target_value, source_value)
        else:
            target[key] = source_value

    return target
