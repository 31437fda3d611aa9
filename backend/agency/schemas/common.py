"""
Identifier helpers shared by the API and the client synchronization layer.

Identifiers arrive either as numbers (client-assigned, e.g. creation
timestamps) or as opaque strings (server-assigned, seed records). They are
compared by their string form everywhere.
"""

from typing import Any, Optional, Union

EntityId = Union[int, str]


def normalize_id(value: Any) -> Optional[str]:
    """Return the string form of an identifier, or None when absent."""
    if value is None:
        return None
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    return str(value)


def same_id(left: Any, right: Any) -> bool:
    """True when two identifiers refer to the same entity."""
    if left is None or right is None:
        return False
    return normalize_id(left) == normalize_id(right)


def is_empty(value: Any) -> bool:
    """True for None and for empty strings, lists, and dicts."""
    if value is None:
        return True
    if isinstance(value, (str, list, tuple, dict)) and len(value) == 0:
        return True
    return False
