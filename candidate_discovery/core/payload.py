"""Empty-field elision for agent-facing payloads."""

from collections.abc import Mapping
from typing import Any


def remove_empty_fields(value: Any) -> Any:
    """Recursively drop None, blank strings, and empty containers.

    Containers that become empty after cleaning are dropped too, so the
    result for a fully empty structure is None. ``False`` and ``0`` are
    data and are kept.
    """
    if isinstance(value, Mapping):
        cleaned = {}
        for key, item in value.items():
            item = remove_empty_fields(item)
            if item is not None:
                cleaned[key] = item
        return cleaned or None
    if isinstance(value, list | tuple):
        items = [remove_empty_fields(item) for item in value]
        kept = [item for item in items if item is not None]
        return kept or None
    if isinstance(value, str):
        return value if value.strip() else None
    return value
