"""
Serializable value types for document and realtime payloads.

Firestore documents and Realtime Database nodes accept JSON-like trees.
``JsonValue`` names that shape for type checkers, and ``ensure_json_value``
checks it at runtime before anything leaves the process. Callers whose
backend accepts richer leaves (timestamps, write sentinels) pass them as
``leaf_types``.
"""

from typing import Any, Dict, List, Mapping, Tuple, Union

JsonPrimitive = Union[None, bool, int, float, str]
JsonValue = Union[JsonPrimitive, List["JsonValue"], Dict[str, "JsonValue"]]
Document = Dict[str, JsonValue]

_PRIMITIVES = (type(None), bool, int, float, str)


def ensure_json_value(
    value: Any, path: str = "$", leaf_types: Tuple[type, ...] = ()
) -> JsonValue:
    """
    Validate that ``value`` is a JSON-like tree.

    Tuples are accepted as lists. Mappings must have string keys.

    Args:
        value: Value to validate
        path: Location used in error messages (JSONPath-like)
        leaf_types: Extra types accepted as-is wherever a primitive may appear

    Returns:
        The value, with tuples converted to lists and mappings to dicts.

    Raises:
        TypeError: If a node has an unsupported type
        ValueError: If a mapping has a non-string key

    Example:
        >>> ensure_json_value({"tags": ("a", "b"), "count": 2})
        {'tags': ['a', 'b'], 'count': 2}
    """
    if isinstance(value, _PRIMITIVES) or (leaf_types and isinstance(value, leaf_types)):
        return value
    if isinstance(value, (list, tuple)):
        return [
            ensure_json_value(item, f"{path}[{i}]", leaf_types)
            for i, item in enumerate(value)
        ]
    if isinstance(value, Mapping):
        result: Dict[str, JsonValue] = {}
        for key, item in value.items():
            if not isinstance(key, str):
                raise ValueError(
                    f"Mapping keys must be strings, got {type(key).__name__} at {path}"
                )
            result[key] = ensure_json_value(item, f"{path}.{key}", leaf_types)
        return result
    raise TypeError(f"Unsupported value type {type(value).__name__} at {path}")


def ensure_document(data: Any, leaf_types: Tuple[type, ...] = ()) -> Document:
    """Validate a document payload: a mapping of field name to JSON value."""
    if not isinstance(data, Mapping):
        raise TypeError(f"Document data must be a mapping, got {type(data).__name__}")
    return ensure_json_value(data, leaf_types=leaf_types)
