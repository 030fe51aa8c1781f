"""Property tree merging and dot-path key expansion.

A property set is a plain ``dict``. Nested structure is represented by
nested dicts; after expansion no key contains the path separator.
"""

from collections.abc import Iterable, Mapping
from copy import deepcopy
from typing import Any

PATH_SEPARATOR = "."


def deep_merge(base: Mapping[str, Any], override: Mapping[str, Any]) -> dict[str, Any]:
    """Deep merge two property sets, with override taking precedence.

    For nested dictionaries, values are merged recursively.
    For other values, override replaces base. No key is ever removed.

    Args:
        base: Base property set
        override: Override property set (takes precedence)

    Returns:
        Merged property set. Neither input is modified.
    """
    result = {key: deepcopy(value) for key, value in base.items()}

    for key, value in override.items():
        if (
            key in result
            and isinstance(result[key], dict)
            and isinstance(value, Mapping)
        ):
            result[key] = deep_merge(result[key], value)
        else:
            result[key] = deepcopy(dict(value)) if isinstance(value, Mapping) else deepcopy(value)

    return result


def merge_properties(property_sets: Iterable[Mapping[str, Any] | None]) -> dict[str, Any]:
    """Merge property sets in order, from first to last.

    Identical keys in later sets override those in earlier ones. The order
    of ``property_sets`` is significant and is never changed.
    """
    merged: dict[str, Any] = {}
    for properties in property_sets:
        if properties:
            merged = deep_merge(merged, properties)
    return merged


def expand_property_key(key: str, value: Any) -> dict[str, Any]:
    """Turn a dot-separated key and its value into a nested property set.

    Example: ``"spring.profiles.active", "dev"`` ->
    ``{"spring": {"profiles": {"active": "dev"}}}``
    """
    segments = key.split(PATH_SEPARATOR)
    node: Any = value
    for segment in reversed(segments):
        node = {segment: node}
    return node


def expand_properties(properties: Mapping[str, Any] | None) -> dict[str, Any]:
    """Parse dot-separated keys of a property set into nested property sets.

    Nested mappings are expanded as well. When two keys disagree on the type
    at an intermediate segment, the later key wins per :func:`deep_merge`.
    """
    expanded: dict[str, Any] = {}
    if not properties:
        return expanded

    for key, value in properties.items():
        if isinstance(value, Mapping):
            value = expand_properties(value)
        expanded = deep_merge(expanded, expand_property_key(str(key), value))
    return expanded


def flatten_properties(
    properties: Mapping[str, Any] | None,
    prefix: str = "",
) -> dict[str, Any]:
    """Flatten a nested property set into dot-separated keys.

    Sequences and scalars are leaves. Empty nested mappings are dropped.
    """
    flat: dict[str, Any] = {}
    if not properties:
        return flat

    for key, value in properties.items():
        path = f"{prefix}{PATH_SEPARATOR}{key}" if prefix else str(key)
        if isinstance(value, Mapping):
            flat.update(flatten_properties(value, path))
        else:
            flat[path] = value
    return flat


def get_property(properties: Mapping[str, Any] | None, path: str, default: Any = None) -> Any:
    """Look up a dot-separated path in a nested property set."""
    node: Any = properties
    for segment in path.split(PATH_SEPARATOR):
        if not isinstance(node, Mapping) or segment not in node:
            return default
        node = node[segment]
    return node


def set_property(properties: dict[str, Any], path: str, value: Any) -> None:
    """Set a dot-separated path in place, creating intermediate mappings.

    A non-mapping value sitting on the path is replaced by a mapping.
    """
    segments = path.split(PATH_SEPARATOR)
    node = properties
    for segment in segments[:-1]:
        child = node.get(segment)
        if not isinstance(child, dict):
            child = {}
            node[segment] = child
        node = child
    node[segments[-1]] = value
