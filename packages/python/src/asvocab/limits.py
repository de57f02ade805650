"""
Resource limits for incoming vocabulary documents.

Federated servers deserialize documents from untrusted peers; these
checks bound document size and nesting depth before any entity is
built.
"""

from __future__ import annotations

import json
from typing import Any, Optional

DEFAULT_RESOURCE_LIMITS = {
    "max_document_size": 10 * 1024 * 1024,  # 10 MB
    "max_graph_depth": 100,
}

_MAX_RECURSION_DEPTH = 500  # Safety cap for _measure_depth


def resolve_limits(limits: Optional[dict[str, int]] = None) -> dict[str, int]:
    """Merge *limits* over :data:`DEFAULT_RESOURCE_LIMITS`.

    Raises
    ------
    KeyError
        If *limits* names an unknown limit.
    ValueError
        If a limit is not a positive integer.
    """
    overrides = limits or {}
    unknown = sorted(set(overrides) - set(DEFAULT_RESOURCE_LIMITS))
    if unknown:
        raise KeyError(
            f"Unknown resource limits {unknown}. "
            f"Available: {sorted(DEFAULT_RESOURCE_LIMITS)}"
        )
    for name, value in overrides.items():
        if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
            raise ValueError(f"Limit {name} must be a positive integer, got: {value!r}")
    return {**DEFAULT_RESOURCE_LIMITS, **overrides}


def enforce_resource_limits(
    document: str | bytes | dict | Any,
    limits: Optional[dict[str, int]] = None,
) -> Any:
    """Validate *document* against resource limits and return it parsed.

    Text is size-checked before it is parsed; dicts and lists are
    measured by their compact JSON encoding.

    Raises
    ------
    TypeError
        If *document* is ``None``, not JSON-serializable, or of an
        unsupported type.
    ValueError
        If a limit is exceeded or text is not valid JSON.
    """
    if document is None:
        raise TypeError("Document must not be None")
    resolved = resolve_limits(limits)
    if isinstance(document, (str, bytes)):
        size = len(document.encode("utf-8") if isinstance(document, str) else document)
        _check_size(size, resolved)
        try:
            parsed = json.loads(document)
        except (json.JSONDecodeError, UnicodeDecodeError) as exc:
            raise ValueError(f"Document is not valid JSON: {exc}") from exc
    elif isinstance(document, (dict, list)):
        try:
            content = json.dumps(document, separators=(",", ":"))
        except (TypeError, ValueError) as exc:
            raise TypeError(f"Document is not JSON-serializable: {exc}") from exc
        _check_size(len(content.encode("utf-8")), resolved)
        parsed = document
    else:
        raise TypeError(
            f"Document must be a str, bytes, dict, or list, got: {type(document).__name__}"
        )
    depth = _measure_depth(parsed)
    if depth > resolved["max_graph_depth"]:
        raise ValueError(
            f"Document depth {depth} exceeds limit {resolved['max_graph_depth']}"
        )
    return parsed


def _check_size(size: int, resolved: dict[str, int]) -> None:
    if size > resolved["max_document_size"]:
        raise ValueError(
            f"Document size {size} exceeds limit {resolved['max_document_size']}"
        )


def _measure_depth(obj: Any, current: int = 0) -> int:
    if current > _MAX_RECURSION_DEPTH:
        return current
    if not isinstance(obj, (dict, list)):
        return current
    max_depth = current
    items = obj if isinstance(obj, list) else obj.values()
    for item in items:
        max_depth = max(max_depth, _measure_depth(item, current + 1))
    return max_depth
