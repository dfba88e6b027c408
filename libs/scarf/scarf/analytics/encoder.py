"""Minimal JSON encoding for analytics event properties.

Two paths are provided:

* ``encode_properties`` produces the wire body. Every top-level value except
  ``None`` is sent as a JSON string holding its display text, which is what the
  collector schema expects.
* ``to_json`` is a general recursive encoder that keeps native JSON types.
"""

from __future__ import annotations

import array
import math
from decimal import Decimal
from typing import Any, Dict, List, Mapping, Optional, Tuple, Union

PropertyValue = Union[
    None,
    bool,
    int,
    float,
    Decimal,
    str,
    Mapping[str, Any],
    List[Any],
    Tuple[Any, ...],
    bytes,
    bytearray,
    memoryview,
    array.array,
]

Properties = Mapping[str, PropertyValue]

_ESCAPES: Dict[str, str] = {
    "\\": "\\\\",
    '"': '\\"',
    "\b": "\\b",
    "\f": "\\f",
    "\n": "\\n",
    "\r": "\\r",
    "\t": "\\t",
}

_ARRAY_TYPES = (list, tuple, bytes, bytearray, memoryview, array.array)


def quote(text: str) -> str:
    """Quote a string as a JSON string literal.

    Only the characters JSON requires are escaped; non-ASCII text is kept as is.

    Args:
        text: Text to quote

    Returns:
        str: The quoted literal, including the surrounding double quotes
    """
    parts = ['"']
    for ch in text:
        escaped = _ESCAPES.get(ch)
        if escaped is not None:
            parts.append(escaped)
        elif ch < " ":
            parts.append("\\u%04x" % ord(ch))
        else:
            parts.append(ch)
    parts.append('"')
    return "".join(parts)


def _int_text(value: int) -> Optional[str]:
    # int.__repr__ keeps IntEnum members numeric; huge ints can exceed the
    # interpreter's digit limit for str conversion
    try:
        return int.__repr__(value)
    except ValueError:
        return None


def _number_to_json(value: Union[int, float, Decimal]) -> str:
    if isinstance(value, float):
        if not math.isfinite(value):
            return "null"
        return float.__repr__(value)
    if isinstance(value, Decimal):
        if not value.is_finite():
            return "null"
        return str(value)
    text = _int_text(value)
    return "null" if text is None else text


def _mapping_to_json(mapping: Mapping[Any, Any]) -> str:
    # Keys that are not strings are skipped
    items = [
        quote(key) + ":" + to_json(item) for key, item in mapping.items() if isinstance(key, str)
    ]
    return "{" + ",".join(items) + "}"


def _array_to_json(values: Any) -> str:
    if isinstance(values, memoryview):
        values = values.tolist()
    return "[" + ",".join(to_json(item) for item in values) + "]"


def to_json(value: Any) -> str:
    """Encode an arbitrary value as JSON, keeping native JSON types.

    Unsupported values fall back to their ``str()`` text, so this never raises.

    Args:
        value: Value to encode

    Returns:
        str: JSON text
    """
    if value is None:
        return "null"
    if isinstance(value, str):
        return quote(value)
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float, Decimal)):
        return _number_to_json(value)
    if isinstance(value, Mapping):
        return _mapping_to_json(value)
    if isinstance(value, _ARRAY_TYPES):
        return _array_to_json(value)
    return quote(_safe_str(value))


def display_text(value: Any) -> Optional[str]:
    """Return the text a top-level property value is sent as.

    None means the value has no text form and is sent as ``null``.
    """
    if value is None:
        return None
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int):
        return _int_text(value)
    if isinstance(value, float):
        if math.isnan(value):
            return "NaN"
        if math.isinf(value):
            return "Infinity" if value > 0 else "-Infinity"
        return float.__repr__(value)
    if isinstance(value, (Mapping,) + _ARRAY_TYPES):
        return to_json(value)
    return _safe_str(value)


def encode_properties(properties: Optional[Properties]) -> str:
    """Encode event properties as the JSON object sent to the collector.

    Keys keep the mapping's iteration order. ``None`` values are sent as JSON
    ``null``; every other value is sent as a JSON string of its display text,
    e.g. ``{"a": 1, "b": True}`` encodes to ``{"a":"1","b":"true"}``.

    Args:
        properties: Event properties, or None for an empty event

    Returns:
        str: JSON object text
    """
    if not properties:
        return "{}"

    items = []
    for key, value in properties.items():
        text = display_text(value)
        encoded = "null" if text is None else quote(text)
        items.append(quote(_safe_str(key)) + ":" + encoded)
    return "{" + ",".join(items) + "}"


def _safe_str(value: Any) -> str:
    try:
        return str(value)
    except Exception:
        return "<%s>" % type(value).__name__
