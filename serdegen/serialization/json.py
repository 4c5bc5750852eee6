"""JSON bridge used by generated ``to_json`` / ``from_json`` methods.

Generated types convert to and from JSON-compatible Python objects
(``dict``, ``list``, ``str``, ``int``, ``float``, ``bool``, ``None``);
:func:`to_json_string` and :func:`from_json_string` handle the text form.

Example:
    Round-tripping through JSON text::

        from serdegen.serialization.json import to_json_string, from_json_string

        text = to_json_string(point.to_json())
        assert Point.from_json(from_json_string(text)) == point
"""

import json as json_module
from typing import Any

from serdegen.exceptions import DecodeError


def to_json_string(value: Any, indent: int = None) -> str:
    """Serialize a JSON-compatible object to a JSON string."""
    return json_module.dumps(value, indent=indent)


def from_json_string(text: str) -> Any:
    """Parse a JSON string.

    Raises:
        DecodeError: If the text is not valid JSON.
    """
    try:
        return json_module.loads(text)
    except ValueError as e:
        raise DecodeError(f"Invalid JSON: {e}", cause=e)


def get_field(data: Any, key: str, type_name: str) -> Any:
    """Get a required key of a JSON object.

    Raises:
        DecodeError: If ``data`` is not an object or lacks the key.
    """
    if not isinstance(data, dict):
        raise DecodeError(f"Expected a JSON object for {type_name}, got {data!r}")
    if key not in data:
        raise DecodeError(f"Missing field {key!r} in {type_name}")
    return data[key]


def expect_list(data: Any, type_name: str, size: int = None) -> list:
    if not isinstance(data, list):
        raise DecodeError(f"Expected a JSON array for {type_name}, got {data!r}")
    if size is not None and len(data) != size:
        raise DecodeError(f"Expected {size} items for {type_name}, got {len(data)}")
    return data


def bytes_to_json(value: bytes) -> str:
    return value.hex()


def bytes_from_json(data: Any) -> bytes:
    if not isinstance(data, str):
        raise DecodeError(f"Expected a hex string, got {data!r}")
    try:
        return bytes.fromhex(data)
    except ValueError as e:
        raise DecodeError(f"Invalid hex string: {data!r}", cause=e)


def bool_from_json(data: Any) -> bool:
    if not isinstance(data, bool):
        raise DecodeError(f"Expected a JSON boolean, got {data!r}")
    return data


def int_from_json(data: Any) -> int:
    if isinstance(data, bool) or not isinstance(data, int):
        raise DecodeError(f"Expected a JSON integer, got {data!r}")
    return data


def float_from_json(data: Any) -> float:
    if isinstance(data, bool) or not isinstance(data, (int, float)):
        raise DecodeError(f"Expected a JSON number, got {data!r}")
    return float(data)


def str_from_json(data: Any) -> str:
    if not isinstance(data, str):
        raise DecodeError(f"Expected a JSON string, got {data!r}")
    return data


def char_from_json(data: Any) -> str:
    if not isinstance(data, str) or len(data) != 1:
        raise DecodeError(f"Expected a single character, got {data!r}")
    return data
