"""Value types used by generated code.

Generated modules import this module as ``st``. Integer and float widths
are spelled as aliases (``st.uint64``, ``st.float32``, ...) so that type
annotations document the wire width, while values stay plain Python
``int`` and ``float`` objects.
"""

from dataclasses import dataclass
from typing import Any, Generic, Iterable, TypeVar

from serdegen.exceptions import DecodeError, SerializationError
from serdegen.serialization.api import Deserializer, Serializer

__all__ = [
    "Unit",
    "UNIT",
    "Option",
    "Slice",
    "int8",
    "int16",
    "int32",
    "int64",
    "int128",
    "uint8",
    "uint16",
    "uint32",
    "uint64",
    "uint128",
    "float32",
    "float64",
    "char",
    "freeze",
    "check_not_none",
    "DecodeError",
    "SerializationError",
    "Serializer",
    "Deserializer",
]

T = TypeVar("T")

int8 = int
int16 = int
int32 = int
int64 = int
int128 = int
uint8 = int
uint16 = int
uint32 = int
uint64 = int
uint128 = int
float32 = float
float64 = float
char = str


@dataclass(frozen=True)
class Unit:
    """The unit value. All instances are equal."""

    def __repr__(self) -> str:
        return "UNIT"


UNIT = Unit()


class Option(Generic[T]):
    """Explicit presence wrapper for optional values.

    ``None`` is never a valid field value in generated types, so an absent
    optional value is ``Option.none()`` rather than ``None``.

    Example:
        >>> Option.some(3).value
        3
        >>> Option.none().is_present
        False
    """

    __slots__ = ("_present", "_value")

    def __init__(self, present: bool = False, value: Any = None):
        if present and value is None:
            raise TypeError("A present Option must hold a value")
        self._present = present
        self._value = value if present else None

    @classmethod
    def some(cls, value: T) -> "Option[T]":
        return cls(True, value)

    @classmethod
    def none(cls) -> "Option[T]":
        return cls(False)

    @property
    def is_present(self) -> bool:
        return self._present

    @property
    def value(self) -> T:
        """Get the wrapped value.

        Raises:
            ValueError: If the option is absent.
        """
        if not self._present:
            raise ValueError("Option has no value")
        return self._value

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Option):
            return NotImplemented
        return self._present == other._present and self._value == other._value

    def __hash__(self) -> int:
        return hash((self._present, freeze(self._value)))

    def __repr__(self) -> str:
        if self._present:
            return f"Option.some({self._value!r})"
        return "Option.none()"


@dataclass(frozen=True)
class Slice:
    """Byte range ``[start, end)`` of an encoded value in the input."""

    start: int
    end: int


def freeze(value: Any) -> Any:
    """Convert a field value to a hashable equivalent.

    Lists become tuples and dicts become frozensets of ``(key, value)``
    pairs, recursively, so that equal values hash equally regardless of
    map insertion order. Everything else is assumed hashable already.
    """
    if isinstance(value, (list, tuple)):
        return tuple(freeze(item) for item in value)
    if isinstance(value, dict):
        return frozenset((freeze(k), freeze(v)) for k, v in value.items())
    return value


def check_not_none(obj: Any, field_names: Iterable[str]) -> None:
    """Reject ``None`` in any of the given fields.

    Raises:
        TypeError: If a field holds ``None``.
    """
    for name in field_names:
        if getattr(obj, name) is None:
            raise TypeError(f"{type(obj).__name__}.{name} must not be None")
