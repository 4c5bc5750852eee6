"""Language-independent helpers shared by all code emitters."""

import keyword
import re
from typing import Iterable

from serdegen.exceptions import UnresolvedFormatError
from serdegen.formats import (
    Format,
    MapFormat,
    OptionFormat,
    PrimitiveFormat,
    PrimitiveKind,
    SeqFormat,
    TupleArrayFormat,
    TupleFormat,
    TypeNameFormat,
    VariableFormat,
)

# Words a signature uses for shapes and primitives.
SIGNATURE_WORDS = frozenset(
    {"option", "vector", "map", "to", "array"} | {kind.mangled for kind in PrimitiveKind}
)
_PLAIN_NAME = re.compile(r"[A-Za-z][A-Za-z0-9]*")
_NUMBERED_WORD = re.compile(r"(tuple|array)[0-9]+")


def mangle_name(name: str) -> str:
    """Spell a type name inside a signature.

    Names that could be confused with the surrounding signature, those
    containing ``_`` or spelled like a signature word, are prefixed with
    their length.

    Example:
        >>> mangle_name("Point")
        'Point'
        >>> mangle_name("x_to_y")
        '6_x_to_y'
    """
    if (
        _PLAIN_NAME.fullmatch(name)
        and name not in SIGNATURE_WORDS
        and not _NUMBERED_WORD.fullmatch(name)
    ):
        return name
    return f"{len(name)}_{name}"


def mangle_type(format: Format) -> str:
    """Compute the canonical signature of a format.

    The signature encodes the shape and every nested element, so that
    ``OPTION(U64)`` and ``OPTION(STR)`` differ while two occurrences of
    ``OPTION(U64)`` are identical. It is also a valid identifier suffix,
    used to name the generated helper routines.

    Raises:
        UnresolvedFormatError: If the format contains a placeholder.
    """
    if isinstance(format, TypeNameFormat):
        return mangle_name(format.name)
    if isinstance(format, PrimitiveFormat):
        return format.kind.mangled
    if isinstance(format, OptionFormat):
        return f"option_{mangle_type(format.format)}"
    if isinstance(format, SeqFormat):
        return f"vector_{mangle_type(format.format)}"
    if isinstance(format, MapFormat):
        return f"map_{mangle_type(format.key)}_to_{mangle_type(format.value)}"
    if isinstance(format, TupleFormat):
        parts = "_".join(mangle_type(f) for f in format.formats)
        return f"tuple{len(format.formats)}_{parts}"
    if isinstance(format, TupleArrayFormat):
        return f"array{format.size}_{mangle_type(format.content)}_array"
    if isinstance(format, VariableFormat):
        raise UnresolvedFormatError("Cannot compute the signature of an unresolved format")
    raise TypeError(f"Unknown format: {format!r}")


def needs_helper(format: Format) -> bool:
    """Check whether a format is (de)serialized through a generated helper."""
    return isinstance(
        format, (OptionFormat, SeqFormat, MapFormat, TupleFormat, TupleArrayFormat)
    )


def escape_identifier(name: str, reserved: Iterable[str] = ()) -> str:
    """Append an underscore to names that are Python keywords or reserved."""
    if keyword.iskeyword(name) or name in reserved:
        return f"{name}_"
    return name