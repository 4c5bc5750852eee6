"""Format grammar and registry model.

A :class:`Format` describes the shape of a single value. Container formats
(:class:`ContainerFormat`) describe the named types of a registry, and
:class:`VariantFormat` describes one alternative of an enum.

The grammar is closed: every consumer matches exhaustively over the classes
defined here.

Example:
    Building a registry by hand::

        from serdegen.formats import (
            Named, StructFormat, OptionFormat, SeqFormat, U64, STR,
        )

        registry = {
            "Account": StructFormat([
                Named("owner", STR),
                Named("balance", OptionFormat(U64)),
                Named("tags", SeqFormat(STR)),
            ]),
        }
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Dict, Generic, List, Tuple, TypeVar

from serdegen.exceptions import UnresolvedFormatError

T = TypeVar("T")


class PrimitiveKind(Enum):
    """Primitive value kinds. Values are the registry (YAML) spellings."""

    UNIT = "UNIT"
    BOOL = "BOOL"
    I8 = "I8"
    I16 = "I16"
    I32 = "I32"
    I64 = "I64"
    I128 = "I128"
    U8 = "U8"
    U16 = "U16"
    U32 = "U32"
    U64 = "U64"
    U128 = "U128"
    F32 = "F32"
    F64 = "F64"
    CHAR = "CHAR"
    STR = "STR"
    BYTES = "BYTES"

    @property
    def mangled(self) -> str:
        """Get the lower-case name used in signatures and runtime calls."""
        return self.value.lower()


@dataclass(frozen=True)
class Named(Generic[T]):
    """A value with a name: a struct field or an enum variant."""

    name: str
    value: T


class Format:
    """Base class of all value formats."""

    def visit(self, callback: Callable[["Format"], None]) -> None:
        """Visit this format and all nested formats, children first."""
        callback(self)


@dataclass(frozen=True)
class PrimitiveFormat(Format):
    kind: PrimitiveKind

    def __repr__(self) -> str:
        return self.kind.value


@dataclass(frozen=True)
class TypeNameFormat(Format):
    """Reference to a container defined in the registry (or externally)."""

    name: str


@dataclass(frozen=True)
class OptionFormat(Format):
    format: Format

    def visit(self, callback: Callable[[Format], None]) -> None:
        self.format.visit(callback)
        callback(self)


@dataclass(frozen=True)
class SeqFormat(Format):
    format: Format

    def visit(self, callback: Callable[[Format], None]) -> None:
        self.format.visit(callback)
        callback(self)


@dataclass(frozen=True)
class MapFormat(Format):
    key: Format
    value: Format

    def visit(self, callback: Callable[[Format], None]) -> None:
        self.key.visit(callback)
        self.value.visit(callback)
        callback(self)


@dataclass(frozen=True)
class TupleFormat(Format):
    formats: Tuple[Format, ...]

    def __post_init__(self):
        object.__setattr__(self, "formats", tuple(self.formats))

    def visit(self, callback: Callable[[Format], None]) -> None:
        for format in self.formats:
            format.visit(callback)
        callback(self)


@dataclass(frozen=True)
class TupleArrayFormat(Format):
    """Fixed-size array: ``size`` elements of ``content``, no length prefix."""

    content: Format
    size: int

    def visit(self, callback: Callable[[Format], None]) -> None:
        self.content.visit(callback)
        callback(self)


@dataclass(frozen=True)
class VariableFormat(Format):
    """Unresolved placeholder left over from registry inference."""

    def visit(self, callback: Callable[[Format], None]) -> None:
        raise UnresolvedFormatError("Unresolved format found in registry")


UNIT = PrimitiveFormat(PrimitiveKind.UNIT)
BOOL = PrimitiveFormat(PrimitiveKind.BOOL)
I8 = PrimitiveFormat(PrimitiveKind.I8)
I16 = PrimitiveFormat(PrimitiveKind.I16)
I32 = PrimitiveFormat(PrimitiveKind.I32)
I64 = PrimitiveFormat(PrimitiveKind.I64)
I128 = PrimitiveFormat(PrimitiveKind.I128)
U8 = PrimitiveFormat(PrimitiveKind.U8)
U16 = PrimitiveFormat(PrimitiveKind.U16)
U32 = PrimitiveFormat(PrimitiveKind.U32)
U64 = PrimitiveFormat(PrimitiveKind.U64)
U128 = PrimitiveFormat(PrimitiveKind.U128)
F32 = PrimitiveFormat(PrimitiveKind.F32)
F64 = PrimitiveFormat(PrimitiveKind.F64)
CHAR = PrimitiveFormat(PrimitiveKind.CHAR)
STR = PrimitiveFormat(PrimitiveKind.STR)
BYTES = PrimitiveFormat(PrimitiveKind.BYTES)


class VariantFormat:
    """Base class of enum variant formats."""

    def visit(self, callback: Callable[[Format], None]) -> None:
        for named in variant_fields(self):
            named.value.visit(callback)


@dataclass(frozen=True)
class UnitVariant(VariantFormat):
    pass


@dataclass(frozen=True)
class NewTypeVariant(VariantFormat):
    format: Format


@dataclass(frozen=True)
class TupleVariant(VariantFormat):
    formats: Tuple[Format, ...]

    def __post_init__(self):
        object.__setattr__(self, "formats", tuple(self.formats))


@dataclass(frozen=True)
class StructVariant(VariantFormat):
    fields: Tuple[Named[Format], ...]

    def __post_init__(self):
        object.__setattr__(self, "fields", tuple(self.fields))


@dataclass(frozen=True)
class VariableVariant(VariantFormat):
    """Unresolved variant placeholder left over from registry inference."""

    def visit(self, callback: Callable[[Format], None]) -> None:
        raise UnresolvedFormatError("Unresolved variant format found in registry")


class ContainerFormat:
    """Base class of the formats of named registry entries."""

    def visit(self, callback: Callable[[Format], None]) -> None:
        """Visit every format reachable from this container."""
        for named in container_fields(self):
            named.value.visit(callback)


@dataclass(frozen=True)
class UnitStructFormat(ContainerFormat):
    pass


@dataclass(frozen=True)
class NewTypeStructFormat(ContainerFormat):
    """A struct wrapping exactly one value; transparent in JSON."""

    format: Format


@dataclass(frozen=True)
class TupleStructFormat(ContainerFormat):
    formats: Tuple[Format, ...]

    def __post_init__(self):
        object.__setattr__(self, "formats", tuple(self.formats))


@dataclass(frozen=True)
class StructFormat(ContainerFormat):
    fields: Tuple[Named[Format], ...]

    def __post_init__(self):
        object.__setattr__(self, "fields", tuple(self.fields))


@dataclass(frozen=True, eq=False)
class EnumFormat(ContainerFormat):
    """A closed tagged union, keyed by non-negative variant tag."""

    variants: Dict[int, Named[VariantFormat]] = field(default_factory=dict)

    def visit(self, callback: Callable[[Format], None]) -> None:
        for _, variant in self.sorted_variants():
            variant.value.visit(callback)

    def sorted_variants(self) -> List[Tuple[int, Named[VariantFormat]]]:
        """Get (tag, variant) pairs in ascending tag order."""
        return sorted(self.variants.items(), key=lambda item: item[0])

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, EnumFormat):
            return False
        return self.sorted_variants() == other.sorted_variants()

    def __hash__(self) -> int:
        return hash(tuple(self.sorted_variants()))


Registry = Dict[str, ContainerFormat]


def _positional(formats) -> List[Named[Format]]:
    return [Named(f"field{index}", format) for index, format in enumerate(formats)]


def container_fields(container: ContainerFormat) -> List[Named[Format]]:
    """Get the ordered fields of a struct-like container.

    Newtype structs have a single field named ``value`` and tuple structs
    have synthesized names ``field0``, ``field1``, ...

    Raises:
        TypeError: If called with an enum.
    """
    if isinstance(container, UnitStructFormat):
        return []
    if isinstance(container, NewTypeStructFormat):
        return [Named("value", container.format)]
    if isinstance(container, TupleStructFormat):
        return _positional(container.formats)
    if isinstance(container, StructFormat):
        return list(container.fields)
    if isinstance(container, EnumFormat):
        raise TypeError("Enums have variants, not fields")
    raise TypeError(f"Unknown container format: {container!r}")


def variant_fields(variant: VariantFormat) -> List[Named[Format]]:
    """Get the ordered fields of an enum variant."""
    if isinstance(variant, UnitVariant):
        return []
    if isinstance(variant, NewTypeVariant):
        return [Named("value", variant.format)]
    if isinstance(variant, TupleVariant):
        return _positional(variant.formats)
    if isinstance(variant, StructVariant):
        return list(variant.fields)
    if isinstance(variant, VariableVariant):
        raise UnresolvedFormatError("Unresolved variant format found in registry")
    raise TypeError(f"Unknown variant format: {variant!r}")
