"""Registry loading and validation.

Registries are read from the YAML layout produced by serde-reflection:
primitive formats are upper-case scalars and every other format is a
single-key mapping.

Example:
    A registry file::

        Point:
          STRUCT:
            - x: I32
            - y: I32
        Shape:
          ENUM:
            0:
              Circle:
                NEWTYPE: U32
            1:
              Polygon:
                NEWTYPE:
                  SEQ:
                    TYPENAME: Point

    Loading it::

        from serdegen.registry import load_registry, validate_registry

        registry = load_registry("types.yaml")
        validate_registry(registry)
"""

import os
from typing import Any, Dict, Iterable, List, Optional, Set

import yaml

from serdegen.exceptions import SchemaError, UnresolvedFormatError
from serdegen.formats import (
    ContainerFormat,
    EnumFormat,
    Format,
    MapFormat,
    Named,
    NewTypeStructFormat,
    NewTypeVariant,
    OptionFormat,
    PrimitiveFormat,
    PrimitiveKind,
    Registry,
    SeqFormat,
    StructFormat,
    StructVariant,
    TupleArrayFormat,
    TupleFormat,
    TupleStructFormat,
    TupleVariant,
    TypeNameFormat,
    UnitStructFormat,
    UnitVariant,
    VariableFormat,
    VariableVariant,
    VariantFormat,
    container_fields,
    variant_fields,
)
from serdegen.logging import get_logger

_logger = get_logger("registry")

_PRIMITIVES = {kind.value: PrimitiveFormat(kind) for kind in PrimitiveKind}


class _UniqueKeyLoader(yaml.SafeLoader):
    """Safe loader that rejects duplicate mapping keys.

    Plain ``yaml.safe_load`` keeps the last of two equal keys, which would
    silently drop a container, a variant or a tag.
    """

    def construct_mapping(self, node, deep=False):
        seen = set()
        for key_node, _ in node.value:
            key = self.construct_object(key_node, deep=deep)
            if key in seen:
                raise SchemaError(
                    f"Duplicate key {key!r} at line {key_node.start_mark.line + 1}"
                )
            seen.add(key)
        return super().construct_mapping(node, deep=deep)


def _single_entry(data: Any, what: str):
    if not isinstance(data, dict) or len(data) != 1:
        raise SchemaError(f"Invalid {what}: expected a single-key mapping, got {data!r}")
    return next(iter(data.items()))


def parse_format(data: Any) -> Format:
    """Parse a value format from its YAML representation."""
    if isinstance(data, str):
        if data in _PRIMITIVES:
            return _PRIMITIVES[data]
        if data == "VARIABLE":
            return VariableFormat()
        raise SchemaError(f"Unknown format: {data}")

    tag, body = _single_entry(data, "format")
    if tag == "TYPENAME":
        if not isinstance(body, str) or not body:
            raise SchemaError(f"Invalid type name: {body!r}")
        return TypeNameFormat(body)
    if tag == "OPTION":
        return OptionFormat(parse_format(body))
    if tag == "SEQ":
        return SeqFormat(parse_format(body))
    if tag == "MAP":
        if not isinstance(body, dict) or set(body) != {"KEY", "VALUE"}:
            raise SchemaError(f"Invalid map format: {body!r}")
        return MapFormat(parse_format(body["KEY"]), parse_format(body["VALUE"]))
    if tag == "TUPLE":
        if not isinstance(body, list):
            raise SchemaError(f"Invalid tuple format: {body!r}")
        return TupleFormat(tuple(parse_format(item) for item in body))
    if tag == "TUPLEARRAY":
        if not isinstance(body, dict) or set(body) != {"CONTENT", "SIZE"}:
            raise SchemaError(f"Invalid fixed-size array format: {body!r}")
        return TupleArrayFormat(parse_format(body["CONTENT"]), body["SIZE"])
    if tag == "VARIABLE":
        return VariableFormat()
    raise SchemaError(f"Unknown format: {tag}")


def _parse_named_formats(data: Any, what: str) -> List[Named[Format]]:
    if not isinstance(data, list):
        raise SchemaError(f"Invalid {what}: expected a list of fields, got {data!r}")
    fields = []
    for item in data:
        name, body = _single_entry(item, "field")
        fields.append(Named(str(name), parse_format(body)))
    return fields


def _parse_formats(data: Any, what: str) -> List[Format]:
    if not isinstance(data, list):
        raise SchemaError(f"Invalid {what}: expected a list of formats, got {data!r}")
    return [parse_format(item) for item in data]


def parse_variant_format(data: Any) -> VariantFormat:
    """Parse an enum variant format from its YAML representation."""
    if data == "UNIT":
        return UnitVariant()
    if data == "VARIABLE":
        return VariableVariant()

    tag, body = _single_entry(data, "variant")
    if tag == "NEWTYPE":
        return NewTypeVariant(parse_format(body))
    if tag == "TUPLE":
        return TupleVariant(tuple(_parse_formats(body, "tuple variant")))
    if tag == "STRUCT":
        return StructVariant(tuple(_parse_named_formats(body, "struct variant")))
    if tag == "VARIABLE":
        return VariableVariant()
    raise SchemaError(f"Unknown variant format: {tag}")


def parse_container_format(data: Any) -> ContainerFormat:
    """Parse a container format from its YAML representation."""
    if data == "UNITSTRUCT":
        return UnitStructFormat()

    tag, body = _single_entry(data, "container")
    if tag == "NEWTYPESTRUCT":
        return NewTypeStructFormat(parse_format(body))
    if tag == "TUPLESTRUCT":
        return TupleStructFormat(tuple(_parse_formats(body, "tuple struct")))
    if tag == "STRUCT":
        return StructFormat(tuple(_parse_named_formats(body, "struct")))
    if tag == "ENUM":
        if not isinstance(body, dict):
            raise SchemaError(f"Invalid enum: expected a mapping of tags, got {body!r}")
        variants: Dict[int, Named[VariantFormat]] = {}
        for index, entry in body.items():
            if isinstance(index, bool) or not isinstance(index, int):
                raise SchemaError(f"Invalid variant tag: {index!r}")
            name, variant = _single_entry(entry, "variant")
            variants[index] = Named(str(name), parse_variant_format(variant))
        return EnumFormat(variants)
    raise SchemaError(f"Unknown container format: {tag}")


def registry_from_dict(data: Any) -> Registry:
    """Build a registry from already-parsed YAML or JSON data."""
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise SchemaError("A registry must be a mapping from names to containers")
    registry: Registry = {}
    for name, body in data.items():
        try:
            registry[str(name)] = parse_container_format(body)
        except SchemaError as e:
            if e.container_name is not None:
                raise
            raise SchemaError(f"{name}: {e}", container_name=str(name), cause=e)
    return registry


def load_registry_from_string(content: str) -> Registry:
    """Load a registry from a YAML string.

    Raises:
        SchemaError: If the YAML is malformed or not a valid registry.
    """
    try:
        data = yaml.load(content, Loader=_UniqueKeyLoader)
    except yaml.YAMLError as e:
        raise SchemaError(f"Failed to parse registry YAML: {e}", cause=e)
    return registry_from_dict(data)


def load_registry(path: str) -> Registry:
    """Load a registry from a YAML file.

    Raises:
        SchemaError: If the file cannot be read, or its content is not
            a valid registry.
    """
    if not os.path.exists(path):
        raise SchemaError(f"Registry file not found: {path}")
    try:
        with open(path, "r", encoding="utf-8") as f:
            content = f.read()
    except OSError as e:
        raise SchemaError(f"Failed to read registry file: {e}", cause=e)

    registry = load_registry_from_string(content)
    _logger.debug("Loaded registry with %d containers from %s", len(registry), path)
    return registry


def _check_names(names: Iterable[str], what: str, container_name: str) -> None:
    seen: Set[str] = set()
    for name in names:
        if not isinstance(name, str) or not name:
            raise SchemaError(
                f"{container_name}: {what} names must be non-empty strings",
                container_name=container_name,
            )
        if name in seen:
            raise SchemaError(
                f"{container_name}: duplicate {what} name {name!r}",
                container_name=container_name,
            )
        seen.add(name)


def _check_format(
    format: Format, known_names: Set[str], container_name: str
) -> None:
    def check(f: Format) -> None:
        if isinstance(f, TypeNameFormat) and f.name not in known_names:
            raise SchemaError(
                f"{container_name}: reference to undefined type {f.name!r}",
                container_name=container_name,
            )
        if isinstance(f, TupleArrayFormat):
            if isinstance(f.size, bool) or not isinstance(f.size, int) or f.size <= 0:
                raise SchemaError(
                    f"{container_name}: fixed-size array size must be a positive "
                    f"integer, got {f.size!r}",
                    container_name=container_name,
                )

    try:
        format.visit(check)
    except UnresolvedFormatError as e:
        if e.container_name is not None:
            raise
        raise UnresolvedFormatError(
            f"{container_name}: {e}", container_name=container_name, cause=e
        )


def _check_fields(
    fields: List[Named[Format]], known_names: Set[str], container_name: str
) -> None:
    _check_names([f.name for f in fields], "field", container_name)
    for named in fields:
        _check_format(named.value, known_names, container_name)


def validate_registry(
    registry: Registry, external_names: Optional[Iterable[str]] = None
) -> None:
    """Check that a registry is usable as generator input.

    Args:
        registry: The registry to check.
        external_names: Type names declared outside the registry which
            named references may also resolve to.

    Raises:
        UnresolvedFormatError: If a placeholder format is present.
        SchemaError: On a dangling reference, a duplicate or negative tag,
            a duplicate field or variant name, or an invalid array size.
    """
    known_names = set(registry) | set(external_names or ())
    for name, container in registry.items():
        if not isinstance(name, str) or not name:
            raise SchemaError("Container names must be non-empty strings")
        if isinstance(container, EnumFormat):
            tags = list(container.variants)
            for tag in tags:
                if isinstance(tag, bool) or not isinstance(tag, int) or tag < 0:
                    raise SchemaError(
                        f"{name}: variant tags must be non-negative integers, got {tag!r}",
                        container_name=name,
                    )
            _check_names(
                [variant.name for variant in container.variants.values()],
                "variant",
                name,
            )
            for tag, variant in container.sorted_variants():
                try:
                    fields = variant_fields(variant.value)
                except UnresolvedFormatError as e:
                    raise UnresolvedFormatError(
                        f"{name}: variant {variant.name} is unresolved",
                        container_name=name,
                        cause=e,
                    )
                _check_fields(fields, known_names, name)
        elif isinstance(container, ContainerFormat):
            _check_fields(container_fields(container), known_names, name)
        else:
            raise SchemaError(
                f"{name}: not a container format: {container!r}", container_name=name
            )
