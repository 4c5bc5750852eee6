"""Python target.

Generates a single importable module: ``<module path>/__init__.py``. Every
struct-like container and every enum variant becomes a ``@dataclass``;
enums become a plain base class with a tag dispatcher. Generated code
depends on :mod:`serdegen.serialization` at runtime.

Python resolves global names at call time, so containers may reference
each other (or themselves) in any order without forward declarations.
"""

import json
import textwrap
from typing import Dict, List, Optional, Tuple

from serdegen.common import escape_identifier
from serdegen.config import Encoding, Language
from serdegen.emitter import CodeEmitter
from serdegen.exceptions import SchemaError, UnresolvedFormatError
from serdegen.formats import (
    EnumFormat,
    Format,
    MapFormat,
    Named,
    OptionFormat,
    PrimitiveFormat,
    PrimitiveKind,
    Registry,
    SeqFormat,
    TupleArrayFormat,
    TupleFormat,
    TypeNameFormat,
    VariableFormat,
    container_fields,
    variant_fields,
)
from serdegen.generator import CodeGenerator
from serdegen.helpers import HelperTable

_PRIMITIVE_TYPES = {
    PrimitiveKind.UNIT: "st.Unit",
    PrimitiveKind.BOOL: "bool",
    PrimitiveKind.I8: "st.int8",
    PrimitiveKind.I16: "st.int16",
    PrimitiveKind.I32: "st.int32",
    PrimitiveKind.I64: "st.int64",
    PrimitiveKind.I128: "st.int128",
    PrimitiveKind.U8: "st.uint8",
    PrimitiveKind.U16: "st.uint16",
    PrimitiveKind.U32: "st.uint32",
    PrimitiveKind.U64: "st.uint64",
    PrimitiveKind.U128: "st.uint128",
    PrimitiveKind.F32: "st.float32",
    PrimitiveKind.F64: "st.float64",
    PrimitiveKind.CHAR: "st.char",
    PrimitiveKind.STR: "str",
    PrimitiveKind.BYTES: "bytes",
}

_INTEGERS = (
    PrimitiveKind.I8,
    PrimitiveKind.I16,
    PrimitiveKind.I32,
    PrimitiveKind.I64,
    PrimitiveKind.I128,
    PrimitiveKind.U8,
    PrimitiveKind.U16,
    PrimitiveKind.U32,
    PrimitiveKind.U64,
    PrimitiveKind.U128,
)

_FROM_JSON = {
    PrimitiveKind.BOOL: "sj.bool_from_json",
    PrimitiveKind.F32: "sj.float_from_json",
    PrimitiveKind.F64: "sj.float_from_json",
    PrimitiveKind.CHAR: "sj.char_from_json",
    PrimitiveKind.STR: "sj.str_from_json",
    PrimitiveKind.BYTES: "sj.bytes_from_json",
}
_FROM_JSON.update({kind: "sj.int_from_json" for kind in _INTEGERS})

# Names bound at module level by the library unit.
MODULE_NAMES = frozenset(
    {"annotations", "typing", "dataclass", "st", "sj", "bcs", "bincode", "TraitHelpers"}
)

# Keys a variant adds next to its fields in JSON.
VARIANT_JSON_KEYS = ("type", "type_name")

# Names a field may not take: generated parameters, locals and methods,
# plus the class attribute carrying a variant tag.
FIELD_RESERVED_NAMES = frozenset(
    {"self", "cls", "serializer", "deserializer", "INDEX", "TraitHelpers"}
    | {"serialize", "deserialize", "load", "to_json", "from_json", "load_json"}
    | {
        f"{encoding.value}_{operation}"
        for encoding in Encoding
        for operation in ("serialize", "deserialize")
    }
)


def _quote_str(value: str) -> str:
    return json.dumps(value)


def _tuple_display(items: List[str]) -> str:
    if len(items) == 1:
        return f"({items[0]},)"
    return f"({', '.join(items)})"


def _is_hashable(format: Format) -> bool:
    if isinstance(format, (SeqFormat, TupleArrayFormat, MapFormat)):
        return False
    if isinstance(format, TupleFormat):
        return all(_is_hashable(f) for f in format.formats)
    return True


class PythonEmitter(CodeEmitter):
    """Emits the units of a generated Python module."""

    def __init__(self, config, registry: Registry, helpers: HelperTable):
        super().__init__(config, registry, helpers, indent="    ")
        self._external = config.external_qualified_names
        roots = {namespace.split(".")[0] for namespace in config.external_definitions}
        self._class_reserved = MODULE_NAMES | roots
        self._field_reserved = FIELD_RESERVED_NAMES | roots | set(registry)
        self._first_member = False

    def class_name(self, name: str) -> str:
        return escape_identifier(name, self._class_reserved)

    def field_name(self, name: str) -> str:
        return escape_identifier(name, self._field_reserved)

    def quote_qualified_name(self, name: str) -> str:
        if name in self._external:
            return self._external[name]
        return self.class_name(name)

    def quote_primitive_type(self, kind: PrimitiveKind) -> str:
        return _PRIMITIVE_TYPES[kind]

    def quote_option_type(self, inner: str) -> str:
        return f"st.Option[{inner}]"

    def quote_seq_type(self, inner: str) -> str:
        return f"typing.List[{inner}]"

    def quote_map_type(self, key: str, value: str) -> str:
        return f"typing.Dict[{key}, {value}]"

    def quote_tuple_type(self, items: List[str]) -> str:
        if not items:
            return "typing.Tuple[()]"
        return f"typing.Tuple[{', '.join(items)}]"

    def quote_write_primitive(self, kind: PrimitiveKind, value: str) -> str:
        return f"serializer.write_{kind.mangled}({value})"

    def quote_read_primitive(self, kind: PrimitiveKind) -> str:
        return f"deserializer.read_{kind.mangled}()"

    def quote_write_named(self, value: str) -> str:
        return f"{value}.serialize(serializer)"

    def quote_read_named(self, qualified_name: str) -> str:
        return f"{qualified_name}.deserialize(deserializer)"

    def quote_helper_call(self, operation: str, signature: str, value: Optional[str]) -> str:
        if operation == "serialize":
            return f"{self.HELPERS_CLASS}.serialize_{signature}({value}, serializer)"
        if operation == "deserialize":
            return f"{self.HELPERS_CLASS}.deserialize_{signature}(deserializer)"
        return f"{self.HELPERS_CLASS}.{operation}_{signature}({value})"

    def quote_to_json(self, value: str, format: Format) -> str:
        """Get an expression converting ``value`` to a JSON-compatible object."""
        if isinstance(format, PrimitiveFormat):
            if format.kind == PrimitiveKind.UNIT:
                return "None"
            if format.kind == PrimitiveKind.BYTES:
                return f"sj.bytes_to_json({value})"
            return value
        if isinstance(format, TypeNameFormat):
            return f"{value}.to_json()"
        if isinstance(format, VariableFormat):
            raise UnresolvedFormatError("Cannot convert an unresolved format to JSON")
        return self.quote_helper_call("to_json", self.helper_signature(format), value)

    def quote_from_json(self, value: str, format: Format) -> str:
        """Get an expression converting a JSON-compatible object back."""
        if isinstance(format, PrimitiveFormat):
            if format.kind == PrimitiveKind.UNIT:
                return "st.UNIT"
            return f"{_FROM_JSON[format.kind]}({value})"
        if isinstance(format, TypeNameFormat):
            return f"{self.quote_qualified_name(format.name)}.from_json({value})"
        if isinstance(format, VariableFormat):
            raise UnresolvedFormatError("Cannot convert an unresolved format from JSON")
        return self.quote_helper_call("from_json", self.helper_signature(format), value)

    def variant_class_name(self, base: str, variant: str) -> str:
        return f"{self.class_name(base)}__{variant}"

    def _open_class(self, header: str) -> None:
        self.out.writeln()
        self.out.writeln()
        self.out.writeln(header)
        self.out.indent()
        self._first_member = True

    def _close_class(self) -> None:
        self.out.unindent()

    def _member(self) -> None:
        if not self._first_member:
            self.out.writeln()
        self._first_member = False

    def output_docstring(self, text: str) -> None:
        escaped = text.strip().replace("\\", "\\\\").replace('"', '\\"')
        lines = escaped.splitlines() or [""]
        if len(lines) == 1:
            self.out.writeln(f'"""{lines[0]}"""')
        else:
            self.out.writeln(f'"""{lines[0]}')
            for line in lines[1:]:
                self.out.writeln(line)
            self.out.writeln('"""')
        self._first_member = False

    def output_custom_code(self, path: str) -> None:
        code = self.custom_code_for(path)
        if not code:
            return
        self._member()
        for line in textwrap.dedent(code).strip("\n").splitlines():
            self.out.writeln(line)

    def output_struct_or_variant_container(
        self,
        variant_base: Optional[str],
        variant_index: Optional[int],
        name: str,
        fields: List[Named[Format]],
        transparent: bool,
        actual_name: str,
    ) -> None:
        path = actual_name if variant_base is None else f"{variant_base}.{actual_name}"
        class_name = name if variant_base is not None else self.class_name(name)
        attrs: List[Tuple[Named[Format], str]] = [
            (field, self.field_name(field.name)) for field in fields
        ]

        self.out.writeln()
        self.out.writeln()
        self.out.writeln("@dataclass")
        if variant_base is not None:
            header = f"class {class_name}({self.class_name(variant_base)}):"
        else:
            header = f"class {class_name}:"
        self.out.writeln(header)
        self.out.indent()
        self._first_member = True

        comment = self.comment_for(path)
        if comment:
            self.output_docstring(comment)
        if variant_index is not None:
            self._member()
            self.out.writeln(f"INDEX = {variant_index}")
        if attrs:
            self._member()
            for field, attr in attrs:
                field_comment = self.comment_for(f"{path}.{field.name}")
                if field_comment:
                    for line in field_comment.strip().splitlines():
                        self.out.writeln(f"#: {line}")
                self.out.writeln(f"{attr}: {self.quote_type(field.value)}")

            self._member()
            self.out.writeln("def __post_init__(self) -> None:")
            names = _tuple_display([_quote_str(attr) for _, attr in attrs])
            self.out.writeln(f"    st.check_not_none(self, {names})")

        self._member()
        self.out.writeln("def __hash__(self) -> int:")
        parts = [_quote_str(path)] + [f"st.freeze(self.{attr})" for _, attr in attrs]
        self.out.writeln(f"    return hash({_tuple_display(parts)})")

        if self.config.serialization:
            self._output_serialize(variant_index, attrs)
            if variant_index is None:
                for encoding in self.config.encodings:
                    self.output_class_serialize_for_encoding(encoding)
            self._output_deserialize(class_name, variant_index, attrs)
            if variant_index is None:
                for encoding in self.config.encodings:
                    self.output_class_deserialize_for_encoding(class_name, encoding)

        self._output_to_json(variant_index, actual_name, attrs, transparent)
        self._output_from_json(class_name, variant_index, path, attrs, transparent)
        self.output_custom_code(path)
        self.out.unindent()

    def _output_serialize(self, variant_index, attrs) -> None:
        self._member()
        self.out.writeln("def serialize(self, serializer: st.Serializer) -> None:")
        self.out.indent()
        if variant_index is not None:
            self.out.writeln(f"serializer.write_variant_tag({variant_index})")
        for field, attr in attrs:
            self.out.writeln(self.quote_serialize_value(f"self.{attr}", field.value))
        if variant_index is None and not attrs:
            self.out.writeln("pass")
        self.out.unindent()

    def _output_deserialize(self, class_name, variant_index, attrs) -> None:
        method = "deserialize" if variant_index is None else "load"
        self._member()
        self.out.writeln("@classmethod")
        self.out.writeln(
            f"def {method}(cls, deserializer: st.Deserializer) -> {class_name}:"
        )
        self.out.indent()
        for field, attr in attrs:
            self.out.writeln(f"{attr} = {self.quote_deserialize(field.value)}")
        arguments = ", ".join(f"{attr}={attr}" for _, attr in attrs)
        self.out.writeln(f"return cls({arguments})")
        self.out.unindent()

    def _output_to_json(self, variant_index, actual_name, attrs, transparent) -> None:
        self._member()
        self.out.writeln("def to_json(self) -> typing.Any:")
        self.out.indent()
        if transparent:
            field, attr = attrs[0]
            self.out.writeln(f"return {self.quote_to_json(f'self.{attr}', field.value)}")
        else:
            entries = [
                f"{_quote_str(field.name)}: {self.quote_to_json(f'self.{attr}', field.value)}"
                for field, attr in attrs
            ]
            if variant_index is not None:
                entries.append(f'"type": {variant_index}')
                entries.append(f'"type_name": {_quote_str(actual_name)}')
            if entries:
                self.out.writeln("return {")
                self.out.indent()
                for entry in entries:
                    self.out.writeln(f"{entry},")
                self.out.unindent()
                self.out.writeln("}")
            else:
                self.out.writeln("return {}")
        self.out.unindent()

    def _output_from_json(self, class_name, variant_index, path, attrs, transparent) -> None:
        method = "from_json" if variant_index is None else "load_json"
        self._member()
        self.out.writeln("@classmethod")
        self.out.writeln(f"def {method}(cls, data: typing.Any) -> {class_name}:")
        self.out.indent()
        if transparent:
            field, attr = attrs[0]
            self.out.writeln(f"return cls({attr}={self.quote_from_json('data', field.value)})")
        elif not attrs:
            self.out.writeln("return cls()")
        else:
            self.out.writeln("return cls(")
            self.out.indent()
            for field, attr in attrs:
                lookup = f"sj.get_field(data, {_quote_str(field.name)}, {_quote_str(path)})"
                self.out.writeln(f"{attr}={self.quote_from_json(lookup, field.value)},")
            self.out.unindent()
            self.out.writeln(")")
        self.out.unindent()

    def output_class_serialize_for_encoding(self, encoding: Encoding) -> None:
        self._member()
        self.out.writeln(f"def {encoding.value}_serialize(self) -> bytes:")
        self.out.indent()
        self.out.writeln(f"serializer = {encoding.value}.{encoding.camel_name}Serializer()")
        self.out.writeln("self.serialize(serializer)")
        self.out.writeln("return serializer.get_bytes()")
        self.out.unindent()

    def output_class_deserialize_for_encoding(self, class_name: str, encoding: Encoding) -> None:
        self._member()
        self.out.writeln("@classmethod")
        self.out.writeln(f"def {encoding.value}_deserialize(cls, data: bytes) -> {class_name}:")
        self.out.indent()
        self.out.writeln(f"deserializer = {encoding.value}.{encoding.camel_name}Deserializer(data)")
        self.out.writeln("value = cls.deserialize(deserializer)")
        self.out.writeln("if deserializer.remaining() > 0:")
        self.out.writeln('    raise st.DecodeError("Some input bytes were not read")')
        self.out.writeln("return value")
        self.out.unindent()

    def output_enum_container(self, name: str, format: EnumFormat) -> None:
        class_name = self.class_name(name)
        variants = format.sorted_variants()
        self._open_class(f"class {class_name}:")

        comment = self.comment_for(name)
        if comment:
            self.output_docstring(comment)

        if self.config.serialization:
            self._member()
            self.out.writeln("def serialize(self, serializer: st.Serializer) -> None:")
            self.out.writeln("    raise NotImplementedError")

            self._member()
            self.out.writeln("@staticmethod")
            self.out.writeln(f"def deserialize(deserializer: st.Deserializer) -> {class_name}:")
            self.out.indent()
            self.out.writeln("index = deserializer.read_variant_tag()")
            for index, variant in variants:
                self.out.writeln(f"if index == {index}:")
                self.out.writeln(
                    f"    return {self.variant_class_name(name, variant.name)}.load(deserializer)"
                )
            self.out.writeln(
                f'raise st.DecodeError(f"Unknown variant index for {name}: {{index}}")'
            )
            self.out.unindent()

            for encoding in self.config.encodings:
                self.output_class_serialize_for_encoding(encoding)
                self.output_class_deserialize_for_encoding(class_name, encoding)

        self._member()
        self.out.writeln("def to_json(self) -> typing.Any:")
        self.out.writeln("    raise NotImplementedError")

        self._member()
        self.out.writeln("@staticmethod")
        self.out.writeln(f"def from_json(data: typing.Any) -> {class_name}:")
        self.out.indent()
        self.out.writeln(
            f'index = sj.int_from_json(sj.get_field(data, "type", {_quote_str(name)}))'
        )
        for index, variant in variants:
            self.out.writeln(f"if index == {index}:")
            self.out.writeln(
                f"    return {self.variant_class_name(name, variant.name)}.load_json(data)"
            )
        self.out.writeln(f'raise st.DecodeError(f"Unknown variant index for {name}: {{index}}")')
        self.out.unindent()

        self.output_custom_code(name)
        self._close_class()

        self.output_variants(name, format)

    def output_trait_helpers(self) -> None:
        self.output_helpers_header()
        for signature, format in self.helpers.items():
            if self.config.serialization:
                self.output_serialization_helper(signature, format)
                self.output_deserialization_helper(signature, format)
            self.output_to_json_helper(signature, format)
            self.output_from_json_helper(signature, format)
        self.output_helpers_footer()

    def output_helpers_header(self) -> None:
        self._open_class(f"class {self.HELPERS_CLASS}:")
        self.output_docstring("Routines shared by every occurrence of a composite shape.")

    def output_helpers_footer(self) -> None:
        self._close_class()

    def _helper_header(self, definition: str) -> None:
        self._member()
        self.out.writeln("@staticmethod")
        self.out.writeln(definition)
        self.out.indent()

    def output_serialization_helper(self, signature: str, format: Format) -> None:
        self._helper_header(
            f"def serialize_{signature}(value: {self.quote_type(format)}, "
            f"serializer: st.Serializer) -> None:"
        )
        if isinstance(format, OptionFormat):
            self.out.writeln("if value.is_present:")
            self.out.writeln("    serializer.write_option_tag(True)")
            self.out.writeln(f"    {self.quote_serialize_value('value.value', format.format)}")
            self.out.writeln("else:")
            self.out.writeln("    serializer.write_option_tag(False)")
        elif isinstance(format, SeqFormat):
            self.out.writeln("serializer.write_length(len(value))")
            self.out.writeln("for item in value:")
            self.out.writeln(f"    {self.quote_serialize_value('item', format.format)}")
        elif isinstance(format, MapFormat):
            self.out.writeln("serializer.write_length(len(value))")
            self.out.writeln("offsets = []")
            self.out.writeln("for key, item in value.items():")
            self.out.indent()
            self.out.writeln("offsets.append(serializer.current_offset())")
            self.out.writeln(self.quote_serialize_value("key", format.key))
            self.out.writeln(self.quote_serialize_value("item", format.value))
            self.out.unindent()
            self.out.writeln("serializer.sort_map_entries(offsets)")
        elif isinstance(format, TupleFormat):
            for index, item in enumerate(format.formats):
                self.out.writeln(self.quote_serialize_value(f"value[{index}]", item))
            if not format.formats:
                self.out.writeln("pass")
        elif isinstance(format, TupleArrayFormat):
            self.out.writeln(f"if len(value) != {format.size}:")
            self.out.writeln(
                f'    raise st.SerializationError(f"Expected {format.size} items '
                f'for {signature}, got {{len(value)}}")'
            )
            self.out.writeln("for item in value:")
            self.out.writeln(f"    {self.quote_serialize_value('item', format.content)}")
        else:
            raise self.unexpected_helper(format)
        self.out.unindent()

    def output_deserialization_helper(self, signature: str, format: Format) -> None:
        self._helper_header(
            f"def deserialize_{signature}(deserializer: st.Deserializer) -> "
            f"{self.quote_type(format)}:"
        )
        if isinstance(format, OptionFormat):
            self.out.writeln("if deserializer.read_option_tag():")
            self.out.writeln(f"    return st.Option.some({self.quote_deserialize(format.format)})")
            self.out.writeln("return st.Option.none()")
        elif isinstance(format, SeqFormat):
            self.out.writeln("length = deserializer.read_length()")
            self.out.writeln(f"return [{self.quote_deserialize(format.format)} for _ in range(length)]")
        elif isinstance(format, MapFormat):
            self.out.writeln("length = deserializer.read_length()")
            self.out.writeln("obj = {}")
            self.out.writeln("previous_key = None")
            self.out.writeln("for _ in range(length):")
            self.out.indent()
            self.out.writeln("key_start = deserializer.current_offset()")
            self.out.writeln(f"key = {self.quote_deserialize(format.key)}")
            self.out.writeln("key_slice = st.Slice(key_start, deserializer.current_offset())")
            self.out.writeln("if previous_key is not None:")
            self.out.writeln("    deserializer.check_that_key_slices_are_increasing(previous_key, key_slice)")
            self.out.writeln("if key in obj:")
            self.out.writeln(f'    raise st.DecodeError("Duplicate key in {signature}")')
            self.out.writeln(f"obj[key] = {self.quote_deserialize(format.value)}")
            self.out.writeln("previous_key = key_slice")
            self.out.unindent()
            self.out.writeln("return obj")
        elif isinstance(format, TupleFormat):
            items = [self.quote_deserialize(item) for item in format.formats]
            self.out.writeln(f"return {_tuple_display(items) if items else '()'}")
        elif isinstance(format, TupleArrayFormat):
            self.out.writeln(
                f"return [{self.quote_deserialize(format.content)} for _ in range({format.size})]"
            )
        else:
            raise self.unexpected_helper(format)
        self.out.unindent()

    def output_to_json_helper(self, signature: str, format: Format) -> None:
        self._helper_header(
            f"def to_json_{signature}(value: {self.quote_type(format)}) -> typing.Any:"
        )
        if isinstance(format, OptionFormat):
            self.out.writeln("if value.is_present:")
            self.out.writeln(f"    return {self.quote_to_json('value.value', format.format)}")
            self.out.writeln("return None")
        elif isinstance(format, SeqFormat):
            self.out.writeln(f"return [{self.quote_to_json('item', format.format)} for item in value]")
        elif isinstance(format, TupleArrayFormat):
            self.out.writeln(f"return [{self.quote_to_json('item', format.content)} for item in value]")
        elif isinstance(format, MapFormat):
            key = self.quote_to_json("key", format.key)
            item = self.quote_to_json("item", format.value)
            self.out.writeln(f"return [[{key}, {item}] for key, item in value.items()]")
        elif isinstance(format, TupleFormat):
            items = [self.quote_to_json(f"value[{i}]", f) for i, f in enumerate(format.formats)]
            self.out.writeln(f"return [{', '.join(items)}]")
        else:
            raise self.unexpected_helper(format)
        self.out.unindent()

    def output_from_json_helper(self, signature: str, format: Format) -> None:
        self._helper_header(
            f"def from_json_{signature}(data: typing.Any) -> {self.quote_type(format)}:"
        )
        name = _quote_str(signature)
        if isinstance(format, OptionFormat):
            self.out.writeln("if data is None:")
            self.out.writeln("    return st.Option.none()")
            self.out.writeln(f"return st.Option.some({self.quote_from_json('data', format.format)})")
        elif isinstance(format, SeqFormat):
            self.out.writeln(
                f"return [{self.quote_from_json('item', format.format)} "
                f"for item in sj.expect_list(data, {name})]"
            )
        elif isinstance(format, TupleArrayFormat):
            self.out.writeln(
                f"return [{self.quote_from_json('item', format.content)} "
                f"for item in sj.expect_list(data, {name}, {format.size})]"
            )
        elif isinstance(format, MapFormat):
            self.out.writeln("obj = {}")
            self.out.writeln(f"for entry in sj.expect_list(data, {name}):")
            self.out.indent()
            self.out.writeln(f"key, item = sj.expect_list(entry, {name}, 2)")
            key = self.quote_from_json("key", format.key)
            item = self.quote_from_json("item", format.value)
            self.out.writeln(f"obj[{key}] = {item}")
            self.out.unindent()
            self.out.writeln("return obj")
        elif isinstance(format, TupleFormat):
            self.out.writeln(f"items = sj.expect_list(data, {name}, {len(format.formats)})")
            items = [self.quote_from_json(f"items[{i}]", f) for i, f in enumerate(format.formats)]
            self.out.writeln(f"return {_tuple_display(items) if items else '()'}")
        else:
            raise self.unexpected_helper(format)
        self.out.unindent()

    def exported_names(self) -> List[str]:
        names = []
        for name, container in self.registry.items():
            names.append(self.class_name(name))
            if isinstance(container, EnumFormat):
                for _, variant in container.sorted_variants():
                    names.append(self.variant_class_name(name, variant.name))
        return names

    def output_library(self) -> None:
        module_name = self.config.module_name
        self.out.writeln(f"# Generated by serdegen for module {module_name}. Do not edit.")
        self.out.writeln(f'"""Types of the ``{module_name}`` module."""')
        self.out.writeln()
        self.out.writeln("from __future__ import annotations")
        self.out.writeln()
        self.out.writeln("import typing")
        self.out.writeln("from dataclasses import dataclass")
        self.out.writeln()
        self.out.writeln("from serdegen.serialization import json as sj")
        self.out.writeln("from serdegen.serialization import types as st")
        if self.config.serialization:
            for encoding in self.config.encodings:
                self.out.writeln(f"from serdegen.serialization import {encoding.value}")
        namespaces = list(self.config.external_definitions)
        if namespaces:
            self.out.writeln()
            for namespace in namespaces:
                self.out.writeln(f"import {namespace}")
        self.out.writeln()
        self.out.writeln("__all__ = [")
        for name in self.exported_names():
            self.out.writeln(f"    {_quote_str(name)},")
        self.out.writeln("]")


class PythonCodeGenerator(CodeGenerator):
    """Generates a Python module from a registry.

    Example:
        >>> config = CodeGeneratorConfig("shapes").add_encoding(Encoding.BCS)
        >>> module = PythonCodeGenerator(config).generate(registry)
        >>> print(module.files()["shapes/__init__.py"])
    """

    language = Language.PYTHON

    def new_emitter(self, registry: Registry, helpers: HelperTable) -> PythonEmitter:
        return PythonEmitter(self.config, registry, helpers)

    def validate(self, registry: Registry) -> None:
        """Additionally reject names and map keys Python cannot represent."""
        super().validate(registry)
        for name, container in registry.items():
            if not name.isidentifier():
                raise SchemaError(
                    f"{name}: not a valid Python class name", container_name=name
                )

            def check(format: Format) -> None:
                if isinstance(format, MapFormat) and not _is_hashable(format.key):
                    raise SchemaError(
                        f"{name}: map keys of format {format.key!r} are not hashable "
                        f"in Python",
                        container_name=name,
                    )

            container.visit(check)
            if isinstance(container, EnumFormat):
                identifiers = []
                for _, variant in container.sorted_variants():
                    identifiers.append(variant.name)
                    fields = variant_fields(variant.value)
                    identifiers.extend(f.name for f in fields)
                    for field in fields:
                        if field.name in VARIANT_JSON_KEYS:
                            raise SchemaError(
                                f"{name}.{variant.name}: field name {field.name!r} clashes "
                                f"with the JSON variant tag",
                                container_name=name,
                            )
            else:
                identifiers = [f.name for f in container_fields(container)]
            for identifier in identifiers:
                if not identifier.isidentifier():
                    raise SchemaError(
                        f"{name}: {identifier!r} is not a valid Python identifier",
                        container_name=name,
                    )

    def assemble(
        self, library: str, containers: Dict[str, str], helpers: str
    ) -> Dict[str, Tuple[str, str]]:
        path = "/".join(self.config.module_path + ["__init__.py"])
        source = library + "".join(containers.values()) + helpers
        return {path: (self.config.module_name, source)}
