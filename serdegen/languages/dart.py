"""Dart target.

Generates a Dart library under ``lib/<module path>/``: one ``part`` file per
container, ``TraitHelpers.dart`` for the shared helpers, and a library unit
declaring the parts and imports. The Dart runtime (``serde``, ``bincode``,
``bcs`` libraries) is not generated.
"""

from typing import Dict, List, Optional, Tuple

from serdegen.config import Encoding, Language
from serdegen.emitter import CodeEmitter
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
)
from serdegen.generator import CodeGenerator
from serdegen.helpers import HelperTable

_PRIMITIVE_TYPES = {
    PrimitiveKind.UNIT: "Unit",
    PrimitiveKind.BOOL: "bool",
    PrimitiveKind.I8: "int",
    PrimitiveKind.I16: "int",
    PrimitiveKind.I32: "int",
    PrimitiveKind.I64: "int",
    PrimitiveKind.I128: "Int128",
    PrimitiveKind.U8: "int",
    PrimitiveKind.U16: "int",
    PrimitiveKind.U32: "int",
    PrimitiveKind.U64: "int",
    PrimitiveKind.U128: "Int128",
    PrimitiveKind.F32: "double",
    PrimitiveKind.F64: "double",
    PrimitiveKind.CHAR: "int",
    PrimitiveKind.STR: "String",
    PrimitiveKind.BYTES: "Bytes",
}

# external_definitions key listing raw import URIs instead of type names.
RAW_IMPORTS_KEY = "import"


def library_name(config) -> str:
    return "_".join(config.module_path)


class DartEmitter(CodeEmitter):
    def __init__(self, config, registry: Registry, helpers: HelperTable):
        super().__init__(config, registry, helpers, indent="  ")

    def quote_qualified_name(self, name: str) -> str:
        return name

    def quote_primitive_type(self, kind: PrimitiveKind) -> str:
        return _PRIMITIVE_TYPES[kind]

    def quote_option_type(self, inner: str) -> str:
        return f"Optional<{inner}>"

    def quote_seq_type(self, inner: str) -> str:
        return f"List<{inner}>"

    def quote_map_type(self, key: str, value: str) -> str:
        return f"Map<{key}, {value}>"

    def quote_tuple_type(self, items: List[str]) -> str:
        return f"Tuple{len(items)}<{', '.join(items)}>"

    def quote_write_primitive(self, kind: PrimitiveKind, value: str) -> str:
        return f"serializer.serialize_{kind.mangled}({value});"

    def quote_read_primitive(self, kind: PrimitiveKind) -> str:
        return f"deserializer.deserialize_{kind.mangled}()"

    def quote_write_named(self, value: str) -> str:
        return f"{value}.serialize(serializer);"

    def quote_read_named(self, qualified_name: str) -> str:
        return f"{qualified_name}.deserialize(deserializer)"

    def quote_helper_call(self, operation: str, signature: str, value: Optional[str]) -> str:
        if operation == "serialize":
            return f"{self.HELPERS_CLASS}.serialize_{signature}({value}, serializer);"
        return f"{self.HELPERS_CLASS}.deserialize_{signature}(deserializer)"

    def variant_class_name(self, base: str, variant: str) -> str:
        return f"{base}{variant}Item"

    def field_to_json(self, field: Named[Format]) -> str:
        name = field.name
        format = field.value
        if isinstance(format, TypeNameFormat):
            return f"'{name}': {name}.toJson()"
        if isinstance(format, PrimitiveFormat) and format.kind == PrimitiveKind.BYTES:
            return f"'{name}': {name}.toJson()"
        if isinstance(format, OptionFormat):
            return f"'{name}': {name}.isPresent ? {name}.value : null"
        if isinstance(format, SeqFormat) and isinstance(format.format, TypeNameFormat):
            return f"'{name}': {name}.map((f) => f.toJson()).toList()"
        return f"'{name}': {name}"

    def field_from_json(self, field: Named[Format]) -> str:
        name = field.name
        format = field.value
        if isinstance(format, TypeNameFormat):
            return f"{name} = {format.name}.fromJson(json['{name}'])"
        if isinstance(format, PrimitiveFormat) and format.kind == PrimitiveKind.BYTES:
            return f"{name} = Bytes.fromJson(json['{name}'])"
        if isinstance(format, OptionFormat):
            return f"{name} = Optional.ofNullable(json['{name}'])"
        if isinstance(format, SeqFormat) and isinstance(format.format, TypeNameFormat):
            item = format.format.name
            return f"{name} = List<{item}>.from(json['{name}'].map((f) => {item}.fromJson(f)))"
        if isinstance(format, (SeqFormat, TupleArrayFormat, MapFormat)):
            return f"{name} = {self.quote_type(format)}.from(json['{name}'])"
        return f"{name} = json['{name}']"

    def output_comment(self, path: str) -> None:
        comment = self.comment_for(path)
        if comment:
            for line in comment.strip().splitlines():
                self.out.writeln(f"/// {line}".rstrip())

    def output_custom_code(self, path: str) -> None:
        code = self.custom_code_for(path)
        if code:
            self.out.writeln()
            for line in code.strip("\n").splitlines():
                self.out.writeln(line)

    def output_preamble(self) -> None:
        self.out.writeln(f"part of {library_name(self.config)}_types;")

    def output_container(self, name: str, format) -> None:
        self.output_preamble()
        super().output_container(name, format)

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
        self.out.writeln()
        self.output_comment(path)
        if variant_base is not None:
            self.out.writeln(f"class {name} extends {variant_base} {{")
        else:
            self.out.writeln(f"class {name} {{")
        self.out.indent()

        for field in fields:
            self.output_comment(f"{path}.{field.name}")
            self.out.writeln(f"{self.quote_type(field.value)} {field.name};")
        if fields:
            self.out.writeln()

        parameters = ", ".join(f"{self.quote_type(f.value)} {f.name}" for f in fields)
        self.out.writeln(f"{name}({parameters}) {{")
        self.out.indent()
        for field in fields:
            self.out.writeln(f"assert ({field.name} != null);")
        for field in fields:
            self.out.writeln(f"this.{field.name} = {field.name};")
        self.out.unindent()
        self.out.writeln("}")

        if self.config.serialization:
            self.out.writeln()
            self.out.writeln("void serialize(BinarySerializer serializer) {")
            self.out.indent()
            if variant_index is not None:
                self.out.writeln(f"serializer.serialize_variant_index({variant_index});")
            for field in fields:
                self.out.writeln(self.quote_serialize_value(field.name, field.value))
            self.out.unindent()
            self.out.writeln("}")
            if variant_index is None:
                for encoding in self.config.encodings:
                    self.output_class_serialize_for_encoding(encoding)

            method = "deserialize" if variant_index is None else "load"
            self.out.writeln()
            self.out.writeln(f"static {name} {method}(BinaryDeserializer deserializer) {{")
            self.out.indent()
            for field in fields:
                self.out.writeln(f"var {field.name} = {self.quote_deserialize(field.value)};")
            self.out.writeln(f"return new {name}({', '.join(f.name for f in fields)});")
            self.out.unindent()
            self.out.writeln("}")
            if variant_index is None:
                for encoding in self.config.encodings:
                    self.output_class_deserialize_for_encoding(name, encoding)

        self.output_equality(name, fields)

        constructor = "fromJson" if variant_index is None else "loadJson"
        self.out.writeln()
        if transparent:
            self.out.writeln(f"{name}.{constructor}(dynamic json) : {fields[0].name} = json;")
        elif fields:
            self.out.writeln(f"{name}.{constructor}(dynamic json) :")
            self.out.indent()
            initializers = [self.field_from_json(field) for field in fields]
            for initializer in initializers[:-1]:
                self.out.writeln(f"{initializer},")
            self.out.writeln(f"{initializers[-1]};")
            self.out.unindent()
        else:
            self.out.writeln(f"{name}.{constructor}(dynamic json);")

        self.out.writeln()
        if transparent:
            self.out.writeln(f"dynamic toJson() => {fields[0].name};")
        else:
            self.out.writeln("dynamic toJson() => {")
            self.out.indent()
            for field in fields:
                self.out.writeln(f"{self.field_to_json(field)},")
            if variant_index is not None:
                self.out.writeln(f"'type': {variant_index},")
                self.out.writeln(f"'type_name': '{actual_name}',")
            self.out.unindent()
            self.out.writeln("};")

        self.output_custom_code(path)
        self.out.unindent()
        self.out.writeln("}")

    def output_equality(self, name: str, fields: List[Named[Format]]) -> None:
        self.out.writeln()
        self.out.writeln("@override")
        self.out.writeln(f"bool operator ==(covariant {name} other) {{")
        self.out.indent()
        self.out.writeln("if (other == null) return false;")
        comparisons = []
        for field in fields:
            if isinstance(field.value, (SeqFormat, TupleArrayFormat)):
                comparisons.append(f"isListsEqual(this.{field.name}, other.{field.name})")
            else:
                comparisons.append(f"this.{field.name} == other.{field.name}")
        if not comparisons:
            self.out.writeln("return true;")
        elif len(comparisons) == 1:
            self.out.writeln(f"return {comparisons[0]};")
        else:
            self.out.writeln(f"return {comparisons[0]} &&")
            for comparison in comparisons[1:-1]:
                self.out.writeln(f"    {comparison} &&")
            self.out.writeln(f"    {comparisons[-1]};")
        self.out.unindent()
        self.out.writeln("}")

        self.out.writeln()
        self.out.writeln("@override")
        self.out.writeln("int get hashCode {")
        self.out.indent()
        self.out.writeln("int value = 7;")
        for field in fields:
            self.out.writeln(f"value = 31 * value + this.{field.name}.hashCode;")
        self.out.writeln("return value;")
        self.out.unindent()
        self.out.writeln("}")

    def output_class_serialize_for_encoding(self, encoding: Encoding) -> None:
        self.out.writeln()
        self.out.writeln(f"Uint8List {encoding.value}Serialize() {{")
        self.out.indent()
        self.out.writeln(f"var serializer = new {encoding.camel_name}Serializer();")
        self.out.writeln("serialize(serializer);")
        self.out.writeln("return serializer.get_bytes();")
        self.out.unindent()
        self.out.writeln("}")

    def output_class_deserialize_for_encoding(self, name: str, encoding: Encoding) -> None:
        self.out.writeln()
        self.out.writeln(f"static {name} {encoding.value}Deserialize(Uint8List input) {{")
        self.out.indent()
        self.out.writeln(f"var deserializer = new {encoding.camel_name}Deserializer(input);")
        self.out.writeln(f"{name} value = deserialize(deserializer);")
        self.out.writeln("if (deserializer.get_buffer_offset() < input.length) {")
        self.out.writeln('  throw new Exception("Some input bytes were not read");')
        self.out.writeln("}")
        self.out.writeln("return value;")
        self.out.unindent()
        self.out.writeln("}")

    def output_enum_container(self, name: str, format: EnumFormat) -> None:
        variants = format.sorted_variants()
        self.out.writeln()
        self.output_comment(name)
        self.out.writeln(f"abstract class {name} {{")
        self.out.indent()
        self.out.writeln(f"{name}();")

        if self.config.serialization:
            self.out.writeln()
            self.out.writeln("void serialize(BinarySerializer serializer);")
            self.out.writeln()
            self.out.writeln(f"static {name} deserialize(BinaryDeserializer deserializer) {{")
            self.out.indent()
            self.out.writeln("int index = deserializer.deserialize_variant_index();")
            self.out.writeln("switch (index) {")
            self.out.indent()
            for index, variant in variants:
                self.out.writeln(
                    f"case {index}: return {self.variant_class_name(name, variant.name)}"
                    f".load(deserializer);"
                )
            self.out.writeln(
                f'default: throw new Exception("Unknown variant index for {name}: " '
                f"+ index.toString());"
            )
            self.out.unindent()
            self.out.writeln("}")
            self.out.unindent()
            self.out.writeln("}")

            for encoding in self.config.encodings:
                self.output_class_serialize_for_encoding(encoding)
                self.output_class_deserialize_for_encoding(name, encoding)

        self.out.writeln()
        self.out.writeln(f"static {name} fromJson(dynamic json) {{")
        self.out.indent()
        self.out.writeln("final type = json['type'] as int;")
        self.out.writeln("switch (type) {")
        self.out.indent()
        for index, variant in variants:
            self.out.writeln(
                f"case {index}: return {self.variant_class_name(name, variant.name)}"
                f".loadJson(json);"
            )
        self.out.writeln(
            f'default: throw new Exception("Unknown variant index for {name}: " '
            f"+ type.toString());"
        )
        self.out.unindent()
        self.out.writeln("}")
        self.out.unindent()
        self.out.writeln("}")

        self.out.writeln()
        self.out.writeln("dynamic toJson();")
        self.output_custom_code(name)
        self.out.unindent()
        self.out.writeln("}")

        self.output_variants(name, format)

    def output_trait_helpers(self) -> None:
        if self.config.serialization:
            super().output_trait_helpers()
        else:
            self.output_helpers_header()
            self.output_helpers_footer()

    def output_helpers_header(self) -> None:
        self.output_preamble()
        self.out.writeln()
        self.out.writeln(f"class {self.HELPERS_CLASS} {{")
        self.out.indent()

    def output_helpers_footer(self) -> None:
        self.out.unindent()
        self.out.writeln("}")

    def output_serialization_helper(self, signature: str, format: Format) -> None:
        self.out.writeln(
            f"static void serialize_{signature}({self.quote_type(format)} value, "
            f"BinarySerializer serializer) {{"
        )
        self.out.indent()
        if isinstance(format, OptionFormat):
            self.out.writeln("if (value.isPresent) {")
            self.out.writeln("  serializer.serialize_option_tag(true);")
            self.out.writeln(f"  {self.quote_serialize_value('value.value', format.format)}")
            self.out.writeln("} else {")
            self.out.writeln("  serializer.serialize_option_tag(false);")
            self.out.writeln("}")
        elif isinstance(format, SeqFormat):
            self.out.writeln("serializer.serialize_len(value.length);")
            self.out.writeln(f"for ({self.quote_type(format.format)} item in value) {{")
            self.out.writeln(f"  {self.quote_serialize_value('item', format.format)}")
            self.out.writeln("}")
        elif isinstance(format, MapFormat):
            self.out.writeln("serializer.serialize_len(value.length);")
            self.out.writeln("final offsets = <int>[];")
            self.out.writeln(
                f"value.forEach(({self.quote_type(format.key)} key, "
                f"{self.quote_type(format.value)} item) {{"
            )
            self.out.writeln("  offsets.add(serializer.get_buffer_offset());")
            self.out.writeln(f"  {self.quote_serialize_value('key', format.key)}")
            self.out.writeln(f"  {self.quote_serialize_value('item', format.value)}")
            self.out.writeln("});")
            self.out.writeln("serializer.sort_map_entries(offsets);")
        elif isinstance(format, TupleFormat):
            for index, item in enumerate(format.formats):
                self.out.writeln(self.quote_serialize_value(f"value.item{index + 1}", item))
        elif isinstance(format, TupleArrayFormat):
            self.out.writeln(f"if (value.length != {format.size}) {{")
            self.out.writeln(
                f'  throw new Exception("Expected {format.size} items for {signature}, got " '
                f"+ value.length.toString());"
            )
            self.out.writeln("}")
            self.out.writeln(f"for ({self.quote_type(format.content)} item in value) {{")
            self.out.writeln(f"  {self.quote_serialize_value('item', format.content)}")
            self.out.writeln("}")
        else:
            raise self.unexpected_helper(format)
        self.out.unindent()
        self.out.writeln("}")
        self.out.writeln()

    def output_deserialization_helper(self, signature: str, format: Format) -> None:
        self.out.writeln(
            f"static {self.quote_type(format)} deserialize_{signature}"
            f"(BinaryDeserializer deserializer) {{"
        )
        self.out.indent()
        if isinstance(format, OptionFormat):
            self.out.writeln("bool tag = deserializer.deserialize_option_tag();")
            self.out.writeln("if (!tag) {")
            self.out.writeln("  return Optional.empty();")
            self.out.writeln("}")
            self.out.writeln(f"return Optional.of({self.quote_deserialize(format.format)});")
        elif isinstance(format, SeqFormat):
            item_type = self.quote_type(format.format)
            self.out.writeln("int length = deserializer.deserialize_len();")
            self.out.writeln(f"final obj = <{item_type}>[];")
            self.out.writeln("for (int i = 0; i < length; i++) {")
            self.out.writeln(f"  obj.add({self.quote_deserialize(format.format)});")
            self.out.writeln("}")
            self.out.writeln("return obj;")
        elif isinstance(format, MapFormat):
            key_type = self.quote_type(format.key)
            value_type = self.quote_type(format.value)
            self.out.writeln("int length = deserializer.deserialize_len();")
            self.out.writeln(f"final obj = new Map<{key_type}, {value_type}>();")
            self.out.writeln("int previous_key_start = 0;")
            self.out.writeln("int previous_key_end = 0;")
            self.out.writeln("for (int i = 0; i < length; i++) {")
            self.out.indent()
            self.out.writeln("int key_start = deserializer.get_buffer_offset();")
            self.out.writeln(f"{key_type} key = {self.quote_deserialize(format.key)};")
            self.out.writeln("int key_end = deserializer.get_buffer_offset();")
            self.out.writeln("if (i > 0) {")
            self.out.writeln("  deserializer.check_that_key_slices_are_increasing(")
            self.out.writeln("      new Slice(previous_key_start, previous_key_end),")
            self.out.writeln("      new Slice(key_start, key_end));")
            self.out.writeln("}")
            self.out.writeln("previous_key_start = key_start;")
            self.out.writeln("previous_key_end = key_end;")
            self.out.writeln(f"obj[key] = {self.quote_deserialize(format.value)};")
            self.out.unindent()
            self.out.writeln("}")
            self.out.writeln("return obj;")
        elif isinstance(format, TupleFormat):
            items = ", ".join(self.quote_deserialize(item) for item in format.formats)
            self.out.writeln(f"return new {self.quote_type(format)}({items});")
        elif isinstance(format, TupleArrayFormat):
            item_type = self.quote_type(format.content)
            self.out.writeln(f"final obj = <{item_type}>[];")
            self.out.writeln(f"for (int i = 0; i < {format.size}; i++) {{")
            self.out.writeln(f"  obj.add({self.quote_deserialize(format.content)});")
            self.out.writeln("}")
            self.out.writeln("return obj;")
        else:
            raise self.unexpected_helper(format)
        self.out.unindent()
        self.out.writeln("}")
        self.out.writeln()

    def output_library(self) -> None:
        up = "../" * len(self.config.module_path)
        self.out.writeln(f"library {library_name(self.config)}_types;")
        self.out.writeln()
        self.out.writeln("import 'dart:typed_data';")
        self.out.writeln("import 'package:optional/optional.dart';")
        self.out.writeln("import 'package:tuple/tuple.dart';")
        self.out.writeln("import 'package:hex/hex.dart';")
        self.out.writeln(f"import '{up}serde/serde.dart';")
        if self.config.serialization:
            for encoding in self.config.encodings:
                self.out.writeln(f"import '{up}{encoding.value}/{encoding.value}.dart';")
        for namespace, names in self.config.external_definitions.items():
            if namespace == RAW_IMPORTS_KEY:
                for uri in names:
                    self.out.writeln(f"import '{uri}';")
            else:
                parts = namespace.split(".")
                self.out.writeln(f"import '{up}{'/'.join(parts)}/{'_'.join(parts)}.dart';")
        self.out.writeln()
        self.out.writeln(f"part '{self.HELPERS_CLASS}.dart';")
        for name in self.registry:
            self.out.writeln(f"part '{name}.dart';")


class DartCodeGenerator(CodeGenerator):
    """Generates a Dart library from a registry."""

    language = Language.DART

    def new_emitter(self, registry: Registry, helpers: HelperTable) -> DartEmitter:
        return DartEmitter(self.config, registry, helpers)

    def assemble(
        self, library: str, containers: Dict[str, str], helpers: str
    ) -> Dict[str, Tuple[str, str]]:
        directory = "/".join(["lib"] + self.config.module_path)
        layout = {}
        for name, source in containers.items():
            layout[f"{directory}/{name}.dart"] = (name, source)
        layout[f"{directory}/{CodeEmitter.HELPERS_CLASS}.dart"] = (
            CodeEmitter.HELPERS_CLASS,
            helpers,
        )
        layout[f"{directory}/{library_name(self.config)}.dart"] = (
            self.config.module_name,
            library,
        )
        return layout
