"""Language-neutral emission skeleton.

:class:`CodeEmitter` owns the dispatch over the format grammar. It maps
formats to target types (the type mapper) and to serialize / deserialize
expressions (the expression emitter), and it walks containers and enums
in a fixed order. Target languages fill in the hooks: how a primitive is
spelled, how a class is laid out, how a helper body is written.

A fresh emitter is created for every output unit. The only state shared
between units is the read-only :class:`~serdegen.helpers.HelperTable`.
"""

from abc import ABC, abstractmethod
from typing import List, Optional

from serdegen.config import CodeGeneratorConfig
from serdegen.exceptions import GenerationError, UnresolvedFormatError
from serdegen.formats import (
    ContainerFormat,
    EnumFormat,
    Format,
    MapFormat,
    Named,
    NewTypeStructFormat,
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
from serdegen.helpers import HelperTable
from serdegen.indent import IndentedWriter


class CodeEmitter(ABC):
    """Base class of the per-language emitters.

    Args:
        config: The generator configuration.
        registry: The registry being generated. Emitters only read it.
        helpers: The helper table built from the registry.
        indent: One level of indentation in the target language.
    """

    HELPERS_CLASS = "TraitHelpers"

    def __init__(
        self,
        config: CodeGeneratorConfig,
        registry: Registry,
        helpers: HelperTable,
        indent: str = "    ",
    ):
        self.config = config
        self.registry = registry
        self.helpers = helpers
        self.out = IndentedWriter(indent)

    def getvalue(self) -> str:
        return self.out.getvalue()

    # Type mapper

    def quote_type(self, format: Format) -> str:
        """Map a format to a type expression of the target language."""
        if isinstance(format, TypeNameFormat):
            return self.quote_qualified_name(format.name)
        if isinstance(format, PrimitiveFormat):
            return self.quote_primitive_type(format.kind)
        if isinstance(format, OptionFormat):
            return self.quote_option_type(self.quote_type(format.format))
        if isinstance(format, SeqFormat):
            return self.quote_seq_type(self.quote_type(format.format))
        if isinstance(format, MapFormat):
            return self.quote_map_type(self.quote_type(format.key), self.quote_type(format.value))
        if isinstance(format, TupleFormat):
            return self.quote_tuple_type([self.quote_type(f) for f in format.formats])
        if isinstance(format, TupleArrayFormat):
            return self.quote_array_type(self.quote_type(format.content), format.size)
        if isinstance(format, VariableFormat):
            raise UnresolvedFormatError("Cannot map an unresolved format to a type")
        raise TypeError(f"Unknown format: {format!r}")

    @abstractmethod
    def quote_qualified_name(self, name: str) -> str:
        pass

    @abstractmethod
    def quote_primitive_type(self, kind: PrimitiveKind) -> str:
        pass

    @abstractmethod
    def quote_option_type(self, inner: str) -> str:
        pass

    @abstractmethod
    def quote_seq_type(self, inner: str) -> str:
        pass

    @abstractmethod
    def quote_map_type(self, key: str, value: str) -> str:
        pass

    @abstractmethod
    def quote_tuple_type(self, items: List[str]) -> str:
        pass

    def quote_array_type(self, content: str, size: int) -> str:
        return self.quote_seq_type(content)

    # Expression emitter

    def helper_signature(self, format: Format) -> str:
        """Get the helper signature of a composite format.

        Raises:
            GenerationError: If the helper table has no entry for it.
        """
        return self.helpers.signature(format)

    def quote_serialize_value(self, value: str, format: Format) -> str:
        """Get a statement writing ``value`` of the given format."""
        if isinstance(format, PrimitiveFormat):
            return self.quote_write_primitive(format.kind, value)
        if isinstance(format, TypeNameFormat):
            return self.quote_write_named(value)
        if isinstance(format, VariableFormat):
            raise UnresolvedFormatError("Cannot serialize an unresolved format")
        return self.quote_helper_call("serialize", self.helper_signature(format), value)

    def quote_deserialize(self, format: Format) -> str:
        """Get an expression reading a value of the given format."""
        if isinstance(format, PrimitiveFormat):
            return self.quote_read_primitive(format.kind)
        if isinstance(format, TypeNameFormat):
            return self.quote_read_named(self.quote_qualified_name(format.name))
        if isinstance(format, VariableFormat):
            raise UnresolvedFormatError("Cannot deserialize an unresolved format")
        return self.quote_helper_call("deserialize", self.helper_signature(format), None)

    @abstractmethod
    def quote_write_primitive(self, kind: PrimitiveKind, value: str) -> str:
        pass

    @abstractmethod
    def quote_read_primitive(self, kind: PrimitiveKind) -> str:
        pass

    @abstractmethod
    def quote_write_named(self, value: str) -> str:
        pass

    @abstractmethod
    def quote_read_named(self, qualified_name: str) -> str:
        pass

    @abstractmethod
    def quote_helper_call(self, operation: str, signature: str, value: Optional[str]) -> str:
        """Quote a call into the helper unit.

        ``value`` is None for operations that only read from the
        deserializer.
        """
        pass

    # Documentation and custom code

    def comment_for(self, path: str) -> Optional[str]:
        return self.config.comments.get(path)

    def custom_code_for(self, name: str) -> Optional[str]:
        return self.config.custom_code.get(name)

    # Units

    def output_container(self, name: str, format: ContainerFormat) -> None:
        """Emit the unit of one registry entry."""
        if isinstance(format, EnumFormat):
            self.output_enum_container(name, format)
            return
        self.output_struct_or_variant_container(
            None,
            None,
            name,
            container_fields(format),
            isinstance(format, NewTypeStructFormat),
            name,
        )

    def output_variants(self, base: str, format: EnumFormat) -> None:
        """Emit every variant of an enum, in ascending tag order."""
        for index, variant in format.sorted_variants():
            try:
                fields = variant_fields(variant.value)
            except UnresolvedFormatError as e:
                raise UnresolvedFormatError(
                    f"{base}: variant {variant.name} is unresolved",
                    container_name=base,
                    cause=e,
                )
            self.output_struct_or_variant_container(
                base,
                index,
                self.variant_class_name(base, variant.name),
                fields,
                False,
                variant.name,
            )

    def output_trait_helpers(self) -> None:
        """Emit the helper unit: one helper group per signature."""
        self.output_helpers_header()
        for signature, format in self.helpers.items():
            self.output_serialization_helper(signature, format)
            self.output_deserialization_helper(signature, format)
        self.output_helpers_footer()

    @abstractmethod
    def variant_class_name(self, base: str, variant: str) -> str:
        pass

    @abstractmethod
    def output_struct_or_variant_container(
        self,
        variant_base: Optional[str],
        variant_index: Optional[int],
        name: str,
        fields: List[Named[Format]],
        transparent: bool,
        actual_name: str,
    ) -> None:
        """Emit a struct-like class.

        Args:
            variant_base: Name of the enum base class, for variants.
            variant_index: Tag of the variant, for variants.
            name: Name of the emitted class.
            fields: Ordered fields of the struct or variant.
            transparent: Whether JSON flattens to the single field.
            actual_name: Registry name (the variant name, for variants).
        """
        pass

    @abstractmethod
    def output_enum_container(self, name: str, format: EnumFormat) -> None:
        pass

    @abstractmethod
    def output_helpers_header(self) -> None:
        pass

    @abstractmethod
    def output_helpers_footer(self) -> None:
        pass

    @abstractmethod
    def output_serialization_helper(self, signature: str, format: Format) -> None:
        pass

    @abstractmethod
    def output_deserialization_helper(self, signature: str, format: Format) -> None:
        pass

    @abstractmethod
    def output_library(self) -> None:
        """Emit the unit wiring the module together."""
        pass

    def unexpected_helper(self, format: Format) -> GenerationError:
        return GenerationError(f"No helper algorithm for {format!r}")
