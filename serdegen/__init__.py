"""serdegen: schema-driven serialization code generator."""

from serdegen.config import CodeGeneratorConfig, Encoding, Language
from serdegen.exceptions import (
    SerdeGenError,
    ConfigurationError,
    SchemaError,
    UnresolvedFormatError,
    GenerationError,
    SerializationError,
    DecodeError,
)
from serdegen.generator import CodeGenerator, GeneratedModule, get_generator
from serdegen.helpers import HelperTable
from serdegen.registry import (
    load_registry,
    load_registry_from_string,
    registry_from_dict,
    validate_registry,
)

__version__ = "0.1.0"

__all__ = [
    "CodeGeneratorConfig",
    "Encoding",
    "Language",
    "SerdeGenError",
    "ConfigurationError",
    "SchemaError",
    "UnresolvedFormatError",
    "GenerationError",
    "SerializationError",
    "DecodeError",
    "CodeGenerator",
    "GeneratedModule",
    "get_generator",
    "HelperTable",
    "load_registry",
    "load_registry_from_string",
    "registry_from_dict",
    "validate_registry",
    "__version__",
]
