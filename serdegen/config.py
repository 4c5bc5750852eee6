"""Code generator configuration."""

from enum import Enum
from typing import Dict, Iterable, List, Optional
import keyword
import os

import yaml

from serdegen.exceptions import ConfigurationError


class Encoding(Enum):
    """Binary encodings a generated module can support."""
    BINCODE = "bincode"
    BCS = "bcs"

    @property
    def camel_name(self) -> str:
        """Get the capitalized name used in generated class names."""
        return self.value.capitalize()

    @classmethod
    def parse(cls, value: str) -> "Encoding":
        """Parse an encoding from its (case-insensitive) name."""
        try:
            return cls(value.strip().lower())
        except ValueError:
            raise ConfigurationError(f"Invalid encoding: {value}")


class Language(Enum):
    """Target languages supported by the generator."""
    PYTHON = "python"
    DART = "dart"

    @classmethod
    def parse(cls, value: str) -> "Language":
        """Parse a language from its (case-insensitive) name."""
        try:
            return cls(value.strip().lower())
        except ValueError:
            raise ConfigurationError(f"Invalid language: {value}")


class CodeGeneratorConfig:
    """Language-independent configuration for code generation.

    Attributes are exposed as validated properties. The builder-style
    ``add_*`` methods return the config itself so calls can be chained.

    Example:
        Programmatic configuration::

            config = (
                CodeGeneratorConfig("my_types")
                .add_encoding(Encoding.BCS)
                .add_external_definitions("common.types", ["Address"])
            )

        From YAML::

            config = CodeGeneratorConfig.from_yaml("serdegen.yml")
    """

    def __init__(
        self,
        module_name: str,
        serialization: bool = True,
        encodings: Optional[Iterable[Encoding]] = None,
        external_definitions: Optional[Dict[str, List[str]]] = None,
        comments: Optional[Dict[str, str]] = None,
        custom_code: Optional[Dict[str, str]] = None,
    ):
        self._module_name = module_name
        self._serialization = serialization
        self._encodings: List[Encoding] = []
        for encoding in encodings or []:
            self.add_encoding(encoding)
        self._external_definitions: Dict[str, List[str]] = {}
        for namespace, names in (external_definitions or {}).items():
            self.add_external_definitions(namespace, names)
        self._comments: Dict[str, str] = dict(comments or {})
        self._custom_code: Dict[str, str] = dict(custom_code or {})
        self._validate()

    def _validate(self) -> None:
        if not isinstance(self._module_name, str) or not self._module_name:
            raise ConfigurationError("module_name must be a non-empty string")
        for part in self._module_name.split("."):
            if not part.isidentifier() or keyword.iskeyword(part):
                raise ConfigurationError(f"Invalid module_name: {self._module_name}")
        seen: Dict[str, str] = {}
        for namespace, names in self._external_definitions.items():
            for name in names:
                if name in seen and seen[name] != namespace:
                    raise ConfigurationError(
                        f"External type {name} is declared in both "
                        f"{seen[name]} and {namespace}"
                    )
                seen[name] = namespace

    @property
    def module_name(self) -> str:
        """Get the dotted name of the generated module."""
        return self._module_name

    @module_name.setter
    def module_name(self, value: str) -> None:
        self._module_name = value
        self._validate()

    @property
    def module_path(self) -> List[str]:
        """Get the module name split into its namespace parts."""
        return self._module_name.split(".")

    @property
    def serialization(self) -> bool:
        """Get whether (de)serialization code is emitted."""
        return self._serialization

    @serialization.setter
    def serialization(self, value: bool) -> None:
        self._serialization = value

    @property
    def encodings(self) -> List[Encoding]:
        """Get the active encodings, in declaration order."""
        return list(self._encodings)

    @property
    def external_definitions(self) -> Dict[str, List[str]]:
        """Get externally declared type names, keyed by namespace."""
        return {ns: list(names) for ns, names in self._external_definitions.items()}

    @property
    def external_qualified_names(self) -> Dict[str, str]:
        """Get a mapping from external type name to its qualified name."""
        qualified = {}
        for namespace, names in self._external_definitions.items():
            for name in names:
                qualified[name] = f"{namespace}.{name}"
        return qualified

    @property
    def comments(self) -> Dict[str, str]:
        """Get doc comments keyed by dotted path (``Type`` or ``Type.field``)."""
        return dict(self._comments)

    @property
    def custom_code(self) -> Dict[str, str]:
        """Get custom code blocks keyed by container (or ``Enum.Variant``) name."""
        return dict(self._custom_code)

    def add_encoding(self, encoding: Encoding) -> "CodeGeneratorConfig":
        """Activate an encoding. Adding an active encoding is a no-op."""
        if isinstance(encoding, str):
            encoding = Encoding.parse(encoding)
        if not isinstance(encoding, Encoding):
            raise ConfigurationError(f"Invalid encoding: {encoding!r}")
        if encoding not in self._encodings:
            self._encodings.append(encoding)
        return self

    def add_external_definitions(
        self, namespace: str, names: Iterable[str]
    ) -> "CodeGeneratorConfig":
        """Declare type names that live in another namespace."""
        if not namespace:
            raise ConfigurationError("External namespace must not be empty")
        if isinstance(names, str):
            raise ConfigurationError(
                f"External definitions for {namespace} must be a list of names"
            )
        existing = self._external_definitions.setdefault(namespace, [])
        for name in names:
            if name not in existing:
                existing.append(name)
        self._validate()
        return self

    def add_comment(self, path: str, text: str) -> "CodeGeneratorConfig":
        """Attach a doc comment to a container, field or variant."""
        self._comments[path] = text
        return self

    def add_custom_code(self, name: str, code: str) -> "CodeGeneratorConfig":
        """Append custom code to the body of a generated class."""
        self._custom_code[name] = code
        return self

    @classmethod
    def from_dict(cls, data: dict) -> "CodeGeneratorConfig":
        """Create CodeGeneratorConfig from a dictionary."""
        if not isinstance(data, dict):
            raise ConfigurationError("Configuration must be a mapping")
        if "module_name" not in data:
            raise ConfigurationError("module_name is required")

        encodings = []
        for name in data.get("encodings", []):
            encodings.append(Encoding.parse(str(name)))

        external = data.get("external_definitions", {}) or {}
        if not isinstance(external, dict):
            raise ConfigurationError("external_definitions must be a mapping")

        return cls(
            module_name=data["module_name"],
            serialization=bool(data.get("serialization", True)),
            encodings=encodings,
            external_definitions=external,
            comments=data.get("comments", {}) or {},
            custom_code=data.get("custom_code", {}) or {},
        )

    @classmethod
    def from_yaml(cls, yaml_path: str) -> "CodeGeneratorConfig":
        """Load configuration from a YAML file.

        Args:
            yaml_path: Path to the YAML configuration file.

        Returns:
            CodeGeneratorConfig instance.

        Raises:
            ConfigurationError: If the file cannot be read or parsed.
        """
        if not os.path.exists(yaml_path):
            raise ConfigurationError(f"Configuration file not found: {yaml_path}")

        try:
            with open(yaml_path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Failed to parse YAML: {e}", cause=e)
        except OSError as e:
            raise ConfigurationError(f"Failed to read configuration file: {e}", cause=e)

        return cls._from_document(data)

    @classmethod
    def from_yaml_string(cls, yaml_content: str) -> "CodeGeneratorConfig":
        """Load configuration from a YAML string.

        Args:
            yaml_content: YAML configuration as a string.

        Returns:
            CodeGeneratorConfig instance.

        Raises:
            ConfigurationError: If the YAML cannot be parsed.
        """
        try:
            data = yaml.safe_load(yaml_content)
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Failed to parse YAML: {e}", cause=e)

        return cls._from_document(data)

    @classmethod
    def _from_document(cls, data) -> "CodeGeneratorConfig":
        if data is None:
            data = {}

        if isinstance(data, dict) and "serdegen" in data:
            data = data["serdegen"]

        return cls.from_dict(data)

    def __repr__(self) -> str:
        return (
            f"CodeGeneratorConfig(module_name={self._module_name!r}, "
            f"serialization={self._serialization}, "
            f"encodings={[e.value for e in self._encodings]})"
        )
