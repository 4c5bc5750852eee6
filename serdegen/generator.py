"""Generation pipeline shared by all target languages.

A run is a pure function of (registry, config): validate the registry,
build the helper table in one pass, emit one unit per container in
registry order, emit the helper unit and the library unit, and assemble
them into files. Nothing is written until every unit has been produced.

Example:
    Generating and writing a Python module::

        from serdegen.config import CodeGeneratorConfig, Encoding, Language
        from serdegen.generator import get_generator
        from serdegen.registry import load_registry

        config = CodeGeneratorConfig("shapes", encodings=[Encoding.BCS])
        generator = get_generator(Language.PYTHON, config)
        generator.output("build/", load_registry("shapes.yaml"))
"""

import os
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Dict, List, Tuple

from serdegen.config import CodeGeneratorConfig, Language
from serdegen.exceptions import ConfigurationError, GenerationError
from serdegen.formats import Registry
from serdegen.helpers import HelperTable
from serdegen.logging import get_logger
from serdegen.registry import validate_registry

_logger = get_logger("generator")


@dataclass
class GeneratedModule:
    """In-memory result of a generation run.

    Attributes:
        language: The target language.
        module_name: The dotted module name from the configuration.
        library: The unit wiring the module together.
        containers: Unit source per container name, in registry order.
        helpers: The unit holding the deduplicated helpers.
        layout: Relative file path (``/``-separated) to the name of the
            unit it holds and its content.
    """

    language: Language
    module_name: str
    library: str
    containers: Dict[str, str] = field(default_factory=dict)
    helpers: str = ""
    layout: Dict[str, Tuple[str, str]] = field(default_factory=dict)

    def files(self) -> Dict[str, str]:
        """Get the content of each output file, keyed by relative path."""
        return {path: content for path, (_, content) in self.layout.items()}

    def unit_name(self, path: str) -> str:
        return self.layout[path][0]


class CodeGenerator(ABC):
    """Base class of the per-language code generators.

    Args:
        config: The generator configuration.
    """

    language: Language

    def __init__(self, config: CodeGeneratorConfig):
        self._config = config

    @property
    def config(self) -> CodeGeneratorConfig:
        return self._config

    @abstractmethod
    def new_emitter(self, registry: Registry, helpers: HelperTable):
        """Create an emitter for one output unit."""
        pass

    @abstractmethod
    def assemble(
        self, library: str, containers: Dict[str, str], helpers: str
    ) -> Dict[str, Tuple[str, str]]:
        """Lay the units out as files.

        Returns:
            Relative path to (unit name, content).
        """
        pass

    def validate(self, registry: Registry) -> None:
        """Reject a registry the generator cannot handle.

        Raises:
            SchemaError: If the registry is malformed.
        """
        validate_registry(registry, self._config.external_qualified_names)

    def generate(self, registry: Registry) -> GeneratedModule:
        """Generate every unit of the module in memory.

        Raises:
            SchemaError: If the registry is malformed.
        """
        _logger.info(
            "Generating %s module %s from %d containers",
            self.language.value,
            self._config.module_name,
            len(registry),
        )
        self.validate(registry)
        helpers = HelperTable.from_registry(registry)
        _logger.debug("Helper table has %d entries", len(helpers))

        containers: Dict[str, str] = {}
        for name, container in registry.items():
            _logger.debug("Emitting container %s", name)
            emitter = self.new_emitter(registry, helpers)
            emitter.output_container(name, container)
            containers[name] = emitter.getvalue()

        emitter = self.new_emitter(registry, helpers)
        emitter.output_trait_helpers()
        helper_unit = emitter.getvalue()

        emitter = self.new_emitter(registry, helpers)
        emitter.output_library()
        library = emitter.getvalue()

        return GeneratedModule(
            language=self.language,
            module_name=self._config.module_name,
            library=library,
            containers=containers,
            helpers=helper_unit,
            layout=self.assemble(library, containers, helper_unit),
        )

    def output(self, install_dir: str, registry: Registry) -> List[str]:
        """Generate the module and write its files under ``install_dir``.

        Returns:
            The paths of the written files.

        Raises:
            SchemaError: If the registry is malformed. Nothing is written.
            GenerationError: If a file cannot be written.
        """
        module = self.generate(registry)
        written = []
        for relative_path, content in module.files().items():
            path = os.path.join(install_dir, *relative_path.split("/"))
            try:
                os.makedirs(os.path.dirname(path), exist_ok=True)
                with open(path, "w", encoding="utf-8") as f:
                    f.write(content)
            except OSError as e:
                unit = module.unit_name(relative_path)
                raise GenerationError(
                    f"Failed to write {unit} to {path}: {e}", container_name=unit, cause=e
                )
            _logger.info("Wrote %s", path)
            written.append(path)
        return written


def get_generator(language, config: CodeGeneratorConfig) -> CodeGenerator:
    """Get the code generator of a target language.

    Args:
        language: A :class:`Language` or its name.
        config: The generator configuration.

    Raises:
        ConfigurationError: If the language is unknown.
    """
    from serdegen.languages import GENERATORS

    if isinstance(language, str):
        language = Language.parse(language)
    generator_class = GENERATORS.get(language)
    if generator_class is None:
        raise ConfigurationError(f"No generator for language: {language}")
    return generator_class(config)
