"""The ``serdegen`` command."""

import argparse
import sys
from typing import List, Optional

from serdegen.config import CodeGeneratorConfig, Encoding, Language
from serdegen.exceptions import ConfigurationError, GenerationError, SchemaError
from serdegen.generator import get_generator
from serdegen.logging import configure_logging, get_logger
from serdegen.registry import load_registry

_logger = get_logger("cli")

EXIT_OK = 0
EXIT_SCHEMA_ERROR = 1
EXIT_GENERATION_ERROR = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="serdegen",
        description="Generate (de)serialization code from a registry of formats.",
    )
    parser.add_argument("registry", help="path to the registry YAML file")
    parser.add_argument(
        "--language",
        required=True,
        choices=[language.value for language in Language],
        help="target language",
    )
    parser.add_argument("--module-name", help="name of the generated module")
    parser.add_argument("--config", help="path to a YAML generator configuration")
    parser.add_argument(
        "--encodings",
        default="",
        help="comma-separated encodings to support (bcs, bincode)",
    )
    parser.add_argument(
        "--skip-serialization",
        action="store_true",
        help="only generate type definitions and JSON conversion",
    )
    parser.add_argument(
        "--target-dir",
        help="directory to write files to; sources are printed when omitted",
    )
    parser.add_argument("--verbose", action="store_true", help="log debug messages")
    return parser


def load_config(args: argparse.Namespace) -> CodeGeneratorConfig:
    """Combine the configuration file (if any) with command-line overrides.

    Raises:
        ConfigurationError: If no module name is given or a value is invalid.
    """
    if args.config:
        config = CodeGeneratorConfig.from_yaml(args.config)
        if args.module_name:
            config.module_name = args.module_name
    elif args.module_name:
        config = CodeGeneratorConfig(args.module_name)
    else:
        raise ConfigurationError("Either --module-name or --config is required")

    for name in args.encodings.split(","):
        if name.strip():
            config.add_encoding(Encoding.parse(name))
    if args.skip_serialization:
        config.serialization = False
    return config


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(verbose=args.verbose)

    try:
        config = load_config(args)
        registry = load_registry(args.registry)
        generator = get_generator(args.language, config)
        if args.target_dir:
            written = generator.output(args.target_dir, registry)
            _logger.info("Generated %d files in %s", len(written), args.target_dir)
        else:
            module = generator.generate(registry)
            files = module.files()
            for path, content in files.items():
                if len(files) > 1:
                    sys.stdout.write(f"// ---- {path}\n")
                sys.stdout.write(content)
    except (ConfigurationError, SchemaError) as e:
        _logger.error("%s", e)
        return EXIT_SCHEMA_ERROR
    except GenerationError as e:
        _logger.error("%s", e)
        return EXIT_GENERATION_ERROR
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
