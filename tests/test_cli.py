"""Unit tests for serdegen.cli module."""

import logging

import pytest

from serdegen.cli import (
    EXIT_GENERATION_ERROR,
    EXIT_OK,
    EXIT_SCHEMA_ERROR,
    build_parser,
    load_config,
    main,
)
from serdegen.config import Encoding
from serdegen.exceptions import ConfigurationError
from serdegen.logging import SERDEGEN_ROOT_LOGGER, SerdeGenLoggerFactory


@pytest.fixture(autouse=True)
def restore_logging():
    root = logging.getLogger(SERDEGEN_ROOT_LOGGER)
    level = root.level
    yield
    SerdeGenLoggerFactory.reset()
    root.setLevel(level)


@pytest.fixture
def registry_file(tmp_path, sample_registry_yaml):
    path = tmp_path / "registry.yaml"
    path.write_text(sample_registry_yaml, encoding="utf-8")
    return str(path)


class TestLoadConfig:
    """Tests for load_config."""

    def test_module_name_and_encodings(self):
        args = build_parser().parse_args(
            ["r.yaml", "--language", "python", "--module-name", "x", "--encodings", "bcs, bincode"]
        )
        config = load_config(args)
        assert config.module_name == "x"
        assert config.encodings == [Encoding.BCS, Encoding.BINCODE]
        assert config.serialization is True

    def test_config_file_with_override(self, tmp_path):
        path = tmp_path / "serdegen.yml"
        path.write_text(
            "serdegen:\n  module_name: from_file\n  encodings: [bcs]\n", encoding="utf-8"
        )
        args = build_parser().parse_args(
            [
                "r.yaml",
                "--language",
                "dart",
                "--config",
                str(path),
                "--module-name",
                "override",
                "--skip-serialization",
            ]
        )
        config = load_config(args)
        assert config.module_name == "override"
        assert config.encodings == [Encoding.BCS]
        assert config.serialization is False

    def test_module_name_required(self):
        args = build_parser().parse_args(["r.yaml", "--language", "python"])
        with pytest.raises(ConfigurationError):
            load_config(args)

    def test_language_required(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args(["r.yaml", "--module-name", "x"])


class TestMain:
    """Tests for the serdegen command."""

    def test_writes_files(self, tmp_path, registry_file):
        target = tmp_path / "out"
        code = main(
            [
                registry_file,
                "--language",
                "python",
                "--module-name",
                "shapes",
                "--encodings",
                "bcs",
                "--target-dir",
                str(target),
            ]
        )
        assert code == EXIT_OK
        assert "def bcs_serialize" in (target / "shapes" / "__init__.py").read_text(
            encoding="utf-8"
        )

    def test_prints_single_file(self, registry_file, capsys):
        code = main([registry_file, "--language", "python", "--module-name", "shapes"])
        assert code == EXIT_OK
        out = capsys.readouterr().out
        assert out.startswith("# Generated by serdegen for module shapes.")
        assert "// ----" not in out

    def test_prints_file_headers(self, registry_file, capsys):
        code = main([registry_file, "--language", "dart", "--module-name", "shapes"])
        assert code == EXIT_OK
        out = capsys.readouterr().out
        assert "// ---- lib/shapes/Point.dart\n" in out
        assert "// ---- lib/shapes/shapes.dart\n" in out

    def test_invalid_registry(self, tmp_path, capsys):
        path = tmp_path / "bad.yaml"
        path.write_text("A:\n  NEWTYPESTRUCT:\n    TYPENAME: Missing\n", encoding="utf-8")
        code = main([str(path), "--language", "python", "--module-name", "x"])
        assert code == EXIT_SCHEMA_ERROR
        assert "undefined type 'Missing'" in capsys.readouterr().err

    def test_missing_registry(self, tmp_path):
        code = main([str(tmp_path / "none.yaml"), "--language", "python", "--module-name", "x"])
        assert code == EXIT_SCHEMA_ERROR

    def test_invalid_encoding(self, registry_file):
        code = main(
            [registry_file, "--language", "python", "--module-name", "x", "--encodings", "json"]
        )
        assert code == EXIT_SCHEMA_ERROR

    def test_unwritable_target(self, tmp_path, registry_file):
        target = tmp_path / "occupied"
        target.write_text("", encoding="utf-8")
        code = main(
            [
                registry_file,
                "--language",
                "python",
                "--module-name",
                "shapes",
                "--target-dir",
                str(target),
            ]
        )
        assert code == EXIT_GENERATION_ERROR
