"""Unit tests for serdegen.config module."""

import pytest

from serdegen.config import CodeGeneratorConfig, Encoding, Language
from serdegen.exceptions import ConfigurationError


class TestEncoding:
    """Tests for Encoding."""

    def test_camel_name(self):
        assert Encoding.BCS.camel_name == "Bcs"
        assert Encoding.BINCODE.camel_name == "Bincode"

    def test_parse(self):
        assert Encoding.parse(" BCS ") is Encoding.BCS
        assert Encoding.parse("bincode") is Encoding.BINCODE

    def test_parse_invalid(self):
        with pytest.raises(ConfigurationError) as exc_info:
            Encoding.parse("protobuf")
        assert "Invalid encoding" in str(exc_info.value)


class TestLanguage:
    """Tests for Language."""

    def test_parse(self):
        assert Language.parse("Python") is Language.PYTHON
        assert Language.parse("dart") is Language.DART

    def test_parse_invalid(self):
        with pytest.raises(ConfigurationError):
            Language.parse("cobol")


class TestCodeGeneratorConfig:
    """Tests for CodeGeneratorConfig."""

    def test_default_values(self):
        config = CodeGeneratorConfig("types")
        assert config.module_name == "types"
        assert config.module_path == ["types"]
        assert config.serialization is True
        assert config.encodings == []
        assert config.external_definitions == {}
        assert config.comments == {}
        assert config.custom_code == {}

    def test_dotted_module_name(self):
        config = CodeGeneratorConfig("acme.wire.types")
        assert config.module_path == ["acme", "wire", "types"]

    @pytest.mark.parametrize("name", ["", "1types", "acme.class", "acme..types", "my-types"])
    def test_invalid_module_name(self, name):
        with pytest.raises(ConfigurationError):
            CodeGeneratorConfig(name)

    def test_module_name_setter_validates(self):
        config = CodeGeneratorConfig("types")
        config.module_name = "other"
        assert config.module_name == "other"
        with pytest.raises(ConfigurationError):
            config.module_name = "not valid"

    def test_add_encoding(self):
        config = CodeGeneratorConfig("types").add_encoding(Encoding.BCS).add_encoding("bincode")
        assert config.encodings == [Encoding.BCS, Encoding.BINCODE]

    def test_add_encoding_twice_is_noop(self):
        config = CodeGeneratorConfig("types", encodings=[Encoding.BCS])
        config.add_encoding(Encoding.BCS)
        assert config.encodings == [Encoding.BCS]

    def test_add_invalid_encoding(self):
        with pytest.raises(ConfigurationError):
            CodeGeneratorConfig("types").add_encoding(3)

    def test_encodings_returns_copy(self):
        config = CodeGeneratorConfig("types", encodings=[Encoding.BCS])
        config.encodings.append(Encoding.BINCODE)
        assert config.encodings == [Encoding.BCS]

    def test_external_definitions(self):
        config = CodeGeneratorConfig("types").add_external_definitions(
            "common.types", ["Address", "Hash"]
        )
        assert config.external_definitions == {"common.types": ["Address", "Hash"]}
        assert config.external_qualified_names == {
            "Address": "common.types.Address",
            "Hash": "common.types.Hash",
        }

    def test_external_name_in_two_namespaces(self):
        config = CodeGeneratorConfig("types").add_external_definitions("a", ["Address"])
        with pytest.raises(ConfigurationError) as exc_info:
            config.add_external_definitions("b", ["Address"])
        assert "Address" in str(exc_info.value)

    def test_external_names_must_be_a_list(self):
        with pytest.raises(ConfigurationError):
            CodeGeneratorConfig("types").add_external_definitions("a", "Address")

    def test_comments_and_custom_code(self):
        config = (
            CodeGeneratorConfig("types")
            .add_comment("Point.x", "Horizontal.")
            .add_custom_code("Point", "def norm(self): ...")
        )
        assert config.comments == {"Point.x": "Horizontal."}
        assert config.custom_code == {"Point": "def norm(self): ..."}

    def test_from_dict(self):
        config = CodeGeneratorConfig.from_dict(
            {
                "module_name": "shapes",
                "serialization": False,
                "encodings": ["bcs"],
                "external_definitions": {"common": ["Address"]},
                "comments": {"Point": "A point."},
            }
        )
        assert config.module_name == "shapes"
        assert config.serialization is False
        assert config.encodings == [Encoding.BCS]
        assert config.external_qualified_names == {"Address": "common.Address"}
        assert config.comments == {"Point": "A point."}

    def test_from_dict_requires_module_name(self):
        with pytest.raises(ConfigurationError) as exc_info:
            CodeGeneratorConfig.from_dict({"encodings": ["bcs"]})
        assert "module_name is required" in str(exc_info.value)

    def test_from_dict_invalid_external_definitions(self):
        with pytest.raises(ConfigurationError):
            CodeGeneratorConfig.from_dict({"module_name": "x", "external_definitions": ["a"]})

    def test_from_yaml_string(self):
        yaml_content = """
serdegen:
  module_name: shapes
  encodings:
    - bincode
    - bcs
"""
        config = CodeGeneratorConfig.from_yaml_string(yaml_content)
        assert config.module_name == "shapes"
        assert config.encodings == [Encoding.BINCODE, Encoding.BCS]

    def test_from_yaml_string_without_wrapper(self):
        config = CodeGeneratorConfig.from_yaml_string("module_name: shapes\n")
        assert config.module_name == "shapes"

    def test_from_yaml_string_empty(self):
        with pytest.raises(ConfigurationError):
            CodeGeneratorConfig.from_yaml_string("")

    def test_from_yaml_string_invalid(self):
        with pytest.raises(ConfigurationError) as exc_info:
            CodeGeneratorConfig.from_yaml_string("module_name: [unclosed")
        assert "Failed to parse YAML" in str(exc_info.value)

    def test_from_yaml_file(self, tmp_path):
        path = tmp_path / "serdegen.yml"
        path.write_text("serdegen:\n  module_name: from_file\n", encoding="utf-8")
        config = CodeGeneratorConfig.from_yaml(str(path))
        assert config.module_name == "from_file"

    def test_from_yaml_file_not_found(self, tmp_path):
        with pytest.raises(ConfigurationError) as exc_info:
            CodeGeneratorConfig.from_yaml(str(tmp_path / "missing.yml"))
        assert "Configuration file not found" in str(exc_info.value)

    def test_repr(self):
        config = CodeGeneratorConfig("types", encodings=[Encoding.BCS])
        assert "module_name='types'" in repr(config)
        assert "'bcs'" in repr(config)
