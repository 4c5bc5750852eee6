"""Shared pytest fixtures for serdegen tests."""

import itertools
import sys
import types

import pytest

from serdegen.config import CodeGeneratorConfig, Encoding
from serdegen.languages.python import PythonCodeGenerator
from serdegen.registry import load_registry_from_string


SAMPLE_REGISTRY_YAML = """
Point:
  STRUCT:
    - x: I32
    - y: I32
Color:
  ENUM:
    0:
      Red: UNIT
    1:
      Rgb:
        TUPLE:
          - U8
          - U8
          - U8
    2:
      Named:
        STRUCT:
          - name: STR
          - alpha:
              OPTION: U8
Shape:
  ENUM:
    0:
      Circle:
        STRUCT:
          - center:
              TYPENAME: Point
          - radius: U32
    1:
      Polygon:
        NEWTYPE:
          SEQ:
            TYPENAME: Point
    2:
      Empty: UNIT
Label:
  NEWTYPESTRUCT: STR
Marker: UNITSTRUCT
Pair:
  TUPLESTRUCT:
    - U16
    - BOOL
Account:
  STRUCT:
    - owner: STR
    - balance:
        OPTION: U32
    - tags:
        SEQ: STR
    - scores:
        MAP:
          KEY: STR
          VALUE: U64
    - digest:
        TUPLEARRAY:
          CONTENT: U8
          SIZE: 4
    - data: BYTES
    - nonce: U128
    - delta: I64
    - flag: BOOL
    - nothing: UNIT
Ledger:
  STRUCT:
    - limit:
        OPTION: U32
    - accounts:
        SEQ:
          TYPENAME: Account
    - positions:
        MAP:
          KEY:
            TUPLE:
              - U8
              - STR
          VALUE:
            OPTION: I16
    - shapes:
        SEQ:
          TYPENAME: Shape
Tree:
  STRUCT:
    - value: U32
    - children:
        SEQ:
          TYPENAME: Tree
"""

_module_ids = itertools.count()


@pytest.fixture
def sample_registry_yaml():
    """Get the YAML text of the sample registry."""
    return SAMPLE_REGISTRY_YAML


@pytest.fixture
def sample_registry():
    """Create a registry exercising every container and format kind."""
    return load_registry_from_string(SAMPLE_REGISTRY_YAML)


@pytest.fixture
def python_config():
    """Create a config for a Python module supporting both encodings."""
    return CodeGeneratorConfig("sample_types", encodings=[Encoding.BCS, Encoding.BINCODE])


@pytest.fixture
def load_generated():
    """Execute generated Python source as a module registered in sys.modules."""
    created = []

    def load(source: str) -> types.ModuleType:
        name = f"serdegen_generated_{next(_module_ids)}"
        module = types.ModuleType(name)
        sys.modules[name] = module
        created.append(name)
        exec(compile(source, f"<{name}>", "exec"), module.__dict__)
        return module

    yield load
    for name in created:
        sys.modules.pop(name, None)


@pytest.fixture
def python_source():
    """Generate the source of a Python module."""

    def generate(registry, config) -> str:
        module = PythonCodeGenerator(config).generate(registry)
        return module.files()["/".join(config.module_path + ["__init__.py"])]

    return generate


@pytest.fixture
def generated(python_source, load_generated):
    """Generate and load a Python module from a registry and config."""

    def generate(registry, config):
        return load_generated(python_source(registry, config))

    return generate


@pytest.fixture
def sample_module(generated, sample_registry, python_config):
    """Load the module generated from the sample registry."""
    return generated(sample_registry, python_config)
