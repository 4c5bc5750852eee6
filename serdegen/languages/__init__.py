"""Target languages."""

from serdegen.config import Language
from serdegen.languages.dart import DartCodeGenerator
from serdegen.languages.python import PythonCodeGenerator

GENERATORS = {
    Language.PYTHON: PythonCodeGenerator,
    Language.DART: DartCodeGenerator,
}

__all__ = ["GENERATORS", "DartCodeGenerator", "PythonCodeGenerator"]
