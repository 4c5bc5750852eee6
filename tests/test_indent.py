"""Unit tests for serdegen.indent module."""

import pytest

from serdegen.indent import IndentedWriter


class TestIndentedWriter:
    """Tests for IndentedWriter."""

    def test_indentation(self):
        out = IndentedWriter("    ")
        out.writeln("class A:")
        out.indent()
        out.writeln("x = 1")
        out.unindent()
        out.writeln("y = 2")
        assert out.getvalue() == "class A:\n    x = 1\ny = 2\n"

    def test_blank_lines_not_indented(self):
        out = IndentedWriter("  ")
        out.indent()
        out.writeln("a")
        out.writeln()
        out.writeln("b")
        assert out.getvalue() == "  a\n\n  b\n"

    def test_multiline_write(self):
        out = IndentedWriter("\t")
        out.indent()
        out.write("a\nb\n")
        assert out.getvalue() == "\ta\n\tb\n"

    def test_partial_line(self):
        out = IndentedWriter("  ")
        out.indent()
        out.write("x = ")
        out.write("1\n")
        assert out.getvalue() == "  x = 1\n"

    def test_level(self):
        out = IndentedWriter()
        out.indent()
        out.indent()
        assert out.level == 2

    def test_unindent_below_zero(self):
        with pytest.raises(ValueError):
            IndentedWriter().unindent()
