"""Indentation-aware text writer used by the code emitters."""

import io


class IndentedWriter:
    """Accumulate source text, prefixing every non-empty line with the
    current indentation.

    Args:
        indent: The text of one indentation level (e.g. four spaces).
    """

    def __init__(self, indent: str = "    "):
        self._indent = indent
        self._level = 0
        self._buffer = io.StringIO()
        self._at_line_start = True

    def indent(self) -> None:
        self._level += 1

    def unindent(self) -> None:
        if self._level == 0:
            raise ValueError("Cannot unindent below level 0")
        self._level -= 1

    @property
    def level(self) -> int:
        return self._level

    def write(self, text: str) -> None:
        """Write text; embedded newlines start new indented lines."""
        for line in text.splitlines(keepends=True):
            if self._at_line_start and line.strip():
                self._buffer.write(self._indent * self._level)
            self._buffer.write(line)
            self._at_line_start = line.endswith("\n")

    def writeln(self, text: str = "") -> None:
        self.write(text + "\n")

    def getvalue(self) -> str:
        return self._buffer.getvalue()
