"""Indented Python source writer with a template line map."""

from __future__ import annotations


class CodeWriter:
    """Accumulate Python source lines, remembering where each came from.

    Every written line records the template line that produced it, so a
    SyntaxError reported by ``compile()`` against the generated source can be
    translated back to the template.

    Example:
        >>> w = CodeWriter()
        >>> w.write_line("def render(self):", 1)
        >>> w.indent()
        >>> w.write_line("return ''", 1)
        >>> w.dedent()
        >>> print(w.getvalue())
        def render(self):
            return ''

    """

    INDENT = "    "

    __slots__ = ("_indent", "_lines", "_map")

    def __init__(self) -> None:
        self._lines: list[str] = []
        self._map: list[int] = []
        self._indent = 0

    @property
    def level(self) -> int:
        return self._indent

    def indent(self) -> None:
        self._indent += 1

    def dedent(self) -> None:
        assert self._indent > 0
        self._indent -= 1

    def write_line(self, line: str, lineno: int, indent: int | None = None) -> None:
        """Write one line at the current (or given) indentation level."""
        if indent is None:
            indent = self._indent
        self._lines.append(self.INDENT * indent + line)
        self._map.append(lineno)

    def template_line(self, generated_lineno: int | None) -> int | None:
        """Template line for a 1-based generated line, or None if out of range."""
        if generated_lineno is None or not 0 < generated_lineno <= len(self._map):
            return None
        return self._map[generated_lineno - 1]

    @property
    def line_map(self) -> tuple[int, ...]:
        return tuple(self._map)

    def getvalue(self) -> str:
        return "\n".join(self._lines) + "\n"

    def __len__(self) -> int:
        return len(self._lines)
