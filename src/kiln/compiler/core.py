"""kiln Compiler core: Render Plan → Python code object.

The Compiler serializes a RenderPlan into the source of a single rendering
routine and compiles it with Python's own ``compile()``. Directive heads
and expression fragments are pasted in verbatim; whether they are valid
Python is decided by CPython, and a SyntaxError is mapped back to the
template line that produced the offending generated line.

Design Principles:
1. **StringBuilder**: Output via ``_kiln_append()``, ``''.join(_kiln_buf)`` at return
2. **Local caching**: ``_kiln_e``, ``_kiln_s``, ``_kiln_append`` bound once per render
3. **Coalescing**: Adjacent literal appends become one ``_kiln_append`` call
4. **Line map**: every generated line knows its template line, for both
   compile errors and runtime tracebacks

Generated shape for ``"%% if self.x {\\nYes: {{ self.n }}\\n%% } else {\\nNo\\n%% }\\n"``:

    ```python
    def _kiln_factory(_kiln_escape, _kiln_str):
        def render(self):
            _kiln_e = _kiln_escape
            _kiln_s = _kiln_str
            _kiln_buf = []
            _kiln_append = _kiln_buf.append
            if self.x:
                _kiln_append('Yes: ')
                _kiln_value = self.n
                _kiln_append(_kiln_s(_kiln_value))
                _kiln_append('\\n')
            else:
                _kiln_append('No\\n')
            return ''.join(_kiln_buf)
        return render
    ```

Each fragment is assigned to ``_kiln_value`` before it is appended, so an
empty or statement-like fragment is a SyntaxError rather than a silent call
with the wrong arguments.

Names starting with ``_kiln_`` are reserved for the generated routine.
A template that assigns one of them (in a statement, a loop target or a
``with ... as``) replaces a helper the routine relies on.

The factory is executed against the context module's globals, so
expressions see module-level names live while the helpers stay closure
locals.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from kiln.compiler.plan import (
    AppendExpr,
    AppendLiteral,
    BeginControl,
    EndControl,
    ExecStatement,
    RenderPlan,
)
from kiln.compiler.writer import CodeWriter
from kiln.environment.exceptions import ExpressionSyntaxError

if TYPE_CHECKING:
    import types

logger = logging.getLogger(__name__)

FACTORY_NAME = "_kiln_factory"
RENDER_NAME = "render"

# Names the generated routine binds; templates must not assign them
RESERVED_PREFIX = "_kiln_"
ESCAPE_NAME = f"{RESERVED_PREFIX}e"
STR_NAME = f"{RESERVED_PREFIX}s"
BUF_NAME = f"{RESERVED_PREFIX}buf"
APPEND_NAME = f"{RESERVED_PREFIX}append"
VALUE_NAME = f"{RESERVED_PREFIX}value"


@dataclass(frozen=True, slots=True)
class CompiledRoutine:
    """Compiled rendering routine plus what is needed to explain its failures.

    Attributes:
        code: Code object defining ``_kiln_factory(_kiln_escape, _kiln_str)``
        filename: Pseudo-filename the code was compiled under
        line_map: Template line for each generated line (index = line - 1)
        python_source: The generated source, for debugging
    """

    code: types.CodeType
    filename: str
    line_map: tuple[int, ...]
    python_source: str

    def template_line(self, generated_lineno: int | None) -> int | None:
        if generated_lineno is None or not 0 < generated_lineno <= len(self.line_map):
            return None
        return self.line_map[generated_lineno - 1]


@dataclass(slots=True)
class _Frame:
    """One block body being written."""

    emitted: bool = False
    arm: bool = False


class Compiler:
    """Serialize a RenderPlan into one Python rendering routine.

    Attributes:
        _name: Template name for error messages
        _filename: Source file path for error messages
        _source: Template text for error snippets

    Example:
        >>> from kiln.lexer import tokenize
        >>> from kiln.parser import Parser
        >>> from kiln.compiler.plan import build_plan
        >>> plan = build_plan(Parser(tokenize("Hi {{ self }}\\n")).parse(), escape=False)
        >>> routine = Compiler(name="hi.txt").compile(plan)

    """

    __slots__ = ("_filename", "_name", "_source")

    def __init__(
        self,
        name: str | None = None,
        filename: str | None = None,
        source: str | None = None,
    ):
        self._name = name
        self._filename = filename
        self._source = source

    @property
    def code_filename(self) -> str:
        """Pseudo-filename the generated routine is compiled under."""
        return f"<kiln {self._filename or self._name or 'template'}>"

    def generate(self, plan: RenderPlan) -> CodeWriter:
        """Write the factory + render function source for ``plan``."""
        w = CodeWriter()
        w.write_line(f"def {FACTORY_NAME}({RESERVED_PREFIX}escape, {RESERVED_PREFIX}str):", 1)
        w.indent()
        w.write_line(f"def {RENDER_NAME}(self):", 1)
        w.indent()
        for line in (
            f"{ESCAPE_NAME} = {RESERVED_PREFIX}escape",
            f"{STR_NAME} = {RESERVED_PREFIX}str",
            f"{BUF_NAME} = []",
            f"{APPEND_NAME} = {BUF_NAME}.append",
        ):
            w.write_line(line, 1)

        last_line = self._write_plan(plan, w)

        w.write_line(f"return ''.join({BUF_NAME})", last_line)
        w.dedent()
        w.write_line(f"return {RENDER_NAME}", last_line)
        w.dedent()
        return w

    def compile(self, plan: RenderPlan) -> CompiledRoutine:
        """Compile ``plan`` into a CompiledRoutine.

        Raises:
            ExpressionSyntaxError: Python rejected a head, statement or
                fragment; ``lineno`` is the template line it came from
        """
        writer = self.generate(plan)
        source = writer.getvalue()
        filename = self.code_filename
        logger.debug(
            "generated %d lines for %s:\n%s",
            len(writer),
            self._name or "<template>",
            source,
        )
        try:
            code = compile(source, filename, "exec", dont_inherit=True)
        except SyntaxError as e:
            raise ExpressionSyntaxError(
                e.msg,
                lineno=writer.template_line(e.lineno),
                name=self._name,
                filename=self._filename,
                source=self._source,
            ) from e
        return CompiledRoutine(code, filename, writer.line_map, source)

    def _write_plan(self, plan: RenderPlan, w: CodeWriter) -> int:
        """Write the plan's instructions; return the last template line seen."""
        frames: list[_Frame] = [_Frame(emitted=True)]
        literal: list[str] = []
        literal_line = 1
        last_line = 1

        def emit(line: str, lineno: int) -> None:
            w.write_line(line, lineno)
            frames[-1].emitted = True

        def flush_literal() -> None:
            if literal:
                emit(f"{APPEND_NAME}({''.join(literal)!r})", literal_line)
                literal.clear()

        def close_body(frame: _Frame, lineno: int) -> None:
            if not frame.emitted:
                w.write_line("pass", lineno)

        for instruction in plan:
            last_line = instruction.lineno

            if isinstance(instruction, AppendLiteral):
                if not literal:
                    literal_line = instruction.lineno
                literal.append(instruction.text)
                continue

            flush_literal()

            if isinstance(instruction, AppendExpr):
                convert = ESCAPE_NAME if instruction.escape else STR_NAME
                emit(f"{VALUE_NAME} = {instruction.fragment}", instruction.lineno)
                emit(f"{APPEND_NAME}({convert}({VALUE_NAME}))", instruction.lineno)
            elif isinstance(instruction, ExecStatement):
                emit(instruction.code, instruction.lineno)
            elif isinstance(instruction, BeginControl):
                if instruction.arm:
                    # Arm head goes back at the construct's level, after the
                    # previous body has been closed off
                    close_body(frames[-1], instruction.lineno)
                    frames[-1].emitted = True
                    w.write_line(f"{instruction.head}:", instruction.lineno, w.level - 1)
                    frames.append(_Frame(arm=True))
                else:
                    emit(f"{instruction.head}:", instruction.lineno)
                    w.indent()
                    frames.append(_Frame())
            elif isinstance(instruction, EndControl):
                frame = frames.pop()
                close_body(frame, instruction.lineno)
                if not frame.arm:
                    w.dedent()

        flush_literal()
        return last_line
