"""kiln Template: a compiled rendering routine bound to its helpers.

A Template owns the code object produced by the Compiler. On construction
the factory is executed once against the namespace expressions should see
(normally the context class's module globals) and returns the ``render``
function with ``_kiln_escape`` and ``_kiln_str`` bound as closure cells.

Rendering is a single call. Exceptions raised by user expressions are
wrapped in TemplateRuntimeError carrying the template line, found by
walking the traceback for frames of the generated routine and mapping
their line numbers back through the routine's line map.
"""

from __future__ import annotations

import builtins
import logging
from typing import TYPE_CHECKING, Any

from kiln.compiler.core import FACTORY_NAME
from kiln.environment.exceptions import (
    TemplateError,
    TemplateRuntimeError,
    build_source_snippet,
)
from kiln.utils.html import html_escape

if TYPE_CHECKING:
    import types
    from collections.abc import Callable

    from kiln._types import TemplateSource
    from kiln.compiler.core import CompiledRoutine

logger = logging.getLogger(__name__)


def _routine_lines(tb: types.TracebackType | None, filename: str) -> list[int]:
    """Generated line numbers of every traceback frame inside ``filename``."""
    lines: list[int] = []
    while tb is not None:
        if tb.tb_frame.f_code.co_filename == filename:
            lines.append(tb.tb_lineno)
        tb = tb.tb_next
    return lines


def _describe(error: BaseException) -> str:
    error_str = str(error).strip()
    if error_str:
        return f"{type(error).__name__}: {error_str}"

    # Handle empty error messages (e.g., StopIteration, bare exceptions)
    error_type = type(error).__name__
    non_empty = [str(a) for a in error.args if str(a).strip()]
    if non_empty:
        return f"{error_type}: {', '.join(non_empty)}"
    return f"{error_type} (no details available)"


class Template:
    """Compiled template ready for rendering.

    Attributes:
        name: Template identifier
        filename: Source path when loaded from disk
        content_type: Content-Type resolved from the template suffix
        escape: Whether interpolated values are HTML-escaped

    Example:
        >>> from kiln import Environment
        >>> t = Environment().from_string("Hi {{ self }}!\\n", suffix="txt")
        >>> t.render("there")
        'Hi there!\\n'

    """

    __slots__ = ("_escape", "_render_func", "_routine", "_source")

    def __init__(
        self,
        routine: CompiledRoutine,
        *,
        source: TemplateSource,
        escape: bool,
        namespace: dict[str, Any] | None = None,
    ):
        """Bind ``routine`` to its helpers.

        Args:
            routine: Output of ``Compiler.compile``
            source: Template text, name and Content-Type
            escape: Escaping decision the routine was generated with
            namespace: Globals for expression evaluation. Defaults to a
                namespace holding only builtins.
        """
        self._routine = routine
        self._source = source
        self._escape = escape

        if namespace is None:
            namespace = {"__builtins__": builtins}
        local_ns: dict[str, Any] = {}
        exec(routine.code, namespace, local_ns)
        factory: Callable[..., Callable[[Any], str]] = local_ns[FACTORY_NAME]
        self._render_func = factory(html_escape, str)

    @property
    def name(self) -> str | None:
        return self._source.name

    @property
    def filename(self) -> str | None:
        return self._source.filename

    @property
    def content_type(self) -> str:
        return self._source.content_type

    @property
    def escape(self) -> bool:
        return self._escape

    @property
    def source(self) -> str:
        return self._source.text

    @property
    def python_source(self) -> str:
        """Generated Python for this template (useful when debugging)."""
        return self._routine.python_source

    @property
    def routine(self) -> CompiledRoutine:
        return self._routine

    def render(self, context: Any) -> str:
        """Render with ``context`` bound to ``self`` inside expressions.

        Raises:
            TemplateRuntimeError: An expression or statement raised. The
                original exception is chained as ``__cause__``.
        """
        try:
            return self._render_func(context)
        except TemplateRuntimeError as e:
            # A nested context failed while being interpolated here
            lines = _routine_lines(e.__traceback__, self._routine.filename)
            lineno = self._routine.template_line(lines[0]) if lines else None
            e.push_frame(self.name or "<template>", lineno or 0)
            raise
        except TemplateError:
            # Load and compile errors of a reloading nested context
            raise
        except Exception as e:
            raise self._enhance_error(e) from e

    def _enhance_error(self, error: Exception) -> TemplateRuntimeError:
        """Convert a generic exception into TemplateRuntimeError with location."""
        lines = _routine_lines(error.__traceback__, self._routine.filename)
        # Innermost frame wins so functions defined in the template report
        # their own line
        lineno = self._routine.template_line(lines[-1]) if lines else None

        snippet = None
        if self._source.text and lineno:
            snippet = build_source_snippet(self._source.text, lineno)

        suggestion = None
        if isinstance(error, AttributeError) and "NoneType" in str(error):
            suggestion = "A value used in this expression is None; guard it with an if block"
        elif isinstance(error, NameError):
            suggestion = "Module-level names are visible; everything else goes through self"

        logger.debug("render of %s failed at line %s", self.name, lineno, exc_info=error)
        return TemplateRuntimeError(
            _describe(error),
            template_name=self.name,
            lineno=lineno,
            suggestion=suggestion,
            source_snippet=snippet,
        )

    def __repr__(self) -> str:
        return f"<Template {self.name or '(inline)'} {self.content_type!r}>"
