"""Exceptions for the kiln template compiler.

Exception Hierarchy:
TemplateError (base)
├── TemplateLoadError             # Source unreadable
│   └── TemplateNotFoundError     # Source missing
├── TemplateSyntaxError           # Compile-time error with source location
│   ├── LexerError                # Unterminated interpolation
│   ├── UnbalancedBlockError      # Opener never closed
│   ├── UnmatchedCloserError      # Closer with nothing open
│   ├── MalformedCloserError      # Text after a closing brace
│   ├── AmbiguousArmError         # Continuation opener separated from its closer
│   └── ExpressionSyntaxError     # Python rejected the generated routine
└── TemplateRuntimeError          # Render-time error with template line

Compile-time errors are fatal: nothing is generated for a template that
raises one of them. Expression fragments are never validated by kiln; when
Python's compiler rejects the generated routine, the SyntaxError is mapped
back to the template line and re-raised as ExpressionSyntaxError.

Example:
    ```
    KLN-PAR-001: unclosed block 'if self.admin' opened here
      --> templates/page.html:3
       |
      3 | %% if self.admin {
       |
    ```

"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from kiln.environment import terminal

# ---------------------------------------------------------------------------
# Error codes
# ---------------------------------------------------------------------------

_KILN_DOCS_BASE = "https://kiln.readthedocs.io/en/latest/errors"


class ErrorCode(Enum):
    """Searchable error codes for kiln errors.

    Format: KLN-{CATEGORY}-{NUMBER}
    Categories: LEX (tokenizer), PAR (block matcher), GEN (generated code),
    RUN (render), TPL (template loading)
    """

    # Tokenizer errors (KLN-LEX-xxx)
    UNTERMINATED_INTERPOLATION = "KLN-LEX-001"

    # Block matcher errors (KLN-PAR-xxx)
    UNBALANCED_BLOCK = "KLN-PAR-001"
    UNMATCHED_CLOSER = "KLN-PAR-002"
    MALFORMED_CLOSER = "KLN-PAR-003"
    AMBIGUOUS_ARM = "KLN-PAR-004"

    # Generated code errors (KLN-GEN-xxx)
    EXPRESSION_SYNTAX = "KLN-GEN-001"

    # Runtime errors (KLN-RUN-xxx)
    RUNTIME_ERROR = "KLN-RUN-001"

    # Template loading errors (KLN-TPL-xxx)
    TEMPLATE_NOT_FOUND = "KLN-TPL-001"
    TEMPLATE_UNREADABLE = "KLN-TPL-002"

    @property
    def docs_url(self) -> str:
        """Documentation URL for this error code."""
        return f"{_KILN_DOCS_BASE}/#{self.value.lower()}"

    @property
    def category(self) -> str:
        """Error category (e.g., 'lexer', 'parser', 'runtime')."""
        prefix = self.value.split("-")[1]
        return {
            "LEX": "lexer",
            "PAR": "parser",
            "GEN": "codegen",
            "RUN": "runtime",
            "TPL": "template",
        }.get(prefix, "unknown")


# ---------------------------------------------------------------------------
# Source snippets
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class SourceSnippet:
    """Template source context around an error line.

    Attributes:
        lines: Tuple of (line_number, line_content) pairs around the error.
        error_line: The 1-based line number where the error occurred.
        column: Optional column offset for caret pointer.
    """

    lines: tuple[tuple[int, str], ...]
    error_line: int
    column: int | None = None

    def format(self) -> str:
        """Format snippet in compiler diagnostic style with colors."""
        parts: list[str] = [terminal.dim_text("   |")]
        for lineno, content in self.lines:
            is_error = lineno == self.error_line
            parts.append(terminal.format_source_line(lineno, content, is_error=is_error))
            if is_error and self.column is not None:
                caret = " " * self.column + "^"
                parts.append(f"{terminal.dim_text('     |')} {terminal.error_line(caret)}")
        parts.append(terminal.dim_text("   |"))
        return "\n".join(parts)


def format_template_stack(stack: list[tuple[str, int]] | None) -> str:
    """Format the chain of enclosing templates for a nested render failure.

    Example:
        >>> print(format_template_stack([("page.html", 12), ("layout.html", 3)]))
        Template stack:
          • page.html:12
          • layout.html:3
    """
    if not stack:
        return ""

    lines = [terminal.dim_text("Template stack:")]
    for template_name, line_num in stack:
        lines.append(f"  • {terminal.location(f'{template_name}:{line_num}')}")
    return "\n".join(lines)


def build_source_snippet(
    source: str,
    error_line: int,
    *,
    context_lines: int = 2,
    column: int | None = None,
) -> SourceSnippet:
    """Build a SourceSnippet from template source.

    Args:
        source: Full template source text.
        error_line: 1-based line number of the error.
        context_lines: Number of lines to show before/after the error line.
        column: Optional column offset for caret pointer.
    """
    all_lines = source.split("\n")
    start = max(0, error_line - 1 - context_lines)
    end = min(len(all_lines), error_line + context_lines)
    lines = tuple((i + 1, all_lines[i].rstrip("\r")) for i in range(start, end))
    return SourceSnippet(lines=lines, error_line=error_line, column=column)


class TemplateError(Exception):
    """Base exception for all kiln errors.

    Attributes:
        code: Optional ErrorCode for searchable, documentable error identification.
    """

    code: ErrorCode | None = None

    def format_compact(self) -> str:
        """Format error as a short, human-readable summary with docs link."""
        parts: list[str] = []

        header = str(self)
        if self.code and self.code.value not in header:
            header = f"{self.code.value}: {header}"
        parts.append(header)

        if self.code:
            parts.append(f"  Docs: {self.code.docs_url}")

        return "\n".join(parts)


class TemplateLoadError(TemplateError):
    """Template source exists but could not be read or decoded."""

    code: ErrorCode | None = ErrorCode.TEMPLATE_UNREADABLE


class TemplateNotFoundError(TemplateLoadError):
    """Template not found by the loader.

    Example:
            >>> FileSystemLoader("templates/").get_source("missing.html")
        TemplateNotFoundError: Template 'missing.html' not found in: templates

    """

    code: ErrorCode | None = ErrorCode.TEMPLATE_NOT_FOUND


class TemplateSyntaxError(TemplateError):
    """Compile-time error in template source.

    When ``source`` and ``lineno`` are provided, the error message includes
    a source snippet with the offending line. If ``col_offset`` is also
    given, a caret (``^``) points at the exact column.
    """

    code: ErrorCode | None = None

    def __init__(
        self,
        message: str,
        lineno: int | None = None,
        name: str | None = None,
        filename: str | None = None,
        source: str | None = None,
        col_offset: int | None = None,
    ):
        self.message = message
        self.lineno = lineno
        self.name = name
        self.filename = filename
        self.source = source
        self.col_offset = col_offset
        super().__init__(self._format_message())

    @property
    def location(self) -> str:
        location = self.filename or self.name or "<template>"
        if self.lineno:
            location += f":{self.lineno}"
        return location

    def _source_line(self) -> str | None:
        if not (self.source and self.lineno):
            return None
        lines = self.source.split("\n")
        if 0 < self.lineno <= len(lines):
            return lines[self.lineno - 1].rstrip("\r")
        return None

    def _format_message(self) -> str:
        location = self.location
        if self.lineno and self.col_offset is not None:
            location += f":{self.col_offset}"

        header = f"Syntax Error: {self.message}\n  --> {location}"

        error_line = self._source_line()
        if error_line is not None:
            snippet = f"\n   |\n{self.lineno:>3} | {error_line}"
            if self.col_offset is not None:
                snippet += f"\n   | {' ' * self.col_offset}^"
            return header + snippet

        return header

    def format_compact(self) -> str:
        """Format syntax error as structured terminal diagnostic."""
        parts: list[str] = [
            terminal.format_error_header(self.code.value if self.code else None, self.message),
            f"  --> {terminal.location(self.location)}",
        ]

        if self.source and self.lineno:
            snippet = build_source_snippet(self.source, self.lineno, column=self.col_offset)
            parts.append(snippet.format())

        if self.code:
            parts.append(f"  {terminal.dim_text('Docs:')} {terminal.docs_url(self.code.docs_url)}")

        return "\n".join(parts)


class LexerError(TemplateSyntaxError):
    """An interpolation marker was opened but not closed on the same line."""

    code: ErrorCode | None = ErrorCode.UNTERMINATED_INTERPOLATION


class UnbalancedBlockError(TemplateSyntaxError):
    """End of input reached with a block still open.

    ``lineno`` is the line of the last unmatched opener.
    """

    code: ErrorCode | None = ErrorCode.UNBALANCED_BLOCK


class UnmatchedCloserError(TemplateSyntaxError):
    """A closing brace directive was found with no block open."""

    code: ErrorCode | None = ErrorCode.UNMATCHED_CLOSER


class MalformedCloserError(TemplateSyntaxError):
    """A directive starts with a closing brace but is neither ``}`` nor ``} head {``."""

    code: ErrorCode | None = ErrorCode.MALFORMED_CLOSER


class AmbiguousArmError(TemplateSyntaxError):
    """A continuation opener (else, elif, case, ...) is not adjacent to its closer.

    Attributes:
        closer_lineno: Line of the closer the opener was separated from.
    """

    code: ErrorCode | None = ErrorCode.AMBIGUOUS_ARM

    def __init__(self, message: str, *, closer_lineno: int, **kwargs):
        self.closer_lineno = closer_lineno
        super().__init__(message, **kwargs)


class ExpressionSyntaxError(TemplateSyntaxError):
    """Python's compiler rejected a fragment or head forwarded from the template.

    Raised ``from`` the original SyntaxError; ``lineno`` is the template line
    the offending generated line came from.
    """

    code: ErrorCode | None = ErrorCode.EXPRESSION_SYNTAX


class TemplateRuntimeError(TemplateError):
    """Render-time error with template location.

    Output Format:
            ```
            Runtime Error: 'NoneType' object has no attribute 'title'
              Location: article.html:15
               |
            > 15 | <h1>{{ self.post.title }}</h1>
               |
            ```

    Attributes:
        message: Error description
        template_name: Name of the template
        lineno: Line number in template source
        source_snippet: Surrounding template lines
        suggestion: Actionable fix suggestion
        template_stack: (template_name, line) of each enclosing template that
            interpolated the failing one, innermost first
    """

    code: ErrorCode | None = ErrorCode.RUNTIME_ERROR

    def __init__(
        self,
        message: str,
        *,
        template_name: str | None = None,
        lineno: int | None = None,
        suggestion: str | None = None,
        source_snippet: SourceSnippet | None = None,
        template_stack: list[tuple[str, int]] | None = None,
    ):
        self.message = message
        self.template_name = template_name
        self.lineno = lineno
        self.suggestion = suggestion
        self.source_snippet = source_snippet
        self.template_stack = template_stack or []
        super().__init__(self._format_message())

    def push_frame(self, template_name: str, lineno: int) -> None:
        """Record an enclosing template the error propagated through."""
        self.template_stack.append((template_name, lineno))
        self.args = (self._format_message(),)

    def _location(self) -> str:
        loc = self.template_name or "<template>"
        if self.lineno:
            loc += f":{self.lineno}"
        return loc

    def _format_message(self) -> str:
        parts = [f"Runtime Error: {self.message}"]

        if self.template_name or self.lineno:
            parts.append(f"  Location: {terminal.location(self._location())}")

        if self.source_snippet:
            parts.append(self.source_snippet.format())

        if self.template_stack:
            parts.append("")
            parts.append(format_template_stack(self.template_stack))

        if self.suggestion:
            parts.append(f"\n  {terminal.hint('Suggestion:')} {self.suggestion}")

        return "\n".join(parts)

    def format_compact(self) -> str:
        """Format runtime error as structured terminal diagnostic."""
        parts: list[str] = [
            terminal.format_error_header(self.code.value if self.code else None, self.message),
            f"  Location: {terminal.location(self._location())}",
        ]

        if self.source_snippet:
            parts.append(self.source_snippet.format())

        if self.template_stack:
            parts.append("")
            parts.append(format_template_stack(self.template_stack))

        if self.suggestion:
            parts.append(f"  {terminal.hint('Hint:')} {self.suggestion}")

        if self.code:
            parts.append(f"  {terminal.dim_text('Docs:')} {terminal.docs_url(self.code.docs_url)}")

        return "\n".join(parts)
