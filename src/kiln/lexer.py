"""kiln tokenizer: template source → classified lines.

The template language is line-oriented. Every physical line is exactly one
of:

- **Directive**: left-trimmed content starts with ``%%``. The marker and one
  optional following space are stripped; the rest is the statement text.
- **Blank**: nothing but a line terminator.
- **Text**: anything else. Scanned left to right for ``{{ … }}`` spans and
  ``$$ …`` line interpolations; the literal runs around them are kept
  byte for byte.

Each line remembers its own terminator, so a template with no markers
renders back to exactly its own text.

Example:
    >>> lines = tokenize("Hi {{ self.name }}!\\n%% if self.x {\\n")
    >>> [line.kind.name for line in lines]
    ['TEXT', 'DIRECTIVE']
    >>> lines[0].parts
    ('Hi ', Span(fragment='self.name', start=3, end=18), '!')

"""

from __future__ import annotations

import logging

from kiln._types import Line, LineKind, Span
from kiln.environment.exceptions import LexerError

logger = logging.getLogger(__name__)

DIRECTIVE_MARKER = "%%"
INTERPOLATION_OPEN = "{{"
INTERPOLATION_CLOSE = "}}"
INTERPOLATION_LINE = "$$"


def split_lines(source: str) -> list[tuple[str, str]]:
    """Split source into (content, terminator) pairs.

    A trailing newline does not produce an extra empty line. ``\\r\\n`` is
    kept together as the terminator.
    """
    pieces = source.split("\n")
    last = pieces.pop()
    result: list[tuple[str, str]] = []
    for piece in pieces:
        if piece.endswith("\r"):
            result.append((piece[:-1], "\r\n"))
        else:
            result.append((piece, "\n"))
    if last:
        result.append((last, ""))
    return result


def scan_text(
    content: str,
    lineno: int,
    *,
    name: str | None = None,
    filename: str | None = None,
    source: str | None = None,
) -> tuple[str | Span, ...]:
    """Split one Text line into literal runs and interpolation spans.

    Raises:
        LexerError: ``{{`` is not closed before the end of the line
    """
    parts: list[str | Span] = []
    pos = 0
    while True:
        open_at = content.find(INTERPOLATION_OPEN, pos)
        line_at = content.find(INTERPOLATION_LINE, pos)

        if line_at != -1 and (open_at == -1 or line_at < open_at):
            if line_at > pos:
                parts.append(content[pos:line_at])
            fragment = content[line_at + len(INTERPOLATION_LINE) :].strip()
            parts.append(Span(fragment, line_at, len(content)))
            return tuple(parts)

        if open_at == -1:
            if pos < len(content):
                parts.append(content[pos:])
            return tuple(parts)

        inner = open_at + len(INTERPOLATION_OPEN)
        close_at = content.find(INTERPOLATION_CLOSE, inner)
        if close_at == -1:
            raise LexerError(
                "unterminated interpolation",
                lineno=lineno,
                name=name,
                filename=filename,
                source=source,
                col_offset=open_at,
            )

        if open_at > pos:
            parts.append(content[pos:open_at])
        end = close_at + len(INTERPOLATION_CLOSE)
        parts.append(Span(content[inner:close_at].strip(), open_at, end))
        pos = end


def tokenize(
    source: str,
    *,
    name: str | None = None,
    filename: str | None = None,
    directive_marker: str = DIRECTIVE_MARKER,
) -> list[Line]:
    """Classify every physical line of ``source``.

    Args:
        source: Template text
        name: Template name for error messages
        filename: Template path for error messages
        directive_marker: Prefix that turns a line into a directive

    Returns:
        One ``Line`` per physical line, in order

    Raises:
        LexerError: Unterminated ``{{`` on some line
    """
    lines: list[Line] = []
    for index, (content, terminator) in enumerate(split_lines(source)):
        lineno = index + 1
        stripped = content.lstrip()

        if stripped.startswith(directive_marker):
            statement = stripped[len(directive_marker) :]
            if statement.startswith(" "):
                statement = statement[1:]
            lines.append(
                Line(LineKind.DIRECTIVE, lineno, content, terminator, statement=statement)
            )
        elif not content:
            lines.append(Line(LineKind.BLANK, lineno, content, terminator))
        else:
            parts = scan_text(content, lineno, name=name, filename=filename, source=source)
            lines.append(Line(LineKind.TEXT, lineno, content, terminator, parts=parts))

    logger.debug("tokenized %s: %d lines", name or "<template>", len(lines))
    return lines
