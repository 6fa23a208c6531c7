"""Line and span types produced by the kiln tokenizer.

The tokenizer works one physical line at a time. Each line becomes a
`Line` tagged with a `LineKind`; Text lines additionally carry their
literal runs and `Span` objects in source order.

"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto


class LineKind(Enum):
    """Classification of a physical template line."""

    TEXT = auto()
    DIRECTIVE = auto()
    BLANK = auto()


@dataclass(frozen=True, slots=True)
class Span:
    """An interpolation embedded in a Text line.

    Attributes:
        fragment: Expression text between the markers, stripped. Opaque to
            kiln; only the Python compiler ever looks inside it.
        start: Column of the opening marker (0-based).
        end: Column just past the closing marker (or end of line for `$$`).
    """

    fragment: str
    start: int
    end: int


@dataclass(frozen=True, slots=True)
class Line:
    """One physical line of template source.

    Attributes:
        kind: TEXT, DIRECTIVE or BLANK
        lineno: 1-based line number
        content: Line text without its terminator
        terminator: ``"\\n"``, ``"\\r\\n"``, or ``""`` for a final unterminated line
        parts: For TEXT lines, literal runs (``str``) and ``Span`` objects
            interleaved in source order. Empty literal runs are omitted.
        statement: For DIRECTIVE lines, the text after the marker and one
            optional space
    """

    kind: LineKind
    lineno: int
    content: str
    terminator: str
    parts: tuple[str | Span, ...] = ()
    statement: str = ""

    @property
    def spans(self) -> tuple[Span, ...]:
        return tuple(p for p in self.parts if isinstance(p, Span))


@dataclass(frozen=True, slots=True)
class TemplateSource:
    """Raw template text plus the Content-Type resolved from its suffix.

    Attributes:
        text: Template source
        name: Template identifier (loader name or context name)
        filename: File path when loaded from disk, else None
        content_type: e.g. ``'text/html; charset=utf-8'``
    """

    text: str
    name: str | None
    filename: str | None
    content_type: str
