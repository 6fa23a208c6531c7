"""Block matcher: classified lines → block tree.

Nesting comes only from braces at the edges of directive statements:

    %% if self.x {          opener   → push Control("if self.x")
    Yes
    %% } else {             closer + opener → pop, then chain an arm
    No
    %% }                    closer   → pop

A closer followed *on the very next line* by an opener chains that opener
as an arm of the construct just closed, instead of starting a sibling. That
adjacency rule is the only tie-break; block kinds are never inspected,
except that an opener starting with a continuation keyword (``else``,
``elif``, ``except``, ``finally``, ``case``) is rejected when Text or Blank
lines separate it from the closer before it.

Directive lines whose statement is empty or starts with ``#`` are comments
and are dropped without affecting adjacency.

"""

from __future__ import annotations

import logging
import re
from collections.abc import Sequence
from dataclasses import dataclass, field

from kiln._types import Line, LineKind
from kiln.environment.exceptions import (
    AmbiguousArmError,
    MalformedCloserError,
    UnbalancedBlockError,
    UnmatchedCloserError,
)
from kiln.nodes import Control, Leaf, Node, Statement, Template

logger = logging.getLogger(__name__)

BLOCK_OPEN = "{"
BLOCK_CLOSE = "}"

CONTINUATION_KEYWORDS: tuple[str, ...] = ("else", "elif", "except", "finally", "case")

_CONTINUATION = re.compile(rf"(?:{'|'.join(CONTINUATION_KEYWORDS)})\b")


@dataclass(slots=True)
class _OpenBlock:
    """Mutable builder for a Control node whose closer has not been seen yet."""

    head: str
    lineno: int
    body: list[Node] = field(default_factory=list)
    arms: list[Control] = field(default_factory=list)
    # First block of the chain when this block is an arm
    chain: _OpenBlock | None = None
    end_lineno: int = 0

    def freeze(self) -> Control:
        return Control(
            lineno=self.lineno,
            head=self.head,
            body=tuple(self.body),
            arms=tuple(self.arms),
            end_lineno=self.end_lineno,
        )


class Parser:
    """Match directive braces into a tree of Control nodes.

    Attributes:
        _lines: Tokenized template lines
        _stack: Open blocks, innermost last
        _pending: Closed chain head that may still receive arms
        _gap_after: Line of the closer whose chain was ended by Text/Blank

    Example:
        >>> from kiln.lexer import tokenize
        >>> tree = Parser(tokenize("%% for i in range(3) {\\n{{ i }}\\n%% }\\n")).parse()
        >>> tree.body[0].head
        'for i in range(3)'

    """

    __slots__ = (
        "_filename",
        "_gap_after",
        "_lines",
        "_name",
        "_pending",
        "_root",
        "_source",
        "_stack",
    )

    def __init__(
        self,
        lines: Sequence[Line],
        name: str | None = None,
        filename: str | None = None,
        source: str | None = None,
    ):
        self._lines = lines
        self._name = name
        self._filename = filename
        self._source = source
        self._root: list[Node] = []
        self._stack: list[_OpenBlock] = []
        self._pending: _OpenBlock | None = None
        self._gap_after: int | None = None

    def parse(self) -> Template:
        """Build the block tree.

        Raises:
            UnbalancedBlockError: Input ended with a block still open
            UnmatchedCloserError: ``}`` with no block open
            MalformedCloserError: Text after ``}`` that is not an opener
            AmbiguousArmError: Continuation opener separated from its closer
        """
        for line in self._lines:
            if line.kind is LineKind.DIRECTIVE:
                self._directive(line)
            else:
                if self._pending is not None:
                    self._gap_after = self._pending.end_lineno
                    self._flush()
                self._body().append(Leaf(lineno=line.lineno, line=line))

        self._flush()
        if self._stack:
            unclosed = self._stack[-1]
            raise self._error(
                UnbalancedBlockError,
                f"unclosed block '{unclosed.head}' opened here",
                unclosed.lineno,
            )

        logger.debug(
            "matched %s: %d top-level nodes",
            self._name or "<template>",
            len(self._root),
        )
        return Template(lineno=1, body=tuple(self._root), name=self._name)

    def _body(self) -> list[Node]:
        return self._stack[-1].body if self._stack else self._root

    def _flush(self) -> None:
        """Attach the pending chain to the current body; no more arms may join it."""
        if self._pending is not None:
            self._body().append(self._pending.freeze())
            self._pending = None

    def _directive(self, line: Line) -> None:
        statement = line.statement.strip()
        if not statement or statement.startswith("#"):
            return

        if statement == BLOCK_CLOSE:
            self._close(line)
        elif statement.startswith(BLOCK_CLOSE):
            rest = statement[len(BLOCK_CLOSE) :].strip()
            if not rest.endswith(BLOCK_OPEN):
                raise self._error(
                    MalformedCloserError,
                    f"unexpected text after closing brace: '{rest}'",
                    line.lineno,
                )
            self._close(line)
            self._open(line, rest)
        elif statement.endswith(BLOCK_OPEN):
            self._open(line, statement)
        else:
            self._flush()
            self._body().append(Statement(lineno=line.lineno, code=statement))

        self._gap_after = None

    def _open(self, line: Line, statement: str) -> None:
        head = statement[: -len(BLOCK_OPEN)].strip()

        chain = self._pending
        if chain is not None:
            # Closer on the previous line (or same line): this opener is an arm
            self._pending = None
            self._stack.append(_OpenBlock(head, line.lineno, chain=chain))
            return

        if self._gap_after is not None and _CONTINUATION.match(head):
            raise self._error(
                AmbiguousArmError,
                f"'{head}' is separated from the block closed on line "
                f"{self._gap_after} by text; put the opener directly after the closer",
                line.lineno,
                closer_lineno=self._gap_after,
            )

        self._stack.append(_OpenBlock(head, line.lineno))

    def _close(self, line: Line) -> None:
        self._flush()
        if not self._stack:
            raise self._error(UnmatchedCloserError, "closing brace with no open block", line.lineno)

        block = self._stack.pop()
        block.end_lineno = line.lineno
        if block.chain is not None:
            block.chain.arms.append(block.freeze())
            self._pending = block.chain
        else:
            self._pending = block

    def _error(self, error_class: type, message: str, lineno: int, **kwargs):
        return error_class(
            message,
            lineno=lineno,
            name=self._name,
            filename=self._filename,
            source=self._source,
            **kwargs,
        )
