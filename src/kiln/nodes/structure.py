"""Structural nodes for the kiln block tree."""

from __future__ import annotations

from collections.abc import Iterator, Sequence
from dataclasses import dataclass

from kiln._types import Line
from kiln.nodes.base import Node


@dataclass(frozen=True, slots=True)
class Leaf(Node):
    """One Text or Blank line, emitted as output."""

    line: Line


@dataclass(frozen=True, slots=True)
class Statement(Node):
    """A directive that neither opens nor closes a block: ``%% total = 0``"""

    code: str


@dataclass(frozen=True, slots=True)
class Control(Node):
    """A brace-delimited block: ``%% head {`` ... ``%% }``

    ``arms`` holds the chained continuations of the same construct
    (``} else {``, successive ``case`` blocks, ...) in source order. An arm
    is itself a Control whose own ``arms`` are always empty; the chain is
    flat on its first node.

    ``end_lineno`` is the line of the closer that ended this node's own body.
    """

    head: str
    body: Sequence[Node]
    arms: Sequence[Control] = ()
    end_lineno: int = 0

    def walk(self) -> Iterator[Node]:
        """Yield every descendant node in pre-order."""
        for child in self.body:
            yield child
            if isinstance(child, Control):
                yield from child.walk()
        for arm in self.arms:
            yield arm
            yield from arm.walk()


@dataclass(frozen=True, slots=True)
class Template(Node):
    """Root node: the implicit top-level body."""

    body: Sequence[Node]
    name: str | None = None

    def walk(self) -> Iterator[Node]:
        for child in self.body:
            yield child
            if isinstance(child, Control):
                yield from child.walk()
