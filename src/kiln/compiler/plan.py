"""Render Plan: the block tree flattened into append/control instructions.

Pre-order traversal of the tree produces a flat list whose Begin/End
instructions mirror the directive nesting exactly:

    %% if self.x {              BeginControl("if self.x")
    Yes: {{ self.n }}             AppendLiteral("Yes: ")
                                  AppendExpr("self.n", escape=False)
                                  AppendLiteral("\\n")
    %% } else {                   BeginControl("else", arm=True)
    No                              AppendLiteral("No")
                                    AppendLiteral("\\n")
    %% }                          EndControl
                                EndControl

Chained arms sit inside the Begin/End pair of the construct they belong to;
the serializer writes them back at the construct's own indentation.
"""

from __future__ import annotations

from collections.abc import Iterator, Sequence
from dataclasses import dataclass
from typing import Union

from kiln._types import LineKind, Span
from kiln.nodes import Control, Leaf, Node, Statement, Template


@dataclass(frozen=True, slots=True)
class AppendLiteral:
    text: str
    lineno: int


@dataclass(frozen=True, slots=True)
class AppendExpr:
    """Append the value of an expression fragment, escaped or verbatim."""

    fragment: str
    escape: bool
    lineno: int


@dataclass(frozen=True, slots=True)
class BeginControl:
    """Open a host-language block. ``arm`` marks a chained continuation."""

    head: str
    lineno: int
    arm: bool = False


@dataclass(frozen=True, slots=True)
class EndControl:
    lineno: int


@dataclass(frozen=True, slots=True)
class ExecStatement:
    code: str
    lineno: int


Instruction = Union[AppendLiteral, AppendExpr, BeginControl, EndControl, ExecStatement]


@dataclass(frozen=True, slots=True)
class RenderPlan:
    """Ordered instructions for one template, plus its escaping decision.

    Attributes:
        instructions: Flattened instruction list
        escape: Whether AppendExpr values are HTML-escaped (same for all)
        name: Template name for diagnostics
    """

    instructions: tuple[Instruction, ...]
    escape: bool
    name: str | None = None

    def __iter__(self) -> Iterator[Instruction]:
        return iter(self.instructions)

    def __len__(self) -> int:
        return len(self.instructions)

    def brackets(self) -> list[Instruction]:
        """The Begin/End subsequence, in order."""
        return [i for i in self.instructions if isinstance(i, (BeginControl, EndControl))]

    def is_balanced(self) -> bool:
        """Whether Begin/End instructions form a well-formed bracket sequence."""
        depth = 0
        for instruction in self.brackets():
            depth += 1 if isinstance(instruction, BeginControl) else -1
            if depth < 0:
                return False
        return depth == 0


def _emit_leaf(leaf: Leaf, escape: bool) -> Iterator[Instruction]:
    line = leaf.line
    if line.kind is LineKind.TEXT:
        for part in line.parts:
            if isinstance(part, Span):
                yield AppendExpr(part.fragment, escape, line.lineno)
            elif part:
                yield AppendLiteral(part, line.lineno)
    if line.terminator:
        yield AppendLiteral(line.terminator, line.lineno)


def _emit(nodes: Sequence[Node], escape: bool) -> Iterator[Instruction]:
    for node in nodes:
        if isinstance(node, Leaf):
            yield from _emit_leaf(node, escape)
        elif isinstance(node, Statement):
            yield ExecStatement(node.code, node.lineno)
        elif isinstance(node, Control):
            yield BeginControl(node.head, node.lineno)
            yield from _emit(node.body, escape)
            for arm in node.arms:
                yield BeginControl(arm.head, arm.lineno, arm=True)
                yield from _emit(arm.body, escape)
                yield EndControl(arm.end_lineno)
            yield EndControl(node.arms[-1].end_lineno if node.arms else node.end_lineno)
        else:
            raise TypeError(f"unexpected node in block tree: {type(node).__name__}")


def build_plan(template: Template, *, escape: bool) -> RenderPlan:
    """Flatten a block tree into a RenderPlan.

    Args:
        template: Root of the block tree
        escape: Escaping decision for every AppendExpr, from the template's
            Content-Type
    """
    return RenderPlan(tuple(_emit(template.body, escape)), escape, template.name)
