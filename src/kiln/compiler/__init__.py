"""kiln code generator: block tree → Render Plan → Python code object.

Example:
    >>> from kiln.compiler import Compiler, build_plan
    >>> plan = build_plan(tree, escape=True)
    >>> routine = Compiler(name="page.html").compile(plan)

"""

from kiln.compiler.core import CompiledRoutine, Compiler
from kiln.compiler.plan import (
    AppendExpr,
    AppendLiteral,
    BeginControl,
    EndControl,
    ExecStatement,
    Instruction,
    RenderPlan,
    build_plan,
)
from kiln.compiler.writer import CodeWriter

__all__ = [
    "AppendExpr",
    "AppendLiteral",
    "BeginControl",
    "CodeWriter",
    "CompiledRoutine",
    "Compiler",
    "EndControl",
    "ExecStatement",
    "Instruction",
    "RenderPlan",
    "build_plan",
]
