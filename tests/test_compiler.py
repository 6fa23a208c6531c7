"""Tests for the generated rendering routine."""

import pytest

from kiln.compiler import Compiler, build_plan
from kiln.compiler.writer import CodeWriter
from kiln.environment.exceptions import ExpressionSyntaxError
from kiln.lexer import tokenize
from kiln.parser import Parser

from .conftest import Ctx, render


def compile_source(source: str, escape: bool = False, name: str = "t.txt"):
    plan = build_plan(Parser(tokenize(source), name=name, source=source).parse(), escape=escape)
    return Compiler(name=name, source=source).compile(plan)


class TestCodeWriter:
    def test_indentation_and_map(self):
        w = CodeWriter()
        w.write_line("if x:", 3)
        w.indent()
        w.write_line("pass", 4)
        w.dedent()
        assert w.getvalue() == "if x:\n    pass\n"
        assert w.line_map == (3, 4)
        assert w.template_line(2) == 4
        assert w.template_line(0) is None
        assert w.template_line(3) is None

    def test_explicit_indent(self):
        w = CodeWriter()
        w.indent()
        w.indent()
        w.write_line("else:", 1, w.level - 1)
        assert w.getvalue() == "    else:\n"


class TestGeneratedSource:
    def test_literals_coalesced(self):
        routine = compile_source("a\nb\nc\n")
        assert "_kiln_append('a\\nb\\nc\\n')" in routine.python_source
        assert routine.python_source.count("_kiln_append(") == 1

    def test_expression_uses_converter(self):
        source = compile_source("{{ x }}").python_source
        assert "_kiln_append(_kiln_s(_kiln_value))" in source
        escaped = compile_source("{{ x }}", escape=True).python_source
        assert "_kiln_append(_kiln_e(_kiln_value))" in escaped

    def test_generated_names_are_reserved(self):
        source = compile_source("%% x = 1\n{{ x }}\n", escape=True).python_source
        assigned = {
            line.strip().split(" = ")[0]
            for line in source.splitlines()
            if " = " in line and line.strip() != "x = 1"
        }
        assert assigned
        assert all(name.startswith("_kiln_") for name in assigned)

    def test_arm_written_at_construct_level(self):
        source = compile_source("%% if a {\n%% } else {\n%% }\n").python_source
        assert "\n        if a:\n            pass\n        else:\n            pass\n" in source

    def test_filename(self):
        assert compile_source("x", name="page.txt").filename == "<kiln page.txt>"

    def test_line_map_covers_generated_lines(self):
        routine = compile_source("a\n%% if b {\n{{ c }}\n%% }\n")
        assert len(routine.line_map) == routine.python_source.count("\n")
        value_line = routine.python_source.splitlines().index("            _kiln_value = c") + 1
        assert routine.template_line(value_line) == 3


class TestRendering:
    def test_if_else(self, env):
        source = "%% if self.x {\nYes: {{ self.n }}\n%% } else {\nNo\n%% }\n"
        assert render(env, source, Ctx(x=True, n=5)) == "Yes: 5\n"
        assert render(env, source, Ctx(x=False, n=5)) == "No\n"

    def test_for_loop(self, env):
        assert render(env, "%% for i in range(3) {\n{{ i }},\n%% }\n") == "0,\n1,\n2,\n"

    def test_match_case(self, env):
        source = (
            "%% match self.kind {\n"
            "%% case 'circle' {\n"
            "round\n"
            "%% }\n"
            "%% case _ {\n"
            "other\n"
            "%% }\n"
            "%% }\n"
        )
        assert render(env, source, Ctx(kind="circle")) == "round\n"
        assert render(env, source, Ctx(kind="square")) == "other\n"

    def test_elif_chain(self, env):
        source = "%% if self.n < 0 {\nneg\n%% } elif self.n == 0 {\nzero\n%% } else {\npos\n%% }\n"
        assert [render(env, source, Ctx(n=n)) for n in (-1, 0, 1)] == ["neg\n", "zero\n", "pos\n"]

    def test_try_except(self, env):
        source = "%% try {\n{{ 1 // self.d }}\n%% } except ZeroDivisionError {\ninf\n%% }\n"
        assert render(env, source, Ctx(d=0)) == "inf\n"
        assert render(env, source, Ctx(d=1)) == "1\n"

    def test_statements_and_locals(self, env):
        source = "%% total = 0\n%% for n in self.nums {\n%% total += n\n%% }\nSum: {{ total }}\n"
        assert render(env, source, Ctx(nums=[1, 2, 3])) == "Sum: 6\n"

    def test_underscore_locals_survive_interpolation(self, env):
        assert render(env, "%% _value = 3\n{{ 1 }}{{ _value }}\n") == "13\n"

    def test_underscore_loop_targets_keep_escaping(self, env):
        source = "%% for _e, _s in [('<', '>')] {\n{{ _e }}{{ _s }}\n%% }\n"
        assert render(env, source, escape=True) == "&lt;&gt;\n"

    def test_buffer_names_free_for_templates(self, env):
        source = "%% _buf = []\n%% _append = _buf.append\n%% _append('x')\n{{ _buf }}\n"
        assert render(env, source) == "['x']\n"

    def test_empty_block_body(self, env):
        assert render(env, "%% for i in range(2) {\n%% }\ndone\n") == "done\n"

    def test_adjacent_unrelated_blocks_both_run(self, env):
        source = "%% if True {\nA\n%% }\n%% if True {\nB\n%% }\n"
        assert render(env, source) == "A\nB\n"

    def test_directive_lines_produce_no_output(self, env):
        assert render(env, "a\n%% x = 1\n%% # note\nb\n") == "a\nb\n"

    def test_crlf_preserved(self, env):
        assert render(env, "%% if True {\r\nx {{ 1 }}\r\n%% }\r\n") == "x 1\r\n"

    def test_line_interpolation(self, env):
        assert render(env, "%% for w in ['a', 'b'] {\n- $$ w.upper()\n%% }\n") == "- A\n- B\n"

    def test_text_with_quotes_and_backslashes(self, env):
        source = "it's \"quoted\" \\n not a newline\n"
        assert render(env, source) == source

    def test_nested_function_definition(self, env):
        source = "%% def twice(v) {\n%% return v * 2\n%% }\n{{ twice(self.n) }}\n"
        assert render(env, source, Ctx(n=21)) == "42\n"


class TestExpressionErrors:
    def test_invalid_fragment(self):
        with pytest.raises(ExpressionSyntaxError) as exc_info:
            compile_source("ok\nvalue: {{ self.x + }}\n")
        error = exc_info.value
        assert error.lineno == 2
        assert isinstance(error.__cause__, SyntaxError)

    def test_empty_fragment(self):
        with pytest.raises(ExpressionSyntaxError) as exc_info:
            compile_source("{{ }}\n")
        assert exc_info.value.lineno == 1

    def test_invalid_head(self):
        with pytest.raises(ExpressionSyntaxError) as exc_info:
            compile_source("a\nb\n%% iff self.x {\n%% }\n")
        assert exc_info.value.lineno == 3

    def test_orphan_else_is_rejected_by_python(self):
        with pytest.raises(ExpressionSyntaxError) as exc_info:
            compile_source("%% x = 1\n%% else {\n%% }\n")
        assert exc_info.value.lineno == 2
