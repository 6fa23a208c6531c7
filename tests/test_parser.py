"""Tests for the kiln block matcher."""

import pytest

from kiln.environment.exceptions import (
    AmbiguousArmError,
    MalformedCloserError,
    TemplateSyntaxError,
    UnbalancedBlockError,
    UnmatchedCloserError,
)
from kiln.lexer import tokenize
from kiln.nodes import Control, Leaf, Statement
from kiln.parser import Parser


def parse(source: str):
    return Parser(tokenize(source), name="t.txt", source=source).parse()


class TestNesting:
    def test_single_block(self):
        tree = parse("%% if self.x {\nYes\n%% }\n")
        (block,) = tree.body
        assert isinstance(block, Control)
        assert block.head == "if self.x"
        assert block.lineno == 1
        assert block.end_lineno == 3
        assert [type(n) for n in block.body] == [Leaf]

    def test_nested_blocks(self):
        tree = parse("%% for a in b {\n%% if a {\n{{ a }}\n%% }\n%% }\n")
        (outer,) = tree.body
        (inner,) = outer.body
        assert outer.head == "for a in b"
        assert inner.head == "if a"
        assert inner.end_lineno == 4
        assert outer.end_lineno == 5

    def test_text_around_blocks(self):
        tree = parse("before\n%% if x {\nin\n%% }\nafter\n")
        assert [type(n) for n in tree.body] == [Leaf, Control, Leaf]

    def test_statement_directive(self):
        tree = parse("%% total = 0\n")
        (node,) = tree.body
        assert isinstance(node, Statement)
        assert node.code == "total = 0"

    def test_dict_literal_statement_is_not_a_closer(self):
        (node,) = parse("%% d = {}\n").body
        assert isinstance(node, Statement)

    def test_comments_ignored(self):
        tree = parse("%% # note\n%%\ntext\n")
        assert [type(n) for n in tree.body] == [Leaf]

    def test_block_kind_never_inspected(self):
        tree = parse("%% with open(p) as f {\n%% }\n")
        (block,) = tree.body
        assert block.head == "with open(p) as f"
        assert block.body == ()

    def test_walk_visits_arms(self):
        tree = parse("%% if a {\n%% } else {\n%% if b {\n%% }\n%% }\n")
        heads = [n.head for n in tree.walk() if isinstance(n, Control)]
        assert heads == ["if a", "else", "if b"]


class TestChaining:
    def test_same_line_arm(self):
        tree = parse("%% if x {\nA\n%% } else {\nB\n%% }\n")
        (block,) = tree.body
        (arm,) = block.arms
        assert arm.head == "else"
        assert arm.lineno == 3
        assert arm.end_lineno == 5
        assert block.end_lineno == 3

    def test_next_line_arm(self):
        tree = parse("%% if x {\nA\n%% }\n%% elif y {\nB\n%% }\n")
        (block,) = tree.body
        assert [arm.head for arm in block.arms] == ["elif y"]

    def test_multiple_arms(self):
        source = "%% if a {\n1\n%% } elif b {\n2\n%% } else {\n3\n%% }\n"
        (block,) = parse(source).body
        assert [arm.head for arm in block.arms] == ["elif b", "else"]

    def test_match_case_arms(self):
        source = (
            "%% match self.kind {\n"
            "%% case 'a' {\n"
            "A\n"
            "%% }\n"
            "%% case _ {\n"
            "Other\n"
            "%% }\n"
            "%% }\n"
        )
        (match,) = parse(source).body
        (first,) = match.body
        assert first.head == "case 'a'"
        assert [arm.head for arm in first.arms] == ["case _"]

    def test_comment_between_closer_and_arm_keeps_chain(self):
        (block,) = parse("%% if x {\n%% }\n%% # otherwise\n%% else {\n%% }\n").body
        assert [arm.head for arm in block.arms] == ["else"]

    def test_text_between_blocks_makes_siblings(self):
        tree = parse("%% if a {\n%% }\ntext\n%% if b {\n%% }\n")
        assert [type(n) for n in tree.body] == [Control, Leaf, Control]
        assert tree.body[0].arms == ()

    def test_statement_ends_chain(self):
        tree = parse("%% if a {\n%% }\n%% x = 1\n%% if b {\n%% }\n")
        assert [type(n) for n in tree.body] == [Control, Statement, Control]


class TestErrors:
    def test_unclosed_reports_opener(self):
        with pytest.raises(UnbalancedBlockError) as exc_info:
            parse("a\n%% if x {\nb\n")
        assert exc_info.value.lineno == 2
        assert "if x" in exc_info.value.message

    def test_unclosed_reports_innermost(self):
        with pytest.raises(UnbalancedBlockError) as exc_info:
            parse("%% for a in b {\n%% if a {\n%% }\n")
        assert exc_info.value.lineno == 1

    def test_unclosed_arm_reports_arm(self):
        with pytest.raises(UnbalancedBlockError) as exc_info:
            parse("%% if a {\n%% } else {\nx\n")
        assert exc_info.value.lineno == 2

    def test_unmatched_closer(self):
        with pytest.raises(UnmatchedCloserError) as exc_info:
            parse("text\n%% }\n")
        assert exc_info.value.lineno == 2

    def test_extra_closer_after_block(self):
        with pytest.raises(UnmatchedCloserError) as exc_info:
            parse("%% if a {\n%% }\n%% }\n")
        assert exc_info.value.lineno == 3

    def test_malformed_closer(self):
        with pytest.raises(MalformedCloserError) as exc_info:
            parse("%% if a {\n%% } else\n%% }\n")
        assert exc_info.value.lineno == 2

    def test_ambiguous_arm_after_text(self):
        with pytest.raises(AmbiguousArmError) as exc_info:
            parse("%% if a {\n%% }\ntext\n%% else {\n%% }\n")
        error = exc_info.value
        assert error.lineno == 4
        assert error.closer_lineno == 2

    def test_ambiguous_arm_after_blank(self):
        with pytest.raises(AmbiguousArmError):
            parse("%% if a {\n%% }\n\n%% elif b {\n%% }\n")

    def test_errors_are_syntax_errors(self):
        with pytest.raises(TemplateSyntaxError):
            parse("%% }\n")

    def test_error_location(self):
        with pytest.raises(UnmatchedCloserError) as exc_info:
            parse("%% }\n")
        assert exc_info.value.location == "t.txt:1"
