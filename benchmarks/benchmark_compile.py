"""Compile-time benchmarks: the full pipeline and each stage.

Run with: pytest benchmarks/benchmark_compile.py --benchmark-only
"""

from __future__ import annotations

import pytest
from pytest_benchmark.fixture import BenchmarkFixture

from kiln import Environment
from kiln.compiler import Compiler, build_plan
from kiln.lexer import tokenize
from kiln.parser import Parser

from .conftest import LIST_TEMPLATE_KILN

BIG_TEMPLATE = LIST_TEMPLATE_KILN * 50


@pytest.mark.benchmark(group="compile:pipeline")
def test_compile_small(benchmark: BenchmarkFixture, kiln_env: Environment) -> None:
    benchmark(kiln_env.from_string, LIST_TEMPLATE_KILN, suffix="html")


@pytest.mark.benchmark(group="compile:pipeline")
def test_compile_big(benchmark: BenchmarkFixture, kiln_env: Environment) -> None:
    benchmark(kiln_env.from_string, BIG_TEMPLATE, suffix="html")


@pytest.mark.benchmark(group="compile:stages")
def test_tokenize(benchmark: BenchmarkFixture) -> None:
    benchmark(tokenize, BIG_TEMPLATE)


@pytest.mark.benchmark(group="compile:stages")
def test_parse(benchmark: BenchmarkFixture) -> None:
    lines = tokenize(BIG_TEMPLATE)
    benchmark(lambda: Parser(lines).parse())


@pytest.mark.benchmark(group="compile:stages")
def test_generate(benchmark: BenchmarkFixture) -> None:
    plan = build_plan(Parser(tokenize(BIG_TEMPLATE)).parse(), escape=True)
    benchmark(Compiler(name="big.html").compile, plan)
