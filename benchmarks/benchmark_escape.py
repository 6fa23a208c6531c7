"""Benchmarks for HTML escaping of interpolated values.

Run with: pytest benchmarks/benchmark_escape.py --benchmark-only
"""

from __future__ import annotations

from pytest_benchmark.fixture import BenchmarkFixture

from kiln import Markup
from kiln.utils.html import html_escape


def test_escape_no_special(benchmark: BenchmarkFixture) -> None:
    """Fast path: nothing to replace."""
    benchmark(html_escape, "Hello World no special chars here at all")


def test_escape_many_special_chars(benchmark: BenchmarkFixture) -> None:
    benchmark(html_escape, "<script>alert('xss');</script>" * 10)


def test_escape_markup_passthrough(benchmark: BenchmarkFixture) -> None:
    benchmark(html_escape, Markup("<b>already safe</b>"))


def test_escape_non_string(benchmark: BenchmarkFixture) -> None:
    benchmark(html_escape, 12345)
