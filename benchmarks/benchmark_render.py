"""Template rendering benchmarks: kiln vs Jinja2.

Run with: pytest benchmarks/benchmark_render.py --benchmark-only
Compare: pytest benchmarks/benchmark_render.py --benchmark-compare

Both engines render the same HTML list with escaping on.
"""

from __future__ import annotations

import pytest
from jinja2 import Environment as Jinja2Environment
from pytest_benchmark.fixture import BenchmarkFixture

from kiln import Environment

from .conftest import LIST_TEMPLATE_JINJA2, LIST_TEMPLATE_KILN, Catalog


@pytest.mark.benchmark(group="render:small")
def test_render_small_kiln(
    benchmark: BenchmarkFixture, kiln_env: Environment, small_catalog: Catalog
) -> None:
    template = kiln_env.from_string(LIST_TEMPLATE_KILN, suffix="html")
    benchmark(template.render, small_catalog)


@pytest.mark.benchmark(group="render:small")
def test_render_small_jinja2(
    benchmark: BenchmarkFixture, jinja2_env: Jinja2Environment, small_catalog: Catalog
) -> None:
    template = jinja2_env.from_string(LIST_TEMPLATE_JINJA2)
    benchmark(template.render, title=small_catalog.title, items=small_catalog.items)


@pytest.mark.benchmark(group="render:large")
def test_render_large_kiln(
    benchmark: BenchmarkFixture, kiln_env: Environment, large_catalog: Catalog
) -> None:
    template = kiln_env.from_string(LIST_TEMPLATE_KILN, suffix="html")
    benchmark(template.render, large_catalog)


@pytest.mark.benchmark(group="render:large")
def test_render_large_jinja2(
    benchmark: BenchmarkFixture, jinja2_env: Jinja2Environment, large_catalog: Catalog
) -> None:
    template = jinja2_env.from_string(LIST_TEMPLATE_JINJA2)
    benchmark(template.render, title=large_catalog.title, items=large_catalog.items)


def test_outputs_agree(
    kiln_env: Environment, jinja2_env: Jinja2Environment, small_catalog: Catalog
) -> None:
    """Sanity check: the benchmarked templates produce the same page."""
    kiln_out = kiln_env.from_string(LIST_TEMPLATE_KILN, suffix="html").render(small_catalog)
    jinja2_out = jinja2_env.from_string(LIST_TEMPLATE_JINJA2).render(
        title=small_catalog.title, items=small_catalog.items
    )
    assert kiln_out == jinja2_out
