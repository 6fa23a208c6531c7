"""Fixtures for kiln benchmarks.

Run with: pytest benchmarks/ --benchmark-only
"""

from __future__ import annotations

from dataclasses import dataclass, field

import pytest
from jinja2 import Environment as Jinja2Environment

from kiln import Environment

LIST_TEMPLATE_KILN = """\
<h1>{{ self.title }}</h1>
<ul>
%% for item in self.items {
%% if item.price > 50 {
  <li class="pricey">{{ item.name }}: {{ item.price }}</li>
%% } else {
  <li>{{ item.name }}: {{ item.price }}</li>
%% }
%% }
</ul>
"""

LIST_TEMPLATE_JINJA2 = """\
<h1>{{ title }}</h1>
<ul>
{% for item in items %}{#
#}{% if item.price > 50 %}  <li class="pricey">{{ item.name }}: {{ item.price }}</li>
{% else %}  <li>{{ item.name }}: {{ item.price }}</li>
{% endif %}{% endfor %}</ul>
"""


@dataclass
class Item:
    name: str
    price: float


@dataclass
class Catalog:
    title: str
    items: list[Item] = field(default_factory=list)


def build_catalog(size: int) -> Catalog:
    return Catalog("Catalog <all>", [Item(f"Item {i} & co", i * 1.5) for i in range(size)])


@pytest.fixture(scope="session")
def small_catalog() -> Catalog:
    return build_catalog(10)


@pytest.fixture(scope="session")
def large_catalog() -> Catalog:
    return build_catalog(1000)


@pytest.fixture(scope="session")
def kiln_env() -> Environment:
    return Environment()


@pytest.fixture(scope="session")
def jinja2_env() -> Jinja2Environment:
    return Jinja2Environment(autoescape=True, keep_trailing_newline=True)
