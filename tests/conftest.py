"""Pytest configuration and fixtures for kiln tests."""

import pytest

from kiln import DictLoader, Environment
from kiln.environment import terminal


@pytest.fixture(autouse=True, scope="session")
def plain_diagnostics():
    """Keep error messages free of ANSI codes regardless of FORCE_COLOR."""
    saved = terminal._USE_COLORS
    terminal._USE_COLORS = False
    yield
    terminal._USE_COLORS = saved


@pytest.fixture
def env():
    """Create a basic kiln Environment."""
    return Environment()


@pytest.fixture
def env_with_loader():
    """Create a kiln Environment with DictLoader and test templates."""
    loader = DictLoader(
        {
            "greeting.txt": "Hello, {{ self.name }}!\n",
            "page.html": "<h1>{{ self.title }}</h1>\n",
            "list.txt": "%% for item in self.items {\n- $$ item\n%% }\n",
        }
    )
    return Environment(loader=loader)


class Ctx:
    """Attribute bag used as a rendering context."""

    def __init__(self, **attrs):
        self.__dict__.update(attrs)


@pytest.fixture
def ctx():
    return Ctx


def render(env: Environment, source: str, context=None, **kwargs) -> str:
    """Compile ``source`` and render it with ``context``."""
    return env.from_string(source, **kwargs).render(context)
