"""The ``@display`` class decorator: a context class rendered by its template.

The decorated class is the template's context. Inside the template it is
``self``; its module's globals are visible by name:

    ```python
    from kiln import display

    @display
    class QuickStartTxt:
        def __init__(self, name, items):
            self.name = name
            self.items = items
    ```

with ``templates/quick-start.txt`` next to the module:

    ```
    Hello {{ self.name }}!
    %% for item in self.items {
    - $$ item
    %% }
    ```

``str(QuickStartTxt("Ann", ["a", "b"]))`` renders it. The template is
compiled once, when the decorator runs, so template errors surface at
import time. With ``reload=True`` the source is re-read and recompiled on
every render instead, which is slower but picks up edits immediately.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import TYPE_CHECKING, Any, TypeVar, overload

from kiln._types import TemplateSource
from kiln.environment import Environment, FileSystemLoader
from kiln.environment.content_types import resolve_content_type
from kiln.utils.html import Markup
from kiln.utils.naming import template_filename

if TYPE_CHECKING:
    from collections.abc import Callable

    from kiln.environment.loaders import Loader
    from kiln.template import Template

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=type)

TEMPLATE_DIR = "templates"


def _module_namespace(cls: type) -> dict[str, Any]:
    module = sys.modules.get(cls.__module__)
    if module is None:
        raise TypeError(f"cannot find module {cls.__module__!r} of {cls.__qualname__}")
    return module.__dict__


def _default_loader(cls: type) -> FileSystemLoader:
    module_file = getattr(sys.modules.get(cls.__module__), "__file__", None)
    base = Path(module_file).parent if module_file else Path.cwd()
    return FileSystemLoader(base / TEMPLATE_DIR)


class _Binding:
    """Everything needed to (re)build one context class's template."""

    __slots__ = ("content_type", "env", "escape", "name", "namespace", "text")

    def __init__(
        self,
        env: Environment,
        name: str,
        text: str | None,
        content_type: str,
        escape: bool,
        namespace: dict[str, Any],
    ):
        self.env = env
        self.name = name
        self.text = text
        self.content_type = content_type
        self.escape = escape
        self.namespace = namespace

    def load(self) -> TemplateSource:
        if self.text is not None:
            return TemplateSource(self.text, self.name, None, self.content_type)
        return self.env.get_source(self.name)

    def build(self) -> Template:
        return self.env.compile(self.load(), escape=self.escape, namespace=self.namespace)


def _bind(
    cls: type,
    *,
    text: str | None,
    path: str | None,
    suffix: str | None,
    loader: Loader | None,
    env: Environment | None,
    escape: bool | None,
) -> _Binding:
    if text is not None and path is not None:
        raise TypeError("display() takes either text= or path=, not both")

    if env is None:
        env = Environment(loader=loader or (None if text is not None else _default_loader(cls)))
    elif loader is not None:
        env = Environment(loader, env.escape_policy, env.directive_marker)

    if text is not None:
        name = cls.__qualname__
        content_type = resolve_content_type(suffix)
    else:
        name = path or template_filename(cls.__name__, suffix)
        content_type = resolve_content_type(name)

    if escape is None:
        escape = env.escape_policy.escapes(content_type)
    return _Binding(env, name, text, content_type, escape, _module_namespace(cls))


def _install(cls: type, binding: _Binding, reload: bool) -> None:
    if reload:
        def __str__(self: Any) -> str:
            logger.debug("reloading %s for %s", binding.name, type(self).__qualname__)
            return binding.build().render(self)

        cls.__kiln_template__ = None
    else:
        template = binding.build()
        render = template.render

        def __str__(self: Any) -> str:
            return render(self)

        cls.__kiln_template__ = template

    __str__.__qualname__ = f"{cls.__qualname__}.__str__"
    cls.__str__ = __str__

    if "content_type" not in cls.__dict__:
        cls.content_type = binding.content_type

    if binding.escape and "__html__" not in cls.__dict__:
        def __html__(self: Any) -> Markup:
            return Markup(str(self))

        __html__.__qualname__ = f"{cls.__qualname__}.__html__"
        cls.__html__ = __html__


@overload
def display(cls: T) -> T: ...


@overload
def display(
    cls: None = None,
    *,
    text: str | None = None,
    path: str | None = None,
    suffix: str | None = None,
    loader: Loader | None = None,
    env: Environment | None = None,
    escape: bool | None = None,
    reload: bool = False,
) -> Callable[[T], T]: ...


def display(
    cls: T | None = None,
    *,
    text: str | None = None,
    path: str | None = None,
    suffix: str | None = None,
    loader: Loader | None = None,
    env: Environment | None = None,
    escape: bool | None = None,
    reload: bool = False,
) -> T | Callable[[T], T]:
    """Make ``cls`` render through its template when converted with ``str()``.

    Args:
        cls: The context class (when used without parentheses)
        text: Inline template text instead of a file
        path: Template file name relative to the loader, instead of the
            one derived from the class name
        suffix: Declared file suffix. With a file template, the whole class
            name becomes the stem; with inline text, it decides the
            Content-Type.
        loader: Where to find the template file. Defaults to the
            ``templates`` directory next to the class's module.
        env: Environment supplying the escape policy and directive marker
        escape: Force HTML escaping on or off regardless of Content-Type
        reload: Re-read and recompile the template on every render

    Installs ``__str__``, ``__kiln_template__`` (``None`` in reload mode),
    ``content_type`` unless the class defines one, and ``__html__`` when
    the template escapes and the class does not define one.

    Raises:
        TemplateLoadError: Template file missing or unreadable
        TemplateSyntaxError: Template failed to compile (not in reload mode,
            where this happens on render instead)
    """

    def decorate(klass: T) -> T:
        binding = _bind(
            klass,
            text=text,
            path=path,
            suffix=suffix,
            loader=loader,
            env=env,
            escape=escape,
        )
        logger.debug(
            "binding %s to %s (%s, escape=%s, reload=%s)",
            klass.__qualname__,
            binding.name,
            binding.content_type,
            binding.escape,
            reload,
        )
        _install(klass, binding, reload)
        return klass

    if cls is not None:
        return decorate(cls)
    return decorate
