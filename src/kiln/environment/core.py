"""kiln Environment: the explicit settings of one compile pipeline.

An Environment bundles a loader, an escape policy and the directive
marker, and runs the pipeline for one template at a time:

    source → tokenize → Parser → escape decision → build_plan
           → Compiler → Template

Nothing is cached or shared between templates; every ``compile()`` call
is independent.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from kiln._types import TemplateSource
from kiln.compiler import Compiler, build_plan
from kiln.environment.content_types import EscapePolicy, resolve_content_type
from kiln.environment.exceptions import TemplateNotFoundError
from kiln.lexer import DIRECTIVE_MARKER, tokenize
from kiln.parser import Parser
from kiln.template import Template

if TYPE_CHECKING:
    from kiln.environment.loaders import Loader

logger = logging.getLogger(__name__)


class Environment:
    """Loader, escaping rules and markers for compiling templates.

    Attributes:
        loader: Source of template text by file name (optional for
            ``from_string``)
        escape_policy: Content-Type → escape/verbatim decision
        directive_marker: Line prefix that marks a directive (default ``%%``)

    Example:
        >>> env = Environment(loader=DictLoader({"hi.txt": "Hi {{ self }}\\n"}))
        >>> env.get_template("hi.txt").render("Ann")
        'Hi Ann\\n'

        >>> env.from_string("<b>{{ self }}</b>", suffix="html").render("<i>")
        '<b>&lt;i&gt;</b>'

    """

    __slots__ = ("directive_marker", "escape_policy", "loader")

    def __init__(
        self,
        loader: Loader | None = None,
        escape_policy: EscapePolicy | None = None,
        directive_marker: str = DIRECTIVE_MARKER,
    ):
        if not directive_marker or directive_marker != directive_marker.strip():
            raise ValueError(
                f"directive_marker must be non-empty without spaces: {directive_marker!r}"
            )
        self.loader = loader
        self.escape_policy = escape_policy or EscapePolicy()
        self.directive_marker = directive_marker

    def get_source(self, name: str) -> TemplateSource:
        """Load ``name`` through the loader and resolve its Content-Type.

        Raises:
            TemplateNotFoundError: No loader configured, or the loader has
                no such template
            TemplateLoadError: The template could not be read
        """
        if self.loader is None:
            raise TemplateNotFoundError(f"Template '{name}' not found: no loader configured")
        text, filename = self.loader.get_source(name)
        return TemplateSource(text, name, filename, resolve_content_type(name))

    def get_template(
        self,
        name: str,
        *,
        escape: bool | None = None,
        namespace: dict[str, Any] | None = None,
    ) -> Template:
        """Load and compile a template by file name."""
        return self.compile(self.get_source(name), escape=escape, namespace=namespace)

    def from_string(
        self,
        source: str,
        *,
        name: str | None = None,
        suffix: str | None = None,
        escape: bool | None = None,
        namespace: dict[str, Any] | None = None,
    ) -> Template:
        """Compile template text directly.

        Args:
            source: Template text
            name: Name for error messages
            suffix: File suffix (``"html"``, ``"txt"``...) deciding the
                Content-Type; plain text when omitted
            escape: Force escaping on or off regardless of Content-Type
            namespace: Globals visible to expressions
        """
        content_type = resolve_content_type(suffix)
        return self.compile(
            TemplateSource(source, name, None, content_type),
            escape=escape,
            namespace=namespace,
        )

    def compile(
        self,
        source: TemplateSource,
        *,
        escape: bool | None = None,
        namespace: dict[str, Any] | None = None,
    ) -> Template:
        """Run the full pipeline on ``source``.

        Raises:
            TemplateSyntaxError: Any compile-time failure; nothing is
                generated for the template
        """
        label = source.name or "<template>"
        lines = tokenize(
            source.text,
            name=source.name,
            filename=source.filename,
            directive_marker=self.directive_marker,
        )
        tree = Parser(lines, source.name, source.filename, source.text).parse()

        if escape is None:
            escape = self.escape_policy.escapes(source.content_type)
        plan = build_plan(tree, escape=escape)
        logger.debug(
            "planned %s (%s, escape=%s): %d instructions",
            label,
            source.content_type,
            escape,
            len(plan),
        )

        routine = Compiler(source.name, source.filename, source.text).compile(plan)
        return Template(routine, source=source, escape=escape, namespace=namespace)

    def __repr__(self) -> str:
        return (
            f"<Environment loader={type(self.loader).__name__ if self.loader else None} "
            f"marker={self.directive_marker!r}>"
        )
