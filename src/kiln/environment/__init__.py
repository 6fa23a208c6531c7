"""kiln environment: loaders, escaping rules, errors and the compile pipeline.

Example:
    >>> from kiln.environment import Environment, FileSystemLoader
    >>> env = Environment(loader=FileSystemLoader("templates/"))
    >>> env.get_template("quick-start.txt").render(context)

"""

from kiln.environment.content_types import (
    DEFAULT_CONTENT_TYPE,
    EscapePolicy,
    Escaping,
    resolve_content_type,
)
from kiln.environment.exceptions import (
    AmbiguousArmError,
    ErrorCode,
    ExpressionSyntaxError,
    LexerError,
    MalformedCloserError,
    SourceSnippet,
    TemplateError,
    TemplateLoadError,
    TemplateNotFoundError,
    TemplateRuntimeError,
    TemplateSyntaxError,
    UnbalancedBlockError,
    UnmatchedCloserError,
    build_source_snippet,
)
from kiln.environment.loaders import ChoiceLoader, DictLoader, FileSystemLoader, Loader
from kiln.environment.core import Environment

__all__ = [
    "DEFAULT_CONTENT_TYPE",
    "AmbiguousArmError",
    "ChoiceLoader",
    "DictLoader",
    "Environment",
    "ErrorCode",
    "EscapePolicy",
    "Escaping",
    "ExpressionSyntaxError",
    "FileSystemLoader",
    "LexerError",
    "Loader",
    "MalformedCloserError",
    "SourceSnippet",
    "TemplateError",
    "TemplateLoadError",
    "TemplateNotFoundError",
    "TemplateRuntimeError",
    "TemplateSyntaxError",
    "UnbalancedBlockError",
    "UnmatchedCloserError",
    "build_source_snippet",
    "resolve_content_type",
]
