"""kiln: compile-time text templates bound to Python classes.

A template is ordinary text with three kinds of markup:

- ``%% <python>`` lines run Python; a line ending in ``{`` opens a block
  and ``%% }`` closes it (``%% } else {`` does both)
- ``{{ expr }}`` interpolates an expression inside a line
- ``$$ expr`` interpolates an expression up to the end of the line

Quickstart:
    >>> from kiln import display
    >>> @display(text="%% if self.n {\\nYes: {{ self.n }}\\n%% } else {\\nNo\\n%% }\\n")
    ... class Answer:
    ...     def __init__(self, n):
    ...         self.n = n
    >>> str(Answer(5))
    'Yes: 5\\n'
    >>> str(Answer(0))
    'No\\n'

Architecture:
Template Source → Lexer → Parser → Render Plan → Compiler → code object → Template

Pipeline stages:
1. **Lexer**: Classifies each line as Text, Directive or Blank and extracts
   interpolation spans
2. **Parser**: Matches directive braces into a block tree
3. **Plan**: Flattens the tree into append/control instructions, with the
   escaping decision made once from the template's Content-Type
4. **Compiler**: Serializes the plan into one Python function and compiles
   it; Python itself checks every expression
5. **Template**: Binds the function to its helpers; ``@display`` installs
   it as the class's ``__str__``

Escaping:
Templates whose suffix maps to an HTML-like Content-Type (``.html``,
``.htm``, ``.xhtml``, ``.xml``) escape every interpolated value unless it
provides ``__html__``. Everything else is interpolated verbatim.

"""

from kiln.display import display
from kiln.environment import (
    ChoiceLoader,
    DictLoader,
    Environment,
    ErrorCode,
    EscapePolicy,
    Escaping,
    FileSystemLoader,
    TemplateError,
    TemplateLoadError,
    TemplateNotFoundError,
    TemplateRuntimeError,
    TemplateSyntaxError,
)
from kiln.template import Template
from kiln.utils.html import Markup, html_escape
from kiln.utils.naming import template_filename

__version__ = "0.1.0"

__all__ = [
    "ChoiceLoader",
    "DictLoader",
    "Environment",
    "ErrorCode",
    "EscapePolicy",
    "Escaping",
    "FileSystemLoader",
    "Markup",
    "Template",
    "TemplateError",
    "TemplateLoadError",
    "TemplateNotFoundError",
    "TemplateRuntimeError",
    "TemplateSyntaxError",
    "__version__",
    "display",
    "template_filename",
]
