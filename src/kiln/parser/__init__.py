"""kiln block matcher: classified lines → block tree.

Example:
    >>> from kiln.lexer import tokenize
    >>> from kiln.parser import Parser
    >>> tree = Parser(tokenize("%% if self.x {\\nYes\\n%% }\\n")).parse()

"""

from kiln.parser.core import CONTINUATION_KEYWORDS, Parser

__all__ = ["CONTINUATION_KEYWORDS", "Parser"]
