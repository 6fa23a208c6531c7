"""Block tree produced by the kiln block matcher.

The tree is a tagged variant with no notion of block kind::

    Template
    └── body: Leaf | Statement | Control
                                 ├── head: "if self.x"
                                 ├── body: (...)
                                 └── arms: (Control("else"), ...)

"""

from kiln.nodes.base import Node
from kiln.nodes.structure import Control, Leaf, Statement, Template

__all__ = [
    "Control",
    "Leaf",
    "Node",
    "Statement",
    "Template",
]
