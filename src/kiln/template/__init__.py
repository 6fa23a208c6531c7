"""Compiled template objects ready for rendering."""

from kiln.template.core import Template
from kiln.utils.html import Markup

__all__ = [
    "Markup",
    "Template",
]
