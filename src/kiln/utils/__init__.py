"""Small helpers shared across kiln: HTML escaping and template naming."""

from kiln.utils.html import Markup, html_escape
from kiln.utils.naming import template_filename

__all__ = ["Markup", "html_escape", "template_filename"]
