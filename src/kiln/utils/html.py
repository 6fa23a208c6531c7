"""HTML escaping for interpolated values.

``html_escape`` converts a value to text and neutralizes the five
characters special to HTML/XML in one ``str.translate()`` pass. Values
that expose ``__html__`` (``Markup``, or a kiln context rendered through
an escaping template) are trusted and appended as-is.
"""

from __future__ import annotations

from typing import Any

_ESCAPE_TABLE = str.maketrans(
    {
        "&": "&amp;",
        "<": "&lt;",
        ">": "&gt;",
        '"': "&quot;",
        "'": "&#39;",
    }
)


class Markup(str):
    """A string that is already safe to append to HTML output.

    Example:
        >>> html_escape(Markup("<b>bold</b>"))
        '<b>bold</b>'
        >>> html_escape("<b>bold</b>")
        '&lt;b&gt;bold&lt;/b&gt;'
    """

    __slots__ = ()

    def __html__(self) -> str:
        return str(self)

    def __repr__(self) -> str:
        return f"Markup({str.__repr__(self)})"


def html_escape(value: Any) -> str:
    """Convert ``value`` to text and escape it for HTML.

    Complexity: O(n) single pass.
    """
    html = getattr(value, "__html__", None)
    if html is not None:
        return html()
    return str(value).translate(_ESCAPE_TABLE)
