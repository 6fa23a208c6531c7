"""Content-Type resolution and the escaper policy.

A template's Content-Type is decided once, from its file suffix, and then
governs every interpolation in that template the same way:

    >>> resolve_content_type("page.html")
    'text/html; charset=utf-8'
    >>> EscapePolicy().decide("text/html; charset=utf-8")
    <Escaping.ESCAPE: 'escape'>
    >>> EscapePolicy().decide(resolve_content_type("notes.md"))
    <Escaping.VERBATIM: 'verbatim'>

Suffixes that ``mimetypes`` does not know (and inline templates without a
declared suffix) fall back to plain text, which is never escaped.
"""

from __future__ import annotations

import mimetypes
from collections.abc import Mapping
from enum import Enum

DEFAULT_CONTENT_TYPE = "text/plain; charset=utf-8"


class Escaping(Enum):
    """What happens to interpolated values of a given Content-Type."""

    ESCAPE = "escape"
    VERBATIM = "verbatim"


HTML_LIKE: Mapping[str, Escaping] = {
    "text/html": Escaping.ESCAPE,
    "application/xhtml+xml": Escaping.ESCAPE,
    "application/xml": Escaping.ESCAPE,
    "text/xml": Escaping.ESCAPE,
}


def media_type(content_type: str) -> str:
    """Strip parameters: ``'text/html; charset=utf-8'`` → ``'text/html'``"""
    return content_type.split(";", 1)[0].strip().lower()


def resolve_content_type(filename: str | None) -> str:
    """Guess the Content-Type of a template from its file name or bare suffix.

    Textual types get an explicit utf-8 charset. Unknown or missing
    suffixes resolve to ``text/plain; charset=utf-8``.
    """
    if not filename:
        return DEFAULT_CONTENT_TYPE
    if "." not in filename:
        filename = f"template.{filename}"
    guessed, _encoding = mimetypes.guess_type(filename, strict=False)
    if guessed is None:
        return DEFAULT_CONTENT_TYPE
    if guessed.startswith("text/"):
        return f"{guessed}; charset=utf-8"
    return guessed


class EscapePolicy:
    """Pure mapping from Content-Type to an escape/verbatim decision.

    Starts from the HTML-like family; anything unmapped is verbatim.
    Mappings are added with ``register()`` (copy-on-write, so a policy
    shared by several environments is never mutated under a reader).

    Example:
        >>> policy = EscapePolicy({"image/svg+xml": Escaping.ESCAPE})
        >>> policy.escapes("image/svg+xml")
        True

    """

    __slots__ = ("_mapping",)

    def __init__(self, extra: Mapping[str, Escaping] | None = None):
        mapping = dict(HTML_LIKE)
        if extra:
            mapping.update({media_type(k): v for k, v in extra.items()})
        self._mapping = mapping

    def register(self, content_type: str, decision: Escaping) -> None:
        new = self._mapping.copy()
        new[media_type(content_type)] = decision
        self._mapping = new

    def decide(self, content_type: str) -> Escaping:
        return self._mapping.get(media_type(content_type), Escaping.VERBATIM)

    def escapes(self, content_type: str) -> bool:
        return self.decide(content_type) is Escaping.ESCAPE

    def __contains__(self, content_type: object) -> bool:
        return isinstance(content_type, str) and media_type(content_type) in self._mapping

    def __repr__(self) -> str:
        escaped = sorted(k for k, v in self._mapping.items() if v is Escaping.ESCAPE)
        return f"<EscapePolicy escape={escaped}>"
