"""Context class name → template file name.

A context class is named after its template: the name is split into words
at every uppercase letter, the last word becomes the file suffix and the
rest are joined with hyphens, all lowercased.

    >>> template_filename("QuickStartTxt")
    'quick-start.txt'
    >>> template_filename("ABCHtml")
    'a-b-c.html'
    >>> template_filename("Foo")
    'foo'
    >>> template_filename("QuickStart", suffix="md")
    'quick-start.md'

"""

from __future__ import annotations


def split_words(name: str) -> list[str]:
    """Split at each uppercase letter; leading lowercase text is its own word."""
    words: list[str] = []
    for char in name:
        if not words or char.isupper():
            words.append("")
        words[-1] += char
    return words


def template_filename(context_name: str, suffix: str | None = None) -> str:
    """File name of the template for a context class named ``context_name``.

    Args:
        context_name: Class name, e.g. ``"QuickStartTxt"``
        suffix: Declared suffix. When given, every word belongs to the stem.
    """
    if not context_name:
        raise ValueError("context name must not be empty")
    words = [w.lower() for w in split_words(context_name)]
    if suffix is not None:
        return f"{'-'.join(words)}.{suffix.lstrip('.')}"
    if len(words) == 1:
        return words[0]
    return f"{'-'.join(words[:-1])}.{words[-1]}"
