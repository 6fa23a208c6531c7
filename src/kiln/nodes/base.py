"""Base node class for the kiln block tree."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class Node:
    """Base class for all block-tree nodes.

    Every node remembers the template line it came from so later stages
    can point diagnostics and runtime errors back at the source.

    """

    lineno: int
