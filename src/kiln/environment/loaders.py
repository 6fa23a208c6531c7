"""Template loaders for kiln.

Loaders provide template source to the Environment. They implement
`get_source(name)` returning `(source, filename)`, where `name` is a
template file name such as ``"quick-start.txt"``.

Built-in Loaders:
- `FileSystemLoader`: Load from filesystem directories
- `DictLoader`: Load from an in-memory dictionary (testing/embedded)
- `ChoiceLoader`: Try multiple loaders in order

Custom Loaders:
Anything with a matching `get_source` works:
    ```python
    class PackageDataLoader:
        def get_source(self, name: str) -> tuple[str, str | None]:
            try:
                text = importlib.resources.files("my_app.templates").joinpath(name).read_text()
            except FileNotFoundError:
                raise TemplateNotFoundError(f"Template '{name}' not found") from None
            return text, None
    ```

A missing template raises TemplateNotFoundError; a template that exists
but cannot be read or decoded raises its parent, TemplateLoadError.

"""

from __future__ import annotations

import logging
from difflib import get_close_matches
from pathlib import Path
from typing import Protocol

from kiln.environment.exceptions import TemplateLoadError, TemplateNotFoundError

logger = logging.getLogger(__name__)


class Loader(Protocol):
    def get_source(self, name: str) -> tuple[str, str | None]: ...


class FileSystemLoader:
    """Load templates from filesystem directories.

    Directories are searched in order and the first matching file wins:
        ```python
        loader = FileSystemLoader(["overrides/", "templates/"])
        ```

    Attributes:
        _paths: List of Path objects to search
        _encoding: File encoding (default: utf-8)

    Example:
            >>> loader = FileSystemLoader("templates/")
            >>> source, filename = loader.get_source("quick-start.txt")
            >>> print(filename)
            templates/quick-start.txt

    Raises:
        TemplateNotFoundError: If template not found in any search path
        TemplateLoadError: If the file exists but cannot be read or decoded

    """

    __slots__ = ("_encoding", "_paths")

    def __init__(
        self,
        paths: str | Path | list[str | Path],
        encoding: str = "utf-8",
    ):
        if isinstance(paths, (str, Path)):
            paths = [paths]
        self._paths = [Path(p) for p in paths]
        self._encoding = encoding

    @property
    def paths(self) -> list[Path]:
        return list(self._paths)

    def get_source(self, name: str) -> tuple[str, str]:
        """Load template source from filesystem."""
        for base in self._paths:
            path = base / name
            if path.is_file():
                logger.debug("loading %s from %s", name, path)
                try:
                    # newline="" keeps \r\n terminators intact
                    with path.open(encoding=self._encoding, newline="") as f:
                        return f.read(), str(path)
                except (OSError, UnicodeDecodeError) as e:
                    raise TemplateLoadError(
                        f"Template '{name}' could not be read from {path}: {e}"
                    ) from e

        raise TemplateNotFoundError(
            f"Template '{name}' not found in: {', '.join(str(p) for p in self._paths)}"
        )

    def list_templates(self) -> list[str]:
        """List all files in search paths."""
        templates = set()
        for base in self._paths:
            if base.is_dir():
                for path in base.rglob("*"):
                    if path.is_file():
                        templates.add(path.relative_to(base).as_posix())
        return sorted(templates)


class DictLoader:
    """Load templates from an in-memory dictionary.

    Returns `None` as filename since templates are not file-backed.

    Example:
            >>> loader = DictLoader({"greeting.txt": "Hello {{ self.name }}!\\n"})
            >>> loader.get_source("greeting.txt")
            ('Hello {{ self.name }}!\\n', None)

    Raises:
        TemplateNotFoundError: If template name not in mapping

    """

    __slots__ = ("_mapping",)

    def __init__(self, mapping: dict[str, str]):
        self._mapping = mapping

    def get_source(self, name: str) -> tuple[str, None]:
        if name not in self._mapping:
            available = sorted(self._mapping.keys())
            msg = f"Template '{name}' not found"
            matches = get_close_matches(name, available, n=1, cutoff=0.6)
            if matches:
                msg += f". Did you mean '{matches[0]}'?"
            elif available:
                msg += f". Available: {', '.join(available[:10])}"
                if len(available) > 10:
                    msg += f" ... ({len(available)} total)"
            raise TemplateNotFoundError(msg)
        return self._mapping[name], None

    def list_templates(self) -> list[str]:
        return sorted(self._mapping.keys())


class ChoiceLoader:
    """Try multiple loaders in order, returning the first match.

    Only TemplateNotFoundError moves on to the next loader; a template that
    exists but is unreadable stops the search.

    Example:
            >>> custom = DictLoader({"nav.html": "<nav>Custom</nav>"})
            >>> default = DictLoader({"nav.html": "<nav>Default</nav>", "foot.html": "<footer/>"})
            >>> ChoiceLoader([custom, default]).get_source("foot.html")
            ('<footer/>', None)

    """

    __slots__ = ("_loaders",)

    def __init__(self, loaders: list[Loader]):
        self._loaders = loaders

    def get_source(self, name: str) -> tuple[str, str | None]:
        """Try each loader in order, return first match."""
        for loader in self._loaders:
            try:
                return loader.get_source(name)
            except TemplateNotFoundError:
                continue
        raise TemplateNotFoundError(
            f"Template '{name}' not found in any of {len(self._loaders)} loaders"
        )

    def list_templates(self) -> list[str]:
        """Merge template lists from all loaders (deduplicated, sorted)."""
        templates: set[str] = set()
        for loader in self._loaders:
            if hasattr(loader, "list_templates"):
                templates.update(loader.list_templates())
        return sorted(templates)
