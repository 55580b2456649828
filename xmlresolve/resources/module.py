from __future__ import annotations

import importlib.resources
import os
import pathlib
import posixpath
import sys
from typing import BinaryIO, Iterable, List, Optional, Sequence, Union

from ..exceptions import ResourceNotFoundError
from .base import Resource, translate_os_error

PathLike = Union[str, os.PathLike]


class ModuleResource(Resource):
    """Resource addressed by a logical name relative to the program's module roots.

    With an ``anchor`` package the name is resolved inside that package, so an
    artifact shipped next to a module travels with it. Without one the name is
    looked up against ``roots`` in order (``sys.path`` at lookup time when no
    roots were given) and the first root holding the file wins.
    """

    def __init__(
        self,
        name: str,
        *,
        anchor: Optional[str] = None,
        roots: Optional[Iterable[PathLike]] = None,
    ) -> None:
        self._name = _clean_name(name)
        self._anchor = anchor
        self._roots: Optional[List[PathLike]] = list(roots) if roots is not None else None

    @property
    def name(self) -> str:
        return self._name

    @property
    def anchor(self) -> Optional[str]:
        return self._anchor

    @property
    def description(self) -> str:
        if self._anchor:
            return f"module resource [{self._anchor.replace('.', '/')}/{self._name}]"
        return f"module resource [{self._name}]"

    @property
    def filename(self) -> Optional[str]:
        return posixpath.basename(self._name) or None

    def exists(self) -> bool:
        return self._locate() is not None

    def open(self) -> BinaryIO:
        location = self._locate()
        if location is None:
            raise ResourceNotFoundError(
                f"{self.description} cannot be opened because it does not exist.",
                self.description,
            )
        try:
            return location.open("rb")
        except OSError as exc:
            raise translate_os_error(exc, self.description) from exc

    def create_relative(self, relative_path: str) -> "ModuleResource":
        name = posixpath.join(posixpath.dirname(self._name), relative_path)
        return ModuleResource(name, anchor=self._anchor, roots=self._roots)

    def _search_roots(self) -> Sequence[PathLike]:
        if self._roots is not None:
            return self._roots
        # An empty entry stands for the working directory, which module lookup ignores.
        return [entry for entry in sys.path if entry]

    def _locate(self):
        if not self._name or self._name == ".." or self._name.startswith("../"):
            return None

        parts = self._name.split("/")
        if self._anchor:
            try:
                location = importlib.resources.files(self._anchor)
            except (ImportError, TypeError):
                return None
            for part in parts:
                location = location.joinpath(part)
            return location if location.is_file() else None

        for root in self._search_roots():
            candidate = pathlib.Path(root).joinpath(*parts)
            if candidate.is_file():
                return candidate
        return None

    def __eq__(self, other: object) -> bool:
        return (
            isinstance(other, ModuleResource)
            and other._name == self._name
            and other._anchor == self._anchor
            and other._roots == self._roots
        )

    def __hash__(self) -> int:
        return hash((self._name, self._anchor))


def _clean_name(name: str) -> str:
    cleaned = posixpath.normpath(name.replace("\\", "/").lstrip("/"))
    return "" if cleaned == "." else cleaned
