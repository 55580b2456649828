from __future__ import annotations

import os
import pathlib
from typing import BinaryIO, Optional, Union

from .base import Resource, translate_os_error


class FileSystemResource(Resource):
    """Resource backed by an absolute or relative path on the local filesystem."""

    def __init__(self, path: Union[str, os.PathLike]) -> None:
        self._path = pathlib.Path(path)

    @property
    def path(self) -> pathlib.Path:
        return self._path

    @property
    def description(self) -> str:
        return f"file [{self._path}]"

    @property
    def filename(self) -> Optional[str]:
        return self._path.name or None

    def exists(self) -> bool:
        return self._path.is_file()

    def open(self) -> BinaryIO:
        try:
            return self._path.open("rb")
        except OSError as exc:
            raise translate_os_error(exc, self.description) from exc

    def create_relative(self, relative_path: str) -> "FileSystemResource":
        return FileSystemResource(self._path.parent / relative_path)

    def __eq__(self, other: object) -> bool:
        return isinstance(other, FileSystemResource) and other._path == self._path

    def __hash__(self) -> int:
        return hash(self._path)
