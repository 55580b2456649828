from __future__ import annotations

from abc import ABC, abstractmethod
from typing import BinaryIO, Optional

from ..exceptions import (
    ResourceAccessDeniedError,
    ResourceError,
    ResourceIOError,
    ResourceNotFoundError,
)


class Resource(ABC):
    """Uniform handle to a byte-readable location.

    A resource is a plain value: building one never touches the underlying
    storage. Existence is checked by ``exists()`` and failures surface only
    when ``open()`` is called.
    """

    @property
    @abstractmethod
    def description(self) -> str:
        """Human readable description used in diagnostics."""

    @property
    def filename(self) -> Optional[str]:
        """Last path segment of the resource, if it has one."""
        return None

    @abstractmethod
    def exists(self) -> bool:
        """Return True if the resource can be opened for reading."""

    @abstractmethod
    def open(self) -> BinaryIO:
        """Open a binary read stream. The caller must close it."""

    def create_relative(self, relative_path: str) -> "Resource":
        """Return a resource of the same kind addressed relative to this one."""
        raise ResourceIOError(
            f"Cannot create a relative resource for {self.description}.",
            self.description,
        )

    def read_bytes(self) -> bytes:
        with self.open() as stream:
            return stream.read()

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.description}>"

    def __str__(self) -> str:
        return self.description


def translate_os_error(exc: OSError, description: str) -> ResourceError:
    """Map an ``OSError`` onto the resource error taxonomy."""
    if isinstance(exc, (FileNotFoundError, IsADirectoryError, NotADirectoryError)):
        return ResourceNotFoundError(f"{description} cannot be opened because it does not exist.", description)
    if isinstance(exc, PermissionError):
        return ResourceAccessDeniedError(f"Access to {description} was denied.", description)
    return ResourceIOError(f"Failed to open {description}: {exc}", description)
