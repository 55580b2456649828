"""Maps location strings onto :class:`Resource` handles."""

from __future__ import annotations

import logging
import re
from typing import Any, BinaryIO, Iterable, List, Optional

import requests

from .resources import (
    URL_SCHEMES,
    FileSystemResource,
    ModuleResource,
    Resource,
    UrlResource,
)
from .resources.module import PathLike

LOGGER = logging.getLogger(__name__)

CLASSPATH_PREFIX = "classpath:"

_SCHEME_PATTERN = re.compile(r"^([A-Za-z][A-Za-z0-9+.\-]*):")
_DRIVE_PATTERN = re.compile(r"^[A-Za-z]:[\\/]")


class ResourceLoader:
    """Resolves location strings to resources under one addressing mode.

    The mode is picked from the syntax of the string alone:

    1. ``classpath:`` prefix -> module resource for the remainder
    2. recognized URL scheme (``file``, ``http``, ``https``, ``s3``) -> URL resource
    3. absolute path (``/``, ``\\`` or a drive letter) -> filesystem resource
    4. anything else -> module resource over the configured module roots

    The filesystem is only consulted later, to decide whether a resource of the
    chosen kind exists.
    """

    def __init__(
        self,
        module_roots: Optional[Iterable[PathLike]] = None,
        *,
        http_session: Optional[requests.Session] = None,
        s3_client: Any = None,
        timeout: float = 10.0,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self._module_roots: Optional[List[PathLike]] = (
            list(module_roots) if module_roots is not None else None
        )
        self._http_session = http_session
        self._s3_client = s3_client
        self._timeout = timeout
        self.logger = logger or LOGGER

    def resolve_path(self, path_like: str) -> Resource:
        if not path_like:
            raise ValueError("Location must not be empty")

        if path_like.startswith(CLASSPATH_PREFIX):
            return self.module_resource(path_like[len(CLASSPATH_PREFIX):])

        match = _SCHEME_PATTERN.match(path_like)
        if match and match.group(1).lower() in URL_SCHEMES:
            return UrlResource(
                path_like,
                session=self._http_session,
                s3_client=self._s3_client,
                timeout=self._timeout,
            )

        if path_like.startswith(("/", "\\")) or _DRIVE_PATTERN.match(path_like):
            return FileSystemResource(path_like)

        return self.module_resource(path_like)

    def module_resource(self, name: str, anchor: Optional[str] = None) -> ModuleResource:
        """Return a module resource, anchored at a package or over the module roots."""
        if anchor:
            return ModuleResource(name, anchor=anchor)
        return ModuleResource(name, roots=self._module_roots)

    def open(self, resource: Resource) -> BinaryIO:
        """Open ``resource`` for reading.

        Raises ``ResourceNotFoundError``, ``ResourceAccessDeniedError`` or
        ``ResourceIOError``. The returned stream must be closed by the caller.
        """
        self.logger.debug("Opening resource", extra={"resource": resource.description})
        return resource.open()
