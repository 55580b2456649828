from __future__ import annotations

import logging
import os
import pathlib
from dataclasses import dataclass
from typing import BinaryIO, Dict, Iterable, List, Mapping, Optional, Protocol, Sequence, Union

from .exceptions import ResourceError, ResourceNotFoundError
from .loader import ResourceLoader
from .resources import Resource

LOGGER = logging.getLogger(__name__)

PACKAGE_ANCHOR = __name__.rpartition(".")[0]


class InputSource:
    """Substitute input handed back to the parser in place of a network fetch.

    Carries the identifiers the document author wrote so parser diagnostics
    keep referring to them even though the bytes come from a local copy.
    """

    def __init__(
        self,
        stream: BinaryIO,
        public_id: Optional[str] = None,
        system_id: Optional[str] = None,
        description: str = "",
    ) -> None:
        self.stream = stream
        self.public_id = public_id
        self.system_id = system_id
        self.description = description

    def read(self) -> bytes:
        return self.stream.read()

    def close(self) -> None:
        self.stream.close()

    def __enter__(self) -> "InputSource":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def __repr__(self) -> str:
        return (
            f"InputSource(public_id={self.public_id!r}, system_id={self.system_id!r}, "
            f"description={self.description!r})"
        )


class EntityResolverProtocol(Protocol):
    def resolve(self, public_id: Optional[str], system_id: Optional[str]) -> Optional[InputSource]:
        ...


@dataclass(frozen=True)
class EntityMapping:
    """A recognized artifact family: base name plus expected extension."""

    base_name: str
    extension: str

    @property
    def filename(self) -> str:
        return self.base_name + self.extension

    def matches(self, system_id: Optional[str]) -> bool:
        if not system_id or not system_id.endswith(self.extension):
            return False
        # Only occurrences at or after the last separator count.
        last_separator = system_id.rfind("/")
        return system_id.find(self.base_name, max(last_separator, 0)) != -1


DEFAULT_MAPPINGS = (EntityMapping("spring-beans", ".dtd"),)


class _AbsorbingResolver:
    """Shared open-and-wrap logic with the decline-on-failure policy."""

    def __init__(
        self,
        loader: Optional[ResourceLoader] = None,
        logger: Optional[logging.Logger] = None,
        strict: bool = False,
    ) -> None:
        self.logger = logger or LOGGER
        self._loader = loader or ResourceLoader(logger=self.logger)
        self._strict = strict

    def _open_source(
        self,
        resource: Resource,
        public_id: Optional[str],
        system_id: Optional[str],
    ) -> Optional[InputSource]:
        try:
            stream = self._loader.open(resource)
        except ResourceNotFoundError:
            self.logger.debug(
                "Could not resolve XML entity: resource not found",
                extra={"systemId": system_id, "resource": resource.description},
            )
            return None
        except ResourceError as exc:
            self.logger.warning(
                "Could not resolve XML entity: resource unreadable",
                extra={"systemId": system_id, "resource": resource.description, "error": str(exc)},
            )
            if self._strict:
                raise
            return None

        self.logger.debug(
            "Resolved XML entity locally",
            extra={"systemId": system_id, "publicId": public_id, "resource": resource.description},
        )
        return InputSource(stream, public_id=public_id, system_id=system_id, description=resource.description)


class EntityResolver(_AbsorbingResolver):
    """Serves bundled DTDs for recognized system identifiers.

    A system id matches a mapping when it ends with the mapping's extension and
    the base name occurs at or after its last ``/``. Every historical URL form
    (``https://www.springframework.org/dtd/spring-beans-2.0.dtd``, a bare
    ``spring-beans.dtd`` ...) maps onto the one canonical file
    ``base_name + extension`` shipped in ``anchor``.

    Returns ``None`` to let the parser fall back to its default resolution.
    """

    def __init__(
        self,
        mappings: Sequence[EntityMapping] = DEFAULT_MAPPINGS,
        *,
        loader: Optional[ResourceLoader] = None,
        anchor: Optional[str] = PACKAGE_ANCHOR,
        logger: Optional[logging.Logger] = None,
        strict: bool = False,
    ) -> None:
        super().__init__(loader=loader, logger=logger, strict=strict)
        self._mappings: tuple = tuple(mappings)
        self._anchor = anchor

    @property
    def mappings(self) -> tuple:
        return self._mappings

    def resolve(self, public_id: Optional[str], system_id: Optional[str]) -> Optional[InputSource]:
        self.logger.debug(
            "Trying to resolve XML entity",
            extra={"publicId": public_id, "systemId": system_id},
        )
        for mapping in self._mappings:
            if not mapping.matches(system_id):
                continue
            resource = self._loader.module_resource(mapping.filename, anchor=self._anchor)
            source = self._open_source(resource, public_id, system_id)
            if source is not None:
                return source
        return None

    def __str__(self) -> str:
        families = ", ".join(mapping.filename for mapping in self._mappings)
        return f"EntityResolver for {families}"


class MappedEntityResolver(_AbsorbingResolver):
    """Resolves system ids through an explicit ``{system_id: location}`` table.

    Locations go through :meth:`ResourceLoader.resolve_path`, so they may be
    module names, absolute paths, ``classpath:`` names or URLs. An ``https:``
    id missing from the table is retried under its ``http:`` form.
    """

    def __init__(
        self,
        mappings: Mapping[str, str],
        *,
        loader: Optional[ResourceLoader] = None,
        logger: Optional[logging.Logger] = None,
        strict: bool = False,
    ) -> None:
        super().__init__(loader=loader, logger=logger, strict=strict)
        self._mappings: Dict[str, str] = dict(mappings)

    @classmethod
    def from_properties(cls, path: Union[str, os.PathLike], **kwargs) -> "MappedEntityResolver":
        """Build a resolver from a ``key=value`` properties file."""
        text = pathlib.Path(path).read_text(encoding="utf-8")
        return cls(parse_properties(text), **kwargs)

    @property
    def mappings(self) -> Dict[str, str]:
        return dict(self._mappings)

    def lookup(self, system_id: Optional[str]) -> Optional[str]:
        if not system_id:
            return None
        location = self._mappings.get(system_id)
        if location is None and system_id.startswith("https:"):
            location = self._mappings.get("http:" + system_id[len("https:"):])
        return location

    def resolve(self, public_id: Optional[str], system_id: Optional[str]) -> Optional[InputSource]:
        location = self.lookup(system_id)
        if location is None:
            return None
        try:
            resource = self._loader.resolve_path(location)
        except ValueError as exc:
            self.logger.warning(
                "Ignoring unusable entity mapping",
                extra={"systemId": system_id, "location": location, "error": str(exc)},
            )
            return None
        return self._open_source(resource, public_id, system_id)

    def __str__(self) -> str:
        return f"EntityResolver using {len(self._mappings)} mapping(s)"


class CompositeEntityResolver:
    """Delegates to each resolver in order; the first substitute wins."""

    def __init__(self, resolvers: Iterable[EntityResolverProtocol]) -> None:
        self._resolvers: List[EntityResolverProtocol] = list(resolvers)

    def resolve(self, public_id: Optional[str], system_id: Optional[str]) -> Optional[InputSource]:
        for resolver in self._resolvers:
            source = resolver.resolve(public_id, system_id)
            if source is not None:
                return source
        return None

    def __str__(self) -> str:
        return "CompositeEntityResolver[" + ", ".join(str(r) for r in self._resolvers) + "]"


def parse_properties(text: str) -> Dict[str, str]:
    """Parse ``key=value`` lines; ``#`` and ``!`` start comments, ``\\:`` is unescaped."""
    result: Dict[str, str] = {}
    for raw_line in text.splitlines():
        line = raw_line.strip()
        if not line or line[0] in "#!":
            continue
        key, sep, value = line.partition("=")
        if not sep:
            continue
        result[_unescape(key.strip())] = _unescape(value.strip())
    return result


def _unescape(value: str) -> str:
    return value.replace("\\:", ":")
