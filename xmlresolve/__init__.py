"""Offline resolution of XML external entities against bundled resources."""

from .exceptions import (
    ResourceAccessDeniedError,
    ResourceError,
    ResourceIOError,
    ResourceNotFoundError,
)
from .loader import ResourceLoader
from .lxml_resolver import LxmlEntityResolver, make_parser
from .resolver import (
    DEFAULT_MAPPINGS,
    CompositeEntityResolver,
    EntityMapping,
    EntityResolver,
    InputSource,
    MappedEntityResolver,
)
from .resources import (
    ByteArrayResource,
    FileSystemResource,
    ModuleResource,
    Resource,
    UrlResource,
)

__all__ = [
    "ResourceError",
    "ResourceNotFoundError",
    "ResourceAccessDeniedError",
    "ResourceIOError",
    "Resource",
    "FileSystemResource",
    "ModuleResource",
    "UrlResource",
    "ByteArrayResource",
    "ResourceLoader",
    "InputSource",
    "EntityMapping",
    "DEFAULT_MAPPINGS",
    "EntityResolver",
    "MappedEntityResolver",
    "CompositeEntityResolver",
    "LxmlEntityResolver",
    "make_parser",
]
