from .base import Resource
from .file import FileSystemResource
from .memory import ByteArrayResource
from .module import ModuleResource
from .url import URL_SCHEMES, UrlResource

__all__ = [
    "Resource",
    "FileSystemResource",
    "ModuleResource",
    "UrlResource",
    "ByteArrayResource",
    "URL_SCHEMES",
]
